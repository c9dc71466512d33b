"""Wiring of a backend connected to a remote node."""

from typing import NamedTuple

from ethereum_rpc import EthRPC
from ethereum_rpc_base_types import ChainId
from ethereum_rpc_logging import get_logger

from .backend import EthereumRpcBackend
from .config import EthereumRpcConfig
from .events import EthereumEventHandler

logger = get_logger(__name__)

MAIN_CHAIN_ID = ChainId(1)
SEPOLIA_CHAIN_ID = ChainId(11155111)
HOLESKY_CHAIN_ID = ChainId(17000)


class RemoteNodeConnection(NamedTuple):
    """A backend connected to a node, with the event handler registered on it."""

    backend: EthereumRpcBackend
    event_handler: EthereumEventHandler


class RpcEthereumBackendProvider:
    """Factory of backends talking to remote nodes."""

    @staticmethod
    def for_remote_node(
        url: str, chain_id: ChainId | int, config: EthereumRpcConfig | None = None
    ) -> RemoteNodeConnection:
        """
        Connect to the node at `url`.

        A default event handler is registered on the backend and marked ready.
        """
        if config is None:
            config = EthereumRpcConfig()
        rpc = EthRPC(url, timeout=config.request_timeout)
        event_handler = EthereumEventHandler()
        backend = EthereumRpcBackend(rpc, chain_id, config, listeners=[event_handler])
        event_handler.on_ready()
        logger.info("Connected to %s (chain id %d)", url, int(chain_id))
        return RemoteNodeConnection(backend=backend, event_handler=event_handler)

    @staticmethod
    def for_infura(key: str, config: EthereumRpcConfig | None = None) -> "InfuraBuilder":
        """Return a builder connecting to the Infura endpoints of the public networks."""
        return InfuraBuilder(key, config)


class InfuraBuilder:
    """Connect to an Infura endpoint using a project key."""

    url_template = "https://{network}.infura.io/v3/{key}"

    def __init__(self, key: str, config: EthereumRpcConfig | None = None):
        """Initialize the builder with the Infura project key."""
        if not key:
            raise ValueError("an Infura project key is required")
        self.key = key
        self.config = config

    def url(self, network: str) -> str:
        """Return the endpoint of a network."""
        return self.url_template.format(network=network, key=self.key)

    def create_main(self) -> RemoteNodeConnection:
        """Connect to Ethereum mainnet."""
        return RpcEthereumBackendProvider.for_remote_node(
            self.url("mainnet"), MAIN_CHAIN_ID, self.config
        )

    def create_sepolia(self) -> RemoteNodeConnection:
        """Connect to the Sepolia testnet."""
        return RpcEthereumBackendProvider.for_remote_node(
            self.url("sepolia"), SEPOLIA_CHAIN_ID, self.config
        )

    def create_holesky(self) -> RemoteNodeConnection:
        """Connect to the Holesky testnet."""
        return RpcEthereumBackendProvider.for_remote_node(
            self.url("holesky"), HOLESKY_CHAIN_ID, self.config
        )
