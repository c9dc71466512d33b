"""Ethereum backend adapter talking to a remote node through JSON-RPC."""

from .backend import BlockNotFoundError, EthereumBackend, EthereumRpcBackend
from .config import EthereumRpcConfig
from .event_generator import EthereumRpcEventGenerator
from .events import EthereumEventHandler
from .provider import (
    HOLESKY_CHAIN_ID,
    MAIN_CHAIN_ID,
    SEPOLIA_CHAIN_ID,
    InfuraBuilder,
    RemoteNodeConnection,
    RpcEthereumBackendProvider,
)

__all__ = (
    "BlockNotFoundError",
    "EthereumBackend",
    "EthereumEventHandler",
    "EthereumRpcBackend",
    "EthereumRpcConfig",
    "EthereumRpcEventGenerator",
    "HOLESKY_CHAIN_ID",
    "InfuraBuilder",
    "MAIN_CHAIN_ID",
    "RemoteNodeConnection",
    "RpcEthereumBackendProvider",
    "SEPOLIA_CHAIN_ID",
)
