"""JSON-RPC methods used by the remote node backend."""

from itertools import count
from typing import Any, Callable, ClassVar, Dict, List, Literal, Type, TypeVar, Union

import requests

from ethereum_rpc_base_types import (
    Address,
    Bytes,
    EthValue,
    GasPrice,
    GasUsage,
    Hash,
    Nonce,
    Quantity,
    decode_quantity,
    encode_quantity,
)
from ethereum_rpc_logging import get_logger

from .types import (
    BlockResponse,
    EthereumApiError,
    JSONRPCError,
    ResponseDecodeError,
    RPCTransportError,
    TransactionReceiptResponse,
    TransactionResponse,
)

logger = get_logger(__name__)

BlockNumberType = Union[int, Literal["latest", "earliest", "pending"]]

GAS_LIMIT_FOR_CONSTANT_CALLS = 1_000_000_000

R = TypeVar("R")
Q = TypeVar("Q", bound=Quantity)


class SendTransactionExceptionError(EthereumApiError):
    """Represent an exception that is raised when a transaction fails to be sent."""

    tx_rlp: Bytes | None = None

    def __init__(self, *args, tx_rlp: Bytes | None = None):
        """Initialize SendTransactionExceptionError class with the given transaction."""
        super().__init__(*args)
        self.tx_rlp = tx_rlp

    def __str__(self):
        """Return string representation of the exception."""
        if self.tx_rlp is not None:
            return f"{super().__str__()} Transaction RLP={self.tx_rlp.hex()}"
        return super().__str__()


def validate_filter_id(value: Any) -> str:
    """Validate the identifier of a node-side filter."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"invalid filter id: {value!r}")
    return value


def quantity(cls: Type[Q]) -> Callable[[Any], Q]:
    """Return a decoder accepting only `0x`-prefixed hex quantities, as sent by nodes."""

    def decoder(value: Any) -> Q:
        return cls(decode_quantity(value))

    return decoder


def block_parameter(block_number: BlockNumberType) -> str:
    """Return the block parameter of a request, a quantity or a tag such as `latest`."""
    return encode_quantity(block_number) if isinstance(block_number, int) else block_number


class BaseRPC:
    """Represents a base RPC class for every RPC call sent to the node."""

    namespace: ClassVar[str]

    def __init__(
        self,
        url: str,
        extra_headers: Dict | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        """Initialize BaseRPC class with the given url."""
        if extra_headers is None:
            extra_headers = {}
        self.url = url
        self.request_id_counter = count(1)
        self.extra_headers = extra_headers
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def __init_subclass__(cls) -> None:
        """Set namespace of the RPC class to the lowercase of the class name."""
        namespace = cls.__name__
        if namespace.endswith("RPC"):
            namespace = namespace[:-3]
        cls.namespace = namespace.lower()

    def post_request(self, method: str, *params: Any, extra_headers: Dict | None = None) -> Any:
        """
        Send JSON-RPC POST request to the node.

        Raises `JSONRPCError` when the node reports an error, discarding any result, and
        `RPCTransportError` when no JSON-RPC response could be obtained.
        """
        if extra_headers is None:
            extra_headers = {}
        assert self.namespace, "RPC namespace not set"

        rpc_method = f"{self.namespace}_{method}"
        payload = {
            "jsonrpc": "2.0",
            "method": rpc_method,
            "params": params,
            "id": next(self.request_id_counter),
        }
        base_header = {
            "Content-Type": "application/json",
        }
        headers = base_header | self.extra_headers | extra_headers

        logger.debug("Sending %s request %s", rpc_method, payload["id"])
        try:
            response = self.session.post(
                self.url, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            response_json = response.json()
        except requests.RequestException as e:
            raise RPCTransportError(f"{rpc_method} request to {self.url} failed: {e}") from e

        if not isinstance(response_json, dict):
            raise RPCTransportError(f"{rpc_method} response is not a JSON-RPC object")

        if response_json.get("error") is not None:
            error = response_json["error"]
            logger.warning("Node returned an error for %s: %s", rpc_method, error)
            if not isinstance(error, dict):
                raise JSONRPCError(code=-32603, message=str(error))
            raise JSONRPCError(
                code=error.get("code", -32603),
                message=error.get("message", ""),
                data=error.get("data"),
            )

        if "result" not in response_json:
            raise ResponseDecodeError(rpc_method, "response didn't contain a result field")
        return response_json["result"]

    def decode(self, method: str, decoder: Callable[[Any], R], value: Any) -> R:
        """Decode the result of a request, turning any validation failure into a decode error."""
        try:
            return decoder(value)
        except (ValueError, TypeError) as e:
            raise ResponseDecodeError(f"{self.namespace}_{method}", str(e)) from e


class EthRPC(BaseRPC):
    """
    Represents an `eth_X` RPC class for every default ethereum RPC method used by the
    backend.
    """

    def gas_price(self) -> GasPrice:
        """`eth_gasPrice`: Returns the current price per gas in wei."""
        return self.decode("gasPrice", quantity(GasPrice), self.post_request("gasPrice"))

    def get_balance(self, address: Address, block_number: BlockNumberType = "latest") -> EthValue:
        """`eth_getBalance`: Returns the balance of the account of given address."""
        result = self.post_request("getBalance", f"{address}", block_parameter(block_number))
        return self.decode("getBalance", quantity(EthValue), result)

    def get_transaction_count(
        self, address: Address, block_number: BlockNumberType = "latest"
    ) -> Nonce:
        """`eth_getTransactionCount`: Returns the number of transactions sent from an address."""
        result = self.post_request(
            "getTransactionCount", f"{address}", block_parameter(block_number)
        )
        return self.decode("getTransactionCount", quantity(Nonce), result)

    def get_code(self, address: Address, block_number: BlockNumberType = "latest") -> Bytes:
        """`eth_getCode`: Returns code at a given address."""
        result = self.post_request("getCode", f"{address}", block_parameter(block_number))
        return self.decode("getCode", Bytes, result)

    def estimate_gas(
        self, account: Address, address: Address, value: EthValue, data: Bytes
    ) -> GasUsage:
        """
        `eth_estimateGas`: Returns the gas needed to execute the transaction.

        The `to` field is omitted when the address is empty (contract creation).
        """
        transaction: Dict[str, str] = {
            "from": f"{account}",
            "value": encode_quantity(value),
            "data": f"{data}",
        }
        if not address.is_empty():
            transaction["to"] = f"{address}"
        result = self.post_request("estimateGas", transaction)
        return self.decode("estimateGas", quantity(GasUsage), result)

    def call(self, account: Address, address: Address, data: Bytes) -> Bytes:
        """
        `eth_call`: Executes a call without creating a transaction on the chain.

        The call is never mined, so it is given a gas allowance large enough for any
        read-only execution.
        """
        transaction = {
            "from": f"{account}",
            "to": f"{address}",
            "gas": encode_quantity(GAS_LIMIT_FOR_CONSTANT_CALLS),
            "gasPrice": encode_quantity(0),
            "value": encode_quantity(0),
            "data": f"{data}",
        }
        return self.decode("call", Bytes, self.post_request("call", transaction, "latest"))

    def send_raw_transaction(self, transaction_rlp: Bytes) -> Hash:
        """`eth_sendRawTransaction`: Send a signed transaction to the node."""
        try:
            result = self.post_request("sendRawTransaction", f"{transaction_rlp.hex()}")
        except EthereumApiError as e:
            raise SendTransactionExceptionError(str(e), tx_rlp=transaction_rlp) from e
        return self.decode("sendRawTransaction", Hash, result)

    def block_number(self) -> Quantity:
        """`eth_blockNumber`: Returns the number of the most recent block."""
        return self.decode("blockNumber", quantity(Quantity), self.post_request("blockNumber"))

    def get_block_by_number(
        self, block_number: BlockNumberType = "latest"
    ) -> BlockResponse | None:
        """`eth_getBlockByNumber`: Returns a block, with full transaction objects."""
        result = self.post_request("getBlockByNumber", block_parameter(block_number), True)
        if result is None:
            return None
        return self.decode("getBlockByNumber", BlockResponse.model_validate, result)

    def get_block_by_hash(self, block_hash: Hash) -> BlockResponse | None:
        """`eth_getBlockByHash`: Returns a block, with full transaction objects."""
        result = self.post_request("getBlockByHash", f"{block_hash}", True)
        if result is None:
            return None
        return self.decode("getBlockByHash", BlockResponse.model_validate, result)

    def get_transaction_by_hash(self, transaction_hash: Hash) -> TransactionResponse | None:
        """`eth_getTransactionByHash`: Returns transaction details."""
        result = self.post_request("getTransactionByHash", f"{transaction_hash}")
        if result is None:
            return None
        return self.decode("getTransactionByHash", TransactionResponse.model_validate, result)

    def get_transaction_receipt(
        self, transaction_hash: Hash
    ) -> TransactionReceiptResponse | None:
        """`eth_getTransactionReceipt`: Returns the receipt of a mined transaction."""
        result = self.post_request("getTransactionReceipt", f"{transaction_hash}")
        if result is None:
            return None
        return self.decode(
            "getTransactionReceipt", TransactionReceiptResponse.model_validate, result
        )

    def new_block_filter(self) -> str:
        """`eth_newBlockFilter`: Creates a filter notifying of new blocks."""
        result = self.post_request("newBlockFilter")
        return self.decode("newBlockFilter", validate_filter_id, result)

    def get_filter_changes(self, filter_id: str) -> List[Hash]:
        """`eth_getFilterChanges`: Returns the hashes of the blocks produced since last poll."""
        result = self.post_request("getFilterChanges", filter_id)
        return self.decode("getFilterChanges", lambda hashes: [Hash(h) for h in hashes], result)

    def uninstall_filter(self, filter_id: str) -> bool:
        """`eth_uninstallFilter`: Removes a filter from the node."""
        return bool(self.post_request("uninstallFilter", filter_id))
