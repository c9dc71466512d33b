"""Types used in the RPC module for the `eth` namespace requests."""

from typing import Annotated, Any, List

from pydantic import BeforeValidator, Field

from ethereum_rpc_base_types import (
    Address,
    Bytes,
    CamelModel,
    EthValue,
    GasPrice,
    GasUsage,
    Hash,
    Nonce,
    Quantity,
    decode_quantity,
)


def wire_quantity(value: Any) -> Any:
    """
    Decode a quantity sent by the node, which must be `0x`-prefixed hex.

    Quantities built locally, such as field defaults, are kept as they are.
    """
    if isinstance(value, Quantity):
        return value
    return decode_quantity(value)


WireQuantity = Annotated[Quantity, BeforeValidator(wire_quantity)]
WireGasUsage = Annotated[GasUsage, BeforeValidator(wire_quantity)]
WireGasPrice = Annotated[GasPrice, BeforeValidator(wire_quantity)]
WireEthValue = Annotated[EthValue, BeforeValidator(wire_quantity)]
WireNonce = Annotated[Nonce, BeforeValidator(wire_quantity)]


class EthereumApiError(Exception):
    """Base class of every failure reported while talking to the node."""

    pass


class JSONRPCError(EthereumApiError):
    """Model to parse a JSON RPC error response."""

    code: int
    message: str
    data: Any

    def __init__(self, code: int | str, message: str, data: Any = None, **kwargs):
        """Initialize the JSONRPCError."""
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data

    def __str__(self) -> str:
        """Return string representation of the JSONRPCError."""
        return f"JSONRPCError(code={self.code}, message={self.message})"


class RPCTransportError(EthereumApiError):
    """The node could not be reached or did not answer with a JSON-RPC document."""

    pass


class ResponseDecodeError(EthereumApiError):
    """The node answered with a result that does not match the expected format."""

    method: str

    def __init__(self, method: str, reason: str):
        """Initialize the ResponseDecodeError."""
        super().__init__(f"unable to decode result of {method}: {reason}")
        self.method = method


class LogResponse(CamelModel):
    """Log entry as embedded in a transaction receipt."""

    address: Address
    topics: List[Hash] = Field(default_factory=list)
    data: Bytes = Field(Bytes(b""))
    transaction_hash: Hash | None = None
    block_hash: Hash | None = None
    log_index: WireQuantity | None = None
    removed: bool = False


class TransactionResponse(CamelModel):
    """Transaction object as returned by `eth_getTransactionByHash` and full blocks."""

    transaction_hash: Hash = Field(..., alias="hash")
    block_hash: Hash | None = None
    block_number: WireQuantity | None = None
    transaction_index: WireQuantity | None = None
    sender: Address = Field(..., alias="from")
    to: Address | None = None
    gas_limit: WireGasUsage = Field(..., alias="gas")
    gas_price: WireGasPrice | None = None
    value: WireEthValue = Field(EthValue(0))
    data: Bytes = Field(Bytes(b""), alias="input")
    nonce: WireNonce = Field(Nonce(0))

    @property
    def mined(self) -> bool:
        """Return whether the transaction is included in a block."""
        return self.block_hash is not None and not self.block_hash.is_empty()


class TransactionReceiptResponse(CamelModel):
    """Receipt object as returned by `eth_getTransactionReceipt`."""

    transaction_hash: Hash
    transaction_index: WireQuantity | None = None
    block_hash: Hash | None = None
    block_number: WireQuantity | None = None
    sender: Address | None = Field(None, alias="from")
    to: Address | None = None
    contract_address: Address | None = None
    gas_used: WireGasUsage
    cumulative_gas_used: WireGasUsage | None = None
    status: WireQuantity | None = None
    logs: List[LogResponse] = Field(default_factory=list)


class BlockResponse(CamelModel):
    """Block object as returned by `eth_getBlockBy*` with full transaction objects."""

    number: WireQuantity | None = None
    hash: Hash | None = None
    parent_hash: Hash | None = None
    timestamp: WireQuantity | None = None
    gas_limit: WireGasUsage | None = None
    gas_used: WireGasUsage | None = None
    transactions: List[TransactionResponse] = Field(default_factory=list)
