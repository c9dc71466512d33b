"""JSON-RPC methods, response types and block feeds used to talk to a remote node."""

from .feeds import BlockFeed, FilterBlockFeed, PollingBlockFeed
from .rpc import (
    GAS_LIMIT_FOR_CONSTANT_CALLS,
    BlockNumberType,
    EthRPC,
    SendTransactionExceptionError,
)
from .types import (
    BlockResponse,
    EthereumApiError,
    JSONRPCError,
    LogResponse,
    ResponseDecodeError,
    RPCTransportError,
    TransactionReceiptResponse,
    TransactionResponse,
)

__all__ = [
    "GAS_LIMIT_FOR_CONSTANT_CALLS",
    "BlockFeed",
    "BlockNumberType",
    "BlockResponse",
    "EthRPC",
    "EthereumApiError",
    "FilterBlockFeed",
    "JSONRPCError",
    "LogResponse",
    "PollingBlockFeed",
    "RPCTransportError",
    "ResponseDecodeError",
    "SendTransactionExceptionError",
    "TransactionReceiptResponse",
    "TransactionResponse",
]
