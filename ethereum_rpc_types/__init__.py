"""Domain types exchanged between the RPC backend and the facade using it."""

from .account_types import EOA, Account
from .block_types import BlockInfo, TransactionInfo, TransactionStatus
from .receipt_types import GAS_EXHAUSTED_ERROR, EventData, TransactionReceipt
from .transaction_types import Transaction, TransactionRequest
from .utils import keccak256

__all__ = (
    "Account",
    "BlockInfo",
    "EOA",
    "EventData",
    "GAS_EXHAUSTED_ERROR",
    "Transaction",
    "TransactionInfo",
    "TransactionReceipt",
    "TransactionRequest",
    "TransactionStatus",
    "keccak256",
)
