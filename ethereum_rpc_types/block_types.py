"""Block and transaction status types handed to the facade."""

from enum import Enum
from typing import List

from pydantic import Field

from ethereum_rpc_base_types import FrozenCamelModel, Hash

from .receipt_types import TransactionReceipt


class TransactionStatus(str, Enum):
    """Known state of a transaction from the point of view of the backend."""

    UNKNOWN = "Unknown"
    PENDING = "Pending"
    EXECUTED = "Executed"


class TransactionInfo(FrozenCamelModel):
    """A transaction hash together with its receipt, if any, and its status."""

    transaction_hash: Hash
    receipt: TransactionReceipt | None = None
    status: TransactionStatus = TransactionStatus.UNKNOWN

    @classmethod
    def from_receipt(
        cls, receipt: TransactionReceipt, status: TransactionStatus
    ) -> "TransactionInfo":
        """Create the info of the transaction a receipt belongs to."""
        return cls(transaction_hash=receipt.transaction_hash, receipt=receipt, status=status)


class BlockInfo(FrozenCamelModel):
    """Block number and the receipts of the transactions it contains."""

    block_number: int
    receipts: List[TransactionReceipt] = Field(default_factory=list)
