"""Transaction receipt and event types handed to the facade."""

from typing import List

from pydantic import Field

from ethereum_rpc_base_types import Address, Bytes, FrozenCamelModel, GasUsage, Hash

GAS_EXHAUSTED_ERROR = "All the gas was used! an error occurred"


class EventData(FrozenCamelModel):
    """Event log emitted by a transaction, split into signature, arguments and topics."""

    transaction_hash: Hash
    address: Address = Field(default_factory=Address.empty)
    event_signature: Bytes
    event_arguments: Bytes
    indexed_arguments: List[Bytes] = Field(default_factory=list)


class TransactionReceipt(FrozenCamelModel):
    """
    Outcome of a mined transaction.

    The node does not report a reliable failure flag for every network, so a transaction
    that consumed exactly its gas limit is considered to have failed.
    """

    transaction_hash: Hash
    block_hash: Hash = Field(default_factory=Hash.empty)
    from_address: Address = Field(default_factory=Address.empty, alias="from")
    to: Address = Field(default_factory=Address.empty)
    contract_address: Address = Field(default_factory=Address.empty)
    error: str = ""
    response: Bytes = Field(Bytes(b""))
    successful: bool = True
    events: List[EventData] = Field(default_factory=list)
    gas_used: GasUsage = Field(GasUsage(0))
    gas_limit: GasUsage = Field(GasUsage(0))

    @classmethod
    def from_execution(
        cls,
        *,
        gas_limit: GasUsage,
        gas_used: GasUsage,
        **kwargs,
    ) -> "TransactionReceipt":
        """Create a receipt classifying success as `gas_used != gas_limit`."""
        successful = gas_used != gas_limit
        return cls(
            gas_limit=gas_limit,
            gas_used=gas_used,
            successful=successful,
            error="" if successful else GAS_EXHAUSTED_ERROR,
            **kwargs,
        )
