"""Transaction types signed locally before being sent to the node."""

from functools import cached_property
from typing import ClassVar, List, Literal

from pydantic import Field

from ethereum_rpc_base_types import (
    Address,
    Bytes,
    CamelModel,
    ChainId,
    EthValue,
    FrozenCamelModel,
    GasPrice,
    GasUsage,
    Hash,
    HexNumber,
    Nonce,
    SignableRLPSerializable,
)

from .account_types import EOA


class TransactionRequest(FrozenCamelModel):
    """What the caller wants to send: recipient, value, call data and gas limit."""

    account: EOA = Field(..., exclude=True)
    address: Address = Field(default_factory=Address.empty)
    value: EthValue = Field(EthValue(0))
    data: Bytes = Field(Bytes(b""))
    gas_limit: GasUsage


class Transaction(CamelModel, SignableRLPSerializable):
    """
    Legacy (type 0) transaction.

    When `chain_id` is non-zero the signature follows the replay protection scheme of
    [EIP-155](https://eips.ethereum.org/EIPS/eip-155): the chain id is part of the signed
    envelope and mixed into `v`.
    """

    nonce: Nonce = Field(Nonce(0))
    gas_price: GasPrice = Field(GasPrice(0))
    gas_limit: GasUsage = Field(GasUsage(21_000), serialization_alias="gas")
    to: Address | None = None
    value: EthValue = Field(EthValue(0))
    data: Bytes = Field(Bytes(b""), alias="input")
    chain_id: ChainId = Field(ChainId(0))

    v: HexNumber = Field(HexNumber(0))
    r: HexNumber = Field(HexNumber(0))
    s: HexNumber = Field(HexNumber(0))

    zero: ClassVar[Literal[0]] = 0

    class UnsignedTransactionError(Exception):
        """Transaction was serialized for submission before being signed."""

        def __str__(self):
            """Print exception string."""
            return "transaction must be signed before it can be sent"

    @property
    def protected(self) -> bool:
        """Return whether the signature carries the chain id."""
        return self.chain_id > 0

    @property
    def signed(self) -> bool:
        """Return whether the transaction holds a signature."""
        return self.r != 0 and self.s != 0

    def get_rlp_signing_fields(self) -> List[str]:
        """Return the list of values included in the envelope used for signing."""
        field_list = ["nonce", "gas_price", "gas_limit", "to", "value", "data"]
        if self.protected:
            field_list.extend(["chain_id", "zero", "zero"])
        return field_list

    def get_rlp_fields(self) -> List[str]:
        """Return the list of values included in the serialized transaction."""
        return ["nonce", "gas_price", "gas_limit", "to", "value", "data", "v", "r", "s"]

    def with_signature(self, account: EOA) -> "Transaction":
        """Return a signed copy of the transaction using the private key of the account."""
        signature_bytes = account.sign_recoverable(self.rlp_signing_bytes())
        v, r, s = (
            signature_bytes[64],
            int.from_bytes(signature_bytes[0:32], byteorder="big"),
            int.from_bytes(signature_bytes[32:64], byteorder="big"),
        )
        if self.protected:
            v += 35 + (self.chain_id * 2)
        else:  # not protected
            v += 27
        return self.model_copy(update={"v": HexNumber(v), "r": HexNumber(r), "s": HexNumber(s)})

    def signed_rlp(self) -> Bytes:
        """Return the serialized signed transaction, as accepted by `eth_sendRawTransaction`."""
        if not self.signed:
            raise Transaction.UnsignedTransactionError()
        return self.rlp()

    @cached_property
    def hash(self) -> Hash:
        """Returns hash of the signed transaction."""
        return self.signed_rlp().keccak256()
