"""Account-related types."""

from typing import Any

from coincurve.keys import PrivateKey
from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ethereum_rpc_base_types import Address, Bytes, Hash
from ethereum_rpc_base_types.conversions import FixedSizeBytesConvertible

from .utils import keccak256


class EOA(Address):
    """
    An Externally Owned Account (EOA) is an account controlled by a private key.

    The address is always derived from the key, which never leaves the instance except
    through `sign_recoverable`.
    """

    _key: Hash

    def __new__(cls, *, key: FixedSizeBytesConvertible):
        """Init the EOA from its private key."""
        key_hash = Hash(key, left_padding=True)
        public_key = PrivateKey(bytes(key_hash)).public_key
        address = keccak256(public_key.format(compressed=False)[1:])[32 - 20 :]
        instance = super(EOA, cls).__new__(cls, address)
        instance._key = key_hash
        return instance

    @property
    def address(self) -> Address:
        """Return the plain address of the account."""
        return Address(bytes(self))

    def sign_recoverable(self, message: Bytes) -> bytes:
        """
        Sign the keccak256 hash of the message.

        Returns the 65 bytes `r || s || recovery_id` signature.
        """
        return PrivateKey(bytes(self._key)).sign_recoverable(bytes(message), hasher=keccak256)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept only existing accounts, an account cannot be rebuilt from its address."""
        return core_schema.is_instance_schema(cls)

    def __repr__(self) -> str:
        """Never include the private key in the representation."""
        return f"EOA({self.hex()})"


Account = EOA
