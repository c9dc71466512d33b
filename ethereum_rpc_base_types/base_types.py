"""Basic type primitives used to define other types."""

from decimal import Decimal
from typing import Any, ClassVar, SupportsBytes, Type, TypeVar

from Crypto.Hash import keccak
from pydantic import GetCoreSchemaHandler
from pydantic_core.core_schema import (
    PlainValidatorFunctionSchema,
    no_info_plain_validator_function,
    to_string_ser_schema,
)

from .conversions import (
    BytesConvertible,
    FixedSizeBytesConvertible,
    NumberConvertible,
    decode_quantity,
    to_bytes,
    to_fixed_size_bytes,
    to_number,
)

N = TypeVar("N", bound="Number")


class ToStringSchema:
    """
    Type converter to add a simple pydantic schema that correctly
    parses and serializes the type.
    """

    @staticmethod
    def __get_pydantic_core_schema__(
        source_type: Any, handler: GetCoreSchemaHandler
    ) -> PlainValidatorFunctionSchema:
        """Call the class constructor without info and appends the serialization schema."""
        return no_info_plain_validator_function(
            source_type,
            serialization=to_string_ser_schema(),
        )


class Number(int, ToStringSchema):
    """Class that helps represent numbers."""

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new Number object."""
        return super(Number, cls).__new__(cls, to_number(input_number))

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return str(int(self))

    def hex(self) -> str:
        """Return the hexadecimal representation of the number."""
        return hex(self)


class HexNumber(Number):
    """Class that helps represent an hexadecimal numbers."""

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return self.hex()


class Quantity(HexNumber):
    """
    Non-negative arbitrary-precision integer as carried by JSON-RPC quantities.

    String inputs starting with `0x` are decoded strictly as JSON-RPC quantities, any other
    string is parsed as a decimal number.
    """

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new non-negative quantity."""
        if isinstance(input_number, str):
            stripped = input_number.strip()
            if stripped.startswith("0x"):
                value = decode_quantity(stripped)
            else:
                value = int(stripped, 10)
        else:
            value = to_number(input_number)
        if value < 0:
            raise ValueError(f"{cls.__name__} cannot be negative: {value}")
        return super(Number, cls).__new__(cls, value)


class EthValue(Quantity):
    """Amount of ether, always held in wei. Can be parsed from strings such as `1.5 ether`."""

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new EthValue object."""
        if isinstance(input_number, str) and not input_number.strip().startswith("0x"):
            words = input_number.split()
            if not 1 <= len(words) <= 2:
                raise ValueError(f"Invalid amount {input_number!r}")
            multiplier = 1
            value_str = words[0]
            if len(words) > 1:
                multiplier = cls._get_multiplier(words[1].lower())
            amount: Decimal
            if "**" in value_str:
                base, exp = value_str.split("**")
                amount = Decimal(base) ** int(exp)
            else:
                amount = Decimal(value_str)
            return super(EthValue, cls).__new__(cls, int(amount * multiplier))
        return super(EthValue, cls).__new__(cls, input_number)

    @staticmethod
    def _get_multiplier(unit: str) -> int:
        """Return the multiplier for the given unit of wei, handling synonyms."""
        match unit:
            case "wei":
                return 1
            case "kwei" | "babbage" | "femtoether":
                return 10**3
            case "mwei" | "lovelace" | "picoether":
                return 10**6
            case "gwei" | "shannon" | "nanoether" | "nano":
                return 10**9
            case "szabo" | "microether" | "micro":
                return 10**12
            case "finney" | "milliether" | "milli":
                return 10**15
            case "ether" | "eth":
                return 10**18
            case _:
                raise ValueError(f"Invalid unit {unit}")

    @classmethod
    def wei(cls, amount: int) -> "EthValue":
        """Create an amount from a number of wei."""
        return cls(amount)

    @classmethod
    def ether(cls, amount: int | str | Decimal) -> "EthValue":
        """Create an amount from a number of ether."""
        return cls(int(Decimal(amount) * 10**18))

    def in_wei(self) -> int:
        """Return the amount as a plain integer of wei."""
        return int(self)


class GasPrice(Quantity):
    """Price paid per unit of gas, in wei."""

    pass


class GasUsage(Quantity):
    """A number of gas units, either a limit or a consumed amount."""

    pass


class Nonce(Quantity):
    """Per-account transaction counter."""

    pass


class ChainId(Number):
    """Network identifier mixed into the transaction signature (EIP-155)."""

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new ChainId object."""
        instance = super(ChainId, cls).__new__(cls, input_number)
        if instance < 0:
            raise ValueError(f"Chain id cannot be negative: {int(instance)}")
        return instance


B = TypeVar("B", bound="Bytes")


class Bytes(bytes, ToStringSchema):
    """Class that helps represent bytes of variable length (call data, code, payloads)."""

    def __new__(cls, input_bytes: BytesConvertible = b""):
        """Create a new Bytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        return super(Bytes, cls).__new__(cls, to_bytes(input_bytes))

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(Bytes, self).__hash__()

    def __str__(self) -> str:
        """Return the hexadecimal representation of the bytes."""
        return self.hex()

    def hex(self, *args, **kwargs) -> str:
        """Return the hexadecimal representation of the bytes."""
        return "0x" + super().hex(*args, **kwargs)

    def hex_no_prefix(self) -> str:
        """Return the hexadecimal representation of the bytes without the `0x` marker."""
        return super().hex()

    @classmethod
    def empty(cls: Type[B]) -> B:
        """Return an empty value of this type."""
        return cls(b"")

    def is_empty(self) -> bool:
        """Return whether the value holds no bytes."""
        return len(self) == 0

    def keccak256(self) -> "Hash":
        """Return the keccak256 hash of the byte representation."""
        k = keccak.new(digest_bits=256)
        return Hash(k.update(bytes(self)).digest())


EthData = Bytes

T = TypeVar("T", bound="FixedSizeBytes")


class FixedSizeBytes(Bytes):
    """
    Class that helps represent bytes of fixed length.

    Subclasses with `allow_empty` set also accept a zero-length value, used as a sentinel
    (for example the empty address of a contract creation).
    """

    byte_length: ClassVar[int]
    allow_empty: ClassVar[bool] = False
    _sized_: ClassVar[Type["FixedSizeBytes"]]

    def __class_getitem__(cls, length: int) -> Type["FixedSizeBytes"]:
        """Create a new FixedSizeBytes class with the given length."""

        class Sized(cls):  # type: ignore
            byte_length = length

        Sized._sized_ = Sized
        return Sized

    def __new__(
        cls,
        input_bytes: FixedSizeBytesConvertible | T,
        *,
        left_padding: bool = False,
        right_padding: bool = False,
    ):
        """Create a new FixedSizeBytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        if cls.allow_empty and not isinstance(input_bytes, int):
            raw = to_bytes(input_bytes)
            if len(raw) == 0:
                return bytes.__new__(cls, b"")
        return super(FixedSizeBytes, cls).__new__(
            cls,
            to_fixed_size_bytes(
                input_bytes,
                cls.byte_length,
                left_padding=left_padding,
                right_padding=right_padding,
            ),
        )

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(FixedSizeBytes, self).__hash__()

    def __eq__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be equal."""
        if other is None:
            return False
        if not isinstance(other, FixedSizeBytes):
            if not isinstance(other, (str, int, bytes, SupportsBytes)):
                return NotImplemented
            try:
                other = self._sized_(other)
            except ValueError:
                return False
        return super().__eq__(other)

    def __ne__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be not equal."""
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result


class Address(FixedSizeBytes[20]):  # type: ignore
    """Class that helps represent Ethereum addresses."""

    allow_empty = True


class Hash(FixedSizeBytes[32]):  # type: ignore
    """Class that helps represent transaction and block hashes."""

    allow_empty = True


Address._sized_ = Address
Hash._sized_ = Hash
