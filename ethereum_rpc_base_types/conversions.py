"""Common conversion methods between JSON-RPC wire values and Python values."""

from re import fullmatch, sub
from typing import List, SupportsBytes, TypeAlias

BytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int]
FixedSizeBytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int] | int
NumberConvertible: TypeAlias = str | bytes | SupportsBytes | int


def to_bytes(input_bytes: BytesConvertible) -> bytes:
    """Convert multiple types into bytes."""
    if input_bytes is None:
        raise ValueError("Cannot convert `None` input to bytes")

    if (
        isinstance(input_bytes, SupportsBytes)
        or isinstance(input_bytes, bytes)
        or isinstance(input_bytes, list)
    ):
        return bytes(input_bytes)

    if isinstance(input_bytes, str):
        # Hex strings may contain whitespace for readability
        input_bytes = sub(r"\s+", "", input_bytes)
        if input_bytes.startswith(("0x", "0X")):
            input_bytes = input_bytes[2:]
        if len(input_bytes) % 2 == 1:
            input_bytes = "0" + input_bytes
        return bytes.fromhex(input_bytes)

    raise ValueError(f"invalid type for `bytes`: {type(input_bytes)}")


def to_fixed_size_bytes(
    input_bytes: FixedSizeBytesConvertible,
    size: int,
    *,
    left_padding: bool = False,
    right_padding: bool = False,
) -> bytes:
    """
    Convert multiple types into fixed-size bytes.

    :param input_bytes: The input data to convert.
    :param size: The size of the output bytes.
    :param left_padding: Whether to allow left-padding of the input data bytes using zeros. If the
        input data is an integer, padding is always performed.
    :param right_padding: Whether to allow right-padding of the input data bytes using zeros.
    """
    if isinstance(input_bytes, int):
        return int.to_bytes(input_bytes, length=size, byteorder="big", signed=input_bytes < 0)
    input_bytes = to_bytes(input_bytes)
    if len(input_bytes) > size:
        raise ValueError(f"input is too large for fixed size bytes: {len(input_bytes)} > {size}")
    if len(input_bytes) < size:
        if left_padding:
            return bytes(input_bytes).rjust(size, b"\x00")
        if right_padding:
            return bytes(input_bytes).ljust(size, b"\x00")
        raise ValueError(
            f"input is too small for fixed size bytes: {len(input_bytes)} < {size}\n"
            "Use `left_padding=True` or `right_padding=True` to allow padding."
        )
    return input_bytes


def to_hex(input_bytes: BytesConvertible) -> str:
    """Convert multiple types into a bytes hex string."""
    return "0x" + to_bytes(input_bytes).hex()


def to_number(input_number: NumberConvertible) -> int:
    """Convert multiple types into a number."""
    if isinstance(input_number, int):
        return input_number
    if isinstance(input_number, str):
        return int(input_number, 0)
    if isinstance(input_number, bytes) or isinstance(input_number, SupportsBytes):
        return int.from_bytes(input_number, byteorder="big")
    raise ValueError(f"invalid type for `number`: {type(input_number)}")


def decode_quantity(value: str) -> int:
    """
    Decode a JSON-RPC quantity (`0x`-prefixed, big-endian hex) into an integer.

    Unlike `to_number`, the `0x` marker is mandatory and decimal input is rejected, which is
    what a node is required to send for every quantity.
    """
    if not isinstance(value, str):
        raise ValueError(f"quantity must be a hex string, got {type(value).__name__}")
    if not fullmatch(r"0x[0-9a-fA-F]+", value):
        raise ValueError(f"malformed hex quantity: {value!r}")
    return int(value[2:], 16)


def encode_quantity(value: int) -> str:
    """Encode a non-negative integer as a JSON-RPC quantity."""
    if value < 0:
        raise ValueError(f"quantity cannot be negative: {value}")
    return hex(value)
