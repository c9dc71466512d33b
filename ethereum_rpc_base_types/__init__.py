"""
Common definitions and types.
"""

from .base_types import (
    Address,
    Bytes,
    ChainId,
    EthData,
    EthValue,
    FixedSizeBytes,
    GasPrice,
    GasUsage,
    Hash,
    HexNumber,
    Nonce,
    Number,
    Quantity,
)
from .conversions import decode_quantity, encode_quantity, to_bytes, to_hex
from .json import to_json
from .pydantic import CamelModel, FrozenCamelModel
from .serialization import RLPSerializable, SignableRLPSerializable

__all__ = (
    "Address",
    "Bytes",
    "CamelModel",
    "ChainId",
    "EthData",
    "EthValue",
    "FixedSizeBytes",
    "FrozenCamelModel",
    "GasPrice",
    "GasUsage",
    "Hash",
    "HexNumber",
    "Nonce",
    "Number",
    "Quantity",
    "RLPSerializable",
    "SignableRLPSerializable",
    "decode_quantity",
    "encode_quantity",
    "to_bytes",
    "to_hex",
    "to_json",
)
