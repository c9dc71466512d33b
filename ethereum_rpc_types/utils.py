"""Utility functions for Ethereum RPC types."""

from ethereum_rpc_base_types import Bytes, Hash


def keccak256(data: bytes) -> Hash:
    """Calculate keccak256 hash of the given data."""
    return Bytes(data).keccak256()
