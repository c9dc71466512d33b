"""
JSON encoding for Ethereum RPC types.
"""

from typing import Any, AnyStr, List

from .pydantic import EthereumRpcBaseModel


def to_json(input: EthereumRpcBaseModel | AnyStr | List[EthereumRpcBaseModel | AnyStr]) -> Any:
    """
    Converts a model to its json data representation.
    """
    if isinstance(input, list):
        return [to_json(item) for item in input]
    elif isinstance(input, EthereumRpcBaseModel):
        return input.serialize(mode="json", by_alias=True)
    else:
        return str(input)
