"""Base pydantic classes used to define the models exchanged with the node and the facade."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .mixins import ModelCustomizationsMixin


class EthereumRpcBaseModel(BaseModel, ModelCustomizationsMixin):
    """Base model for all models of the RPC backend."""

    pass


class CamelModel(EthereumRpcBaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `transaction_hash` in a Python model will be represented
    as `transactionHash` when it is serialized to json, which matches the casing used by
    the JSON-RPC responses of every node.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
    )


class FrozenCamelModel(CamelModel):
    """Immutable camel-case model used for the domain values handed to callers."""

    model_config = ConfigDict(frozen=True)
