"""
This module provides various mixins for Pydantic models.
"""

from typing import Any, Literal

from pydantic import BaseModel


class ModelCustomizationsMixin:
    """
    A mixin that customizes the behavior of pydantic models. Any pydantic
    configuration override that must apply to all models
    should be placed here.

    This mixin is applied to `EthereumRpcBaseModel`.
    """

    def serialize(
        self,
        mode: Literal["json", "python"],
        by_alias: bool,
        exclude_none: bool = True,
    ) -> dict[str, Any]:
        """
        Serializes the model to the specified format with the given parameters.

        :param mode: The mode of serialization.
              If mode is 'json', the output will only contain JSON serializable types.
              If mode is 'python', the output may contain non-JSON-serializable Python objects.
        :param by_alias: Whether to use aliases for field names.
        :param exclude_none: Whether to exclude fields with None values, default is True.
        :return: The serialized representation of the model.
        """
        if not hasattr(self, "model_dump"):
            raise NotImplementedError(
                f"{self.__class__.__name__} does not have 'model_dump' method."
                "Are you sure you are using a Pydantic model?"
            )
        return self.model_dump(mode=mode, by_alias=by_alias, exclude_none=exclude_none)

    def __repr_args__(self):
        """
        Generate a list of attribute-value pairs for the object representation.

        Values are rendered the same way they are rendered in JSON, so that hashes and
        amounts show up as hex strings instead of raw `bytes`/`int` reprs.
        Only attributes with non-None values are included in the list.
        """
        attrs_names = self.serialize(mode="python", by_alias=False).keys()
        attrs = ((s, getattr(self, s)) for s in attrs_names)

        repr_attrs = []
        for a, v in attrs:
            match v:
                case list() | dict() | BaseModel() | None:
                    repr_attrs.append((a, v))
                case _:
                    repr_attrs.append((a, str(v)))
        return repr_attrs
