"""
A module for managing the configuration of the RPC backend.

Classes:
- EthereumRpcConfig: Holds how the backend observes new blocks and talks to the node.
"""

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "ETHEREUM_RPC_"


class EthereumRpcConfig(BaseModel):
    """A class for accessing the configuration of the RPC backend."""

    model_config = ConfigDict(frozen=True)

    poll_blocks: bool = False
    """Re-query the latest block at a fixed interval instead of using a node block filter."""

    polling_frequency: int = Field(100, gt=0)
    """Milliseconds between two polls of the latest block."""

    request_timeout: float | None = Field(None, gt=0)
    """Seconds to wait for the node to answer a request, wait forever when `None`."""

    @property
    def polling_interval(self) -> float:
        """Get the polling frequency in seconds."""
        return self.polling_frequency / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EthereumRpcConfig":
        """
        Create the configuration from `ETHEREUM_RPC_*` environment variables.

        Variables that are not set keep their default value.
        """
        if environ is None:
            environ = os.environ
        values = {}
        for field_name in cls.model_fields:
            value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if value is not None and value != "":
                values[field_name] = value
        return cls.model_validate(values)
