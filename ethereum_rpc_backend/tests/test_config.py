"""
Test suite for the backend configuration.
"""

import pytest
from pydantic import ValidationError

from ..config import EthereumRpcConfig


def test_defaults():
    """The backend uses a block filter by default, polling every 100ms when asked to."""
    config = EthereumRpcConfig()
    assert config.poll_blocks is False
    assert config.polling_frequency == 100
    assert config.polling_interval == 0.1
    assert config.request_timeout is None


def test_frozen():
    """The configuration cannot be changed once created."""
    with pytest.raises(ValidationError):
        EthereumRpcConfig().poll_blocks = True  # type: ignore[misc]


@pytest.mark.parametrize("frequency", [0, -100])
def test_invalid_frequency(frequency: int):
    """Polling frequencies must be positive."""
    with pytest.raises(ValidationError):
        EthereumRpcConfig(polling_frequency=frequency)


def test_from_env():
    """Settings are read from `ETHEREUM_RPC_*` variables."""
    config = EthereumRpcConfig.from_env(
        {
            "ETHEREUM_RPC_POLL_BLOCKS": "true",
            "ETHEREUM_RPC_POLLING_FREQUENCY": "250",
            "ETHEREUM_RPC_REQUEST_TIMEOUT": "",
            "UNRELATED": "1",
        }
    )
    assert config == EthereumRpcConfig(poll_blocks=True, polling_frequency=250)


def test_from_process_env(monkeypatch: pytest.MonkeyPatch):
    """The process environment is used by default."""
    monkeypatch.setenv("ETHEREUM_RPC_REQUEST_TIMEOUT", "2.5")
    monkeypatch.delenv("ETHEREUM_RPC_POLL_BLOCKS", raising=False)
    monkeypatch.delenv("ETHEREUM_RPC_POLLING_FREQUENCY", raising=False)
    assert EthereumRpcConfig.from_env().request_timeout == 2.5


def test_from_env_invalid():
    """Malformed values are rejected."""
    with pytest.raises(ValidationError):
        EthereumRpcConfig.from_env({"ETHEREUM_RPC_POLLING_FREQUENCY": "often"})
