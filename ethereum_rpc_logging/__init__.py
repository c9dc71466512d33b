"""Logging configuration shared by the RPC backend packages and the `ethrpc` command."""

from .logging import (
    VERBOSE_LEVEL,
    ColorFormatter,
    LogLevel,
    RpcLogger,
    UTCFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "VERBOSE_LEVEL",
    "ColorFormatter",
    "LogLevel",
    "RpcLogger",
    "UTCFormatter",
    "configure_logging",
    "get_logger",
]
