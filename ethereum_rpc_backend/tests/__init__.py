"""Tests for the `ethereum_rpc_backend` package."""
