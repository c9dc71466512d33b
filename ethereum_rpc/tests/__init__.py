"""Tests for the `ethereum_rpc` package."""
