"""Command-line tools of the RPC backend."""
