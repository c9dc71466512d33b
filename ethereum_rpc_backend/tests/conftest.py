"""Fixtures of the backend tests."""

from typing import List

import pytest

from ethereum_rpc import BlockFeed, BlockResponse, EthRPC

from ..backend import EthereumRpcBackend


class ManualFeed(BlockFeed):
    """Feed delivering the blocks pushed by the test, on the test thread."""

    def __init__(self, rpc: EthRPC):
        super().__init__(rpc, 1.0)
        self.pending: List[BlockResponse] = []
        self.on_block = None
        self.on_error = None

    def poll(self) -> List[BlockResponse]:
        blocks, self.pending = self.pending, []
        return blocks

    def start(self, on_block, on_error) -> None:
        self.on_block = on_block
        self.on_error = on_error

    def deliver(self, *blocks: dict) -> None:
        """Deliver raw blocks as the node would return them."""
        self.pending.extend(BlockResponse.model_validate(block) for block in blocks)
        self.tick(self.on_block, self.on_error)


@pytest.fixture
def manual_feed(eth_rpc: EthRPC) -> ManualFeed:
    """Return a feed driven by the test."""
    return ManualFeed(eth_rpc)


@pytest.fixture
def backend(eth_rpc: EthRPC, manual_feed: ManualFeed) -> EthereumRpcBackend:
    """Return a mainnet backend talking to the fake node."""
    return EthereumRpcBackend(eth_rpc, 1, feed=manual_feed)
