"""
Block feeds: background producers of the blocks appended to the chain.

Two flavors are provided, both delivering full blocks to a single callback from one
daemon thread:

- `FilterBlockFeed` installs a block filter on the node (`eth_newBlockFilter`) and
  delivers every block the node reports as new, as it is produced.
- `PollingBlockFeed` re-queries the `latest` block at a fixed interval and delivers it
  on every poll, so an unchanged head is delivered again.
"""

import time
from abc import ABC, abstractmethod
from threading import Thread
from typing import Callable, Iterable, Iterator, List

from ethereum_rpc_base_types import Hash
from ethereum_rpc_logging import get_logger

from .rpc import EthRPC
from .types import BlockResponse, JSONRPCError, ResponseDecodeError

logger = get_logger(__name__)

BlockCallback = Callable[[BlockResponse], None]
ErrorCallback = Callable[[Exception], None]


class BlockFeed(ABC):
    """Abstract producer of raw blocks."""

    rpc: EthRPC
    interval: float
    _thread: Thread | None

    def __init__(self, rpc: EthRPC, interval: float):
        """Initialize the feed, nothing is requested from the node until `start`."""
        if interval <= 0:
            raise ValueError(f"feed interval must be positive, got {interval}")
        self.rpc = rpc
        self.interval = interval
        self._thread = None

    @abstractmethod
    def poll(self) -> Iterable[BlockResponse]:
        """Return the blocks produced since the previous call."""
        pass

    def tick(self, on_block: BlockCallback, on_error: ErrorCallback) -> None:
        """
        Poll the node once and hand every new block to `on_block`.

        Failures are handed to `on_error`. A failing `on_block` does not prevent the next
        blocks of the same tick from being delivered, a failing poll ends the tick.
        """
        try:
            for block in self.poll():
                try:
                    on_block(block)
                except Exception as e:
                    on_error(e)
        except Exception as e:
            on_error(e)

    def start(self, on_block: BlockCallback, on_error: ErrorCallback) -> None:
        """Start observing the chain on a daemon thread. A feed can only be started once."""
        if self._thread is not None:
            raise RuntimeError(f"{self.__class__.__name__} already started")
        self._thread = Thread(
            target=self._run,
            args=(on_block, on_error),
            name=self.__class__.__name__,
            daemon=True,
        )
        self._thread.start()
        logger.info("%s started against %s", self.__class__.__name__, self.rpc.url)

    def _run(self, on_block: BlockCallback, on_error: ErrorCallback) -> None:
        while True:
            self.tick(on_block, on_error)
            time.sleep(self.interval)


class FilterBlockFeed(BlockFeed):
    """Feed backed by a block filter installed on the node."""

    filter_id: str | None
    pending_hashes: List[Hash]

    def __init__(self, rpc: EthRPC, interval: float = 1.0):
        """Initialize the feed, the filter is installed on the first poll."""
        super().__init__(rpc, interval)
        self.filter_id = None
        self.pending_hashes = []

    def poll(self) -> Iterator[BlockResponse]:
        """
        Fetch the blocks whose hashes were reported by the filter since the last poll.

        The node reports each hash only once. Hashes whose block could not be fetched are
        kept and fetched again on the next poll, except for blocks that cannot be decoded.
        """
        if self.filter_id is None:
            self.filter_id = self.rpc.new_block_filter()
            logger.verbose("Installed block filter %s", self.filter_id)
        try:
            block_hashes = self.rpc.get_filter_changes(self.filter_id)
        except JSONRPCError:
            # The node forgets filters that are not polled often enough or on restart
            logger.warning("Block filter %s rejected, reinstalling it", self.filter_id)
            self.filter_id = None
            raise
        self.pending_hashes.extend(block_hashes)
        while self.pending_hashes:
            block_hash = self.pending_hashes[0]
            try:
                block = self.rpc.get_block_by_hash(block_hash)
            except ResponseDecodeError:
                self.pending_hashes.pop(0)
                raise
            self.pending_hashes.pop(0)
            if block is None:
                logger.warning("Block %s reported by the filter is not available", block_hash)
                continue
            yield block


class PollingBlockFeed(BlockFeed):
    """Feed re-querying the `latest` block at a fixed interval."""

    def poll(self) -> List[BlockResponse]:
        """Return the latest block, even if it was already returned by the previous poll."""
        block = self.rpc.get_block_by_number("latest")
        return [] if block is None else [block]
