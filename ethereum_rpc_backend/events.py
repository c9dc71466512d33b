"""Listener interface notified by the event generator."""

from threading import Condition, Event

from ethereum_rpc_types import BlockInfo, TransactionInfo


class EthereumEventHandler:
    """
    Base class of the listeners registered on a backend.

    Every hook is a no-op by default. Subclasses overriding `on_block` must call
    `super().on_block(block)` to keep `wait_for_block` working.

    Hooks are called from the thread of the block feed, one block at a time.
    """

    def __init__(self):
        """Initialize the handler, no block observed yet."""
        self._condition = Condition()
        self._ready = Event()
        self.blocks_observed = 0
        self.last_block_number: int | None = None

    def on_ready(self) -> None:
        """Called once the backend is wired and observing the chain."""
        self._ready.set()

    @property
    def ready(self) -> bool:
        """Return whether `on_ready` was called."""
        return self._ready.is_set()

    def on_block(self, block: BlockInfo) -> None:
        """Called for every new block, before its transactions."""
        with self._condition:
            self.blocks_observed += 1
            self.last_block_number = block.block_number
            self._condition.notify_all()

    def on_transaction_executed(self, transaction: TransactionInfo) -> None:
        """Called for every receipt of the last block delivered to `on_block`."""
        pass

    def on_feed_error(self, error: Exception) -> None:
        """Called when a new block could not be fetched or delivered."""
        pass

    def wait_for_block(self, number: int | None = None, timeout: float | None = None) -> int:
        """
        Block until a block is observed and return the number of the last observed block.

        Without `number`, wait for the next block. Otherwise return as soon as a block at
        least as high as `number` was observed, which may already be the case.

        Raises `TimeoutError` if no such block arrives within `timeout` seconds.
        """
        with self._condition:
            observed = self.blocks_observed

            def reached() -> bool:
                if number is None:
                    return self.blocks_observed > observed
                return self.last_block_number is not None and self.last_block_number >= number

            if not self._condition.wait_for(reached, timeout):
                raise TimeoutError(f"no block observed within {timeout} seconds")
            assert self.last_block_number is not None
            return self.last_block_number
