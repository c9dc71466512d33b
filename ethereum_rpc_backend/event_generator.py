"""Fan-out of new blocks and executed transactions to the registered listeners."""

from threading import Lock
from typing import TYPE_CHECKING, Iterable, List, Tuple

from ethereum_rpc import BlockFeed, BlockResponse, FilterBlockFeed, PollingBlockFeed
from ethereum_rpc_logging import get_logger
from ethereum_rpc_types import TransactionInfo, TransactionStatus

from .config import EthereumRpcConfig
from .events import EthereumEventHandler

if TYPE_CHECKING:
    from .backend import EthereumRpcBackend

logger = get_logger(__name__)


class EthereumRpcEventGenerator:
    """
    Observe the chain through a block feed and notify every listener of each new block.

    Observation starts when the generator is created and lasts for its whole lifetime.
    Listeners are notified in registration order: first of the block, then of each of its
    receipts. Blocks delivered twice by the feed are notified twice.
    """

    backend: "EthereumRpcBackend"
    feed: BlockFeed

    def __init__(
        self,
        backend: "EthereumRpcBackend",
        config: EthereumRpcConfig,
        *,
        feed: BlockFeed | None = None,
        listeners: Iterable[EthereumEventHandler] = (),
    ):
        """
        Initialize the generator and start the feed selected by the configuration.

        `listeners` are registered before the feed starts, so they see every block.
        """
        self.backend = backend
        self._listeners: List[EthereumEventHandler] = list(listeners)
        self._lock = Lock()
        if feed is None:
            if config.poll_blocks:
                feed = PollingBlockFeed(backend.rpc, config.polling_interval)
            else:
                feed = FilterBlockFeed(backend.rpc)
        self.feed = feed
        self.feed.start(self.observe_block, self.on_feed_error)

    @property
    def listeners(self) -> Tuple[EthereumEventHandler, ...]:
        """Return a snapshot of the registered listeners."""
        with self._lock:
            return tuple(self._listeners)

    def add_listener(self, listener: EthereumEventHandler) -> None:
        """Register a listener for every block observed from now on."""
        with self._lock:
            self._listeners.append(listener)
            count = len(self._listeners)
        logger.info("Registered %s, %d listener(s)", listener.__class__.__name__, count)

    def observe_block(self, block: BlockResponse) -> None:
        """Assemble the info of a new block and deliver it to every listener."""
        block_info = self.backend.to_block_info(block)
        logger.verbose(
            "Block %d with %d receipt(s)", block_info.block_number, len(block_info.receipts)
        )
        for listener in self.listeners:
            listener.on_block(block_info)
            for receipt in block_info.receipts:
                listener.on_transaction_executed(
                    TransactionInfo.from_receipt(receipt, TransactionStatus.EXECUTED)
                )

    def on_feed_error(self, error: Exception) -> None:
        """Report a failure to observe a block to every listener."""
        logger.error("Failed to observe a new block: %s", error, exc_info=error)
        for listener in self.listeners:
            try:
                listener.on_feed_error(error)
            except Exception:
                logger.exception(
                    "%s failed to handle a feed error", listener.__class__.__name__
                )
