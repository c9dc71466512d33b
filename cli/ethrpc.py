"""
`ethrpc` is a CLI tool to inspect a node through the RPC backend.

Every command prints JSON on stdout, logs go to stderr.
"""

import json
import sys
from functools import wraps
from threading import Event
from typing import Any, List

import click

from ethereum_rpc import BlockFeed, BlockResponse, EthereumApiError, EthRPC
from ethereum_rpc_backend import (
    EthereumEventHandler,
    EthereumRpcBackend,
    EthereumRpcConfig,
)
from ethereum_rpc_base_types import Address, Hash, to_json
from ethereum_rpc_logging import LogLevel, configure_logging, get_logger
from ethereum_rpc_types import BlockInfo

logger = get_logger(__name__)


def echo_json(data: Any) -> None:
    """Print JSON data on stdout."""
    click.echo(json.dumps(data, indent=2))


class AddressParamType(click.ParamType):
    """A 20-byte hex address."""

    name = "address"

    def convert(self, value, param, ctx) -> Address:
        """Convert the command-line value to an address."""
        try:
            return Address(value)
        except ValueError as e:
            self.fail(f"{value!r} is not a valid address: {e}", param, ctx)


class BlockParamType(click.ParamType):
    """A block number, or a 32-byte block hash."""

    name = "number_or_hash"

    def convert(self, value, param, ctx) -> int | Hash:
        """Convert the command-line value to a block number or hash."""
        if isinstance(value, (int, Hash)):
            return value
        if value.isdigit():
            return int(value)
        try:
            return Hash(value)
        except ValueError:
            self.fail(f"{value!r} is neither a block number nor a block hash", param, ctx)


class BlockPrinter(EthereumEventHandler):
    """Print every observed block until enough of them were printed."""

    def __init__(self, count: int | None):
        super().__init__()
        self.count = count
        self.printed = 0
        self.done = Event()

    def on_block(self, block: BlockInfo) -> None:
        super().on_block(block)
        if self.done.is_set():
            return
        click.echo(json.dumps(to_json(block)))
        self.printed += 1
        if self.count is not None and self.printed >= self.count:
            self.done.set()

    def on_feed_error(self, error: Exception) -> None:
        click.echo(f"Failed to observe a block: {error}", err=True)


class NoBlockFeed(BlockFeed):
    """Feed of the one-shot commands, which never observe the chain."""

    def __init__(self, rpc: EthRPC):
        super().__init__(rpc, 1.0)

    def poll(self) -> List[BlockResponse]:
        return []

    def start(self, on_block, on_error) -> None:
        pass


class Context:
    """Options of the `ethrpc` group, shared with its commands."""

    def __init__(self, rpc: EthRPC, chain_id: int, config: EthereumRpcConfig):
        self.rpc = rpc
        self.chain_id = chain_id
        self.config = config

    def backend(self, **kwargs) -> EthereumRpcBackend:
        """Create a backend observing the chain with the given options."""
        return EthereumRpcBackend(self.rpc, self.chain_id, self.config, **kwargs)

    def query_backend(self) -> EthereumRpcBackend:
        """Create a backend answering queries without observing the chain."""
        return self.backend(feed=NoBlockFeed(self.rpc))


def handle_api_errors(f):
    """Turn errors reported by the node into a clean exit."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except EthereumApiError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


@click.group(context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120))
@click.option(
    "--url",
    envvar="ETHEREUM_RPC_URL",
    default="http://localhost:8545",
    show_default=True,
    help="JSON-RPC endpoint of the node.",
)
@click.option("--chain-id", type=click.IntRange(min=0), default=1, show_default=True)
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    help="Logging level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL or a number.",
)
@click.pass_context
def ethrpc(ctx: click.Context, url: str, chain_id: int, log_level: str):
    """
    `ethrpc` queries an Ethereum node through its JSON-RPC interface.
    """
    try:
        level = LogLevel.from_cli(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e
    configure_logging(log_level=level, stream=sys.stderr, use_color=False)
    config = EthereumRpcConfig.from_env()
    # A requests session may be provided by the caller through the context object
    session = ctx.obj.get("session") if isinstance(ctx.obj, dict) else None
    rpc = EthRPC(url, session=session, timeout=config.request_timeout)
    ctx.obj = Context(rpc, chain_id, config)


@ethrpc.command()
@click.argument("address", type=AddressParamType())
@click.pass_obj
@handle_api_errors
def balance(obj: Context, address: Address):
    """Print the balance and nonce of ADDRESS."""
    rpc = obj.rpc
    echo_json(
        {
            "address": str(address),
            "balance": str(rpc.get_balance(address).in_wei()),
            "nonce": int(rpc.get_transaction_count(address)),
        }
    )


@ethrpc.command()
@click.argument("block", type=BlockParamType())
@click.pass_obj
@handle_api_errors
def block(obj: Context, block: int | Hash):
    """Print the receipts of block NUMBER_OR_HASH."""
    info = obj.query_backend().get_block(block)
    echo_json(to_json(info))


@ethrpc.command()
@click.argument("transaction_hash", metavar="HASH")
@click.pass_obj
@handle_api_errors
def tx(obj: Context, transaction_hash: str):
    """Print the receipt and status of transaction HASH."""
    try:
        hash_ = Hash(transaction_hash)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="HASH") from e
    info = obj.query_backend().get_transaction_info(hash_)
    if info is None:
        raise click.ClickException(f"transaction {hash_} not found")
    echo_json(to_json(info))


@ethrpc.command()
@click.option(
    "--poll/--filter",
    "poll_blocks",
    default=lambda: EthereumRpcConfig.from_env().poll_blocks,
    help="Poll the latest block, or rely on a node block filter.",
)
@click.option("--count", type=click.IntRange(min=1), default=None, help="Stop after N blocks.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up after this many seconds.",
)
@click.pass_obj
def watch(obj: Context, poll_blocks: bool, count: int | None, timeout: float | None):
    """Print every new block as one JSON line."""
    obj.config = obj.config.model_copy(update={"poll_blocks": poll_blocks})
    printer = BlockPrinter(count)
    obj.backend(listeners=[printer])
    logger.info("Watching %s for new blocks", obj.rpc.url)
    if not printer.done.wait(timeout):
        raise click.ClickException(f"only {printer.printed} block(s) observed in {timeout}s")


if __name__ == "__main__":
    ethrpc()
