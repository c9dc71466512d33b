"""Backend contract consumed by the facade, implemented over the JSON-RPC interface of a node."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from ethereum_rpc import (
    BlockFeed,
    BlockResponse,
    EthereumApiError,
    EthRPC,
    LogResponse,
    ResponseDecodeError,
    TransactionReceiptResponse,
)
from ethereum_rpc_base_types import (
    Address,
    Bytes,
    ChainId,
    EthValue,
    GasPrice,
    GasUsage,
    Hash,
    Nonce,
)
from ethereum_rpc_logging import get_logger
from ethereum_rpc_types import (
    BlockInfo,
    EventData,
    Transaction,
    TransactionInfo,
    TransactionReceipt,
    TransactionRequest,
    TransactionStatus,
)

from .config import EthereumRpcConfig
from .event_generator import EthereumRpcEventGenerator
from .events import EthereumEventHandler

logger = get_logger(__name__)


class BlockNotFoundError(EthereumApiError):
    """The node does not know the requested block."""

    block: int | Hash

    def __init__(self, block: int | Hash):
        """Initialize the error with the number or hash that was requested."""
        super().__init__(f"block {block} not found")
        self.block = block


class EthereumBackend(ABC):
    """Operations the facade needs from an Ethereum node."""

    @abstractmethod
    def get_gas_price(self) -> GasPrice:
        """Return the current gas price."""
        pass

    @abstractmethod
    def get_balance(self, address: Address) -> EthValue:
        """Return the balance of an address."""
        pass

    @abstractmethod
    def address_exists(self, address: Address) -> bool:
        """Return whether the address ever transacted, holds funds or hosts code."""
        pass

    @abstractmethod
    def get_nonce(self, address: Address) -> Nonce:
        """Return the number of transactions sent from an address."""
        pass

    @abstractmethod
    def get_code(self, address: Address) -> Bytes:
        """Return the code deployed at an address, empty for accounts."""
        pass

    @abstractmethod
    def get_current_block_number(self) -> int:
        """Return the number of the head of the chain."""
        pass

    @abstractmethod
    def estimate_gas(
        self, account: Address, address: Address, value: EthValue, data: Bytes
    ) -> GasUsage:
        """Return the gas needed to execute a transaction."""
        pass

    @abstractmethod
    def constant_call(
        self, account: Address, address: Address, value: EthValue, data: Bytes
    ) -> Bytes:
        """Execute a read-only call and return its output."""
        pass

    @abstractmethod
    def submit(self, request: TransactionRequest, nonce: Nonce | int) -> Hash:
        """Sign and submit a transaction, return its hash."""
        pass

    @abstractmethod
    def get_block(self, block: int | Hash) -> BlockInfo:
        """Return a block with the receipts of its transactions."""
        pass

    @abstractmethod
    def get_transaction_info(self, transaction_hash: Hash) -> TransactionInfo | None:
        """Return the receipt and status of a transaction, None if unknown."""
        pass

    @abstractmethod
    def register(self, listener: EthereumEventHandler) -> None:
        """Register a listener notified of every new block."""
        pass


class EthereumRpcBackend(EthereumBackend):
    """
    Backend talking to a remote node exclusively through JSON-RPC.

    Transactions are signed locally, the node never sees a private key. Creating the
    backend starts observing the chain, with a node block filter or by polling the latest
    block depending on `config.poll_blocks`.
    """

    rpc: EthRPC
    chain_id: ChainId
    config: EthereumRpcConfig
    event_generator: EthereumRpcEventGenerator

    def __init__(
        self,
        rpc: EthRPC,
        chain_id: ChainId | int,
        config: EthereumRpcConfig | None = None,
        *,
        feed: BlockFeed | None = None,
        listeners: Iterable[EthereumEventHandler] = (),
    ):
        """Initialize the backend and start observing new blocks, notifying `listeners`."""
        self.rpc = rpc
        self.chain_id = ChainId(chain_id)
        self.config = config if config is not None else EthereumRpcConfig()
        self.event_generator = EthereumRpcEventGenerator(
            self, self.config, feed=feed, listeners=listeners
        )

    def get_gas_price(self) -> GasPrice:
        """Return the current gas price."""
        return self.rpc.gas_price()

    def get_balance(self, address: Address) -> EthValue:
        """Return the balance of an address at the latest block."""
        return self.rpc.get_balance(address)

    def address_exists(self, address: Address) -> bool:
        """
        Return whether the address is known to the chain.

        The node has no such query, so an address exists if it has sent a transaction,
        holds a balance or hosts code.
        """
        return (
            self.rpc.get_transaction_count(address) > 0
            or self.rpc.get_balance(address) > 0
            or not self.rpc.get_code(address).is_empty()
        )

    def get_nonce(self, address: Address) -> Nonce:
        """Return the nonce to use for the next transaction of an address."""
        return self.rpc.get_transaction_count(address)

    def get_code(self, address: Address) -> Bytes:
        """Return the code deployed at an address."""
        return self.rpc.get_code(address)

    def get_current_block_number(self) -> int:
        """Return the number of the head of the chain."""
        return int(self.rpc.block_number())

    def estimate_gas(
        self, account: Address, address: Address, value: EthValue, data: Bytes
    ) -> GasUsage:
        """Return the gas needed to execute a transaction, or to create a contract."""
        return self.rpc.estimate_gas(account, address, value, data)

    def constant_call(
        self, account: Address, address: Address, value: EthValue, data: Bytes
    ) -> Bytes:
        """Execute a read-only call, `value` is not transferred."""
        return self.rpc.call(account, address, data)

    def submit(self, request: TransactionRequest, nonce: Nonce | int) -> Hash:
        """
        Build, sign and send a legacy transaction priced at the current gas price.

        The returned hash is computed from the signed payload, whatever the node answers.
        """
        transaction = Transaction(
            nonce=nonce,
            gas_price=self.get_gas_price(),
            gas_limit=request.gas_limit,
            to=request.address,
            value=request.value,
            data=request.data,
            chain_id=self.chain_id,
        ).with_signature(request.account)
        signed = transaction.signed_rlp()
        transaction_hash = signed.keccak256()
        logger.info(
            "Submitting transaction %s from %s (nonce %d)",
            transaction_hash,
            request.account.address,
            int(nonce),
        )
        self.rpc.send_raw_transaction(signed)
        return transaction_hash

    def get_block(self, block: int | Hash) -> BlockInfo:
        """
        Return a block with the receipts of its transactions.

        One receipt is requested per transaction. Transactions whose receipt is not
        available yet are left out.
        """
        if isinstance(block, int):
            response = self.rpc.get_block_by_number(block)
        else:
            response = self.rpc.get_block_by_hash(Hash(block))
        if response is None:
            raise BlockNotFoundError(block)
        return self.to_block_info(response)

    def get_transaction_info(self, transaction_hash: Hash) -> TransactionInfo | None:
        """
        Return the receipt and status of a transaction.

        Returns None unless both the transaction and its receipt are known to the node.
        """
        receipt = self.rpc.get_transaction_receipt(transaction_hash)
        if receipt is None:
            return None
        transaction = self.rpc.get_transaction_by_hash(transaction_hash)
        if transaction is None:
            return None
        status = TransactionStatus.EXECUTED if transaction.mined else TransactionStatus.UNKNOWN
        return TransactionInfo(
            transaction_hash=transaction_hash,
            receipt=self.to_receipt(transaction.gas_limit, receipt),
            status=status,
        )

    def register(self, listener: EthereumEventHandler) -> None:
        """Register a listener notified of every new block, for the lifetime of the backend."""
        self.event_generator.add_listener(listener)

    def to_block_info(self, block: BlockResponse) -> BlockInfo:
        """Fetch the receipts of the transactions of a block and assemble its info."""
        if block.number is None:
            raise ResponseDecodeError("eth_getBlockByNumber", "block has no number")
        gas_limits: Dict[Hash, GasUsage] = {
            tx.transaction_hash: tx.gas_limit for tx in block.transactions
        }
        receipts: Dict[Hash, TransactionReceipt] = {}
        for transaction_hash, gas_limit in gas_limits.items():
            receipt = self.rpc.get_transaction_receipt(transaction_hash)
            if receipt is None:
                logger.verbose(
                    "Receipt of %s not available yet, leaving it out of block %d",
                    transaction_hash,
                    int(block.number),
                )
                continue
            receipts[receipt.transaction_hash] = self.to_receipt(gas_limit, receipt)
        return BlockInfo(block_number=int(block.number), receipts=list(receipts.values()))

    @classmethod
    def to_receipt(
        cls, gas_limit: GasUsage, receipt: TransactionReceiptResponse
    ) -> TransactionReceipt:
        """Convert a receipt, a transaction that used all of its gas is considered failed."""
        return TransactionReceipt.from_execution(
            gas_limit=gas_limit,
            gas_used=receipt.gas_used,
            transaction_hash=receipt.transaction_hash,
            block_hash=receipt.block_hash if receipt.block_hash is not None else Hash.empty(),
            from_address=receipt.sender if receipt.sender is not None else Address.empty(),
            to=receipt.to if receipt.to is not None else Address.empty(),
            contract_address=(
                receipt.contract_address
                if receipt.contract_address is not None
                else Address.empty()
            ),
            response=Bytes.empty(),
            events=cls.to_events(receipt.transaction_hash, receipt.logs),
        )

    @staticmethod
    def to_events(transaction_hash: Hash, logs: List[LogResponse]) -> List[EventData]:
        """
        Split logs into event data.

        The first topic is the event signature, the remaining ones are the indexed
        arguments. Anonymous events have an empty signature.
        """
        events: List[EventData] = []
        for log in logs:
            topics = [Bytes(topic) for topic in log.topics]
            events.append(
                EventData(
                    transaction_hash=transaction_hash,
                    address=log.address,
                    event_signature=topics[0] if topics else Bytes.empty(),
                    event_arguments=log.data,
                    indexed_arguments=topics[1:],
                )
            )
        return events
