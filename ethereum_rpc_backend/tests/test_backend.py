"""
Test suite for the JSON-RPC backend, run against a fake node.
"""

import pytest

from ethereum_rpc import JSONRPCError, RPCTransportError, SendTransactionExceptionError
from ethereum_rpc_base_types import Address, Bytes, EthValue, Hash
from ethereum_rpc_types import GAS_EXHAUSTED_ERROR, EOA, TransactionRequest, TransactionStatus

from ..backend import BlockNotFoundError, EthereumBackend, EthereumRpcBackend

ACCOUNT = Address("0x" + "aa" * 20)
CONTRACT = Address("0x" + "cc" * 20)

# Example from EIP-155
EIP155_KEY = "0x" + "46" * 32
EIP155_SIGNED_TX = Bytes(
    "0xf86c098504a817c800825208943535353535353535353535353535353535353535880de0b6b3a764000080"
    "25a028ef61340bd939bc2195fe537567866003e1a15d3c71ff63e1590620aa636276a067cbe9d8997f761aec"
    "b703304b3800ccf555c9f3dc64214b297fb1966a3b6d83"
)


def test_backend_contract(backend: EthereumRpcBackend):
    """The RPC backend implements the whole backend contract."""
    assert isinstance(backend, EthereumBackend)
    assert backend.chain_id == 1


@pytest.mark.parametrize(
    "nonce,balance,code,exists",
    [
        ("0x0", "0x0", "0x", False),
        ("0x1", "0x0", "0x", True),
        ("0x0", "0x1", "0x", True),
        ("0x0", "0x0", "0x00", True),
        ("0x5", "0xde0b6b3a7640000", "0x6001", True),
    ],
    ids=["unknown", "nonce", "balance", "code", "everything"],
)
def test_address_exists(
    backend: EthereumRpcBackend, fake_node, nonce: str, balance: str, code: str, exists: bool
):
    """An address exists if it has a nonce, a balance or code."""
    fake_node.results["eth_getTransactionCount"] = nonce
    fake_node.results["eth_getBalance"] = balance
    fake_node.results["eth_getCode"] = code
    assert backend.address_exists(ACCOUNT) is exists


def test_pass_through(backend: EthereumRpcBackend, fake_node):
    """Single value lookups are decoded into domain values."""
    fake_node.results["eth_gasPrice"] = "0x4a817c800"
    fake_node.results["eth_getBalance"] = "0x2a"
    fake_node.results["eth_getTransactionCount"] = "0x7"
    fake_node.results["eth_getCode"] = "0x6001"
    fake_node.results["eth_estimateGas"] = "0x5208"
    fake_node.add_block(12, [])

    assert backend.get_gas_price() == 20 * 10**9
    assert backend.get_balance(ACCOUNT) == EthValue.wei(42)
    assert backend.get_nonce(ACCOUNT) == 7
    assert backend.get_code(CONTRACT) == Bytes("0x6001")
    assert backend.estimate_gas(ACCOUNT, CONTRACT, EthValue(0), Bytes()) == 21_000
    assert backend.get_current_block_number() == 12


def test_constant_call_ignores_value(backend: EthereumRpcBackend, fake_node):
    """Read-only calls never transfer value."""
    fake_node.results["eth_call"] = "0x01"
    assert backend.constant_call(ACCOUNT, CONTRACT, EthValue("1 ether"), Bytes("0x12")) == b"\x01"
    (transaction, _) = fake_node.calls("eth_call")[0]
    assert transaction["value"] == "0x0"


def test_node_errors_propagate(backend: EthereumRpcBackend, fake_node):
    """Node errors reach the caller unchanged."""
    fake_node.errors["eth_gasPrice"] = {"code": -32000, "message": "boom"}
    with pytest.raises(JSONRPCError, match="boom"):
        backend.get_gas_price()


def test_submit(backend: EthereumRpcBackend, fake_node):
    """Transactions are signed locally with the chain id and priced at the current gas price."""
    fake_node.results["eth_gasPrice"] = "0x4a817c800"
    fake_node.results["eth_sendRawTransaction"] = "0x" + "00" * 32
    request = TransactionRequest(
        account=EOA(key=EIP155_KEY),
        address=Address("0x" + "35" * 20),
        value=EthValue("1 ether"),
        gas_limit=21_000,
    )

    transaction_hash = backend.submit(request, 9)

    assert fake_node.calls("eth_sendRawTransaction") == [[EIP155_SIGNED_TX.hex()]]
    # The hash echoed by the node is ignored
    assert transaction_hash == EIP155_SIGNED_TX.keccak256()


def test_submit_contract_creation(backend: EthereumRpcBackend, fake_node):
    """A request without address creates a contract."""
    fake_node.results["eth_gasPrice"] = "0x1"
    fake_node.results["eth_sendRawTransaction"] = "0x" + "00" * 32
    request = TransactionRequest(
        account=EOA(key=EIP155_KEY), data=Bytes("0x6001"), gas_limit=100_000
    )
    transaction_hash = backend.submit(request, 0)
    ((sent,),) = fake_node.calls("eth_sendRawTransaction")
    assert transaction_hash == Bytes(sent).keccak256()
    # Empty `to` is encoded as an empty RLP string
    assert "8001830186a08080826001" in sent


def test_submit_rejected(backend: EthereumRpcBackend, fake_node):
    """Submission failures are not retried."""
    fake_node.results["eth_gasPrice"] = "0x1"
    fake_node.errors["eth_sendRawTransaction"] = {"code": -32000, "message": "nonce too low"}
    request = TransactionRequest(account=EOA(key=EIP155_KEY), address=CONTRACT, gas_limit=21_000)
    with pytest.raises(SendTransactionExceptionError):
        backend.submit(request, 0)
    assert len(fake_node.calls("eth_sendRawTransaction")) == 1


def test_get_block(backend: EthereumRpcBackend, fake_node):
    """One receipt is fetched per transaction, transactions without receipt are left out."""
    transactions = [
        fake_node.add_transaction(1, gas=21_000, gas_used=21_000, block_number=5),
        fake_node.add_transaction(2, gas=21_000, gas_used=20_999, block_number=5),
        fake_node.add_transaction(3, gas_used=None, block_number=5),
    ]
    fake_node.add_block(5, transactions)

    block = backend.get_block(5)

    assert block.block_number == 5
    assert len(fake_node.calls("eth_getTransactionReceipt")) == 3
    assert [receipt.transaction_hash for receipt in block.receipts] == [Hash(1), Hash(2)]

    failed, succeeded = block.receipts
    assert not failed.successful
    assert failed.error == GAS_EXHAUSTED_ERROR
    assert failed.gas_used == failed.gas_limit == 21_000
    assert succeeded.successful
    assert succeeded.error == ""
    assert succeeded.block_hash == Hash(fake_node.blocks[5]["hash"])
    assert succeeded.response.is_empty()
    assert succeeded.contract_address.is_empty()


def test_get_block_by_hash(backend: EthereumRpcBackend, fake_node):
    """Blocks can be looked up by hash."""
    fake_node.add_block(8, [fake_node.add_transaction(1, block_number=8)])
    block = backend.get_block(Hash(fake_node.blocks[8]["hash"]))
    assert block.block_number == 8
    assert len(block.receipts) == 1
    assert fake_node.calls("eth_getBlockByHash") == [[fake_node.blocks[8]["hash"], True]]


@pytest.mark.parametrize("block", [3, Hash(3)])
def test_block_not_found(backend: EthereumRpcBackend, block):
    """Unknown blocks raise `BlockNotFoundError`."""
    with pytest.raises(BlockNotFoundError) as exc_info:
        backend.get_block(block)
    assert exc_info.value.block == block


def test_events(backend: EthereumRpcBackend, fake_node):
    """Logs are split into event signature, indexed arguments and data."""
    signature, first, second = ("0x" + f"{n:02x}" * 32 for n in (1, 2, 3))
    logs = [
        {"address": str(CONTRACT), "topics": [signature, first, second], "data": "0x2a"},
        {"address": str(CONTRACT), "topics": [], "data": "0x"},
    ]
    fake_node.add_block(1, [fake_node.add_transaction(1, logs=logs, block_number=1)])

    (receipt,) = backend.get_block(1).receipts
    event, anonymous = receipt.events
    assert event.transaction_hash == Hash(1)
    assert event.address == CONTRACT
    assert event.event_signature == Bytes(signature)
    assert event.indexed_arguments == [Bytes(first), Bytes(second)]
    assert event.event_arguments == b"\x2a"
    assert anonymous.event_signature.is_empty()
    assert anonymous.indexed_arguments == []


def test_transaction_info_executed(backend: EthereumRpcBackend, fake_node):
    """A mined transaction with a receipt is executed."""
    fake_node.add_transaction(4, block_number=2)
    info = backend.get_transaction_info(Hash(4))
    assert info is not None
    assert info.status == TransactionStatus.EXECUTED
    assert info.transaction_hash == Hash(4)
    assert info.receipt is not None
    assert info.receipt.successful


def test_transaction_info_unknown(backend: EthereumRpcBackend, fake_node):
    """A receipt for a transaction outside any block gives an unknown status."""
    fake_node.add_transaction(4, gas=50_000, gas_used=50_000)
    info = backend.get_transaction_info(Hash(4))
    assert info is not None
    assert info.status == TransactionStatus.UNKNOWN
    assert info.receipt is not None
    assert not info.receipt.successful


def test_transaction_info_not_found(backend: EthereumRpcBackend, fake_node):
    """Without both the receipt and the transaction, nothing is returned."""
    assert backend.get_transaction_info(Hash(4)) is None

    fake_node.add_transaction(5, gas_used=None, block_number=1)
    assert backend.get_transaction_info(Hash(5)) is None

    fake_node.add_transaction(6, block_number=1)
    del fake_node.transactions[str(Hash(6))]
    assert backend.get_transaction_info(Hash(6)) is None


def test_transport_error(backend: EthereumRpcBackend, fake_node):
    """Transport failures are distinct from node errors."""
    fake_node.respond_raw("eth_getBalance", "", status_code=503)
    with pytest.raises(RPCTransportError):
        backend.get_balance(ACCOUNT)
