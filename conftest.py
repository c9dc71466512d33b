"""Local pytest configuration used by the unit tests of every package."""

from typing import Any, Callable, Dict, List

import pytest
import requests

from ethereum_rpc import EthRPC

NODE_URL = "http://localhost:8545"

SENDER = "0x" + "aa" * 20
RECIPIENT = "0x" + "bb" * 20


def tx_hash(n: int) -> str:
    """Return the wire form of the transaction hash number `n`."""
    return f"0x{n:064x}"


def block_hash(number: int) -> str:
    """Return the wire form of the hash of block `number`."""
    return "0xb" + f"{number:063x}"


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, body: Any, status_code: int = 200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def json(self) -> Any:
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeNode:
    """
    Fake `requests.Session` answering JSON-RPC requests like a node would.

    Results are looked up in `results` first (a value, or a callable receiving the request
    params), then in the small chain model built with `add_block`.
    """

    def __init__(self):
        self.results: Dict[str, Any] = {}
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.raw_responses: Dict[str, FakeResponse] = {}
        self.requests: List[Dict[str, Any]] = []
        self.blocks: Dict[int, Dict[str, Any]] = {}
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.receipts: Dict[str, Dict[str, Any]] = {}

    def post(self, url: str, json: Dict[str, Any], headers=None, timeout=None) -> FakeResponse:
        self.requests.append(json)
        method = json["method"]
        params = list(json["params"])
        if method in self.raw_responses:
            return self.raw_responses[method]
        if method in self.errors:
            return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "error": self.errors[method]})
        if method in self.results:
            result = self.results[method]
            if callable(result):
                result = result(*params)
        else:
            handler: Callable[..., Any] | None = getattr(self, f"_{method}", None)
            if handler is None:
                return FakeResponse(
                    {
                        "jsonrpc": "2.0",
                        "id": json["id"],
                        "error": {"code": -32601, "message": f"method {method} not found"},
                    }
                )
            result = handler(*params)
        return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "result": result})

    def respond_raw(self, method: str, body: Any, status_code: int = 200) -> None:
        """Answer `method` with the given HTTP body instead of a JSON-RPC response."""
        self.raw_responses[method] = FakeResponse(body, status_code=status_code)

    def calls(self, method: str) -> List[List[Any]]:
        """Return the params of every request sent for `method`."""
        return [list(r["params"]) for r in self.requests if r["method"] == method]

    def add_transaction(
        self,
        n: int,
        *,
        gas: int = 21_000,
        gas_used: int | None = 20_000,
        to: str | None = RECIPIENT,
        logs: List[Dict[str, Any]] | None = None,
        block_number: int | None = None,
    ) -> Dict[str, Any]:
        """
        Add transaction number `n`, with a receipt unless `gas_used` is None.

        The transaction is pending when `block_number` is None.
        """
        hash_ = tx_hash(n)
        mined_block_hash = block_hash(block_number) if block_number is not None else None
        transaction = {
            "hash": hash_,
            "blockHash": mined_block_hash,
            "blockNumber": hex(block_number) if block_number is not None else None,
            "transactionIndex": "0x0" if block_number is not None else None,
            "from": SENDER,
            "to": to,
            "gas": hex(gas),
            "gasPrice": "0x3b9aca00",
            "value": "0x0",
            "input": "0x",
            "nonce": hex(n),
        }
        self.transactions[hash_] = transaction
        if gas_used is not None:
            self.receipts[hash_] = {
                "transactionHash": hash_,
                "transactionIndex": "0x0",
                "blockHash": mined_block_hash,
                "blockNumber": hex(block_number) if block_number is not None else None,
                "from": SENDER,
                "to": to,
                "contractAddress": None,
                "gasUsed": hex(gas_used),
                "cumulativeGasUsed": hex(gas_used),
                "status": "0x1",
                "logs": logs or [],
            }
        return transaction

    def add_block(self, number: int, transactions: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Add block `number` embedding the given transactions."""
        block = {
            "number": hex(number),
            "hash": block_hash(number),
            "parentHash": block_hash(number - 1) if number > 0 else "0x" + "00" * 32,
            "timestamp": hex(1_700_000_000 + number),
            "gasLimit": hex(30_000_000),
            "gasUsed": hex(sum(int(tx["gas"], 16) for tx in transactions)),
            "transactions": transactions,
        }
        self.blocks[number] = block
        return block

    def _eth_getBlockByNumber(self, number: str, full_txs: bool) -> Dict[str, Any] | None:
        if not self.blocks:
            return None
        if number == "latest":
            return self.blocks[max(self.blocks)]
        return self.blocks.get(int(number, 16))

    def _eth_getBlockByHash(self, hash_: str, full_txs: bool) -> Dict[str, Any] | None:
        for block in self.blocks.values():
            if block["hash"] == hash_:
                return block
        return None

    def _eth_getTransactionByHash(self, hash_: str) -> Dict[str, Any] | None:
        return self.transactions.get(hash_)

    def _eth_getTransactionReceipt(self, hash_: str) -> Dict[str, Any] | None:
        return self.receipts.get(hash_)

    def _eth_blockNumber(self) -> str:
        return hex(max(self.blocks)) if self.blocks else "0x0"


@pytest.fixture
def fake_node() -> FakeNode:
    """Return a fake node without any block."""
    return FakeNode()


@pytest.fixture
def eth_rpc(fake_node: FakeNode) -> EthRPC:
    """Return an `EthRPC` instance talking to the fake node."""
    return EthRPC(NODE_URL, session=fake_node)  # type: ignore[arg-type]
