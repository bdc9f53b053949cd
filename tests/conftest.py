"""Test configuration and fixtures."""

from decimal import Decimal
from typing import Any, Optional

import httpx
import pytest

from hedera_wallet.clients.mirror import MirrorNodeClient
from hedera_wallet.facades.base import WalletContext
from hedera_wallet.state import (
    CurrentAccount,
    KeyStore,
    NetworkAccountState,
    WalletState,
)
from hedera_wallet.types import AccountBalance, AccountInfo, TokenBalance

OPERATOR_ID = "0.0.1001"
OPERATOR_EVM_ADDRESS = "0x" + "ab" * 20
COUNTERPARTY_ID = "0.0.3003"
FUNGIBLE_TOKEN_ID = "0.0.2002"
NFT_TOKEN_ID = "0.0.4004"
TRANSACTION_ID = "0.0.1001@1700000000.000000000"
MIRROR_URL = "https://mirror.test"


class LedgerStatusError(Exception):
    """SDK-style error carrying a ledger status."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"transaction failed with status {status}")


class FakeResponse:
    """Submitted transaction handle."""

    def __init__(self, ledger: "FakeLedgerClient") -> None:
        self.transaction_id = TRANSACTION_ID
        self._ledger = ledger

    async def get_receipt(self, client: Any) -> Any:
        if self._ledger.receipt_error is not None:
            raise self._ledger.receipt_error
        return self._ledger.receipt

    async def get_record(self, client: Any) -> Any:
        if self._ledger.receipt_error is not None:
            raise self._ledger.receipt_error
        return self._ledger.record


class FakeTransaction:
    """Builder recording every setter call in order."""

    def __init__(self, kind: str, ledger: "FakeLedgerClient") -> None:
        self.kind = kind
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.signatures: list[Any] = []
        self.frozen = False
        self.executed = False
        self._ledger = ledger

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any) -> "FakeTransaction":
            self.calls.append((name, args))
            return self

        return record

    def freeze_with(self, client: Any) -> "FakeTransaction":
        self.frozen = True
        return self

    def sign(self, key: Any) -> "FakeTransaction":
        self.signatures.append(key)
        return self

    async def execute(self, client: Any) -> FakeResponse:
        self.executed = True
        if self._ledger.execute_error is not None:
            raise self._ledger.execute_error
        return FakeResponse(self._ledger)

    def args_of(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]


class FakeQuery:
    """Paid ledger query."""

    def __init__(self, ledger: "FakeLedgerClient", kind: str, params: dict[str, Any]) -> None:
        self.kind = kind
        self.params = params
        self.payment: Optional[Decimal] = None
        self._ledger = ledger

    async def get_cost(self, client: Any) -> Decimal:
        return self._ledger.query_cost

    def set_query_payment(self, amount: Decimal) -> "FakeQuery":
        self.payment = amount
        return self

    async def execute(self, client: Any) -> Any:
        if self._ledger.query_error is not None:
            raise self._ledger.query_error
        return self._ledger.query_result


class FakeLedgerClient:
    """Ledger client whose outcomes are set by each test."""

    def __init__(self) -> None:
        self.operator_account_id = OPERATOR_ID
        self.operator_public_key = "operator-public-key"
        self.transactions: list[FakeTransaction] = []
        self.queries: list[FakeQuery] = []
        self.receipt: Any = {"status": "SUCCESS"}
        self.record: Any = {"receipt": {"status": "SUCCESS"}, "transactionId": TRANSACTION_ID}
        self.execute_error: Optional[Exception] = None
        self.receipt_error: Optional[Exception] = None
        self.query_cost = Decimal("1")
        self.query_result: Any = None
        self.query_error: Optional[Exception] = None

    def transaction(self, kind: str) -> FakeTransaction:
        transaction = FakeTransaction(kind, self)
        self.transactions.append(transaction)
        return transaction

    def query(self, kind: str, **params: Any) -> FakeQuery:
        query = FakeQuery(self, kind, params)
        self.queries.append(query)
        return query

    @property
    def submitted(self) -> list[FakeTransaction]:
        return [t for t in self.transactions if t.executed]


class FakeClientFactory:
    """Hands out the same fake ledger client, or None when unavailable."""

    def __init__(self, client: FakeLedgerClient) -> None:
        self.client = client
        self.available = True
        self.requests: list[dict[str, Any]] = []

    async def create_client(self, **kwargs: Any) -> Optional[FakeLedgerClient]:
        self.requests.append(kwargs)
        return self.client if self.available else None


class FakeHost:
    """Records dialogs and answers confirmations with a fixed answer."""

    def __init__(self) -> None:
        self.answer: Any = True
        self.dialogs: list[tuple[str, list[Any]]] = []

    async def show_dialog(self, content: Any, dialog_type: str = "confirmation") -> Any:
        self.dialogs.append((dialog_type, list(content)))
        return self.answer if dialog_type == "confirmation" else None

    def texts(self, dialog_type: str = "confirmation") -> list[str]:
        return [
            node.value
            for kind, nodes in self.dialogs
            if kind == dialog_type
            for node in nodes
        ]


class InMemoryStateStore:
    """State store keeping every written state."""

    def __init__(self, state: WalletState) -> None:
        self.state = state
        self.updates: list[WalletState] = []

    def get_state(self) -> WalletState:
        return self.state

    async def update_state(self, state: WalletState) -> None:
        self.updates.append(state)
        self.state = state


def mirror_handler(request: httpx.Request) -> httpx.Response:
    """Canned mirror node answers keyed by path."""
    path = request.url.path
    if path == f"/api/v1/tokens/{FUNGIBLE_TOKEN_ID}":
        return httpx.Response(
            200,
            json={
                "token_id": FUNGIBLE_TOKEN_ID,
                "name": "Test Token",
                "symbol": "TT",
                "type": "FUNGIBLE_COMMON",
                "decimals": "2",
                "supply_type": "INFINITE",
                "total_supply": "1000000",
                "max_supply": "0",
            },
        )
    if path == f"/api/v1/tokens/{NFT_TOKEN_ID}":
        return httpx.Response(
            200,
            json={
                "token_id": NFT_TOKEN_ID,
                "name": "Test Collection",
                "symbol": "TNFT",
                "type": "NON_FUNGIBLE_UNIQUE",
                "decimals": "0",
                "supply_type": "FINITE",
                "total_supply": "2",
                "max_supply": "10",
            },
        )
    if path == f"/api/v1/tokens/{NFT_TOKEN_ID}/nfts":
        return httpx.Response(
            200,
            json={
                "nfts": [
                    {
                        "token_id": NFT_TOKEN_ID,
                        "serial_number": 1,
                        "account_id": request.url.params.get("account.id"),
                        "metadata": "aXBmczovL2E=",
                    }
                ]
            },
        )
    if path == f"/api/v1/accounts/{COUNTERPARTY_ID}":
        return httpx.Response(
            200,
            json={
                "account": COUNTERPARTY_ID,
                "evm_address": "0x" + "cd" * 20,
                "memo": "counterparty",
                "created_timestamp": "1700000000.000000000",
                "key": {"_type": "ED25519", "key": "abcd"},
                "balance": {
                    "balance": 150_000_000,
                    "timestamp": "1700000100.000000000",
                    "tokens": [
                        {"token_id": FUNGIBLE_TOKEN_ID, "balance": 12345},
                        {"token_id": NFT_TOKEN_ID, "balance": 1},
                    ],
                },
                "staked_node_id": 3,
                "pending_reward": 0,
            },
        )
    return httpx.Response(404, json={"_status": {"messages": [{"message": "Not found"}]}})


@pytest.fixture
def wallet_state() -> WalletState:
    """State of an activated testnet account holding hbar and one token."""
    return WalletState(
        current_account=CurrentAccount(
            hedera_account_id=OPERATOR_ID,
            hedera_evm_address=OPERATOR_EVM_ADDRESS,
            network="testnet",
            mirror_node_url=MIRROR_URL,
        ),
        account_state={
            OPERATOR_EVM_ADDRESS: {
                "testnet": NetworkAccountState(
                    key_store=KeyStore(
                        private_key="operator-private-key",
                        public_key="operator-public-key",
                        address=OPERATOR_EVM_ADDRESS,
                        hedera_account_id=OPERATOR_ID,
                    ),
                    account_info=AccountInfo(
                        account_id=OPERATOR_ID,
                        balance=AccountBalance(
                            hbars=Decimal("100"),
                            tokens={
                                FUNGIBLE_TOKEN_ID: TokenBalance(
                                    token_id=FUNGIBLE_TOKEN_ID,
                                    balance=Decimal("500"),
                                    decimals=2,
                                    symbol="TT",
                                )
                            },
                        ),
                    ),
                    mirror_node_url=MIRROR_URL,
                )
            }
        },
    )


@pytest.fixture
def ledger() -> FakeLedgerClient:
    """Return a fake ledger client acting as the current account."""
    return FakeLedgerClient()


@pytest.fixture
def host() -> FakeHost:
    """Return a host that approves every confirmation."""
    return FakeHost()


@pytest.fixture
def state_store(wallet_state: WalletState) -> InMemoryStateStore:
    """Return an in-memory state store."""
    return InMemoryStateStore(wallet_state)


@pytest.fixture
def mirror() -> MirrorNodeClient:
    """Return a mirror client served by canned responses."""
    return MirrorNodeClient(MIRROR_URL, transport=httpx.MockTransport(mirror_handler))


@pytest.fixture
def client_factory(ledger: FakeLedgerClient) -> FakeClientFactory:
    """Return a factory handing out the fake ledger client."""
    return FakeClientFactory(ledger)


@pytest.fixture
def context(
    state_store: InMemoryStateStore,
    host: FakeHost,
    client_factory: FakeClientFactory,
    mirror: MirrorNodeClient,
) -> WalletContext:
    """Return a wallet context wired to the fakes."""
    return WalletContext(
        origin="https://dapp.example",
        state_store=state_store,
        host=host,
        client_factory=client_factory,
        mirror=mirror,
    )
