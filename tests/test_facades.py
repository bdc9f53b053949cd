"""Tests for the confirmation flows and request dispatch."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import httpx
import pytest

from conftest import (
    COUNTERPARTY_ID,
    FUNGIBLE_TOKEN_ID,
    MIRROR_URL,
    OPERATOR_ID,
    FakeHost,
)
from hedera_wallet import handle_request
from hedera_wallet.clients.mirror import MirrorNodeClient
from hedera_wallet.exceptions import (
    InvalidParams,
    LedgerRejected,
    ResourceUnavailable,
    SwapExpired,
    UnsupportedOperation,
    UserRejected,
)
from hedera_wallet.facades.base import WalletContext
from hedera_wallet.schemas import ScheduledSwap, SwapStatus
from hedera_wallet.types import AccountInfo, TxReceipt


def hbar_transfer(amount: str = "10", **extra) -> dict:
    return {"transfers": [{"assetType": "HBAR", "to": COUNTERPARTY_ID, "amount": amount}], **extra}


class FailingAlertHost(FakeHost):
    """Host whose outcome dialogs fail to render."""

    async def show_dialog(self, content, dialog_type="confirmation"):
        if dialog_type == "alert":
            raise RuntimeError("dialog closed")
        return await super().show_dialog(content, dialog_type)


@pytest.mark.asyncio
async def test_transfer_crypto_happy_path(context, ledger, host):
    """Test an approved hbar transfer is submitted with its service fee."""
    result = await handle_request(
        "transferCrypto",
        hbar_transfer(serviceFee={"percentageCut": "1", "toAddress": "0.0.98"}),
        context,
    )

    assert isinstance(result, TxReceipt)
    assert result.status == "SUCCESS"
    assert [kind for kind, _ in host.dialogs] == ["confirmation", "alert"]
    texts = host.texts()
    assert "Origin: https://dapp.example" in texts
    assert "Amount: 9.9 HBAR" in texts
    assert "Service Fee: 0.1 HBAR" in texts

    (transaction,) = ledger.submitted
    assert sorted(transaction.args_of("add_hbar_transfer")) == [
        ("0.0.1001", -990_000_000),
        ("0.0.1001", -10_000_000),
        ("0.0.3003", 990_000_000),
        ("0.0.98", 10_000_000),
    ]


@pytest.mark.asyncio
async def test_user_rejection_submits_nothing(context, ledger, host, state_store):
    """Test declining the dialog raises UserRejected with no side effects."""
    host.answer = False

    with pytest.raises(UserRejected):
        await handle_request("transferCrypto", hbar_transfer(), context)

    assert ledger.transactions == []
    assert state_store.updates == []
    assert [kind for kind, _ in host.dialogs] == ["confirmation"]


@pytest.mark.asyncio
async def test_token_transfer_uses_cached_decimals(context, ledger, host):
    """Test token amounts are scaled with the cached decimals."""
    params = {
        "transfers": [
            {
                "assetType": "TOKEN",
                "to": COUNTERPARTY_ID,
                "amount": "1.5",
                "assetId": FUNGIBLE_TOKEN_ID,
            }
        ]
    }
    await handle_request("transferCrypto", params, context)

    (transaction,) = ledger.submitted
    assert sorted(transaction.args_of("add_token_transfer")) == [
        (FUNGIBLE_TOKEN_ID, OPERATOR_ID, -150),
        (FUNGIBLE_TOKEN_ID, COUNTERPARTY_ID, 150),
    ]
    assert "Asset Name: Test Token" in host.texts()


@pytest.mark.asyncio
async def test_insufficient_balance_warns(context, ledger, host):
    """Test an oversized transfer is flagged in the dialog but left to the user."""
    await handle_request("transferCrypto", hbar_transfer("1000"), context)

    texts = host.texts()
    assert "There is not enough Hbar in the wallet to transfer the requested amount" in texts
    assert "Proceed only if you are sure about the amount being transferred" in texts
    assert len(ledger.submitted) == 1


@pytest.mark.asyncio
async def test_combined_hbar_transfers_exceeding_balance_warn(context, host):
    """Test hbar transfers that fit the balance alone but not together are flagged."""
    params = {
        "transfers": [
            {"assetType": "HBAR", "to": COUNTERPARTY_ID, "amount": "60"},
            {"assetType": "HBAR", "to": "0.0.3004", "amount": "60"},
        ]
    }
    await handle_request("transferCrypto", params, context)

    warning = "There is not enough Hbar in the wallet to transfer the requested amount"
    assert host.texts().count(warning) == 2


@pytest.mark.asyncio
async def test_hbar_transfers_within_balance_do_not_warn(context, host):
    """Test transfers whose total fits the balance raise no warning."""
    params = {
        "transfers": [
            {"assetType": "HBAR", "to": COUNTERPARTY_ID, "amount": "40"},
            {"assetType": "HBAR", "to": "0.0.3004", "amount": "40"},
        ]
    }
    await handle_request("transferCrypto", params, context)

    warning = "There is not enough Hbar in the wallet to transfer the requested amount"
    assert warning not in host.texts()


@pytest.mark.asyncio
async def test_delegated_transfer_debits_owner(context, ledger, host):
    """Test a transfer with an owner spends the owner's allowance."""
    params = {
        "transfers": [
            {"assetType": "HBAR", "to": "0.0.5005", "amount": "1", "from": COUNTERPARTY_ID}
        ]
    }
    await handle_request("transferCrypto", params, context)

    (transaction,) = ledger.submitted
    assert transaction.args_of("add_approved_hbar_transfer") == [(COUNTERPARTY_ID, -100_000_000)]
    assert transaction.args_of("add_hbar_transfer") == [("0.0.5005", 100_000_000)]
    assert "Transaction Type: Delegated Transfer" in host.texts()


@pytest.mark.asyncio
async def test_known_decimals_survive_mirror_outage(state_store, host, client_factory, ledger):
    """Test a mirror outage is tolerated when decimals are already known."""

    def unavailable(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    context = WalletContext(
        origin="https://dapp.example",
        state_store=state_store,
        host=host,
        client_factory=client_factory,
        mirror=MirrorNodeClient(MIRROR_URL, transport=httpx.MockTransport(unavailable)),
    )
    token_transfer = {"assetType": "TOKEN", "to": COUNTERPARTY_ID, "amount": "1"}

    await handle_request(
        "transferCrypto",
        {"transfers": [{**token_transfer, "assetId": FUNGIBLE_TOKEN_ID}]},
        context,
    )
    assert len(ledger.submitted) == 1

    with pytest.raises(ResourceUnavailable):
        await handle_request(
            "transferCrypto",
            {"transfers": [{**token_transfer, "assetId": "0.0.6006"}]},
            context,
        )
    assert len(ledger.submitted) == 1


@pytest.mark.asyncio
async def test_outcome_dialog_failure_is_not_raised(state_store, client_factory, mirror):
    """Test the transaction result is returned even if the outcome dialog fails."""
    context = WalletContext(
        origin="https://dapp.example",
        state_store=state_store,
        host=FailingAlertHost(),
        client_factory=client_factory,
        mirror=mirror,
    )

    result = await handle_request("transferCrypto", hbar_transfer(), context)
    assert result.status == "SUCCESS"


@pytest.mark.asyncio
async def test_inactive_account_is_refused(context, state_store, ledger):
    """Test an account without a ledger id cannot transact."""
    state_store.state.current_account.hedera_account_id = ""

    with pytest.raises(InvalidParams):
        await handle_request("transferCrypto", hbar_transfer(), context)
    assert ledger.transactions == []


@pytest.mark.asyncio
async def test_missing_ledger_client(context, client_factory, host):
    """Test a factory that cannot build a client surfaces ResourceUnavailable."""
    client_factory.available = False

    with pytest.raises(ResourceUnavailable):
        await handle_request("transferCrypto", hbar_transfer(), context)
    assert host.dialogs == []


@pytest.mark.asyncio
async def test_delete_account_clears_state(context, ledger, state_store, wallet_state):
    """Test a deleted account is forgotten on its network."""
    result = await handle_request("deleteAccount", {"transferAccountId": COUNTERPARTY_ID}, context)

    assert result.status == "SUCCESS"
    (transaction,) = ledger.submitted
    assert transaction.kind == "AccountDeleteTransaction"
    assert transaction.args_of("set_transfer_account_id") == [(COUNTERPARTY_ID,)]

    state = state_store.state
    network_state = state.network_state()
    assert state.current_account.hedera_account_id == ""
    assert network_state.key_store.hedera_account_id == ""
    assert network_state.account_info == AccountInfo()
    assert state.current_account.balance.hbars == 0
    assert wallet_state.current_account.hedera_account_id == OPERATOR_ID


@pytest.mark.asyncio
async def test_delete_account_rejected_keeps_state(context, host, state_store):
    """Test state is untouched when the deletion is declined."""
    host.answer = False

    with pytest.raises(UserRejected):
        await handle_request(
            "operation", {"kind": "delete_account", "transferAccountId": "0.0.7"}, context
        )
    assert state_store.updates == []


@pytest.mark.asyncio
async def test_get_account_info_paid_query(context, ledger, host, state_store):
    """Test the query is paid up to the max cost and the service fee is collected."""
    ledger.query_cost = Decimal("1")
    ledger.query_result = SimpleNamespace(account_id=OPERATOR_ID, balance=250_000_000)

    info = await handle_request(
        "getAccountInfo",
        {"serviceFee": {"percentageCut": "1", "toAddress": "0.0.98"}},
        context,
    )

    query = ledger.queries[0]
    assert query.params == {"account_id": OPERATOR_ID}
    assert query.payment == Decimal("1.0605")
    assert info.balance.hbars == Decimal("2.5")
    assert FUNGIBLE_TOKEN_ID in info.balance.tokens

    texts = host.texts()
    assert "Estimated Query Fee: 1 Hbar" in texts
    assert "Service Fee: 0.01 Hbar" in texts
    assert "Estimated Max Query Fee: 1.0605 Hbar" in texts

    (fee_transfer,) = ledger.submitted
    assert sorted(fee_transfer.args_of("add_hbar_transfer")) == [
        ("0.0.1001", -1_000_000),
        ("0.0.98", 1_000_000),
    ]
    assert state_store.state.current_account.balance.hbars == Decimal("2.5")


@pytest.mark.asyncio
async def test_get_account_info_of_other_account(context, ledger, state_store):
    """Test querying another account leaves the cached state alone."""
    ledger.query_result = SimpleNamespace(account_id=COUNTERPARTY_ID, balance=1)

    info = await handle_request("getAccountInfo", {"accountId": COUNTERPARTY_ID}, context)

    assert info.account_id == COUNTERPARTY_ID
    assert info.balance.tokens == {}
    assert state_store.updates == []
    assert ledger.submitted == []


@pytest.mark.asyncio
async def test_get_topic_info_paid_query(context, ledger, host):
    """Test topic info is quoted, paid and charged a service fee."""
    ledger.query_cost = Decimal("2")
    ledger.query_result = SimpleNamespace(
        topic_memo="news", sequence_number=42, running_hash=b"\x01\x02"
    )

    info = await handle_request(
        "getTopicInfo",
        {"topicId": "0.0.6006", "serviceFee": {"percentageCut": "5", "toAddress": "0.0.98"}},
        context,
    )

    query = ledger.queries[0]
    assert (query.kind, query.params) == ("TopicInfoQuery", {"topic_id": "0.0.6006"})
    assert query.payment == Decimal("2.205")
    assert (info.topic_id, info.memo, info.sequence_number) == ("0.0.6006", "news", "42")
    assert info.running_hash == "0102"
    assert "0.0.6006" in host.texts()

    (fee_transfer,) = ledger.submitted
    assert sorted(fee_transfer.args_of("add_hbar_transfer")) == [
        ("0.0.1001", -10_000_000),
        ("0.0.98", 10_000_000),
    ]


@pytest.mark.asyncio
async def test_get_contract_info_without_service_fee(context, ledger):
    """Test a contract info query with no cut submits no fee transfer."""
    ledger.query_result = {"contractId": "0.0.7007", "balance": 150_000_000, "storage": 512}

    info = await handle_request("getSmartContractInfo", {"contractId": "0.0.7007"}, context)

    assert ledger.queries[0].kind == "ContractInfoQuery"
    assert ledger.queries[0].payment == Decimal("1.05")
    assert info.balance == Decimal("1.5")
    assert info.storage == "512"
    assert ledger.submitted == []


@pytest.mark.asyncio
async def test_get_contract_bytecode_is_hex(context, ledger):
    """Test contract bytecode comes back hex encoded."""
    ledger.query_result = b"\x60\x80"

    result = await handle_request("getSmartContractBytecode", {"contractId": "0.0.7007"}, context)

    assert ledger.queries[0].kind == "ContractByteCodeQuery"
    assert (result.contract_id, result.bytecode) == ("0.0.7007", "6080")


@pytest.mark.asyncio
async def test_get_contract_function_passes_call_params(context, ledger, host):
    """Test a read-only call forwards gas, function and sender to the query."""
    ledger.query_result = {"gasUsed": 21000}

    result = await handle_request(
        "getSmartContractFunction",
        {
            "contractId": "0.0.7007",
            "gas": 50000,
            "functionName": "greet",
            "functionParameters": [{"type": "string", "value": "hi"}],
            "senderAccountId": COUNTERPARTY_ID,
        },
        context,
    )

    params = ledger.queries[0].params
    assert ledger.queries[0].kind == "ContractCallQuery"
    assert (params["gas"], params["function_name"]) == (50000, "greet")
    assert params["sender_account_id"] == COUNTERPARTY_ID
    assert result.function_name == "greet"
    assert result.gas_used == "21000"
    assert "Parameter: string hi" in host.texts()


@pytest.mark.asyncio
async def test_paid_query_failure_is_ledger_rejected(context, ledger):
    """Test a failing query raises LedgerRejected and collects no fee."""
    ledger.query_error = RuntimeError("INVALID_TOPIC_ID")

    with pytest.raises(LedgerRejected) as exc_info:
        await handle_request(
            "getTopicInfo",
            {"topicId": "0.0.6006", "serviceFee": {"percentageCut": "1"}},
            context,
        )
    assert exc_info.value.details["topic_id"] == "0.0.6006"
    assert ledger.submitted == []


@pytest.mark.asyncio
async def test_ethereum_transaction_operation(context, ledger):
    """Test an ethereum transaction is submitted with decoded data."""
    await handle_request(
        "operation",
        {"kind": "ethereum_transaction", "ethereumData": "0x02f8", "maxGasAllowance": "1"},
        context,
    )

    (transaction,) = ledger.submitted
    assert transaction.kind == "EthereumTransaction"
    assert transaction.args_of("set_ethereum_data") == [(b"\x02\xf8",)]
    assert transaction.args_of("set_max_gas_allowance_hbar") == [(Decimal("1.00000000"),)]


@pytest.mark.asyncio
async def test_handle_request_closes_owned_mirror_client(state_store, host, client_factory):
    """Test a mirror client created by the context is closed after the request."""
    context = WalletContext(
        origin="https://dapp.example",
        state_store=state_store,
        host=host,
        client_factory=client_factory,
    )
    owned = context.mirror_client()

    with pytest.raises(UnsupportedOperation):
        await handle_request("noSuchMethod", {}, context)

    assert owned._client.is_closed
    assert context.mirror is None


@pytest.mark.asyncio
async def test_handle_request_keeps_injected_mirror_open(context, mirror):
    """Test an injected mirror client outlives the request."""
    with pytest.raises(UnsupportedOperation):
        await handle_request("noSuchMethod", {}, context)

    assert not mirror._client.is_closed
    assert context.mirror is mirror
    await mirror.close()


@pytest.mark.asyncio
async def test_operation_resolves_token_decimals(context, ledger, host):
    """Test fungible mints pick up the token's decimals before compiling."""
    params = {
        "kind": "mint_token",
        "assetType": "TOKEN",
        "tokenId": FUNGIBLE_TOKEN_ID,
        "amount": "1",
    }

    await handle_request("operation", params, context)

    (transaction,) = ledger.submitted
    assert transaction.kind == "TokenMintTransaction"
    assert transaction.args_of("set_amount") == [(100,)]
    assert "Token: Test Token (TT)" in host.texts()


@pytest.mark.asyncio
async def test_initiate_swap(context, ledger, host):
    """Test scheduling a swap after confirmation."""
    ledger.receipt = {"status": "SUCCESS", "scheduleId": "0.0.7007"}
    params = {
        "atomicSwaps": [
            {
                "requester": {"assetType": "HBAR", "to": COUNTERPARTY_ID, "amount": "10"},
                "responder": {
                    "assetType": "TOKEN",
                    "to": OPERATOR_ID,
                    "amount": "5",
                    "assetId": FUNGIBLE_TOKEN_ID,
                },
            }
        ],
        "serviceFee": {"percentageCut": "2"},
    }

    swap = await handle_request("initiateSwap", params, context)

    assert isinstance(swap, ScheduledSwap)
    assert swap.status == SwapStatus.CREATED
    assert swap.schedule_id == "0.0.7007"
    texts = host.texts()
    assert "You send: 9.9 HBAR" in texts
    assert "You receive: 4.95 TT" in texts
    wrapper = ledger.submitted[0]
    assert wrapper.kind == "ScheduleCreateTransaction"
    assert wrapper.signatures == ["operator-private-key"]
    assert [kind for kind, _ in host.dialogs] == ["confirmation", "alert"]


@pytest.mark.asyncio
async def test_complete_expired_swap(context, ledger, host):
    """Test acknowledging an expired swap fails before any dialog."""
    expired = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()

    with pytest.raises(SwapExpired):
        await handle_request(
            "completeSwap", {"scheduleId": "0.0.7007", "expirationTime": expired}, context
        )
    assert host.dialogs == []
    assert ledger.transactions == []


@pytest.mark.asyncio
async def test_complete_swap(context, ledger):
    """Test acknowledging a live swap countersigns its schedule."""
    swap = await handle_request("completeSwap", {"scheduleId": "0.0.7007"}, context)

    assert swap.status == SwapStatus.ACKNOWLEDGED
    assert ledger.submitted[0].kind == "ScheduleSignTransaction"


@pytest.mark.asyncio
async def test_unknown_method(context):
    """Test unknown RPC methods are unsupported."""
    with pytest.raises(UnsupportedOperation):
        await handle_request("mineBitcoin", {}, context)


@pytest.mark.asyncio
async def test_invalid_params_are_reported_before_any_dialog(context, host):
    """Test request validation happens before the user is asked."""
    with pytest.raises(InvalidParams):
        await handle_request("transferCrypto", {"transfers": []}, context)
    assert host.dialogs == []
