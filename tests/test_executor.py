"""Tests for executing transaction plans against the ledger client."""

from decimal import Decimal

import pytest

from conftest import TRANSACTION_ID, LedgerStatusError
from hedera_wallet.exceptions import LedgerRejected, ResultUnknown
from hedera_wallet.schemas import SimpleTransfer
from hedera_wallet.services.compiler import BuilderCall, TransactionPlan, compile_transfers
from hedera_wallet.services.executor import build_transaction, execute_plan, ledger_status
from hedera_wallet.types import ResultKind, TxReceipt, TxRecord


def transfer_plan(**kwargs) -> TransactionPlan:
    transfers = [
        SimpleTransfer(asset_type="HBAR", to="0.0.3003", amount=Decimal("1")),
        SimpleTransfer.model_validate(
            {
                "assetType": "TOKEN",
                "to": "0.0.3003",
                "amount": "2",
                "assetId": "0.0.2002",
                "decimals": 2,
                "from": "0.0.5005",
            }
        ),
        SimpleTransfer(
            asset_type="NFT", to="0.0.3003", amount=Decimal("1"), asset_id="0.0.4004/1", decimals=0
        ),
    ]
    return compile_transfers(transfers, operator_account_id="0.0.1001", **kwargs)


def test_ledger_status_reads_sdk_errors():
    """Test status extraction from SDK-style errors."""
    assert ledger_status(LedgerStatusError("INVALID_SIGNATURE")) == "INVALID_SIGNATURE"
    assert ledger_status(RuntimeError("boom")) == ""


def test_build_transaction_applies_lines(ledger):
    """Test calls, hbar, approved token and NFT lines reach the builder."""
    transaction = build_transaction(ledger, transfer_plan(memo="hello"))

    assert transaction.kind == "TransferTransaction"
    assert transaction.args_of("set_transaction_memo") == [("hello",)]
    assert sorted(transaction.args_of("add_hbar_transfer")) == [
        ("0.0.1001", -100_000_000),
        ("0.0.3003", 100_000_000),
    ]
    assert transaction.args_of("add_token_transfer") == [("0.0.2002", "0.0.3003", 200)]
    assert transaction.args_of("add_approved_token_transfer") == [("0.0.2002", "0.0.5005", -200)]
    assert transaction.args_of("add_nft_transfer") == [("0.0.4004/1", "0.0.1001", "0.0.3003")]


def test_build_transaction_nests_scheduled_plan(ledger):
    """Test a scheduled plan is built and attached to its wrapper."""
    plan = TransactionPlan(
        kind="ScheduleCreateTransaction",
        calls=(BuilderCall(method="set_schedule_memo", args=("swap",)),),
        scheduled=transfer_plan(),
    )
    wrapper = build_transaction(ledger, plan)

    assert [t.kind for t in ledger.transactions] == [
        "ScheduleCreateTransaction",
        "TransferTransaction",
    ]
    assert wrapper.args_of("set_scheduled_transaction") == [(ledger.transactions[1],)]


@pytest.mark.asyncio
async def test_execute_plan_returns_receipt(ledger):
    """Test a successful plan is frozen, signed, submitted once and normalized."""
    ledger.receipt = {"status": "SUCCESS", "accountId": "0.0.3003"}
    plan = transfer_plan().model_copy(update={"signers": ("extra-key",)})

    receipt = await execute_plan(ledger, plan)

    assert isinstance(receipt, TxReceipt)
    assert receipt.status == "SUCCESS"
    assert receipt.account_id == "0.0.3003"
    transaction = ledger.transactions[0]
    assert transaction.frozen
    assert transaction.signatures == ["extra-key"]
    assert len(ledger.submitted) == 1


@pytest.mark.asyncio
async def test_execute_plan_returns_record(ledger):
    """Test record plans fetch and normalize the record."""
    plan = transfer_plan(result_kind=ResultKind.RECORD)

    record = await execute_plan(ledger, plan)

    assert isinstance(record, TxRecord)
    assert record.receipt.status == "SUCCESS"
    assert record.transaction_id == TRANSACTION_ID


@pytest.mark.asyncio
async def test_execute_plan_precheck_failure(ledger):
    """Test a refused submission becomes LedgerRejected with its status."""
    ledger.execute_error = LedgerStatusError("INSUFFICIENT_PAYER_BALANCE")

    with pytest.raises(LedgerRejected) as exc_info:
        await execute_plan(ledger, transfer_plan())
    assert exc_info.value.status == "INSUFFICIENT_PAYER_BALANCE"


@pytest.mark.asyncio
async def test_execute_plan_receipt_status_failure(ledger):
    """Test a receipt error carrying a status becomes LedgerRejected."""
    ledger.receipt_error = LedgerStatusError("INVALID_ACCOUNT_ID")

    with pytest.raises(LedgerRejected) as exc_info:
        await execute_plan(ledger, transfer_plan())
    assert exc_info.value.status == "INVALID_ACCOUNT_ID"
    assert exc_info.value.details["transaction_id"] == TRANSACTION_ID


@pytest.mark.asyncio
async def test_execute_plan_unreadable_outcome(ledger):
    """Test losing the receipt after submission is reported as unknown, not retried."""
    ledger.receipt_error = TimeoutError("receipt query timed out")

    with pytest.raises(ResultUnknown) as exc_info:
        await execute_plan(ledger, transfer_plan())
    assert exc_info.value.transaction_id == TRANSACTION_ID
    assert len(ledger.submitted) == 1


@pytest.mark.asyncio
async def test_execute_plan_non_success_receipt(ledger):
    """Test a receipt with a failure status raises LedgerRejected."""
    ledger.receipt = {"status": "TOKEN_NOT_ASSOCIATED_TO_ACCOUNT"}

    with pytest.raises(LedgerRejected) as exc_info:
        await execute_plan(ledger, transfer_plan())
    assert exc_info.value.status == "TOKEN_NOT_ASSOCIATED_TO_ACCOUNT"
