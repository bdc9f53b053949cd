"""Tests for receipt, record and account info normalization."""

from datetime import datetime, timezone
from enum import Enum
from types import SimpleNamespace

from hedera_wallet.services.receipts import (
    format_timestamp,
    normalize_account_info,
    normalize_receipt,
    normalize_record,
)
from hedera_wallet.types import AccountBalance, AccountInfo, TokenBalance, TxReceipt, TxRecord


class Status(Enum):
    SUCCESS = 22


def test_format_timestamp_inputs():
    """Test the RFC 1123 rendering of the accepted timestamp shapes."""
    expected = "Tue, 14 Nov 2023 22:13:20 GMT"
    assert format_timestamp(1700000000) == expected
    assert format_timestamp("1700000000.000000000") == expected
    assert format_timestamp(SimpleNamespace(seconds=1700000000, nanos=0)) == expected
    assert format_timestamp(datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)) == expected


def test_format_timestamp_unreadable():
    """Test unreadable timestamps become empty strings."""
    assert format_timestamp(None) == ""
    assert format_timestamp("") == ""
    assert format_timestamp("yesterday") == ""
    assert format_timestamp(object()) == ""


def test_normalize_receipt_none():
    """Test a missing receipt yields every field empty."""
    assert normalize_receipt(None) == TxReceipt()


def test_normalize_receipt_from_sdk_object():
    """Test SDK-style attributes, enums and bytes are rendered as text."""
    raw = SimpleNamespace(
        status=Status.SUCCESS,
        token_id="0.0.2002",
        topic_running_hash=b"\x01\xab",
        topic_sequence_number=7,
        serials=[1, 2],
        exchange_rate=SimpleNamespace(hbars=30000, cents=300000, expiration_time=None),
    )
    receipt = normalize_receipt(raw)

    assert receipt.status == "SUCCESS"
    assert receipt.token_id == "0.0.2002"
    assert receipt.topic_running_hash == "01ab"
    assert receipt.topic_sequence_number == "7"
    assert receipt.serials == ["1", "2"]
    assert receipt.exchange_rate["exchange_rate_in_cents"] == 10.0
    assert receipt.account_id == ""


def test_normalize_receipt_from_camel_case_mapping():
    """Test mapping input with camelCase keys."""
    receipt = normalize_receipt(
        {"status": "SUCCESS", "scheduleId": "0.0.7007", "children": [{"status": "SUCCESS"}]}
    )
    assert receipt.schedule_id == "0.0.7007"
    assert [child.status for child in receipt.children] == ["SUCCESS"]


def test_normalize_receipt_odd_input():
    """Test values of an unexpected type never raise."""
    receipt = normalize_receipt(42)
    assert receipt == TxReceipt()

    receipt = normalize_receipt({"serials": "not-a-list", "exchangeRate": "nope"})
    assert receipt.serials == []
    assert receipt.exchange_rate == {}


def test_normalize_record_transfers():
    """Test hbar and token transfers and the derived token transfer list."""
    raw = {
        "receipt": {"status": "SUCCESS"},
        "transactionHash": b"\xde\xad",
        "consensusTimestamp": SimpleNamespace(seconds=1700000000, nanos=0),
        "transactionId": "0.0.1001@1700000000.000000000",
        "transfers": {"0.0.1001": -100, "0.0.3003": 100},
        "tokenTransfers": {"0.0.2002": {"0.0.1001": -5, "0.0.3003": 5}},
    }
    record = normalize_record(raw)

    assert record.receipt.status == "SUCCESS"
    assert record.transaction_hash == "dead"
    assert record.consensus_timestamp == "Tue, 14 Nov 2023 22:13:20 GMT"
    assert [(t.account_id, t.amount) for t in record.transfers] == [
        ("0.0.1001", "-100"),
        ("0.0.3003", "100"),
    ]
    assert record.token_transfers == {"0.0.2002": {"0.0.1001": "-5", "0.0.3003": "5"}}
    assert {"token_id": "0.0.2002", "account_id": "0.0.3003", "amount": "5"} in (
        record.token_transfers_list
    )


def test_normalize_record_empty_inputs():
    """Test empty and missing records are total."""
    assert normalize_record(None) == TxRecord()
    record = normalize_record({})
    assert record.receipt == TxReceipt()
    assert record.transfers == []
    assert record.nft_transfers == {}


def test_normalize_record_wraps_scalar_list_items():
    """Test list fields holding plain values still normalize to dicts."""
    record = normalize_record(
        {
            "status": "SUCCESS",
            "assessedCustomFees": ["0.0.5", {"amount": 3}],
            "automaticTokenAssociations": [SimpleNamespace(token_id="0.0.2002")],
            "tokenTransfersList": [7],
        }
    )

    assert record.assessed_custom_fees == [{"value": "0.0.5"}, {"amount": "3"}]
    assert record.automatic_token_associations == [{"token_id": "0.0.2002"}]
    assert record.token_transfers_list == [{"value": "7"}]


def test_normalize_account_info_keeps_cached_tokens():
    """Test a ledger answer is combined with previously cached token balances."""
    previous = AccountInfo(
        balance=AccountBalance(
            tokens={"0.0.2002": TokenBalance(token_id="0.0.2002", balance=5, decimals=2)}
        )
    )
    raw = SimpleNamespace(
        account_id="0.0.1001",
        balance=250_000_000,
        account_memo="main",
        staking_info=SimpleNamespace(staked_node_id=3, decline_staking_reward=True),
    )
    info = normalize_account_info(raw, previous=previous)

    assert info.account_id == "0.0.1001"
    assert str(info.balance.hbars) == "2.5"
    assert info.memo == "main"
    assert info.staking_info.staked_node_id == "3"
    assert info.staking_info.decline_staking_reward is True
    assert "0.0.2002" in info.balance.tokens
