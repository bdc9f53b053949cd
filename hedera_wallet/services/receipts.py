"""Normalize SDK receipts, records and account info into fixed-shape models.

The SDK hands back objects whose fields may be missing, ``Long``-like,
byte strings or nested SDK types. Normalization reads every field from
either attributes or mapping keys (snake_case or camelCase), so mirror-style
dicts and SDK objects are both accepted. It never raises: anything it cannot
read becomes the empty value of its field.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from hedera_wallet.types import (
    AccountBalance,
    AccountInfo,
    ContractBytecode,
    ContractCallResult,
    ContractInfo,
    StakingInfo,
    TopicInfo,
    TxReceipt,
    TxRecord,
    TxRecordTransfer,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"
TINYBARS_PER_HBAR = Decimal(100_000_000)
MAX_DEPTH = 6


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _get(raw: Any, *names: str) -> Any:
    """First non-None value among ``names`` read as key or attribute."""
    if raw is None:
        return None
    for name in names:
        for key in (name, _camel(name)):
            try:
                if isinstance(raw, Mapping):
                    value = raw.get(key)
                else:
                    value = getattr(raw, key, None)
            except Exception as e:
                logger.debug(f"Could not read {key} from {type(raw).__name__}: {e}")
                continue
            if callable(value) and not isinstance(value, type):
                continue
            if value is not None:
                return value
    return None


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bool):
        return str(value).lower()
    try:
        return str(value)
    except Exception as e:
        logger.debug(f"Could not render {type(value).__name__}: {e}")
        return ""


def _bool(value: Any) -> bool:
    return bool(value) if isinstance(value, (bool, int)) else False


def format_timestamp(value: Any) -> str:
    """Format a timestamp as an RFC 1123 UTC string, or "" if unreadable.

    Accepts datetimes, epoch seconds as numbers or strings
    (``"1700000000.000000001"``), and objects with ``seconds``/``nanos``.
    """
    if value is None or value == "":
        return ""
    try:
        if isinstance(value, datetime):
            moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        elif isinstance(value, (int, float, Decimal, str)):
            moment = datetime.fromtimestamp(float(value), tz=timezone.utc)
        else:
            seconds = _get(value, "seconds")
            if seconds is None:
                return ""
            nanos = _get(value, "nanos") or 0
            moment = datetime.fromtimestamp(int(seconds) + int(nanos) / 1e9, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _plain(value: Any, depth: int = 0) -> Any:
    """Convert nested SDK values into JSON-friendly strings, lists and dicts."""
    if value is None:
        return ""
    if depth > MAX_DEPTH:
        return as_text(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, int, float, Decimal, bytes, bytearray, memoryview, Enum)):
        return as_text(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Mapping):
        return {as_text(key): _plain(item, depth + 1) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_plain(item, depth + 1) for item in value]
    attributes = getattr(value, "__dict__", None)
    if attributes:
        return {
            key.lstrip("_"): _plain(item, depth + 1)
            for key, item in attributes.items()
            if not callable(item)
        }
    return as_text(value)


def _plain_dict(value: Any) -> dict[str, Any]:
    result = _plain(value)
    return result if isinstance(result, dict) else {}


def _plain_list(value: Any) -> list[Any]:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        return [_plain(item) for item in value]
    except TypeError:
        return []


def _plain_dicts(value: Any) -> list[dict[str, Any]]:
    """Like ``_plain_list`` but every item is a dict; scalars become ``{"value": item}``."""
    return [
        item if isinstance(item, dict) else {"value": item} for item in _plain_list(value)
    ]


def _exchange_rate(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    hbars = _get(raw, "hbars")
    cents = _get(raw, "cents")
    rate_in_cents = _get(raw, "exchange_rate_in_cents")
    if hbars is None and cents is None:
        return {}
    try:
        hbars = int(hbars or 0)
        cents = int(cents or 0)
        if rate_in_cents is None:
            rate_in_cents = cents / hbars if hbars else 0.0
        rate_in_cents = float(rate_in_cents)
    except (TypeError, ValueError):
        return {}
    return {
        "hbars": hbars,
        "cents": cents,
        "expiration_time": format_timestamp(_get(raw, "expiration_time")),
        "exchange_rate_in_cents": rate_in_cents,
    }


def _receipts(value: Any) -> list[TxReceipt]:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        return [normalize_receipt(item) for item in value]
    except TypeError:
        return []


def normalize_receipt(raw: Any) -> TxReceipt:
    """Normalize a transaction receipt.

    Args:
        raw: SDK receipt object or mapping

    Returns:
        TxReceipt with every field present
    """
    if raw is None:
        return TxReceipt()
    return TxReceipt(
        status=as_text(_get(raw, "status")),
        account_id=as_text(_get(raw, "account_id")),
        file_id=as_text(_get(raw, "file_id")),
        contract_id=as_text(_get(raw, "contract_id")),
        topic_id=as_text(_get(raw, "topic_id")),
        token_id=as_text(_get(raw, "token_id")),
        schedule_id=as_text(_get(raw, "schedule_id")),
        exchange_rate=_exchange_rate(_get(raw, "exchange_rate")),
        topic_sequence_number=as_text(_get(raw, "topic_sequence_number")),
        topic_running_hash=as_text(_get(raw, "topic_running_hash")),
        total_supply=as_text(_get(raw, "total_supply")),
        scheduled_transaction_id=as_text(_get(raw, "scheduled_transaction_id")),
        serials=[
            as_text(serial) for serial in _plain_list(_get(raw, "serials", "serial_numbers"))
        ],
        duplicates=_receipts(_get(raw, "duplicates")),
        children=_receipts(_get(raw, "children")),
    )


def _transfer_list(value: Any) -> list[TxRecordTransfer]:
    """Hbar transfers given as ``{account: amount}`` or a list of transfer objects."""
    if value is None or isinstance(value, (str, bytes)):
        return []
    if isinstance(value, Mapping):
        return [
            TxRecordTransfer(account_id=as_text(account), amount=as_text(amount))
            for account, amount in value.items()
        ]
    try:
        return [
            TxRecordTransfer(
                account_id=as_text(_get(item, "account_id")),
                amount=as_text(_get(item, "amount")),
                is_approved=_bool(_get(item, "is_approved")),
            )
            for item in value
        ]
    except TypeError:
        return []


def _token_transfers(value: Any) -> dict[str, dict[str, str]]:
    if not isinstance(value, Mapping):
        return {}
    result: dict[str, dict[str, str]] = {}
    for token, accounts in value.items():
        if isinstance(accounts, Mapping):
            result[as_text(token)] = {
                as_text(account): as_text(amount) for account, amount in accounts.items()
            }
    return result


def _nft_transfers(value: Any) -> dict[str, list[dict[str, Any]]]:
    if not isinstance(value, Mapping):
        return {}
    result: dict[str, list[dict[str, Any]]] = {}
    for token, moves in value.items():
        result[as_text(token)] = [
            {
                "sender_account_id": as_text(_get(move, "sender_account_id", "sender_id")),
                "receiver_account_id": as_text(_get(move, "receiver_account_id", "receiver_id")),
                "serial_number": as_text(_get(move, "serial_number")),
                "is_approved": _bool(_get(move, "is_approved")),
            }
            for move in (moves if isinstance(moves, (list, tuple)) else [])
        ]
    return result


def _records(value: Any) -> list[TxRecord]:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return []
    try:
        return [normalize_record(item) for item in value]
    except TypeError:
        return []


def normalize_record(raw: Any) -> TxRecord:
    """Normalize a transaction record, including its receipt.

    Args:
        raw: SDK record object or mapping

    Returns:
        TxRecord with every field present
    """
    if raw is None:
        return TxRecord()

    token_transfers = _token_transfers(_get(raw, "token_transfers"))
    token_transfers_list = _plain_dicts(_get(raw, "token_transfers_list"))
    if not token_transfers_list:
        token_transfers_list = [
            {"token_id": token, "account_id": account, "amount": amount}
            for token, accounts in token_transfers.items()
            for account, amount in accounts.items()
        ]

    return TxRecord(
        receipt=normalize_receipt(_get(raw, "receipt")),
        transaction_hash=as_text(_get(raw, "transaction_hash")),
        consensus_timestamp=format_timestamp(_get(raw, "consensus_timestamp")),
        transaction_id=as_text(_get(raw, "transaction_id")),
        transaction_memo=as_text(_get(raw, "transaction_memo")),
        transaction_fee=as_text(_get(raw, "transaction_fee")),
        transfers=_transfer_list(_get(raw, "transfers")),
        contract_function_result=_plain_dict(_get(raw, "contract_function_result")),
        token_transfers=token_transfers,
        token_transfers_list=token_transfers_list,
        schedule_ref=as_text(_get(raw, "schedule_ref")),
        assessed_custom_fees=_plain_dicts(_get(raw, "assessed_custom_fees")),
        nft_transfers=_nft_transfers(_get(raw, "nft_transfers")),
        automatic_token_associations=_plain_dicts(_get(raw, "automatic_token_associations")),
        parent_consensus_timestamp=format_timestamp(_get(raw, "parent_consensus_timestamp")),
        alias_key=as_text(_get(raw, "alias_key")),
        duplicates=_records(_get(raw, "duplicates")),
        children=_records(_get(raw, "children")),
        ethereum_hash=as_text(_get(raw, "ethereum_hash")),
        paid_staking_rewards=_transfer_list(_get(raw, "paid_staking_rewards")),
        prng_bytes=as_text(_get(raw, "prng_bytes")),
        prng_number=as_text(_get(raw, "prng_number")),
        evm_address=as_text(_get(raw, "evm_address")),
    )


def _hbars(value: Any) -> Decimal:
    """Hbar amount from tinybars (int) or an object exposing ``to_tinybars``."""
    if value is None:
        return Decimal(0)
    to_tinybars = getattr(value, "to_tinybars", None)
    try:
        if callable(to_tinybars):
            return Decimal(to_tinybars()) / TINYBARS_PER_HBAR
        if isinstance(value, int) and not isinstance(value, bool):
            return Decimal(value) / TINYBARS_PER_HBAR
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)


def _seconds(value: Any) -> str:
    seconds = _get(value, "seconds") if not isinstance(value, (int, str)) else value
    return as_text(seconds)


def normalize_account_info(raw: Any, previous: Optional[AccountInfo] = None) -> AccountInfo:
    """Normalize the result of a ledger account info query.

    Token balances are not part of the ledger answer, so they are carried
    over from ``previous`` when given.
    """
    if raw is None:
        return AccountInfo()

    key = _get(raw, "key")
    staking = _get(raw, "staking_info")
    tokens = previous.balance.tokens if previous else {}

    return AccountInfo(
        account_id=as_text(_get(raw, "account_id")),
        alias=as_text(_get(raw, "alias", "alias_key")),
        created_time="",
        expiration_time=format_timestamp(_get(raw, "expiration_time")),
        memo=as_text(_get(raw, "account_memo", "memo")),
        evm_address=as_text(_get(raw, "contract_account_id", "evm_address")),
        key={"type": type(key).__name__, "key": as_text(key)} if key is not None else {},
        balance=AccountBalance(
            hbars=_hbars(_get(raw, "balance")),
            timestamp=format_timestamp(datetime.now(timezone.utc)),
            tokens=tokens,
        ),
        auto_renew_period=_seconds(_get(raw, "auto_renew_period")),
        ethereum_nonce=as_text(_get(raw, "ethereum_nonce")),
        is_deleted=_bool(_get(raw, "is_deleted")),
        staking_info=StakingInfo(
            decline_staking_reward=_bool(_get(staking, "decline_staking_reward")),
            stake_period_start=format_timestamp(_get(staking, "stake_period_start")),
            pending_reward=as_text(_get(staking, "pending_reward")),
            staked_to_me=as_text(_get(staking, "staked_to_me")),
            staked_account_id=as_text(_get(staking, "staked_account_id")),
            staked_node_id=as_text(_get(staking, "staked_node_id")),
        ),
    )


def normalize_topic_info(raw: Any, topic_id: str = "") -> TopicInfo:
    """Normalize the result of a ledger topic info query."""
    if raw is None:
        return TopicInfo(topic_id=topic_id)
    return TopicInfo(
        topic_id=as_text(_get(raw, "topic_id")) or topic_id,
        memo=as_text(_get(raw, "topic_memo", "memo")),
        running_hash=as_text(_get(raw, "running_hash")),
        sequence_number=as_text(_get(raw, "sequence_number")),
        expiration_time=format_timestamp(_get(raw, "expiration_time")),
        admin_key=as_text(_get(raw, "admin_key")),
        submit_key=as_text(_get(raw, "submit_key")),
        auto_renew_account_id=as_text(_get(raw, "auto_renew_account_id")),
        auto_renew_period=_seconds(_get(raw, "auto_renew_period")),
        ledger_id=as_text(_get(raw, "ledger_id")),
    )


def normalize_contract_info(raw: Any, contract_id: str = "") -> ContractInfo:
    """Normalize the result of a ledger contract info query."""
    if raw is None:
        return ContractInfo(contract_id=contract_id)
    return ContractInfo(
        contract_id=as_text(_get(raw, "contract_id")) or contract_id,
        account_id=as_text(_get(raw, "account_id")),
        contract_account_id=as_text(_get(raw, "contract_account_id")),
        admin_key=as_text(_get(raw, "admin_key")),
        expiration_time=format_timestamp(_get(raw, "expiration_time")),
        auto_renew_period=_seconds(_get(raw, "auto_renew_period")),
        auto_renew_account_id=as_text(_get(raw, "auto_renew_account_id")),
        storage=as_text(_get(raw, "storage")),
        contract_memo=as_text(_get(raw, "contract_memo")),
        balance=_hbars(_get(raw, "balance")),
        is_deleted=_bool(_get(raw, "is_deleted")),
        token_relationships=_plain_dict(_get(raw, "token_relationships")),
        ledger_id=as_text(_get(raw, "ledger_id")),
        staking_info=_plain_dict(_get(raw, "staking_info")),
    )


def normalize_contract_bytecode(raw: Any, contract_id: str = "") -> ContractBytecode:
    """Hex-encode the bytecode returned by a contract bytecode query."""
    if isinstance(raw, str):
        bytecode = raw[2:] if raw.startswith("0x") else raw
    else:
        bytecode = as_text(raw)
    return ContractBytecode(contract_id=contract_id, bytecode=bytecode)


def normalize_contract_call(
    raw: Any, contract_id: str = "", function_name: str = ""
) -> ContractCallResult:
    """Normalize the result of a read-only contract call query."""
    if raw is None:
        return ContractCallResult(contract_id=contract_id, function_name=function_name)
    return ContractCallResult(
        contract_id=as_text(_get(raw, "contract_id")) or contract_id,
        function_name=function_name,
        gas_used=as_text(_get(raw, "gas_used")),
        result=_plain_dict(raw),
    )
