"""Atomic swaps settled through scheduled transactions.

The requesting wallet schedules one transfer transaction holding both legs
and signs it. The ledger executes it once the counterparty countersigns with
``acknowledge``, or drops it when the schedule expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from hedera_wallet.core.config import settings
from hedera_wallet.exceptions import LedgerRejected, SwapExpired, UnsupportedOperation
from hedera_wallet.ledger import LedgerClient
from hedera_wallet.schemas.swap import AtomicSwap, ScheduledSwap, SwapStatus
from hedera_wallet.schemas.transfer import ServiceFee
from hedera_wallet.services.compiler import (
    BuilderCall,
    TransactionPlan,
    TransferListBuilder,
    clean_memo,
    transaction_calls,
)
from hedera_wallet.services.executor import execute_plan
from hedera_wallet.services.fees import normalize_transfers

logger = logging.getLogger(__name__)

# Statuses meaning the schedule can no longer be signed
EXPIRED_SCHEDULE_STATUSES = frozenset(
    {"INVALID_SCHEDULE_ID", "SCHEDULE_ALREADY_DELETED", "SCHEDULE_PENDING_EXPIRATION"}
)


def swap_expiration(now: Optional[datetime] = None) -> datetime:
    """Expiration time of a swap scheduled at ``now``."""
    now = now or datetime.now(timezone.utc)
    return now + timedelta(seconds=settings.SWAP_EXPIRATION_SECONDS)


def ensure_not_expired(schedule_id: str, expires_at: Optional[datetime]) -> Optional[datetime]:
    """Fail fast on a schedule whose known expiry has passed.

    Returns:
        The expiry as an aware datetime, or None when unknown

    Raises:
        SwapExpired: If the expiry is in the past
    """
    if expires_at is None:
        return None
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= datetime.now(timezone.utc):
        raise SwapExpired(
            message=f"Scheduled swap {schedule_id} expired at {expires_at.isoformat()}",
            details={"schedule_id": schedule_id},
        )
    return expires_at


def apply_swap_fees(swaps: Iterable[AtomicSwap], service_fee: ServiceFee) -> None:
    """Deduct the service fee from both legs of each swap, half per leg."""
    for swap in swaps:
        normalize_transfers([swap.requester, swap.responder], service_fee, split=2)


def compile_swap(
    swaps: Iterable[AtomicSwap],
    operator_account_id: str,
    operator_public_key: Any,
    fee_collector: str,
    memo: str = "",
    max_fee: Optional[Decimal] = None,
    expiration_time: Optional[datetime] = None,
) -> TransactionPlan:
    """Compile swaps into a schedule-create transaction.

    For each swap the requester leg moves from the operator to the
    counterparty (``requester.to``) and the responder leg moves from the
    counterparty to the operator. Each leg's payer sends that leg's fee to
    the collector.

    Args:
        swaps: Swaps whose legs already carry their service fee
        operator_account_id: Requesting account
        operator_public_key: Admin key of the schedule
        fee_collector: Account credited with service fees
        memo: Schedule memo
        max_fee: Max transaction fee in hbar
        expiration_time: When the schedule expires

    Returns:
        TransactionPlan wrapping the balanced transfer as its scheduled plan

    Raises:
        UnsupportedOperation: If a leg is a delegated transfer
        InvalidParams: If a token or NFT leg has unresolved decimals
    """
    builder = TransferListBuilder()
    for swap in swaps:
        if swap.requester.is_delegated or swap.responder.is_delegated:
            raise UnsupportedOperation(
                message="Delegated transfers cannot be part of an atomic swap",
                details={"counterparty": swap.requester.to},
            )
        counterparty = swap.requester.to

        builder.move(swap.requester, sender=operator_account_id, receiver=counterparty)
        builder.move(swap.responder, sender=counterparty, receiver=operator_account_id)

    builder.fees(fee_collector)
    scheduled = builder.build()
    calls = transaction_calls(None, max_fee) + [
        BuilderCall(method="set_admin_key", args=(operator_public_key,)),
        BuilderCall(method="set_payer_account_id", args=(operator_account_id,)),
        BuilderCall(method="set_schedule_memo", args=(clean_memo(memo),)),
        BuilderCall(method="set_expiration_time", args=(expiration_time or swap_expiration(),)),
    ]
    return TransactionPlan(
        kind="ScheduleCreateTransaction", calls=tuple(calls), scheduled=scheduled
    )


async def create_swap(
    client: LedgerClient,
    swaps: list[AtomicSwap],
    sender_key: Any,
    fee_collector: str,
    memo: str = "",
    max_fee: Optional[Decimal] = None,
) -> ScheduledSwap:
    """Schedule the swaps and sign them as the requesting side.

    Returns:
        ScheduledSwap in the CREATED state
    """
    expiration_time = swap_expiration()
    plan = compile_swap(
        swaps,
        operator_account_id=client.operator_account_id,
        operator_public_key=client.operator_public_key,
        fee_collector=fee_collector,
        memo=memo,
        max_fee=max_fee,
        expiration_time=expiration_time,
    )
    plan = plan.model_copy(update={"signers": (sender_key,)})
    receipt = await execute_plan(client, plan)

    logger.info(f"Scheduled swap {receipt.schedule_id} expiring at {expiration_time}")
    return ScheduledSwap(
        schedule_id=receipt.schedule_id,
        scheduled_transaction_id=receipt.scheduled_transaction_id,
        status=SwapStatus.CREATED,
        expiration_time=expiration_time,
        receipt=receipt,
    )


async def acknowledge(
    client: LedgerClient,
    schedule_id: str,
    receiver_key: Any,
    expires_at: Optional[datetime] = None,
) -> ScheduledSwap:
    """Countersign a scheduled swap as the responding side.

    Args:
        client: Ledger client of the responder
        schedule_id: Schedule to sign
        receiver_key: Responder's key
        expires_at: Known expiry of the schedule, if any

    Returns:
        ScheduledSwap in the ACKNOWLEDGED state

    Raises:
        SwapExpired: If the schedule has expired or no longer exists
    """
    expires_at = ensure_not_expired(schedule_id, expires_at)

    plan = TransactionPlan(
        kind="ScheduleSignTransaction",
        calls=(BuilderCall(method="set_schedule_id", args=(schedule_id,)),),
        signers=(receiver_key,),
    )
    try:
        receipt = await execute_plan(client, plan)
    except LedgerRejected as e:
        if e.status in EXPIRED_SCHEDULE_STATUSES:
            raise SwapExpired(
                message=f"Scheduled swap {schedule_id} is no longer available: {e.status}",
                status=e.status,
                details={"schedule_id": schedule_id},
            ) from e
        raise

    return ScheduledSwap(
        schedule_id=schedule_id,
        scheduled_transaction_id=receipt.scheduled_transaction_id,
        status=SwapStatus.ACKNOWLEDGED,
        expiration_time=expires_at,
        receipt=receipt,
    )
