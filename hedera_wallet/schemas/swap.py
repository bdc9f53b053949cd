"""Atomic swap schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from hedera_wallet.schemas.common import RequestModel
from hedera_wallet.schemas.transfer import ServiceFee, SimpleTransfer
from hedera_wallet.types import TxReceipt


class SwapStatus(str, Enum):
    """Lifecycle of a scheduled swap."""

    CREATED = "created"
    ACKNOWLEDGED = "acknowledged"
    EXECUTED = "executed"
    EXPIRED = "expired"


class AtomicSwap(RequestModel):
    """Two opposite legs settled in one scheduled transaction.

    ``requester.to`` names the counterparty. The responder leg always
    credits the requesting wallet, so its ``to`` is ignored.
    """

    requester: SimpleTransfer
    responder: SimpleTransfer

    @model_validator(mode="after")
    def validate_legs(self) -> "AtomicSwap":
        if self.requester.amount < 0 or self.responder.amount < 0:
            raise ValueError("swap amounts must not be negative")
        return self


class InitiateSwapRequest(RequestModel):
    """Request to schedule one or more atomic swaps."""

    atomic_swaps: list[AtomicSwap] = Field(..., min_length=1)
    memo: str = ""
    max_fee: Optional[Decimal] = Field(None, gt=0)
    service_fee: ServiceFee = Field(default_factory=ServiceFee)


class AcknowledgeSwapRequest(RequestModel):
    """Request to countersign a scheduled swap."""

    schedule_id: str = Field(..., min_length=1)
    expiration_time: Optional[datetime] = Field(
        None, description="Known expiry of the schedule, checked before signing"
    )


class ScheduledSwap(BaseModel):
    """Outcome of creating or acknowledging a scheduled swap."""

    schedule_id: str
    scheduled_transaction_id: str = ""
    status: SwapStatus
    expiration_time: Optional[datetime] = None
    receipt: TxReceipt = Field(default_factory=TxReceipt)
