"""Base schema shared by single-purpose operation requests."""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from hedera_wallet.schemas.common import RequestModel
from hedera_wallet.types import ResultKind


class OperationRequest(RequestModel):
    """Fields every single-purpose operation accepts.

    Subclasses pin ``kind`` to a literal, which tags them inside the
    ``Operation`` union.
    """

    kind: str
    transaction_memo: str = ""
    max_fee: Optional[Decimal] = Field(None, gt=0, description="Max transaction fee in hbar")
    result_kind: ResultKind = ResultKind.RECEIPT
