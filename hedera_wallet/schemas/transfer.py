"""Transfer-related schemas."""

import re
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator

from hedera_wallet.core.config import settings
from hedera_wallet.schemas.common import RequestModel
from hedera_wallet.types import HBAR_ASSET, AssetType, ResultKind

NFT_ID_PATTERN = re.compile(r"^[^\s/]+/[^\s/]+$")


class ServiceFee(RequestModel):
    """Service fee taken by the wallet operator on a request."""

    percentage_cut: Decimal = Field(
        Decimal(0), ge=0, le=100, description="Percentage of every amount kept as fee"
    )
    to_address: str = Field(
        default_factory=lambda: settings.DEFAULT_FEE_COLLECTOR,
        description="Account credited with collected fees",
    )


class SimpleTransfer(RequestModel):
    """A single asset movement requested by a page.

    ``amount`` is in human-readable units until the compiler converts it.
    ``decimals`` and ``service_fee`` are filled in while the request is
    prepared for confirmation.
    """

    asset_type: AssetType
    to: str = Field(..., min_length=1)
    amount: Decimal
    asset_id: Optional[str] = None
    from_: Optional[str] = Field(None, alias="from", description="Owner for approved transfers")
    decimals: Optional[int] = Field(None, ge=0)
    service_fee: Decimal = Decimal(0)

    @field_validator("from_")
    @classmethod
    def validate_from(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("'from' must be a non-empty account id when given")
        return v

    @model_validator(mode="after")
    def validate_asset_id(self) -> "SimpleTransfer":
        if self.asset_type == AssetType.HBAR:
            if self.asset_id:
                raise ValueError("assetId must not be given for HBAR transfers")
        elif not self.asset_id:
            raise ValueError(f"assetId is required for {self.asset_type.value} transfers")
        elif self.asset_type == AssetType.NFT and not NFT_ID_PATTERN.match(self.asset_id):
            raise ValueError("NFT assetId must have the form tokenId/serialNumber")
        return self

    @property
    def asset_key(self) -> str:
        """Key used to accumulate fees for this transfer's asset."""
        if self.asset_type == AssetType.HBAR:
            return HBAR_ASSET
        if self.asset_type == AssetType.NFT:
            return self.asset_id.split("/")[0]
        return self.asset_id

    @property
    def is_delegated(self) -> bool:
        return bool(self.from_)


class TransferCryptoRequest(RequestModel):
    """Request to transfer hbar, tokens and NFTs in one transaction."""

    transfers: list[SimpleTransfer] = Field(..., min_length=1)
    memo: str = ""
    max_fee: Optional[Decimal] = Field(None, gt=0, description="Max transaction fee in hbar")
    service_fee: ServiceFee = Field(default_factory=ServiceFee)
    result_kind: ResultKind = ResultKind.RECEIPT
