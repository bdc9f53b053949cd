"""Allowance operation schemas."""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, model_validator

from hedera_wallet.schemas.operation import OperationRequest
from hedera_wallet.schemas.transfer import NFT_ID_PATTERN
from hedera_wallet.types import AssetType


class ApproveAllowanceRequest(OperationRequest):
    """Allow a spender to move assets on behalf of the current account."""

    kind: Literal["approve_allowance"] = "approve_allowance"
    spender_account_id: str = Field(..., min_length=1)
    asset_type: AssetType
    amount: Decimal = Decimal(0)
    asset_id: Optional[str] = None
    all_serials: bool = False
    serial_numbers: list[int] = Field(default_factory=list)
    decimals: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_asset(self) -> "ApproveAllowanceRequest":
        if self.asset_type == AssetType.HBAR:
            if self.asset_id:
                raise ValueError("assetId must not be given for HBAR allowances")
        elif not self.asset_id:
            raise ValueError(f"assetId is required for {self.asset_type.value} allowances")
        if self.asset_type != AssetType.NFT and self.amount <= 0:
            raise ValueError("amount must be positive")
        if self.asset_type == AssetType.NFT and not (self.all_serials or self.serial_numbers):
            raise ValueError("either allSerials or serialNumbers is required for NFTs")
        return self


class DeleteAllowanceRequest(OperationRequest):
    """Remove an allowance previously granted by the current account.

    HBAR and token allowances are removed by approving zero for the spender.
    NFT allowances are removed per serial, so ``asset_id`` has the
    ``tokenId/serialNumber`` form.
    """

    kind: Literal["delete_allowance"] = "delete_allowance"
    asset_type: AssetType
    asset_id: Optional[str] = None
    spender_account_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_asset(self) -> "DeleteAllowanceRequest":
        if self.asset_type == AssetType.NFT:
            if not self.asset_id or not NFT_ID_PATTERN.match(self.asset_id):
                raise ValueError("NFT assetId must have the form tokenId/serialNumber")
            return self
        if not self.spender_account_id:
            raise ValueError("spenderAccountId is required for HBAR and TOKEN allowances")
        if self.asset_type == AssetType.TOKEN and not self.asset_id:
            raise ValueError("assetId is required for TOKEN allowances")
        return self
