"""Token service (HTS) operation schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field, model_validator

from hedera_wallet.schemas.common import RequestModel
from hedera_wallet.schemas.operation import OperationRequest

TokenAssetType = Literal["TOKEN", "NFT"]


class TokenCustomFee(RequestModel):
    """Fixed custom fee attached to a token."""

    fee_collector_account_id: str
    hbar_amount: Optional[Decimal] = Field(None, gt=0)
    token_amount: Optional[Decimal] = Field(None, gt=0)
    denominating_token_id: Optional[str] = None
    all_collectors_are_exempt: bool = False

    @model_validator(mode="after")
    def validate_amount(self) -> "TokenCustomFee":
        if (self.hbar_amount is None) == (self.token_amount is None):
            raise ValueError("exactly one of hbarAmount or tokenAmount is required")
        return self


class _AmountOrSerials(OperationRequest):
    asset_type: TokenAssetType
    token_id: str = Field(..., min_length=1)
    amount: Decimal = Decimal(0)
    serial_numbers: list[int] = Field(default_factory=list)
    decimals: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_amount_or_serials(self) -> "_AmountOrSerials":
        if self.asset_type == "TOKEN" and self.amount <= 0:
            raise ValueError("amount must be positive for fungible tokens")
        if self.asset_type == "NFT" and not self.serial_numbers:
            raise ValueError("serialNumbers are required for NFTs")
        return self


class MintTokenRequest(OperationRequest):
    """Mint fungible supply or new NFT serials."""

    kind: Literal["mint_token"] = "mint_token"
    asset_type: TokenAssetType
    token_id: str = Field(..., min_length=1)
    amount: Decimal = Decimal(0)
    metadata: list[str] = Field(default_factory=list)
    decimals: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_amount_or_metadata(self) -> "MintTokenRequest":
        if self.asset_type == "TOKEN" and self.amount <= 0:
            raise ValueError("amount must be positive for fungible tokens")
        if self.asset_type == "NFT" and not self.metadata:
            raise ValueError("metadata is required to mint NFTs")
        return self


class BurnTokenRequest(_AmountOrSerials):
    """Burn fungible supply or NFT serials held by the treasury."""

    kind: Literal["burn_token"] = "burn_token"


class WipeTokenRequest(_AmountOrSerials):
    """Wipe tokens or NFT serials from an account."""

    kind: Literal["wipe_token"] = "wipe_token"
    account_id: str = Field(..., min_length=1)


class FreezeAccountRequest(OperationRequest):
    """Freeze or unfreeze an account for a token."""

    kind: Literal["freeze_account"] = "freeze_account"
    token_id: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1)
    freeze: bool = True


class EnableKycRequest(OperationRequest):
    """Grant or revoke KYC for an account on a token."""

    kind: Literal["enable_kyc"] = "enable_kyc"
    token_id: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1)
    enable: bool = True


class PauseTokenRequest(OperationRequest):
    """Pause or unpause a token."""

    kind: Literal["pause_token"] = "pause_token"
    token_id: str = Field(..., min_length=1)
    pause: bool = True


class AssociateTokensRequest(OperationRequest):
    """Associate tokens with the current account."""

    kind: Literal["associate_tokens"] = "associate_tokens"
    token_ids: list[str] = Field(..., min_length=1)


class DissociateTokensRequest(OperationRequest):
    """Dissociate tokens from the current account."""

    kind: Literal["dissociate_tokens"] = "dissociate_tokens"
    token_ids: list[str] = Field(..., min_length=1)


class CreateTokenRequest(OperationRequest):
    """Create a fungible token or an NFT collection.

    The current account becomes treasury and its key the admin key.
    """

    kind: Literal["create_token"] = "create_token"
    asset_type: TokenAssetType
    name: str = Field(..., min_length=1, max_length=100)
    symbol: str = Field(..., min_length=1, max_length=100)
    decimals: int = Field(0, ge=0)
    initial_supply: Decimal = Field(Decimal(0), ge=0)
    supply_type: Literal["INFINITE", "FINITE"] = "INFINITE"
    max_supply: Optional[Decimal] = Field(None, gt=0)
    token_memo: str = ""
    freeze_default: bool = False
    kyc_public_key: Optional[str] = None
    freeze_public_key: Optional[str] = None
    pause_public_key: Optional[str] = None
    wipe_public_key: Optional[str] = None
    supply_public_key: Optional[str] = None
    fee_schedule_public_key: Optional[str] = None
    custom_fees: list[TokenCustomFee] = Field(default_factory=list)
    expiration_time: Optional[datetime] = None
    auto_renew_period: Optional[int] = Field(None, gt=0, description="Seconds")

    @model_validator(mode="after")
    def validate_supply(self) -> "CreateTokenRequest":
        if self.asset_type == "NFT" and (self.decimals or self.initial_supply):
            raise ValueError("NFT collections must have zero decimals and initial supply")
        if self.supply_type == "FINITE":
            if self.max_supply is None:
                raise ValueError("maxSupply is required for FINITE supply tokens")
            if self.initial_supply > self.max_supply:
                raise ValueError("initialSupply cannot exceed maxSupply")
        elif self.max_supply is not None:
            raise ValueError("maxSupply is only allowed for FINITE supply tokens")
        return self


class UpdateTokenRequest(OperationRequest):
    """Update token properties. Signed with the admin key."""

    kind: Literal["update_token"] = "update_token"
    token_id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=100)
    symbol: Optional[str] = Field(None, max_length=100)
    treasury_account_id: Optional[str] = None
    admin_public_key: Optional[str] = None
    kyc_public_key: Optional[str] = None
    freeze_public_key: Optional[str] = None
    pause_public_key: Optional[str] = None
    wipe_public_key: Optional[str] = None
    supply_public_key: Optional[str] = None
    fee_schedule_public_key: Optional[str] = None
    token_memo: Optional[str] = None
    expiration_time: Optional[datetime] = None
    auto_renew_account_id: Optional[str] = None
    auto_renew_period: Optional[int] = Field(None, gt=0)


class DeleteTokenRequest(OperationRequest):
    """Delete a token. Signed with the admin key."""

    kind: Literal["delete_token"] = "delete_token"
    token_id: str = Field(..., min_length=1)


class UpdateTokenFeeScheduleRequest(OperationRequest):
    """Replace the custom fee schedule of a token."""

    kind: Literal["update_token_fee_schedule"] = "update_token_fee_schedule"
    token_id: str = Field(..., min_length=1)
    custom_fees: list[TokenCustomFee] = Field(default_factory=list)
