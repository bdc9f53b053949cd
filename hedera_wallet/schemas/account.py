"""Account operation schemas."""

from typing import Literal, Optional

from pydantic import Field, model_validator

from hedera_wallet.schemas.operation import OperationRequest
from hedera_wallet.schemas.transfer import ServiceFee


class DeleteAccountRequest(OperationRequest):
    """Delete the current account, sweeping its hbar to another account."""

    kind: Literal["delete_account"] = "delete_account"
    transfer_account_id: str = Field(..., min_length=1)


class StakeHbarRequest(OperationRequest):
    """Stake the current account to a node or an account.

    Leaving both targets empty removes any existing staking.
    """

    kind: Literal["stake_hbar"] = "stake_hbar"
    node_id: Optional[int] = Field(None, ge=0)
    account_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_target(self) -> "StakeHbarRequest":
        if self.node_id is not None and self.account_id:
            raise ValueError("stake to either a node or an account, not both")
        return self

    @property
    def is_unstake(self) -> bool:
        return self.node_id is None and not self.account_id


class AccountInfoRequest(OperationRequest):
    """Paid ledger query for account information."""

    kind: Literal["get_account_info"] = "get_account_info"
    account_id: Optional[str] = Field(None, description="Defaults to the current account")
    service_fee: ServiceFee = Field(default_factory=ServiceFee)
