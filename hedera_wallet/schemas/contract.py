"""Smart contract service (HSCS) operation schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import Field, model_validator

from hedera_wallet.schemas.common import RequestModel
from hedera_wallet.schemas.operation import OperationRequest
from hedera_wallet.schemas.transfer import ServiceFee
from hedera_wallet.types import ResultKind


class ContractFunctionParameter(RequestModel):
    """Typed argument of a contract function call, e.g. ``uint256`` / ``42``."""

    type: str = Field(..., min_length=1)
    value: Any


class CreateContractRequest(OperationRequest):
    """Deploy a contract from hex-encoded bytecode."""

    kind: Literal["create_contract"] = "create_contract"
    gas: int = Field(..., gt=0)
    bytecode: str = Field(..., min_length=1)
    initial_balance: Optional[Decimal] = Field(None, ge=0, description="Hbar")
    admin_key: bool = False
    contract_memo: str = ""
    constructor_parameters: list[ContractFunctionParameter] = Field(default_factory=list)
    auto_renew_period: Optional[int] = Field(None, gt=0)
    max_automatic_token_associations: Optional[int] = Field(None, ge=0)


class UpdateContractRequest(OperationRequest):
    """Update contract properties."""

    kind: Literal["update_contract"] = "update_contract"
    contract_id: str = Field(..., min_length=1)
    admin_public_key: Optional[str] = None
    contract_memo: Optional[str] = None
    expiration_time: Optional[datetime] = None
    auto_renew_period: Optional[int] = Field(None, gt=0)
    max_automatic_token_associations: Optional[int] = Field(None, ge=0)


class DeleteContractRequest(OperationRequest):
    """Delete a contract, sending its hbar to an account or another contract."""

    kind: Literal["delete_contract"] = "delete_contract"
    contract_id: str = Field(..., min_length=1)
    transfer_account_id: Optional[str] = None
    transfer_contract_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_beneficiary(self) -> "DeleteContractRequest":
        if bool(self.transfer_account_id) == bool(self.transfer_contract_id):
            raise ValueError(
                "exactly one of transferAccountId or transferContractId is required"
            )
        return self


class CallContractRequest(OperationRequest):
    """Execute a contract function. Returns the record by default."""

    kind: Literal["call_contract"] = "call_contract"
    contract_id: str = Field(..., min_length=1)
    gas: int = Field(..., gt=0)
    function_name: str = Field(..., min_length=1)
    function_parameters: list[ContractFunctionParameter] = Field(default_factory=list)
    payable_amount: Optional[Decimal] = Field(None, gt=0, description="Hbar")
    result_kind: ResultKind = ResultKind.RECORD


class EthereumTransactionRequest(OperationRequest):
    """Submit a signed, RLP-encoded Ethereum transaction to the ledger."""

    kind: Literal["ethereum_transaction"] = "ethereum_transaction"
    ethereum_data: str = Field(..., min_length=1)
    call_data_file_id: Optional[str] = None
    max_gas_allowance: Optional[Decimal] = Field(None, ge=0, description="Hbar")
    result_kind: ResultKind = ResultKind.RECORD


class ContractInfoRequest(OperationRequest):
    """Paid ledger query for contract information."""

    kind: Literal["get_contract_info"] = "get_contract_info"
    contract_id: str = Field(..., min_length=1)
    service_fee: ServiceFee = Field(default_factory=ServiceFee)


class ContractBytecodeRequest(OperationRequest):
    """Paid ledger query for a contract's runtime bytecode."""

    kind: Literal["get_contract_bytecode"] = "get_contract_bytecode"
    contract_id: str = Field(..., min_length=1)
    service_fee: ServiceFee = Field(default_factory=ServiceFee)


class ContractFunctionRequest(OperationRequest):
    """Paid read-only call of a contract function."""

    kind: Literal["get_contract_function"] = "get_contract_function"
    contract_id: str = Field(..., min_length=1)
    gas: int = Field(..., gt=0)
    function_name: str = Field(..., min_length=1)
    function_parameters: list[ContractFunctionParameter] = Field(default_factory=list)
    sender_account_id: Optional[str] = None
    service_fee: ServiceFee = Field(default_factory=ServiceFee)
