"""Request schemas and the tagged ``Operation`` union."""

from typing import Annotated, Any, Union

from pydantic import Field, TypeAdapter, ValidationError

from hedera_wallet.exceptions import InvalidParams, UnsupportedOperation
from hedera_wallet.schemas.account import (
    AccountInfoRequest,
    DeleteAccountRequest,
    StakeHbarRequest,
)
from hedera_wallet.schemas.allowance import ApproveAllowanceRequest, DeleteAllowanceRequest
from hedera_wallet.schemas.common import RequestModel, parse_request, validation_details
from hedera_wallet.schemas.contract import (
    CallContractRequest,
    ContractBytecodeRequest,
    ContractFunctionParameter,
    ContractFunctionRequest,
    ContractInfoRequest,
    CreateContractRequest,
    DeleteContractRequest,
    EthereumTransactionRequest,
    UpdateContractRequest,
)
from hedera_wallet.schemas.operation import OperationRequest
from hedera_wallet.schemas.swap import (
    AcknowledgeSwapRequest,
    AtomicSwap,
    InitiateSwapRequest,
    ScheduledSwap,
    SwapStatus,
)
from hedera_wallet.schemas.token import (
    AssociateTokensRequest,
    BurnTokenRequest,
    CreateTokenRequest,
    DeleteTokenRequest,
    DissociateTokensRequest,
    EnableKycRequest,
    FreezeAccountRequest,
    MintTokenRequest,
    PauseTokenRequest,
    TokenCustomFee,
    UpdateTokenFeeScheduleRequest,
    UpdateTokenRequest,
    WipeTokenRequest,
)
from hedera_wallet.schemas.topic import (
    CreateTopicRequest,
    DeleteTopicRequest,
    SubmitMessageRequest,
    TopicInfoRequest,
    UpdateTopicRequest,
)
from hedera_wallet.schemas.transfer import ServiceFee, SimpleTransfer, TransferCryptoRequest

# Single-purpose operations compiled into one ledger transaction each
Operation = Annotated[
    Union[
        MintTokenRequest,
        BurnTokenRequest,
        WipeTokenRequest,
        FreezeAccountRequest,
        EnableKycRequest,
        PauseTokenRequest,
        AssociateTokensRequest,
        DissociateTokensRequest,
        CreateTokenRequest,
        UpdateTokenRequest,
        DeleteTokenRequest,
        UpdateTokenFeeScheduleRequest,
        ApproveAllowanceRequest,
        DeleteAllowanceRequest,
        DeleteAccountRequest,
        StakeHbarRequest,
        CreateTopicRequest,
        UpdateTopicRequest,
        DeleteTopicRequest,
        SubmitMessageRequest,
        CreateContractRequest,
        UpdateContractRequest,
        DeleteContractRequest,
        CallContractRequest,
        EthereumTransactionRequest,
    ],
    Field(discriminator="kind"),
]

_operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(params: Any) -> OperationRequest:
    """Validate raw params into the matching operation request.

    Raises:
        UnsupportedOperation: If ``kind`` is missing or unknown
        InvalidParams: If the params do not validate
    """
    try:
        return _operation_adapter.validate_python(params)
    except ValidationError as e:
        error_types = {error["type"] for error in e.errors()}
        if error_types & {"union_tag_invalid", "union_tag_not_found"}:
            kind = params.get("kind") if isinstance(params, dict) else None
            raise UnsupportedOperation(
                message=f"Unsupported operation: {kind or '<missing kind>'}",
                details={"kind": kind},
            ) from e
        raise InvalidParams(
            message="Invalid operation parameters",
            details=validation_details(e),
        ) from e


__all__ = [
    "Operation",
    "OperationRequest",
    "RequestModel",
    "parse_operation",
    "parse_request",
    # Transfers and swaps
    "ServiceFee",
    "SimpleTransfer",
    "TransferCryptoRequest",
    "AtomicSwap",
    "InitiateSwapRequest",
    "AcknowledgeSwapRequest",
    "ScheduledSwap",
    "SwapStatus",
    # Tokens
    "TokenCustomFee",
    "MintTokenRequest",
    "BurnTokenRequest",
    "WipeTokenRequest",
    "FreezeAccountRequest",
    "EnableKycRequest",
    "PauseTokenRequest",
    "AssociateTokensRequest",
    "DissociateTokensRequest",
    "CreateTokenRequest",
    "UpdateTokenRequest",
    "DeleteTokenRequest",
    "UpdateTokenFeeScheduleRequest",
    # Allowances and accounts
    "ApproveAllowanceRequest",
    "DeleteAllowanceRequest",
    "DeleteAccountRequest",
    "StakeHbarRequest",
    "AccountInfoRequest",
    # Topics and contracts
    "CreateTopicRequest",
    "UpdateTopicRequest",
    "DeleteTopicRequest",
    "SubmitMessageRequest",
    "TopicInfoRequest",
    "ContractFunctionParameter",
    "CreateContractRequest",
    "UpdateContractRequest",
    "DeleteContractRequest",
    "CallContractRequest",
    "EthereumTransactionRequest",
    "ContractInfoRequest",
    "ContractBytecodeRequest",
    "ContractFunctionRequest",
]
