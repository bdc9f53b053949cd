"""Confirmation facades and the request dispatcher used by the plugin."""

from typing import Any

from hedera_wallet.exceptions import UnsupportedOperation
from hedera_wallet.facades.account import AccountInfoFacade, DeleteAccountFacade
from hedera_wallet.facades.base import ConfirmationFacade, WalletContext
from hedera_wallet.facades.operations import OperationFacade
from hedera_wallet.facades.queries import (
    ContractBytecodeFacade,
    ContractFunctionFacade,
    ContractInfoFacade,
    PaidQueryFacade,
    TopicInfoFacade,
)
from hedera_wallet.facades.swap import AcknowledgeSwapFacade, InitiateSwapFacade
from hedera_wallet.facades.transfer import TransferCryptoFacade
from hedera_wallet.schemas import (
    AccountInfoRequest,
    AcknowledgeSwapRequest,
    ContractBytecodeRequest,
    ContractFunctionRequest,
    ContractInfoRequest,
    DeleteAccountRequest,
    InitiateSwapRequest,
    TopicInfoRequest,
    TransferCryptoRequest,
    parse_operation,
    parse_request,
)

# RPC method -> (request model, facade)
REQUEST_FACADES: dict[str, tuple[type, type[ConfirmationFacade]]] = {
    "transferCrypto": (TransferCryptoRequest, TransferCryptoFacade),
    "getAccountInfo": (AccountInfoRequest, AccountInfoFacade),
    "initiateSwap": (InitiateSwapRequest, InitiateSwapFacade),
    "completeSwap": (AcknowledgeSwapRequest, AcknowledgeSwapFacade),
    "deleteAccount": (DeleteAccountRequest, DeleteAccountFacade),
    "getTopicInfo": (TopicInfoRequest, TopicInfoFacade),
    "getSmartContractInfo": (ContractInfoRequest, ContractInfoFacade),
    "getSmartContractBytecode": (ContractBytecodeRequest, ContractBytecodeFacade),
    "getSmartContractFunction": (ContractFunctionRequest, ContractFunctionFacade),
}


async def handle_request(method: str, params: Any, context: WalletContext) -> Any:
    """Validate a plugin request and run it through its facade.

    ``method == "operation"`` accepts any single-purpose operation tagged by
    its ``kind``. A mirror client the context created for the request is
    closed before returning.

    Args:
        method: RPC method name
        params: Raw request params
        context: Wallet context of the calling page

    Returns:
        Normalized result of the operation

    Raises:
        UnsupportedOperation: If the method is unknown
        WalletSnapError: Any failure of the confirmation flow
    """
    try:
        if method in REQUEST_FACADES:
            model, facade_class = REQUEST_FACADES[method]
            request = parse_request(model, params)
        elif method == "operation":
            request = parse_operation(params)
            if isinstance(request, DeleteAccountRequest):
                facade_class = DeleteAccountFacade
            else:
                facade_class = OperationFacade
        else:
            raise UnsupportedOperation(
                message=f"Unsupported method: {method}",
                details={"method": method},
            )
        return await facade_class(context).run(request)
    finally:
        await context.close()


__all__ = [
    "AccountInfoFacade",
    "AcknowledgeSwapFacade",
    "ConfirmationFacade",
    "ContractBytecodeFacade",
    "ContractFunctionFacade",
    "ContractInfoFacade",
    "DeleteAccountFacade",
    "InitiateSwapFacade",
    "OperationFacade",
    "PaidQueryFacade",
    "TopicInfoFacade",
    "TransferCryptoFacade",
    "WalletContext",
    "handle_request",
]
