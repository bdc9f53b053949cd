"""Single-purpose token, allowance, topic, contract and staking operations."""

import logging
from typing import Union

from hedera_wallet.facades.base import ConfirmationFacade
from hedera_wallet.host import DialogNode, text
from hedera_wallet.ledger import LedgerClient
from hedera_wallet.schemas import (
    ApproveAllowanceRequest,
    BurnTokenRequest,
    MintTokenRequest,
    OperationRequest,
    WipeTokenRequest,
)
from hedera_wallet.services.compiler import compile_operation
from hedera_wallet.services.executor import execute_plan
from hedera_wallet.services.summary import OPERATION_TITLES, operation_lines
from hedera_wallet.types import AssetType, TxReceipt, TxRecord

logger = logging.getLogger(__name__)


class OperationFacade(ConfirmationFacade[OperationRequest, Union[TxReceipt, TxRecord]]):
    """Confirm and execute any operation of the ``Operation`` union."""

    async def _resolve_decimals(self, operation: OperationRequest) -> list[DialogNode]:
        """Fill in token decimals for operations that move fungible amounts."""
        if isinstance(operation, (MintTokenRequest, BurnTokenRequest, WipeTokenRequest)):
            if operation.asset_type != "TOKEN" or operation.decimals is not None:
                return []
            token_id = operation.token_id
        elif isinstance(operation, ApproveAllowanceRequest):
            if operation.asset_type != AssetType.TOKEN or operation.decimals is not None:
                return []
            token_id = operation.asset_id
        else:
            return []

        operation.decimals, info = await self.context.resolve_token(token_id)
        if info is None:
            return []
        return [text(f"Token: {info.name} ({info.symbol})")]

    async def prepare(self, operation: OperationRequest, client: LedgerClient) -> list[DialogNode]:
        self.title = OPERATION_TITLES.get(operation.kind, operation.kind)
        token_lines = await self._resolve_decimals(operation)
        return operation_lines(operation) + token_lines

    async def execute(
        self,
        operation: OperationRequest,
        client: LedgerClient,
    ) -> Union[TxReceipt, TxRecord]:
        plan = compile_operation(operation, self.context.compile_context(client))
        return await execute_plan(client, plan)
