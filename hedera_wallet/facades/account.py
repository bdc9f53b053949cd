"""Account facades: deleting the current account and paid account info."""

import logging
from typing import Any, Optional

from hedera_wallet.facades.base import ConfirmationFacade
from hedera_wallet.facades.queries import PaidQueryFacade
from hedera_wallet.host import DialogNode, copyable, divider, text
from hedera_wallet.ledger import LedgerClient
from hedera_wallet.schemas import AccountInfoRequest, DeleteAccountRequest
from hedera_wallet.services.compiler import compile_operation
from hedera_wallet.services.executor import execute_plan
from hedera_wallet.services.receipts import normalize_account_info
from hedera_wallet.services.summary import operation_lines
from hedera_wallet.types import AccountBalance, AccountInfo, TxReceipt

logger = logging.getLogger(__name__)


class DeleteAccountFacade(ConfirmationFacade[DeleteAccountRequest, TxReceipt]):
    """Delete the current account and forget it on this network."""

    title = "Delete Account"

    async def prepare(
        self, request: DeleteAccountRequest, client: LedgerClient
    ) -> list[DialogNode]:
        nodes = operation_lines(request)
        nodes += [
            divider(),
            text("Warning: this account will be permanently deleted."),
            text("Its remaining hbar will be sent to:"),
            copyable(request.transfer_account_id),
        ]
        return nodes

    async def execute(self, request: DeleteAccountRequest, client: LedgerClient) -> TxReceipt:
        plan = compile_operation(request, self.context.compile_context(client))
        return await execute_plan(client, plan)

    async def after_success(self, request: DeleteAccountRequest, result: TxReceipt) -> None:
        """Clear the deleted account's id and cached data for this network."""
        state = self.context.state.model_copy(deep=True)
        account = state.current_account
        deleted_id = account.hedera_account_id

        network_state = state.network_state()
        network_state.key_store.hedera_account_id = ""
        network_state.account_info = AccountInfo()
        account.hedera_account_id = ""
        account.balance = AccountBalance()

        await self.context.state_store.update_state(state)
        logger.info(f"Deleted account {deleted_id} on {account.network}")


class AccountInfoFacade(PaidQueryFacade[AccountInfoRequest, AccountInfo]):
    """Paid ledger query for account info, collecting a service fee on top."""

    title = "Get Account Info"
    query_kind = "AccountInfoQuery"

    account_id: str

    def query_params(self, request: AccountInfoRequest, client: LedgerClient) -> dict[str, Any]:
        self.account_id = request.account_id or client.operator_account_id
        return {"account_id": self.account_id}

    def describe(self, request: AccountInfoRequest) -> list[DialogNode]:
        return [text("Account ID:"), copyable(self.account_id)]

    def normalize(self, request: AccountInfoRequest, raw: Any, client: LedgerClient) -> AccountInfo:
        previous: Optional[AccountInfo] = None
        if self.account_id == client.operator_account_id:
            previous = self.context.network_state().account_info
        return normalize_account_info(raw, previous=previous)

    async def after_success(self, request: AccountInfoRequest, result: AccountInfo) -> None:
        """Refresh cached info when the current account was queried."""
        state = self.context.state.model_copy(deep=True)
        if self.account_id != state.current_account.hedera_account_id:
            return
        state.network_state().account_info = result
        state.current_account.balance = result.balance
        await self.context.state_store.update_state(state)
