"""Confirmation flow shared by every user-facing operation.

A facade validates and enriches a request, shows the user a summary, and
only after explicit approval compiles and executes the transaction. State
changes happen only after the ledger confirms success.
"""

import logging
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr

from hedera_wallet.clients.mirror import MirrorNodeClient
from hedera_wallet.core.config import settings
from hedera_wallet.exceptions import (
    InvalidParams,
    ResourceUnavailable,
    UserRejected,
    WalletSnapError,
)
from hedera_wallet.host import DialogNode, HostServices
from hedera_wallet.ledger import LedgerClient, LedgerClientFactory
from hedera_wallet.services.compiler import CompileContext
from hedera_wallet.services.summary import common_panel, post_transaction_lines
from hedera_wallet.state import NetworkAccountState, WalletState
from hedera_wallet.types import MirrorTokenInfo, TokenBalance, TxReceipt, TxRecord

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class WalletContext(BaseModel):
    """Everything a facade needs besides the request itself."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    origin: str
    state_store: Any  # StateStore
    host: Any  # HostServices
    client_factory: Any  # LedgerClientFactory
    mirror: Optional[Any] = None  # MirrorNodeClient

    _owns_mirror: bool = PrivateAttr(default=False)

    @property
    def state(self) -> WalletState:
        return self.state_store.get_state()

    @property
    def network(self) -> str:
        return self.state.current_account.network

    @property
    def mirror_node_url(self) -> str:
        return self.state.current_account.mirror_node_url or settings.mirror_node_url(
            self.network
        )

    def mirror_client(self) -> MirrorNodeClient:
        """Mirror client for the current network, created on first use."""
        if self.mirror is None:
            self.mirror = MirrorNodeClient(self.mirror_node_url)
            self._owns_mirror = True
        return self.mirror

    async def close(self) -> None:
        """Close the mirror client if this context created it."""
        if self._owns_mirror and self.mirror is not None:
            await self.mirror.close()
            self.mirror = None
            self._owns_mirror = False

    def network_state(self) -> NetworkAccountState:
        return self.state.network_state()

    async def create_client(self) -> LedgerClient:
        """Ledger client for the current account.

        Raises:
            ResourceUnavailable: If the client cannot be constructed
        """
        state = self.state
        account = state.current_account
        if not account.hedera_account_id:
            raise InvalidParams(
                message="The current account is not activated on this network",
                details={"network": account.network},
            )
        key_store = state.network_state().key_store
        factory: LedgerClientFactory = self.client_factory
        client = await factory.create_client(
            account_id=account.hedera_account_id,
            network=account.network,
            curve=key_store.curve,
            private_key=key_store.private_key,
        )
        if client is None:
            raise ResourceUnavailable(
                message="Ledger client could not be created",
                details={"network": account.network},
            )
        return client

    def compile_context(self, client: LedgerClient) -> CompileContext:
        return CompileContext(
            operator_account_id=client.operator_account_id,
            operator_public_key=client.operator_public_key,
            signing_key=self.network_state().key_store.private_key,
        )

    async def resolve_token(
        self,
        token_id: str,
        cached: Optional[dict[str, TokenBalance]] = None,
        known_decimals: Optional[int] = None,
    ) -> tuple[int, Optional[MirrorTokenInfo]]:
        """Decimals and metadata of a token.

        Known or cached decimals win; the mirror node supplies metadata.
        A mirror failure is tolerated only when the decimals are already known.

        Args:
            token_id: Token ID
            cached: Token balances to read decimals from, defaults to the
                current account's cached balances
            known_decimals: Decimals already resolved by the caller

        Returns:
            Tuple of (decimals, token info or None)

        Raises:
            ResourceUnavailable: If the mirror node fails and decimals are unknown
        """
        if cached is None:
            cached = self.network_state().account_info.balance.tokens
        decimals = known_decimals
        if decimals is None and token_id in cached:
            decimals = cached[token_id].decimals
        try:
            info = await self.mirror_client().get_token_by_id(token_id)
        except ResourceUnavailable:
            if decimals is None:
                raise
            logger.warning(f"Using known decimals for {token_id}; mirror node unavailable")
            return decimals, None
        return (decimals if decimals is not None else info.decimals), info


class ConfirmationFacade(Generic[RequestT, ResultT]):
    """Template for confirm-then-execute operations.

    Subclasses implement ``prepare`` (validate, enrich and describe the
    request) and ``execute``; they may override ``after_success`` for state
    side effects.
    """

    title: str = "Transaction"

    def __init__(self, context: WalletContext) -> None:
        self.context = context

    async def prepare(self, request: RequestT, client: LedgerClient) -> list[DialogNode]:
        raise NotImplementedError

    async def execute(self, request: RequestT, client: LedgerClient) -> ResultT:
        raise NotImplementedError

    async def after_success(self, request: RequestT, result: ResultT) -> None:
        return None

    async def confirm(self, nodes: list[DialogNode]) -> None:
        """Show the summary and require explicit approval.

        Raises:
            UserRejected: If the user declines
        """
        context = self.context
        panel = common_panel(context.origin, context.network, context.mirror_node_url, nodes)
        host: HostServices = context.host
        confirmed = await host.show_dialog(panel, "confirmation")
        if not confirmed:
            logger.info(f"User rejected {self.title} from {context.origin}")
            raise UserRejected(
                message=f"User rejected the {self.title} request",
                details={"origin": context.origin},
            )

    async def notify(self, result: ResultT) -> None:
        """Best-effort outcome dialog. Failures are logged, not raised."""
        if not settings.POST_TRANSACTION_DIALOG:
            return
        outcome = result if isinstance(result, TxRecord) else getattr(result, "receipt", result)
        if not isinstance(outcome, (TxReceipt, TxRecord)):
            return
        context = self.context
        nodes = post_transaction_lines(outcome, context.network)
        panel = common_panel(context.origin, context.network, context.mirror_node_url, nodes)
        try:
            await context.host.show_dialog(panel, "alert")
        except Exception as e:
            logger.warning(f"Could not show the outcome of {self.title}: {e}")

    async def run(self, request: RequestT) -> ResultT:
        """Run the full confirmation flow.

        Args:
            request: Validated request

        Returns:
            Normalized result of the operation

        Raises:
            WalletSnapError: Any failure, logged and re-raised unchanged
        """
        try:
            client = await self.context.create_client()
            nodes = await self.prepare(request, client)
            await self.confirm(nodes)
            result = await self.execute(request, client)
            await self.after_success(request, result)
        except WalletSnapError as e:
            logger.error(f"{self.title} failed: {e}")
            raise

        await self.notify(result)
        return result
