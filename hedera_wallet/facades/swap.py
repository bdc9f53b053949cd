"""Initiate and acknowledge atomic swaps after user confirmation."""

import logging

from hedera_wallet.exceptions import UnsupportedOperation
from hedera_wallet.facades.base import ConfirmationFacade
from hedera_wallet.host import DialogNode, copyable, divider, heading, text
from hedera_wallet.ledger import LedgerClient
from hedera_wallet.schemas import (
    AcknowledgeSwapRequest,
    InitiateSwapRequest,
    ScheduledSwap,
    SimpleTransfer,
)
from hedera_wallet.services.summary import format_amount, memo_and_fee_lines
from hedera_wallet.services.swap import (
    acknowledge,
    apply_swap_fees,
    create_swap,
    ensure_not_expired,
)
from hedera_wallet.types import AccountBalance, AssetType

logger = logging.getLogger(__name__)


class InitiateSwapFacade(ConfirmationFacade[InitiateSwapRequest, ScheduledSwap]):
    """Schedule atomic swaps as the requesting side."""

    title = "Atomic Swap"

    async def _resolve_leg(
        self,
        leg: SimpleTransfer,
        balance: AccountBalance,
        holder: str,
    ) -> tuple[str, list[str]]:
        """Resolve a leg's decimals and check its payer can cover it.

        Returns:
            Tuple of (asset label, warnings)
        """
        if leg.asset_type == AssetType.HBAR:
            warnings = []
            if balance.hbars < leg.amount + leg.service_fee:
                warnings.append(f"{holder} does not hold enough Hbar for this swap")
            return "HBAR", warnings

        holding = balance.tokens.get(leg.asset_id)
        warnings = []
        if holding is None or holding.balance < leg.amount:
            warnings.append(f"{holder} either does not own {leg.asset_id} or holds too little")
        known = 0 if leg.asset_type == AssetType.NFT else leg.decimals
        leg.decimals, info = await self.context.resolve_token(
            leg.asset_key, cached=balance.tokens, known_decimals=known
        )
        return (info.symbol if info else leg.asset_id), warnings

    async def prepare(
        self,
        request: InitiateSwapRequest,
        client: LedgerClient,
    ) -> list[DialogNode]:
        for swap in request.atomic_swaps:
            if swap.requester.is_delegated or swap.responder.is_delegated:
                raise UnsupportedOperation(
                    message="Delegated transfers cannot be part of an atomic swap",
                    details={"counterparty": swap.requester.to},
                )

        apply_swap_fees(request.atomic_swaps, request.service_fee)

        own_balance = self.context.network_state().account_info.balance
        nodes = [
            heading("Initiate Atomic Swap"),
            text("Are you sure you want to schedule the following swap(s)?"),
            divider(),
        ]
        nodes += memo_and_fee_lines(request.memo, request.max_fee)

        for number, swap in enumerate(request.atomic_swaps, start=1):
            counterparty = swap.requester.to
            counterparty_info = await self.context.mirror_client().get_account_info(counterparty)

            sent, sent_warnings = await self._resolve_leg(
                swap.requester, own_balance, "This wallet"
            )
            received, received_warnings = await self._resolve_leg(
                swap.responder, counterparty_info.balance, f"Account {counterparty}"
            )

            nodes += [
                text(f"Swap #{number}"),
                divider(),
                text("Counterparty:"),
                copyable(counterparty),
                text(f"You send: {format_amount(swap.requester.amount)} {sent}"),
                text(f"You receive: {format_amount(swap.responder.amount)} {received}"),
            ]
            if swap.requester.service_fee > 0:
                nodes.append(
                    text(f"Service Fee: {format_amount(swap.requester.service_fee)} {sent}")
                )
            if swap.responder.service_fee > 0:
                nodes.append(
                    text(
                        f"Counterparty Service Fee: "
                        f"{format_amount(swap.responder.service_fee)} {received}"
                    )
                )
            for warning in sent_warnings + received_warnings:
                logger.warning(warning)
                nodes.append(text(warning))

        nodes.append(text("The counterparty must acknowledge the swap before it expires"))
        return nodes

    async def execute(
        self,
        request: InitiateSwapRequest,
        client: LedgerClient,
    ) -> ScheduledSwap:
        return await create_swap(
            client,
            request.atomic_swaps,
            sender_key=self.context.network_state().key_store.private_key,
            fee_collector=request.service_fee.to_address,
            memo=request.memo,
            max_fee=request.max_fee,
        )


class AcknowledgeSwapFacade(ConfirmationFacade[AcknowledgeSwapRequest, ScheduledSwap]):
    """Countersign a scheduled swap as the responding side."""

    title = "Atomic Swap Acknowledgement"

    async def prepare(
        self,
        request: AcknowledgeSwapRequest,
        client: LedgerClient,
    ) -> list[DialogNode]:
        ensure_not_expired(request.schedule_id, request.expiration_time)
        nodes = [
            heading("Acknowledge Atomic Swap"),
            text("Are you sure you want to sign the following scheduled swap?"),
            divider(),
            text("Schedule ID:"),
            copyable(request.schedule_id),
        ]
        if request.expiration_time is not None:
            nodes.append(text(f"Expires: {request.expiration_time.isoformat()}"))
        return nodes

    async def execute(
        self,
        request: AcknowledgeSwapRequest,
        client: LedgerClient,
    ) -> ScheduledSwap:
        return await acknowledge(
            client,
            request.schedule_id,
            receiver_key=self.context.network_state().key_store.private_key,
            expires_at=request.expiration_time,
        )
