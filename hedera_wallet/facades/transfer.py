"""Transfer hbar, tokens and NFTs after user confirmation."""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from hedera_wallet.facades.base import ConfirmationFacade
from hedera_wallet.host import DialogNode, divider, heading, text
from hedera_wallet.ledger import LedgerClient
from hedera_wallet.schemas import SimpleTransfer, TransferCryptoRequest
from hedera_wallet.services.compiler import compile_transfers
from hedera_wallet.services.executor import execute_plan
from hedera_wallet.services.fees import normalize_transfers
from hedera_wallet.services.summary import memo_and_fee_lines, transfer_lines
from hedera_wallet.types import HBAR_ASSET, AccountBalance, AssetType, TxReceipt, TxRecord

logger = logging.getLogger(__name__)


def hbar_debits(
    transfers: Iterable[SimpleTransfer],
    fees_by_asset: dict[str, Decimal],
) -> dict[Optional[str], Decimal]:
    """Total hbar leaving each paying account, keyed by owner (None for the operator).

    The operator pays every hbar service fee, including fees on delegated
    transfers.
    """
    debits: dict[Optional[str], Decimal] = {None: fees_by_asset.get(HBAR_ASSET, Decimal(0))}
    for transfer in transfers:
        if transfer.asset_type != AssetType.HBAR:
            continue
        owner = transfer.from_ if transfer.is_delegated else None
        debits[owner] = debits.get(owner, Decimal(0)) + transfer.amount
    return debits


class TransferCryptoFacade(ConfirmationFacade[TransferCryptoRequest, Union[TxReceipt, TxRecord]]):
    """Transfer crypto from the current account, or from an owner who approved it."""

    title = "Transfer Crypto"

    fees_by_asset: dict[str, Decimal]
    hbar_debits: dict[Optional[str], Decimal]

    async def _balance_for(self, transfer: SimpleTransfer) -> AccountBalance:
        if transfer.is_delegated:
            owner = await self.context.mirror_client().get_account_info(transfer.from_)
            return owner.balance
        return self.context.network_state().account_info.balance

    async def _describe(
        self,
        number: int,
        transfer: SimpleTransfer,
    ) -> list[DialogNode]:
        balance = await self._balance_for(transfer)
        warnings: list[str] = []
        symbol = name = ""

        if transfer.asset_type == AssetType.HBAR:
            if balance.hbars < self.hbar_debits[transfer.from_ if transfer.is_delegated else None]:
                warnings.append(
                    "There is not enough Hbar in the wallet to transfer the requested amount"
                )
        else:
            holding = balance.tokens.get(transfer.asset_id)
            if holding is None or holding.balance < transfer.amount:
                warnings.append(
                    f"This wallet either does not own {transfer.asset_id} or there is not "
                    "enough balance to transfer the requested amount"
                )
            known = 0 if transfer.asset_type == AssetType.NFT else transfer.decimals
            decimals, info = await self.context.resolve_token(
                transfer.asset_key, cached=balance.tokens, known_decimals=known
            )
            transfer.decimals = decimals
            if info is not None:
                symbol, name = info.symbol, info.name

        for warning in warnings:
            logger.warning(warning)
        return transfer_lines(number, transfer, symbol=symbol, name=name, warnings=warnings)

    async def prepare(
        self,
        request: TransferCryptoRequest,
        client: LedgerClient,
    ) -> list[DialogNode]:
        """Deduct service fees, resolve decimals and describe each transfer."""
        self.fees_by_asset = normalize_transfers(request.transfers, request.service_fee)
        self.hbar_debits = hbar_debits(request.transfers, self.fees_by_asset)

        nodes = [
            heading(self.title),
            text("Are you sure you want to execute the following transaction(s)?"),
            divider(),
        ]
        nodes += memo_and_fee_lines(request.memo, request.max_fee)
        for number, transfer in enumerate(request.transfers, start=1):
            nodes += await self._describe(number, transfer)
        return nodes

    async def execute(
        self,
        request: TransferCryptoRequest,
        client: LedgerClient,
    ) -> Union[TxReceipt, TxRecord]:
        plan = compile_transfers(
            request.transfers,
            operator_account_id=client.operator_account_id,
            fee_collector=request.service_fee.to_address,
            memo=request.memo,
            max_fee=request.max_fee,
            result_kind=request.result_kind,
        )
        return await execute_plan(client, plan)
