"""Service fee computation and fee deduction from transfer lists."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from hedera_wallet.exceptions import InvalidParams
from hedera_wallet.schemas.transfer import ServiceFee, SimpleTransfer
from hedera_wallet.types import AssetType, QueryCost

logger = logging.getLogger(__name__)

# Headroom on top of the quoted cost so a query survives small price moves
SAFETY_MARGIN = Decimal("1.05")

COST_QUANTUM = Decimal("0.00000001")  # 8 dp, one tinybar
FEE_QUANTUM = Decimal("0.01")  # 2 dp


def calculate_fees(base_cost: Decimal, percentage_cut: Decimal) -> QueryCost:
    """Compute the service fee and the maximum payment for a paid query.

    Args:
        base_cost: Cost quoted by the ledger, in hbar
        percentage_cut: Service fee percentage in [0, 100]

    Returns:
        QueryCost with both values rounded to 8 decimal places

    Raises:
        InvalidParams: If an input is out of range
    """
    base_cost = Decimal(base_cost)
    percentage_cut = Decimal(percentage_cut)
    if not base_cost.is_finite() or base_cost < 0:
        raise InvalidParams(
            message="Query cost must be a non-negative number",
            details={"base_cost": str(base_cost)},
        )
    if not percentage_cut.is_finite() or not 0 <= percentage_cut <= 100:
        raise InvalidParams(
            message="Service fee percentage must be between 0 and 100",
            details={"percentage_cut": str(percentage_cut)},
        )

    if base_cost == 0:
        return QueryCost(service_fee=Decimal(0), max_cost=Decimal(0))

    service_fee = base_cost * percentage_cut / 100
    max_cost = (base_cost + service_fee) * SAFETY_MARGIN
    return QueryCost(
        service_fee=service_fee.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP),
        max_cost=max_cost.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP),
    )


def transfer_fee(amount: Decimal, percentage_cut: Decimal) -> Decimal:
    """Fee kept from one transfer amount, rounded half-up to 2 decimals."""
    fee = amount * Decimal(percentage_cut) / 100
    return fee.quantize(FEE_QUANTUM, rounding=ROUND_HALF_UP)


def normalize_transfers(
    transfers: Iterable[SimpleTransfer],
    service_fee: ServiceFee,
    split: int = 1,
) -> dict[str, Decimal]:
    """Deduct the service fee from each transfer in place.

    Every transfer's asset gets an entry in the returned accumulator, even
    when its fee is zero. The same rounded value is subtracted from the
    transfer and added to the accumulator, so for each asset the total
    removed from amounts equals the accumulated fee exactly.

    Args:
        transfers: Transfers to adjust
        service_fee: Fee settings of the request
        split: Number of parties sharing the fee; swaps pass 2 so each leg
            pays half

    Returns:
        Accumulated fee per asset key ("HBAR" or token id)
    """
    fees_by_asset: dict[str, Decimal] = {}
    percentage_cut = Decimal(service_fee.percentage_cut)

    for transfer in transfers:
        key = transfer.asset_key
        fees_by_asset.setdefault(key, Decimal(0))

        # NFTs are indivisible
        if transfer.asset_type == AssetType.NFT or percentage_cut == 0:
            transfer.service_fee = Decimal(0)
            continue

        fee = transfer_fee(transfer.amount, percentage_cut)
        if split > 1:
            fee = fee / split
        transfer.amount -= fee
        transfer.service_fee = fee
        fees_by_asset[key] += fee

    logger.debug(f"Service fees by asset: {fees_by_asset}")
    return fees_by_asset
