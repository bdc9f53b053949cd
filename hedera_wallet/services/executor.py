"""Execute compiled transaction plans against the ledger client.

A plan is submitted exactly once. Nothing here retries: re-submitting after
an ambiguous failure could apply a transfer twice.
"""

import logging
from typing import Any, Union

from hedera_wallet.exceptions import LedgerRejected, ResultUnknown, WalletSnapError
from hedera_wallet.ledger import LedgerClient, TransactionBuilder
from hedera_wallet.services.compiler import TransactionPlan
from hedera_wallet.services.receipts import as_text, normalize_receipt, normalize_record
from hedera_wallet.types import AssetType, ResultKind, TxReceipt, TxRecord

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"


def ledger_status(error: BaseException) -> str:
    """Ledger status code carried by an SDK error, or "" if there is none."""
    status = getattr(error, "status", None)
    if status is None:
        status = getattr(error, "status_code", None)
    return as_text(status)


def build_transaction(client: LedgerClient, plan: TransactionPlan) -> TransactionBuilder:
    """Create the SDK builder for a plan and apply its calls and transfers."""
    transaction = client.transaction(plan.kind)

    for call in plan.calls:
        getattr(transaction, call.method)(*call.args)

    for line in plan.transfers:
        if line.asset_type == AssetType.HBAR:
            if line.approved:
                transaction.add_approved_hbar_transfer(line.account_id, line.amount)
            else:
                transaction.add_hbar_transfer(line.account_id, line.amount)
        elif line.approved:
            transaction.add_approved_token_transfer(line.asset, line.account_id, line.amount)
        else:
            transaction.add_token_transfer(line.asset, line.account_id, line.amount)

    for move in plan.nft_moves:
        if move.approved:
            transaction.add_approved_nft_transfer(move.nft_id, move.sender, move.receiver)
        else:
            transaction.add_nft_transfer(move.nft_id, move.sender, move.receiver)

    if plan.scheduled is not None:
        transaction.set_scheduled_transaction(build_transaction(client, plan.scheduled))

    return transaction


async def execute_plan(
    client: LedgerClient,
    plan: TransactionPlan,
) -> Union[TxReceipt, TxRecord]:
    """Freeze, sign, submit and wait for the outcome of a plan.

    Args:
        client: Ledger client bound to the operator
        plan: Compiled plan

    Returns:
        Normalized receipt or record, as chosen by ``plan.result_kind``

    Raises:
        LedgerRejected: If the ledger refuses the transaction or reports a
            non-success status
        ResultUnknown: If the transaction was submitted but its outcome
            could not be read
    """
    transaction = build_transaction(client, plan)
    transaction.freeze_with(client)
    for key in plan.signers:
        transaction.sign(key)

    try:
        response = await transaction.execute(client)
    except WalletSnapError:
        raise
    except Exception as e:
        status = ledger_status(e)
        logger.error(f"{plan.kind} was not accepted: {status or e}")
        raise LedgerRejected(
            message=f"{plan.kind} failed: {e}",
            status=status,
            details={"transaction": plan.kind},
        ) from e

    transaction_id = as_text(getattr(response, "transaction_id", None))
    logger.info(f"Submitted {plan.kind} {transaction_id}")

    result: Union[TxReceipt, TxRecord]
    try:
        if plan.result_kind == ResultKind.RECORD:
            result = normalize_record(await response.get_record(client))
        else:
            result = normalize_receipt(await response.get_receipt(client))
    except WalletSnapError:
        raise
    except Exception as e:
        status = ledger_status(e)
        if status:
            logger.error(f"{plan.kind} {transaction_id} reached status {status}")
            raise LedgerRejected(
                message=f"{plan.kind} failed with status {status}",
                status=status,
                details={"transaction": plan.kind, "transaction_id": transaction_id},
            ) from e
        logger.error(f"Could not read the outcome of {plan.kind} {transaction_id}: {e}")
        raise ResultUnknown(
            message=f"{plan.kind} was submitted but its outcome could not be read: {e}",
            transaction_id=transaction_id,
        ) from e

    status = _receipt_of(result).status
    if status and status != SUCCESS:
        raise LedgerRejected(
            message=f"{plan.kind} failed with status {status}",
            status=status,
            details={"transaction": plan.kind, "transaction_id": transaction_id},
        )
    return result


def _receipt_of(result: Any) -> TxReceipt:
    return result.receipt if isinstance(result, TxRecord) else result
