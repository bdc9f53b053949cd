"""Dialog content shown before and after a transaction."""

from decimal import Decimal
from typing import Any, Optional, Union

from hedera_wallet.core.config import settings
from hedera_wallet.host import DialogNode, copyable, divider, heading, text
from hedera_wallet.schemas import (
    ApproveAllowanceRequest,
    CallContractRequest,
    CreateTokenRequest,
    DeleteAllowanceRequest,
    OperationRequest,
    SimpleTransfer,
)
from hedera_wallet.services.compiler import clean_memo
from hedera_wallet.types import QueryCost, TxReceipt, TxRecord

OPERATION_TITLES = {
    "mint_token": "Mint Token",
    "burn_token": "Burn Token",
    "wipe_token": "Wipe Token",
    "freeze_account": "Freeze Account",
    "enable_kyc": "Enable KYC",
    "pause_token": "Pause Token",
    "associate_tokens": "Associate Tokens",
    "dissociate_tokens": "Dissociate Tokens",
    "create_token": "Create Token",
    "update_token": "Update Token",
    "delete_token": "Delete Token",
    "update_token_fee_schedule": "Update Token Fee Schedule",
    "approve_allowance": "Approve Allowance",
    "delete_allowance": "Delete Allowance",
    "delete_account": "Delete Account",
    "stake_hbar": "Stake Hbar",
    "create_topic": "Create Topic",
    "update_topic": "Update Topic",
    "delete_topic": "Delete Topic",
    "submit_message": "Submit Message",
    "create_contract": "Create Contract",
    "update_contract": "Update Contract",
    "delete_contract": "Delete Contract",
    "call_contract": "Call Contract",
    "ethereum_transaction": "Ethereum Transaction",
}

# Fields shown for every operation besides the ones described explicitly
SKIPPED_FIELDS = {"kind", "transaction_memo", "max_fee", "result_kind", "decimals"}


def format_amount(value: Decimal) -> str:
    """Render an amount without exponent or trailing zeros."""
    rendered = format(Decimal(value), "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered or "0"


def common_panel(
    origin: str,
    network: str,
    mirror_node_url: str,
    nodes: list[DialogNode],
) -> list[DialogNode]:
    """Wrap operation lines with the request origin and network."""
    return [
        text(f"Origin: {origin}"),
        text(f"Network: {network}"),
        text(f"Mirror Node: {mirror_node_url}"),
        divider(),
        *nodes,
    ]


def memo_and_fee_lines(memo: Optional[str], max_fee: Optional[Decimal]) -> list[DialogNode]:
    nodes = []
    memo = clean_memo(memo)
    if memo:
        nodes += [text("Memo:"), copyable(memo)]
    if max_fee is not None:
        nodes.append(text(f"Max Transaction Fee: {format_amount(max_fee)} Hbar"))
    return nodes


def transfer_lines(
    number: int,
    transfer: SimpleTransfer,
    symbol: str = "",
    name: str = "",
    warnings: Optional[list[str]] = None,
) -> list[DialogNode]:
    """Summary of one transfer. ``transfer.amount`` is already net of fees."""
    nodes = [text(f"Transaction #{number}"), divider()]
    if transfer.is_delegated:
        nodes += [
            text("Transaction Type: Delegated Transfer"),
            text("Owner Account Id:"),
            copyable(transfer.from_),
        ]
    nodes.append(text(f"Asset Type: {transfer.asset_type.value}"))

    if transfer.asset_id:
        asset_id, _, serial = transfer.asset_id.partition("/")
        nodes.append(text(f"Asset Id: {asset_id}"))
        if name:
            nodes.append(text(f"Asset Name: {name}"))
        if serial:
            nodes.append(text(f"NFT Serial Number: {serial}"))

    asset = symbol or ("HBAR" if not transfer.asset_id else transfer.asset_id)
    nodes += [
        text("To:"),
        copyable(transfer.to),
        text(f"Amount: {format_amount(transfer.amount)} {asset}"),
    ]
    if transfer.service_fee > 0:
        nodes.append(text(f"Service Fee: {format_amount(transfer.service_fee)} {asset}"))
    for warning in warnings or []:
        nodes.append(text(warning))
    if warnings:
        nodes.append(text("Proceed only if you are sure about the amount being transferred"))
    return nodes


def query_cost_lines(base_cost: Decimal, cost: QueryCost) -> list[DialogNode]:
    return [
        text(f"Estimated Query Fee: {format_amount(base_cost)} Hbar"),
        text(f"Service Fee: {format_amount(cost.service_fee)} Hbar"),
        text(f"Estimated Max Query Fee: {format_amount(cost.max_cost)} Hbar"),
    ]


def _field_value(value: Any) -> str:
    if isinstance(value, Decimal):
        return format_amount(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(_field_value(item) for item in value)
    if hasattr(value, "model_dump"):
        return str(value.model_dump(exclude_none=True))
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _label(field: str) -> str:
    return " ".join(part.capitalize() for part in field.split("_")).replace("Id", "ID")


def operation_lines(operation: OperationRequest) -> list[DialogNode]:
    """Summary of a single-purpose operation: its non-empty parameters."""
    nodes = [heading(OPERATION_TITLES.get(operation.kind, operation.kind))]
    nodes.append(text("Are you sure you want to execute the following transaction?"))
    nodes.append(divider())

    if isinstance(operation, CreateTokenRequest) and operation.asset_type == "NFT":
        nodes.append(text("Creating a non-fungible token collection"))
    if isinstance(operation, DeleteAllowanceRequest) and operation.asset_type.value == "NFT":
        nodes.append(text("All spenders will lose access to this NFT"))
    if isinstance(operation, ApproveAllowanceRequest) and operation.all_serials:
        nodes.append(text("The spender will be able to move every serial of this collection"))
    if isinstance(operation, CallContractRequest):
        nodes.append(text(f"Function: {operation.function_name}"))

    for field, value in operation.model_dump(exclude_none=True).items():
        if field in SKIPPED_FIELDS or value is False or value in ("", [], {}):
            continue
        if isinstance(operation, CallContractRequest) and field == "function_name":
            continue
        original = getattr(operation, field)
        nodes.append(text(f"{_label(field)}: {_field_value(original)}"))

    nodes += memo_and_fee_lines(operation.transaction_memo, operation.max_fee)
    return nodes


def transaction_url(transaction_id: str, network: str) -> str:
    return f"{settings.HASHSCAN_URL}/{network}/transaction/{transaction_id}"


def post_transaction_lines(
    result: Union[TxReceipt, TxRecord],
    network: str,
) -> list[DialogNode]:
    """Outcome summary shown once a transaction completes."""
    receipt = result.receipt if isinstance(result, TxRecord) else result
    status = "Succeeded" if receipt.status == "SUCCESS" else "Failed"
    nodes = [heading(f"Transaction {status}")]

    transaction_id = ""
    if isinstance(result, TxRecord):
        transaction_id = result.transaction_id
    transaction_id = transaction_id or receipt.scheduled_transaction_id
    if transaction_id:
        nodes += [
            text("Transaction ID"),
            copyable(transaction_id),
            text("View on HashScan:"),
            copyable(transaction_url(transaction_id, network)),
        ]

    for label, value in (
        ("Account ID", receipt.account_id),
        ("Token ID", receipt.token_id),
        ("Topic ID", receipt.topic_id),
        ("Contract ID", receipt.contract_id),
        ("Schedule ID", receipt.schedule_id),
    ):
        if value:
            nodes += [text(label), copyable(value)]
    return nodes
