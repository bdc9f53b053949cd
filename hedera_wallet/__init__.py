"""Hedera wallet core - fees, transaction compilation, atomic swaps and confirmation flows."""

from hedera_wallet.clients.mirror import MirrorNodeClient
from hedera_wallet.core.logging import configure_logging
from hedera_wallet.exceptions import (
    InvalidParams,
    LedgerRejected,
    ResourceUnavailable,
    ResultUnknown,
    SwapExpired,
    UnsupportedOperation,
    UserRejected,
    WalletSnapError,
)
from hedera_wallet.facades import WalletContext, handle_request
from hedera_wallet.services.fees import calculate_fees, normalize_transfers
from hedera_wallet.services.receipts import normalize_receipt, normalize_record
from hedera_wallet.types import (
    AccountBalance,
    AccountInfo,
    QueryCost,
    TokenBalance,
    TxReceipt,
    TxRecord,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "WalletContext",
    "handle_request",
    "MirrorNodeClient",
    "configure_logging",
    # Services
    "calculate_fees",
    "normalize_transfers",
    "normalize_receipt",
    "normalize_record",
    # Exceptions
    "WalletSnapError",
    "UserRejected",
    "InvalidParams",
    "UnsupportedOperation",
    "ResourceUnavailable",
    "LedgerRejected",
    "SwapExpired",
    "ResultUnknown",
    # Types
    "AccountBalance",
    "AccountInfo",
    "QueryCost",
    "TokenBalance",
    "TxReceipt",
    "TxRecord",
]
