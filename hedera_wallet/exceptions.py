"""Exception classes for the Hedera wallet core.

Every error that crosses the plugin boundary is a ``WalletSnapError`` carrying
a JSON-RPC style numeric code plus a stable string error code.
"""

from typing import Any, Optional


class WalletSnapError(Exception):
    """Base exception for all wallet core errors."""

    def __init__(
        self,
        message: str,
        code: int,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.error_code or 'ERROR'}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for the plugin request handler."""
        return {
            "code": self.code,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class UserRejected(WalletSnapError):
    """Raised when the user declines the confirmation dialog."""

    def __init__(
        self,
        message: str = "User rejected the request",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=4001,
            error_code="USER_REJECTED",
            details=details,
        )


class InvalidParams(WalletSnapError):
    """Raised when request parameters fail validation or a precondition."""

    def __init__(
        self,
        message: str = "Invalid parameters",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=-32602,
            error_code="INVALID_PARAMS",
            details=details,
        )


class UnsupportedOperation(WalletSnapError):
    """Raised for request shapes the wallet does not support."""

    def __init__(
        self,
        message: str = "Unsupported operation",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=4200,
            error_code="UNSUPPORTED_OPERATION",
            details=details,
        )


class ResourceUnavailable(WalletSnapError):
    """Raised when the ledger client or the mirror node cannot be reached."""

    def __init__(
        self,
        message: str = "Resource unavailable",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=-32002,
            error_code="RESOURCE_UNAVAILABLE",
            details=details,
        )


class LedgerRejected(WalletSnapError):
    """Raised when the ledger rejects a submitted transaction."""

    def __init__(
        self,
        message: str = "Transaction rejected by the ledger",
        status: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        error_code: str = "LEDGER_REJECTED",
    ) -> None:
        self.status = status or ""
        details = dict(details or {})
        if status:
            details.setdefault("status", status)
        super().__init__(
            message=message,
            code=-32003,
            error_code=error_code,
            details=details,
        )


class SwapExpired(LedgerRejected):
    """Raised when acknowledging a scheduled swap that has already expired."""

    def __init__(
        self,
        message: str = "Scheduled swap has expired",
        status: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status=status,
            details=details,
            error_code="SWAP_EXPIRED",
        )


class ResultUnknown(WalletSnapError):
    """Raised when a transaction was submitted but its outcome could not be read."""

    def __init__(
        self,
        message: str = "Transaction was submitted but its result is unknown",
        transaction_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.transaction_id = transaction_id or ""
        details = dict(details or {})
        if transaction_id:
            details.setdefault("transaction_id", transaction_id)
        super().__init__(
            message=message,
            code=-32603,
            error_code="RESULT_UNKNOWN",
            details=details,
        )


# Mapping from error codes to exception classes
ERROR_CODE_MAP: dict[str, type[WalletSnapError]] = {
    "USER_REJECTED": UserRejected,
    "INVALID_PARAMS": InvalidParams,
    "UNSUPPORTED_OPERATION": UnsupportedOperation,
    "RESOURCE_UNAVAILABLE": ResourceUnavailable,
    "LEDGER_REJECTED": LedgerRejected,
    "SWAP_EXPIRED": SwapExpired,
    "RESULT_UNKNOWN": ResultUnknown,
}


def error_from_dict(data: dict[str, Any]) -> WalletSnapError:
    """Rebuild an error from its serialized form."""
    error_code = data.get("error_code", "")
    message = data.get("message", "Unknown error")
    details = data.get("details", {})

    exception_class = ERROR_CODE_MAP.get(error_code)
    if exception_class is None:
        return WalletSnapError(
            message=message,
            code=data.get("code", -32603),
            error_code=error_code or None,
            details=details,
        )
    if issubclass(exception_class, LedgerRejected):
        return exception_class(message=message, status=details.get("status"), details=details)
    if exception_class is ResultUnknown:
        return ResultUnknown(
            message=message,
            transaction_id=details.get("transaction_id"),
            details=details,
        )
    return exception_class(message=message, details=details)
