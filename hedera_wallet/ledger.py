"""Interfaces of the external ledger SDK as seen by the wallet core.

The core never talks to the network itself. It drives these objects, which
an adapter over a concrete Hedera SDK provides. Builders are created by kind
name (``"TransferTransaction"``, ``"TokenMintTransaction"``, ...) and receive
snake_case setter calls. Structured values (account ids, public keys, custom
fees, datetimes, hbar amounts as ``Decimal``) are passed through as-is for the
adapter to convert.
"""

from decimal import Decimal
from typing import Any, Optional, Protocol


class TransactionResponse(Protocol):
    """Handle returned once a transaction has been submitted."""

    transaction_id: Any

    async def get_receipt(self, client: "LedgerClient") -> Any:
        ...

    async def get_record(self, client: "LedgerClient") -> Any:
        ...


class TransactionBuilder(Protocol):
    """Fluent transaction builder; setters are looked up by name."""

    def freeze_with(self, client: "LedgerClient") -> "TransactionBuilder":
        ...

    def sign(self, key: Any) -> "TransactionBuilder":
        ...

    async def execute(self, client: "LedgerClient") -> TransactionResponse:
        ...


class LedgerQuery(Protocol):
    """Paid ledger query."""

    async def get_cost(self, client: "LedgerClient") -> Decimal:
        ...

    def set_query_payment(self, amount: Decimal) -> "LedgerQuery":
        ...

    async def execute(self, client: "LedgerClient") -> Any:
        ...


class LedgerClient(Protocol):
    """Ledger client bound to the current account as operator."""

    operator_account_id: str
    operator_public_key: Any

    def transaction(self, kind: str) -> TransactionBuilder:
        ...

    def query(self, kind: str, **params: Any) -> LedgerQuery:
        ...


class LedgerClientFactory(Protocol):
    """Creates a ledger client for an account, or returns None if it cannot."""

    async def create_client(
        self,
        account_id: str,
        network: str,
        curve: str,
        private_key: str,
    ) -> Optional[LedgerClient]:
        ...
