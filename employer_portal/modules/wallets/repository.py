"""Repository protocol for wallet operations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from employer_portal.db.models import CreditTransaction as CreditTransactionModel, Wallet as WalletModel


class WalletRepository(Protocol):
    async def get_by_employer(self, employer_id: str) -> WalletModel | None:
        ...

    async def create_wallet(self, employer_id: str) -> WalletModel:
        ...

    async def add_credits(self, wallet_id: str, amount: int) -> WalletModel | None:
        ...

    async def deduct_credits(self, wallet_id: str, amount: int) -> WalletModel | None:
        """Deduct only when the balance covers the amount; ``None`` otherwise."""
        ...

    async def drain_credits(self, wallet_id: str, amount: int) -> int:
        ...

    async def add_transaction(
        self,
        *,
        wallet_id: str,
        employer_id: str,
        type: str,
        status: str,
        credits_amount: int,
        user_id: str | None = None,
        vacancy_id: str | None = None,
        product_id: str | None = None,
        reference_type: str | None = None,
        context: str | None = None,
        money_amount_cents: int | None = None,
        invoice_details_snapshot: dict[str, Any] | None = None,
        expires_at: datetime | None = None,
        remaining_credits: int | None = None,
    ) -> CreditTransactionModel:
        ...

    async def list_transactions(self, employer_id: str, limit: int, offset: int) -> Sequence[CreditTransactionModel]:
        ...

    async def list_spendable_batches(self, employer_id: str, now: datetime) -> Sequence[CreditTransactionModel]:
        ...

    async def list_expired_batches(self, now: datetime) -> Sequence[CreditTransactionModel]:
        ...

    async def set_remaining_credits(self, transaction_id: str, remaining: int) -> None:
        ...

    async def delete_for_employer(self, employer_id: str) -> None:
        ...
