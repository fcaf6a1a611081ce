"""Wallet domain service: credit balance and the append-only ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.timeutils import ensure_aware, utcnow
from employer_portal.db.models import CreditTransaction as CreditTransactionModel, Wallet as WalletModel
from employer_portal.infrastructure.database.repositories.product_repository import SqlProductRepository
from employer_portal.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from employer_portal.modules.products.models import CREDIT_BUNDLE
from employer_portal.modules.products.repository import ProductRepository

from .exceptions import (
    InsufficientCreditsError,
    InvalidCreditAmountError,
    ProductNotPurchasableError,
    WalletNotFoundError,
)
from .models import (
    CreditCheck,
    CreditTransactionRecord,
    ExpiredBatch,
    ExpiringCredits,
    WalletSnapshot,
    check_sufficient,
)
from .repository import WalletRepository

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY_DAYS = 365


@dataclass(slots=True)
class SpendResult:
    wallet: WalletSnapshot
    transaction: CreditTransactionRecord


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository
    products: ProductRepository
    validity_days: int = DEFAULT_VALIDITY_DAYS

    @classmethod
    def with_session(cls, session: AsyncSession, validity_days: int = DEFAULT_VALIDITY_DAYS) -> "WalletService":
        return cls(SqlWalletRepository(session), SqlProductRepository(session), validity_days)

    async def ensure_wallet(self, employer_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_by_employer(employer_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(employer_id)
            logger.info("Wallet created for employer %s", employer_id)
        return self._to_snapshot(wallet)

    async def get_wallet(self, employer_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_by_employer(employer_id)
        if wallet is None:
            raise WalletNotFoundError("Wallet niet gevonden")
        return self._to_snapshot(wallet)

    async def check_credits(self, employer_id: str, required: int) -> CreditCheck:
        wallet = await self.get_wallet(employer_id)
        return check_sufficient(required, wallet.balance)

    async def add(self, employer_id: str, amount: int) -> WalletSnapshot:
        _require_positive(amount)
        wallet = await self.get_wallet(employer_id)
        updated = await self.repository.add_credits(wallet.id, amount)
        if updated is None:
            raise WalletNotFoundError("Wallet niet gevonden")
        return self._to_snapshot(updated)

    async def deduct(self, employer_id: str, amount: int) -> WalletSnapshot:
        _require_positive(amount)
        wallet = await self.get_wallet(employer_id)
        updated = await self.repository.deduct_credits(wallet.id, amount)
        if updated is None:
            current = await self.get_wallet(employer_id)
            raise InsufficientCreditsError(required=amount, available=current.balance)
        return self._to_snapshot(updated)

    async def spend(
        self,
        *,
        employer_id: str,
        amount: int,
        context: str,
        user_id: Optional[str] = None,
        vacancy_id: Optional[str] = None,
        product_id: Optional[str] = None,
    ) -> SpendResult:
        """Deduct credits and record the matching ``spend`` ledger entry.

        Purchase batches are drawn down oldest expiry first; credits that
        never came from a batch (manual top-ups) are taken last.
        """
        wallet = await self.deduct(employer_id, amount)
        await self._consume_batches(employer_id, amount)
        tx = await self.repository.add_transaction(
            wallet_id=wallet.id,
            employer_id=employer_id,
            user_id=user_id,
            vacancy_id=vacancy_id,
            product_id=product_id,
            type="spend",
            status="paid",
            reference_type="vacancy",
            context=context,
            credits_amount=amount,
        )
        logger.info(
            "Employer %s spent %s credits (context=%s, vacancy=%s)",
            employer_id,
            amount,
            context,
            vacancy_id,
        )
        return SpendResult(wallet=wallet, transaction=self._to_transaction(tx))

    async def purchase(
        self,
        *,
        employer_id: str,
        product_id: str,
        user_id: Optional[str] = None,
        context: str = "dashboard",
        invoice_details: Optional[dict[str, Any]] = None,
    ) -> SpendResult:
        product = await self.products.get_by_id(product_id)
        if product is None or not product.is_active or product.type != CREDIT_BUNDLE:
            raise ProductNotPurchasableError("Ongeldig product voor aankoop van credits")
        wallet = await self.get_wallet(employer_id)
        tx = await self.repository.add_transaction(
            wallet_id=wallet.id,
            employer_id=employer_id,
            user_id=user_id,
            product_id=product.id,
            expires_at=utcnow() + timedelta(days=self.validity_days),
            remaining_credits=product.credits,
            type="purchase",
            status="open",
            reference_type="order",
            context=context,
            credits_amount=product.credits,
            money_amount_cents=product.price_cents,
            invoice_details_snapshot=invoice_details,
        )
        wallet = await self.add(employer_id, product.credits)
        logger.info("Employer %s purchased %s credits (%s)", employer_id, product.credits, product.slug)
        return SpendResult(wallet=wallet, transaction=self._to_transaction(tx))

    async def expire_batches(self, now: Optional[datetime] = None) -> list[ExpiredBatch]:
        """Write off every purchase batch whose expiry has passed."""
        now = now or utcnow()
        expired: list[ExpiredBatch] = []
        for batch in await self.repository.list_expired_batches(now):
            remaining = batch.remaining_credits or 0
            await self.repository.set_remaining_credits(batch.id, 0)
            drained = await self.repository.drain_credits(batch.wallet_id, remaining)
            tx = await self.repository.add_transaction(
                wallet_id=batch.wallet_id,
                employer_id=batch.employer_id,
                product_id=batch.product_id,
                type="expiration",
                status="paid",
                reference_type="system",
                context="transactions",
                credits_amount=drained,
            )
            logger.info("Batch %s expired: %s credits written off", batch.id, drained)
            expired.append(
                ExpiredBatch(
                    batch_id=batch.id,
                    employer_id=batch.employer_id,
                    credits_expired=drained,
                    expires_at=ensure_aware(batch.expires_at),
                    transaction_id=tx.id,
                )
            )
        return expired

    async def expiring_soon(
        self, employer_id: str, warning_days: int, now: Optional[datetime] = None
    ) -> Optional[ExpiringCredits]:
        now = now or utcnow()
        horizon = now + timedelta(days=warning_days)
        batches = [
            batch
            for batch in await self.repository.list_spendable_batches(employer_id, now)
            if batch.expires_at is not None and ensure_aware(batch.expires_at) <= horizon
        ]
        if not batches:
            return None
        earliest = min(ensure_aware(batch.expires_at) for batch in batches)
        return ExpiringCredits(
            total=sum(batch.remaining_credits for batch in batches),
            days_until=max(0, (earliest - now).days),
            earliest_date=earliest.date(),
        )

    async def list_transactions(self, employer_id: str, limit: int = 50, offset: int = 0) -> list[CreditTransactionRecord]:
        rows = await self.repository.list_transactions(employer_id, limit, offset)
        return [self._to_transaction(row) for row in rows]

    async def delete_for_employer(self, employer_id: str) -> None:
        await self.repository.delete_for_employer(employer_id)

    async def _consume_batches(self, employer_id: str, amount: int) -> None:
        left = amount
        for batch in await self.repository.list_spendable_batches(employer_id, utcnow()):
            if left <= 0:
                break
            taken = min(left, batch.remaining_credits)
            await self.repository.set_remaining_credits(batch.id, batch.remaining_credits - taken)
            left -= taken

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            id=model.id,
            employer_id=model.employer_id,
            balance=model.balance,
            total_purchased=model.total_purchased,
            total_spent=model.total_spent,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_transaction(model: CreditTransactionModel) -> CreditTransactionRecord:
        return CreditTransactionRecord(
            id=model.id,
            wallet_id=model.wallet_id,
            employer_id=model.employer_id,
            user_id=model.user_id,
            vacancy_id=model.vacancy_id,
            product_id=model.product_id,
            type=model.type,
            status=model.status,
            reference_type=model.reference_type,
            context=model.context,
            credits_amount=model.credits_amount,
            money_amount_cents=model.money_amount_cents,
            invoice_details_snapshot=model.invoice_details_snapshot,
            created_at=model.created_at,
            expires_at=ensure_aware(model.expires_at),
            remaining_credits=model.remaining_credits,
        )


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidCreditAmountError("Aantal credits moet een positief geheel getal zijn")
