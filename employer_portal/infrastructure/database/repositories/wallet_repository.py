"""SQLAlchemy implementation for the wallet ledger"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import asc, delete, desc, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import CreditTransaction, Wallet


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_employer(self, employer_id: str) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.employer_id == employer_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_wallet(self, employer_id: str) -> Wallet:
        wallet = Wallet(employer_id=employer_id, balance=0, total_purchased=0, total_spent=0)
        try:
            # savepoint: a concurrent insert must not discard the caller's pending work
            async with self.session.begin_nested():
                self.session.add(wallet)
                await self.session.flush()
        except IntegrityError:
            wallet = await self.get_by_employer(employer_id)
            if wallet is None:
                raise
        return wallet

    async def add_credits(self, wallet_id: str, amount: int) -> Wallet | None:
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(
                balance=Wallet.balance + amount,
                total_purchased=Wallet.total_purchased + amount,
            )
            .execution_options(synchronize_session="fetch", populate_existing=True)
            .returning(Wallet)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def deduct_credits(self, wallet_id: str, amount: int) -> Wallet | None:
        # single conditional statement, the balance can never go negative
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id, Wallet.balance >= amount)
            .values(
                balance=Wallet.balance - amount,
                total_spent=Wallet.total_spent + amount,
            )
            .execution_options(synchronize_session="fetch", populate_existing=True)
            .returning(Wallet)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

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
    ) -> CreditTransaction:
        tx = CreditTransaction(
            wallet_id=wallet_id,
            employer_id=employer_id,
            user_id=user_id,
            vacancy_id=vacancy_id,
            product_id=product_id,
            type=type,
            status=status,
            reference_type=reference_type,
            context=context,
            credits_amount=credits_amount,
            money_amount_cents=money_amount_cents,
            invoice_details_snapshot=invoice_details_snapshot,
            expires_at=expires_at,
            remaining_credits=remaining_credits,
        )
        self.session.add(tx)
        await self.session.flush()
        await self.session.refresh(tx)
        return tx

    async def list_transactions(self, employer_id: str, limit: int, offset: int) -> list[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.employer_id == employer_id)
            .order_by(desc(CreditTransaction.created_at), desc(CreditTransaction.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_spendable_batches(self, employer_id: str, now: datetime) -> list[CreditTransaction]:
        """Purchase batches with credits left, oldest expiry first."""
        stmt = (
            select(CreditTransaction)
            .where(
                CreditTransaction.employer_id == employer_id,
                CreditTransaction.type == "purchase",
                CreditTransaction.remaining_credits > 0,
                or_(CreditTransaction.expires_at.is_(None), CreditTransaction.expires_at > now),
            )
            .order_by(
                CreditTransaction.expires_at.is_(None),
                asc(CreditTransaction.expires_at),
                asc(CreditTransaction.created_at),
                asc(CreditTransaction.id),
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_expired_batches(self, now: datetime) -> list[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(
                CreditTransaction.type == "purchase",
                CreditTransaction.remaining_credits > 0,
                CreditTransaction.expires_at < now,
            )
            .order_by(asc(CreditTransaction.expires_at), asc(CreditTransaction.id))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_remaining_credits(self, transaction_id: str, remaining: int) -> None:
        await self.session.execute(
            update(CreditTransaction)
            .where(CreditTransaction.id == transaction_id)
            .values(remaining_credits=remaining)
            .execution_options(synchronize_session="fetch")
        )

    async def drain_credits(self, wallet_id: str, amount: int) -> int:
        """Remove up to ``amount`` credits without going below zero; returns what was removed."""
        wallet = await self.session.get(Wallet, wallet_id, populate_existing=True)
        if wallet is None:
            return 0
        drained = min(amount, wallet.balance)
        if drained <= 0:
            return 0
        if await self.deduct_credits(wallet_id, drained) is None:
            return 0
        return drained

    async def delete_for_employer(self, employer_id: str) -> None:
        await self.session.execute(
            delete(CreditTransaction).where(CreditTransaction.employer_id == employer_id)
        )
        await self.session.execute(delete(Wallet).where(Wallet.employer_id == employer_id))
