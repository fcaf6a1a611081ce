"""Tests for WalletService: balance arithmetic and the credit ledger."""
from datetime import timedelta

import pytest

from conftest import create_employer_user
from employer_portal.core.timeutils import utcnow
from employer_portal.infrastructure.database.repositories.account_repository import SqlUserRepository
from employer_portal.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from employer_portal.modules.wallets import (
    InsufficientCreditsError,
    InvalidCreditAmountError,
    ProductNotPurchasableError,
    WalletNotFoundError,
    check_sufficient,
)
from employer_portal.modules.wallets.service import WalletService


class TestCheckSufficient:
    def test_exact_balance_is_enough(self):
        check = check_sufficient(required=16, available=16)
        assert check.sufficient
        assert check.shortage == 0

    def test_shortage_is_reported(self):
        check = check_sufficient(required=16, available=10)
        assert not check.sufficient
        assert check.shortage == 6
        assert check.available == 10
        assert check.required == 16


class TestWalletService:
    async def test_new_employer_starts_at_zero(self, session, employer_user):
        wallet = await WalletService.with_session(session).get_wallet(employer_user.employer_id)

        assert wallet.balance == 0
        assert wallet.total_purchased == 0
        assert wallet.total_spent == 0

    async def test_ensure_wallet_is_idempotent(self, session, employer_user):
        service = WalletService.with_session(session)

        first = await service.ensure_wallet(employer_user.employer_id)
        second = await service.ensure_wallet(employer_user.employer_id)

        assert first.id == second.id

    async def test_add_and_deduct_keep_totals_consistent(self, session, employer_user):
        """balance == total_purchased - total_spent after every mutation"""
        service = WalletService.with_session(session)
        employer_id = employer_user.employer_id

        await service.add(employer_id, 20)
        await service.deduct(employer_id, 16)
        wallet = await service.add(employer_id, 5)

        assert wallet.balance == 9
        assert wallet.total_purchased == 25
        assert wallet.total_spent == 16
        assert wallet.balance == wallet.total_purchased - wallet.total_spent

    async def test_deduct_more_than_balance_changes_nothing(self, session, employer_user):
        service = WalletService.with_session(session)
        employer_id = employer_user.employer_id
        await service.add(employer_id, 10)

        with pytest.raises(InsufficientCreditsError) as excinfo:
            await service.deduct(employer_id, 16)

        assert excinfo.value.shortage == 6
        wallet = await service.get_wallet(employer_id)
        assert wallet.balance == 10
        assert wallet.total_spent == 0

    @pytest.mark.parametrize("amount", [0, -5, 2.5, True])
    async def test_rejects_non_positive_amounts(self, session, employer_user, amount):
        service = WalletService.with_session(session)

        with pytest.raises(InvalidCreditAmountError):
            await service.add(employer_user.employer_id, amount)
        with pytest.raises(InvalidCreditAmountError):
            await service.deduct(employer_user.employer_id, amount)

    async def test_missing_wallet(self, session):
        with pytest.raises(WalletNotFoundError):
            await WalletService.with_session(session).get_wallet("no-such-employer")

    async def test_spend_records_ledger_entry(self, session):
        user = await create_employer_user(session, balance=20)
        service = WalletService.with_session(session)

        result = await service.spend(employer_id=user.employer_id, amount=16, context="vacancy", user_id=user.id)

        assert result.wallet.balance == 4
        assert result.transaction.type == "spend"
        assert result.transaction.credits_amount == 16
        assert result.transaction.context == "vacancy"
        assert result.transaction.user_id == user.id


class TestPurchase:
    async def test_purchase_bundle_adds_credits(self, session, catalog, employer_user):
        service = WalletService.with_session(session)
        bundle = catalog["credits_20"]

        result = await service.purchase(
            employer_id=employer_user.employer_id,
            product_id=bundle.id,
            user_id=employer_user.id,
            invoice_details={"company_name": "Acme"},
        )

        assert result.wallet.balance == 20
        assert result.wallet.total_purchased == 20
        tx = result.transaction
        assert tx.type == "purchase"
        assert tx.credits_amount == 20
        assert tx.money_amount_cents == 45000
        assert tx.invoice_details_snapshot == {"company_name": "Acme"}

    async def test_packages_cannot_be_bought_as_credits(self, session, catalog, employer_user):
        service = WalletService.with_session(session)

        with pytest.raises(ProductNotPurchasableError):
            await service.purchase(employer_id=employer_user.employer_id, product_id=catalog["basic"].id)

        wallet = await service.get_wallet(employer_user.employer_id)
        assert wallet.balance == 0

    async def test_transactions_listed_for_employer(self, session, catalog):
        user = await create_employer_user(session, balance=30)
        other = await create_employer_user(session, "other@acme.nl", balance=30)
        service = WalletService.with_session(session)
        await service.spend(employer_id=user.employer_id, amount=3, context="boost")
        await service.purchase(employer_id=user.employer_id, product_id=catalog["credits_20"].id)
        await service.spend(employer_id=other.employer_id, amount=5, context="boost")

        transactions = await service.list_transactions(user.employer_id)

        assert len(transactions) == 2
        assert {tx.type for tx in transactions} == {"spend", "purchase"}
        assert all(tx.employer_id == user.employer_id for tx in transactions)


class TestCreditBatches:
    async def test_purchase_opens_a_batch_that_expires(self, session, catalog, employer_user):
        service = WalletService.with_session(session, validity_days=30)
        before = utcnow()

        result = await service.purchase(employer_id=employer_user.employer_id, product_id=catalog["credits_20"].id)

        tx = result.transaction
        assert tx.remaining_credits == 20
        assert before + timedelta(days=29) < tx.expires_at <= utcnow() + timedelta(days=30)

    async def test_spend_draws_from_soonest_expiring_batch_first(self, session, catalog, employer_user):
        employer_id = employer_user.employer_id
        bundle = catalog["credits_20"].id
        late = await WalletService.with_session(session, validity_days=300).purchase(
            employer_id=employer_id, product_id=bundle
        )
        early = await WalletService.with_session(session, validity_days=30).purchase(
            employer_id=employer_id, product_id=bundle
        )
        service = WalletService.with_session(session)

        await service.spend(employer_id=employer_id, amount=25, context="vacancy")

        remaining = {tx.id: tx.remaining_credits for tx in await service.list_transactions(employer_id)}
        assert remaining[early.transaction.id] == 0
        assert remaining[late.transaction.id] == 15

    async def test_manual_credits_are_spent_after_batches(self, session, catalog):
        user = await create_employer_user(session, balance=10)
        service = WalletService.with_session(session)
        batch = await service.purchase(employer_id=user.employer_id, product_id=catalog["credits_20"].id)

        await service.spend(employer_id=user.employer_id, amount=5, context="boost")

        remaining = {tx.id: tx.remaining_credits for tx in await service.list_transactions(user.employer_id)}
        assert remaining[batch.transaction.id] == 15

    async def test_expired_batch_is_written_off(self, session, catalog, employer_user):
        employer_id = employer_user.employer_id
        service = WalletService.with_session(session, validity_days=30)
        batch = await service.purchase(employer_id=employer_id, product_id=catalog["credits_20"].id)
        await service.spend(employer_id=employer_id, amount=4, context="boost")

        expired = await service.expire_batches(now=utcnow() + timedelta(days=31))

        assert [item.batch_id for item in expired] == [batch.transaction.id]
        assert expired[0].credits_expired == 16
        wallet = await service.get_wallet(employer_id)
        assert wallet.balance == 0
        assert wallet.total_spent == 20
        assert wallet.balance == wallet.total_purchased - wallet.total_spent
        transactions = await service.list_transactions(employer_id)
        expiration = next(tx for tx in transactions if tx.type == "expiration")
        assert expiration.credits_amount == 16
        assert next(tx for tx in transactions if tx.id == batch.transaction.id).remaining_credits == 0

    async def test_expiry_run_skips_live_batches(self, session, catalog, employer_user):
        service = WalletService.with_session(session, validity_days=30)
        await service.purchase(employer_id=employer_user.employer_id, product_id=catalog["credits_20"].id)

        assert await service.expire_batches() == []
        assert (await service.get_wallet(employer_user.employer_id)).balance == 20

    async def test_expiring_soon_sums_batches_inside_the_warning_window(self, session, catalog, employer_user):
        employer_id = employer_user.employer_id
        bundle = catalog["credits_20"].id
        await WalletService.with_session(session, validity_days=20).purchase(employer_id=employer_id, product_id=bundle)
        await WalletService.with_session(session, validity_days=200).purchase(employer_id=employer_id, product_id=bundle)
        service = WalletService.with_session(session)

        expiring = await service.expiring_soon(employer_id, warning_days=30)

        assert expiring.total == 20
        assert 18 <= expiring.days_until <= 20
        assert await service.expiring_soon(employer_id, warning_days=7) is None


class TestWalletRepository:
    async def test_existing_wallet_keeps_pending_changes(self, session, session_factory, employer_user):
        # Given a pending change in the same unit of work
        await SqlUserRepository(session).update_user(employer_user.id, {"first_name": "Femke"})

        # When a wallet insert collides with the one created at onboarding
        wallet = await SqlWalletRepository(session).create_wallet(employer_user.employer_id)
        await session.commit()

        # Then the existing wallet is returned and the pending change survives
        async with session_factory() as fresh:
            existing = await WalletService.with_session(fresh).get_wallet(employer_user.employer_id)
            user = await SqlUserRepository(fresh).get_by_id(employer_user.id)
        assert wallet.id == existing.id
        assert user.first_name == "Femke"
