"""Tests for the vacancy lifecycle: drafting, paid submission, publication and boosts."""
from datetime import date, timedelta

import pytest

from conftest import complete_vacancy_fields, create_employer_user
from employer_portal.core.timeutils import today as business_today
from employer_portal.infrastructure.database.repositories.vacancy_repository import SqlVacancyRepository
from employer_portal.modules.products import ProductNotFoundError, ProductUnavailableError
from employer_portal.modules.vacancies import (
    Vacancy,
    VacancyAccessDeniedError,
    VacancyNotFoundError,
    VacancyStateError,
    VacancyValidationError,
    missing_required_fields,
)
from employer_portal.modules.vacancies.models import AWAITING_APPROVAL, CONCEPT, PUBLISHED, UNPUBLISHED, WE_DO_IT_FOR_YOU
from employer_portal.modules.vacancies.service import VacancyService
from employer_portal.modules.wallets import InsufficientCreditsError
from employer_portal.modules.wallets.service import WalletService


async def _concept(session, user, catalog, **overrides):
    fields = complete_vacancy_fields(**{"package_id": catalog["basic"].id, **overrides})
    return await VacancyService.with_session(session).create_vacancy(user.employer_id, user.id, fields)


async def _force_status(session, vacancy_id, status, **extra):
    return await SqlVacancyRepository(session).update(vacancy_id, {"status": status, **extra})


class TestMissingRequiredFields:
    def test_complete_self_service_vacancy(self):
        vacancy = Vacancy(id="v1", employer_id="e1", status=CONCEPT, **complete_vacancy_fields())
        assert missing_required_fields(vacancy) == []

    def test_reports_each_blank_field(self):
        vacancy = Vacancy(id="v1", employer_id="e1", status=CONCEPT, **complete_vacancy_fields(location="  "))
        assert missing_required_fields(vacancy) == ["location"]

    def test_apply_form_needs_an_application_email(self):
        vacancy = Vacancy(
            id="v1",
            employer_id="e1",
            status=CONCEPT,
            **complete_vacancy_fields(apply_url=None, show_apply_form=True),
        )
        assert missing_required_fields(vacancy) == ["application_email"]

    def test_we_do_it_for_you_only_needs_description(self):
        vacancy = Vacancy(
            id="v1",
            employer_id="e1",
            status=CONCEPT,
            input_type=WE_DO_IT_FOR_YOU,
            description="Alles staat in het bijgevoegde document",
            apply_url="https://acme.nl/solliciteer",
        )
        assert missing_required_fields(vacancy) == []


class TestDrafting:
    async def test_new_vacancy_is_a_concept(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog, status=PUBLISHED)

        assert vacancy.status == CONCEPT
        assert vacancy.created_by == employer_user.id
        assert vacancy.package_id == catalog["basic"].id

    async def test_other_employer_cannot_read(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        other = await create_employer_user(session, "other@acme.nl")

        with pytest.raises(VacancyAccessDeniedError):
            await VacancyService.with_session(session).get_for_employer(vacancy.id, other.employer_id)

    async def test_unknown_vacancy(self, session, employer_user):
        with pytest.raises(VacancyNotFoundError):
            await VacancyService.with_session(session).get_for_employer("missing", employer_user.employer_id)

    async def test_update_ignores_lifecycle_columns(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        service = VacancyService.with_session(session)

        updated = await service.update_vacancy(
            vacancy.id,
            employer_user.employer_id,
            {"title": "Senior beleidsmedewerker", "status": CONCEPT, "needs_sync": True, "submitted_at": None},
        )

        assert updated.title == "Senior beleidsmedewerker"
        assert updated.status == CONCEPT
        assert updated.needs_sync is False

    async def test_update_cannot_change_status(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        service = VacancyService.with_session(session)

        with pytest.raises(VacancyStateError):
            await service.update_vacancy(vacancy.id, employer_user.employer_id, {"status": PUBLISHED})
        with pytest.raises(VacancyValidationError):
            await service.update_vacancy(vacancy.id, employer_user.employer_id, {"status": "live"})

    async def test_submitted_vacancy_keeps_its_paid_upsells(self, session, catalog):
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog)
        service = VacancyService.with_session(session)
        await service.submit(vacancy.id, user.employer_id, user.id)

        with pytest.raises(VacancyStateError):
            await service.update_vacancy(
                vacancy.id,
                user.employer_id,
                {"selected_upsells": [catalog["featured"].id, catalog["same_day"].id]},
            )
        with pytest.raises(VacancyStateError):
            await service.update_vacancy(vacancy.id, user.employer_id, {"package_id": None})

        stored = await service.get_for_employer(vacancy.id, user.employer_id)
        assert stored.selected_upsells == []
        assert stored.package_id == catalog["basic"].id
        assert (await WalletService.with_session(session).get_wallet(user.employer_id)).balance == 4

    async def test_submitted_vacancy_content_stays_editable(self, session, catalog):
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog)
        service = VacancyService.with_session(session)
        await service.submit(vacancy.id, user.employer_id, user.id)

        updated = await service.update_vacancy(vacancy.id, user.employer_id, {"title": "Teamleider"})

        assert updated.title == "Teamleider"

    async def test_managed_employers_can_be_read(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        other = await create_employer_user(session, "bureau@acme.nl")
        service = VacancyService.with_session(session)

        found = await service.get_for_employer(vacancy.id, other.employer_id, [employer_user.employer_id])

        assert found.id == vacancy.id
        with pytest.raises(VacancyAccessDeniedError):
            await service.get_for_employer(vacancy.id, other.employer_id, ["someone-else"])

    async def test_invalid_input_type(self, session, employer_user):
        with pytest.raises(VacancyValidationError) as excinfo:
            await VacancyService.with_session(session).create_vacancy(
                employer_user.employer_id, employer_user.id, {"input_type": "manual"}
            )
        assert excinfo.value.fields == ["input_type"]

    async def test_only_concepts_can_be_deleted(self, session, catalog, employer_user):
        service = VacancyService.with_session(session)
        concept = await _concept(session, employer_user, catalog)
        live = await _concept(session, employer_user, catalog)
        await _force_status(session, live.id, PUBLISHED)

        await service.delete_vacancy(concept.id, employer_user.employer_id)
        with pytest.raises(VacancyStateError):
            await service.delete_vacancy(live.id, employer_user.employer_id)

        remaining = await service.list_vacancies(employer_user.employer_id)
        assert [vacancy.id for vacancy in remaining] == [live.id]

    async def test_list_filters_by_status(self, session, catalog, employer_user):
        service = VacancyService.with_session(session)
        concept = await _concept(session, employer_user, catalog)
        live = await _concept(session, employer_user, catalog)
        await _force_status(session, live.id, PUBLISHED)

        published = await service.list_vacancies(employer_user.employer_id, [PUBLISHED])
        everything = await service.list_vacancies(employer_user.employer_id)

        assert [vacancy.id for vacancy in published] == [live.id]
        assert {vacancy.id for vacancy in everything} == {concept.id, live.id}


class TestSubmit:
    async def test_successful_submission_charges_the_package(self, session, catalog):
        # Given a complete concept and a balance of 20 against a 16 credit package
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog)

        # When
        result = await VacancyService.with_session(session).submit(vacancy.id, user.employer_id, user.id)

        # Then
        assert result.vacancy.status == AWAITING_APPROVAL
        assert result.vacancy.submitted_at is not None
        assert result.credits_spent == 16
        assert result.new_balance == 4
        assert result.package_name == "Basis"

        transactions = await WalletService.with_session(session).list_transactions(user.employer_id)
        spends = [tx for tx in transactions if tx.type == "spend"]
        assert len(spends) == 1
        assert spends[0].credits_amount == 16
        assert spends[0].vacancy_id == vacancy.id
        assert spends[0].product_id == catalog["basic"].id
        assert spends[0].id == result.transaction_id

    async def test_upsells_are_part_of_the_price(self, session, catalog):
        user = await create_employer_user(session, balance=30)
        vacancy = await _concept(
            session, user, catalog, selected_upsells=[catalog["featured"].id, catalog["same_day"].id]
        )

        result = await VacancyService.with_session(session).submit(vacancy.id, user.employer_id, user.id)

        assert result.credits_spent == 22
        assert result.new_balance == 8

    async def test_insufficient_credits_leave_everything_untouched(self, session, catalog):
        user = await create_employer_user(session, balance=10)
        vacancy = await _concept(session, user, catalog)
        service = VacancyService.with_session(session)

        with pytest.raises(InsufficientCreditsError) as excinfo:
            await service.submit(vacancy.id, user.employer_id, user.id)

        assert excinfo.value.required == 16
        assert excinfo.value.available == 10
        assert excinfo.value.shortage == 6
        assert (await service.get_for_employer(vacancy.id, user.employer_id)).status == CONCEPT
        wallets = WalletService.with_session(session)
        assert (await wallets.get_wallet(user.employer_id)).balance == 10
        assert await wallets.list_transactions(user.employer_id) == []

    async def test_missing_fields_are_checked_before_credits(self, session, catalog):
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog, location=None)

        with pytest.raises(VacancyValidationError) as excinfo:
            await VacancyService.with_session(session).submit(vacancy.id, user.employer_id, user.id)

        assert excinfo.value.fields == ["location"]
        assert (await WalletService.with_session(session).get_wallet(user.employer_id)).balance == 20

    async def test_package_is_required(self, session, catalog):
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog, package_id=None)

        with pytest.raises(VacancyValidationError) as excinfo:
            await VacancyService.with_session(session).submit(vacancy.id, user.employer_id, user.id)

        assert excinfo.value.fields == ["package_id"]

    async def test_unknown_upsell_is_rejected(self, session, catalog):
        user = await create_employer_user(session, balance=20)
        vacancy = await _concept(session, user, catalog, selected_upsells=["not-a-product"])

        with pytest.raises(ProductNotFoundError):
            await VacancyService.with_session(session).submit(vacancy.id, user.employer_id, user.id)

        assert (await WalletService.with_session(session).get_wallet(user.employer_id)).balance == 20

    async def test_only_concepts_can_be_submitted(self, session, catalog):
        user = await create_employer_user(session, balance=40)
        vacancy = await _concept(session, user, catalog)
        service = VacancyService.with_session(session)
        await service.submit(vacancy.id, user.employer_id, user.id)

        with pytest.raises(VacancyStateError):
            await service.submit(vacancy.id, user.employer_id, user.id)

        assert (await WalletService.with_session(session).get_wallet(user.employer_id)).balance == 24

    async def test_other_employer_cannot_submit(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        other = await create_employer_user(session, "other@acme.nl", balance=20)

        with pytest.raises(VacancyAccessDeniedError):
            await VacancyService.with_session(session).submit(vacancy.id, other.employer_id, other.id)


class TestPublication:
    async def test_republish_with_closing_date_today_is_rejected(self, session, catalog, employer_user):
        today = date(2026, 10, 19)
        vacancy = await _concept(session, employer_user, catalog)
        await _force_status(session, vacancy.id, UNPUBLISHED, closing_date=today)

        with pytest.raises(VacancyStateError):
            await VacancyService.with_session(session).republish(vacancy.id, employer_user.employer_id, today=today)

    async def test_republish_with_future_closing_date(self, session, catalog, employer_user):
        today = date(2026, 10, 19)
        vacancy = await _concept(session, employer_user, catalog)
        await _force_status(session, vacancy.id, UNPUBLISHED, closing_date=today + timedelta(days=1))

        republished = await VacancyService.with_session(session).republish(
            vacancy.id, employer_user.employer_id, today=today
        )

        assert republished.status == PUBLISHED
        assert republished.last_published_at is not None
        assert republished.needs_sync is True

    async def test_republish_uses_the_business_day(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        await _force_status(session, vacancy.id, UNPUBLISHED, closing_date=business_today("Europe/Amsterdam"))
        service = VacancyService.with_session(session, "Europe/Amsterdam")

        with pytest.raises(VacancyStateError):
            await service.republish(vacancy.id, employer_user.employer_id)

    async def test_republish_without_closing_date(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog, closing_date=None)
        await _force_status(session, vacancy.id, UNPUBLISHED)

        republished = await VacancyService.with_session(session).republish(vacancy.id, employer_user.employer_id)

        assert republished.status == PUBLISHED

    async def test_only_unpublished_vacancies_can_be_republished(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)

        with pytest.raises(VacancyStateError):
            await VacancyService.with_session(session).republish(vacancy.id, employer_user.employer_id)

    async def test_depublish(self, session, catalog, employer_user):
        vacancy = await _concept(session, employer_user, catalog)
        await _force_status(session, vacancy.id, PUBLISHED)
        service = VacancyService.with_session(session)

        depublished = await service.depublish(vacancy.id, employer_user.employer_id)

        assert depublished.status == UNPUBLISHED
        assert depublished.depublished_at is not None
        assert depublished.needs_sync is True
        with pytest.raises(VacancyStateError):
            await service.depublish(vacancy.id, employer_user.employer_id)


class TestBoost:
    async def test_boost_appends_upsells_and_charges(self, session, catalog):
        user = await create_employer_user(session, balance=10)
        vacancy = await _concept(session, user, catalog)
        await _force_status(session, vacancy.id, PUBLISHED)

        result = await VacancyService.with_session(session).boost(
            vacancy.id, user.employer_id, user.id, [catalog["featured"].id]
        )

        assert result.credits_spent == 3
        assert result.new_balance == 7
        assert result.upsell_names == ["Uitgelicht"]
        assert result.vacancy.selected_upsells == [catalog["featured"].id]
        assert result.vacancy.needs_sync is True

    async def test_boost_rejects_options_not_offered_as_boost(self, session, catalog):
        user = await create_employer_user(session, balance=10)
        vacancy = await _concept(session, user, catalog)
        await _force_status(session, vacancy.id, PUBLISHED)

        with pytest.raises(ProductUnavailableError):
            await VacancyService.with_session(session).boost(
                vacancy.id, user.employer_id, user.id, [catalog["same_day"].id]
            )

    async def test_boost_needs_a_live_vacancy(self, session, catalog):
        user = await create_employer_user(session, balance=10)
        vacancy = await _concept(session, user, catalog)

        with pytest.raises(VacancyStateError):
            await VacancyService.with_session(session).boost(
                vacancy.id, user.employer_id, user.id, [catalog["featured"].id]
            )

    async def test_boost_without_enough_credits(self, session, catalog):
        user = await create_employer_user(session, balance=2)
        vacancy = await _concept(session, user, catalog)
        await _force_status(session, vacancy.id, PUBLISHED)

        with pytest.raises(InsufficientCreditsError) as excinfo:
            await VacancyService.with_session(session).boost(
                vacancy.id, user.employer_id, user.id, [catalog["featured"].id]
            )

        assert excinfo.value.shortage == 1
        assert (await WalletService.with_session(session).get_wallet(user.employer_id)).balance == 2
