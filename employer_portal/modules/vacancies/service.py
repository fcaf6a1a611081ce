"""Vacancy lifecycle: drafting, paid submission, (re)publication and boosts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.timeutils import BUSINESS_TIMEZONE, today as current_date, utcnow
from employer_portal.infrastructure.database.repositories.vacancy_repository import SqlVacancyRepository
from employer_portal.modules.products.service import ProductService
from employer_portal.modules.wallets.exceptions import InsufficientCreditsError
from employer_portal.modules.wallets.service import WalletService

from .exceptions import (
    VacancyAccessDeniedError,
    VacancyNotFoundError,
    VacancyStateError,
    VacancyValidationError,
)
from .models import (
    AWAITING_APPROVAL,
    BOOSTABLE_STATUSES,
    CONCEPT,
    EDITABLE_FIELDS,
    INPUT_TYPES,
    PRICED_FIELDS,
    PUBLISHED,
    SELF_SERVICE,
    UNPUBLISHED,
    VACANCY_STATUSES,
    BoostResult,
    SubmitResult,
    Vacancy,
    missing_required_fields,
)
from .repository import VacancyRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VacancyService:
    repository: VacancyRepository
    wallets: WalletService
    products: ProductService
    timezone: str = BUSINESS_TIMEZONE

    @classmethod
    def with_session(cls, session: AsyncSession, timezone: str = BUSINESS_TIMEZONE) -> "VacancyService":
        return cls(
            SqlVacancyRepository(session),
            WalletService.with_session(session),
            ProductService.with_session(session),
            timezone,
        )

    async def create_vacancy(self, employer_id: str, user_id: str | None, data: Mapping[str, Any]) -> Vacancy:
        fields = self._clean_changes(data)
        fields.setdefault("input_type", SELF_SERVICE)
        vacancy = await self.repository.create(employer_id=employer_id, created_by=user_id, fields=fields)
        logger.info("Vacancy %s created for employer %s", vacancy.id, employer_id)
        return vacancy

    async def list_vacancies(self, employer_id: str, statuses: Iterable[str] | None = None) -> Sequence[Vacancy]:
        return await self.repository.list_by_employer(employer_id, statuses)

    async def get_for_employer(
        self, vacancy_id: str, employer_id: str, managed_employer_ids: Iterable[str] = ()
    ) -> Vacancy:
        """Load a vacancy owned by `employer_id`.

        Intermediaries pass the employers they manage so they can open any
        of their vacancies without switching first.
        """
        vacancy = await self.repository.get_by_id(vacancy_id)
        if vacancy is None:
            raise VacancyNotFoundError("Vacature niet gevonden")
        if vacancy.employer_id != employer_id and vacancy.employer_id not in set(managed_employer_ids):
            raise VacancyAccessDeniedError("Geen toegang tot deze vacature")
        return vacancy

    async def update_vacancy(
        self,
        vacancy_id: str,
        employer_id: str,
        data: Mapping[str, Any],
        managed_employer_ids: Iterable[str] = (),
    ) -> Vacancy:
        vacancy = await self.get_for_employer(vacancy_id, employer_id, managed_employer_ids)
        status = data.get("status")
        if status is not None:
            if status not in VACANCY_STATUSES:
                raise VacancyValidationError(f"Ongeldige status: {status}", ["status"])
            if status != vacancy.status:
                raise VacancyStateError("De status van een vacature kan niet handmatig worden gewijzigd")

        changes = self._clean_changes(data)
        if vacancy.status != CONCEPT and any(key in changes for key in PRICED_FIELDS):
            raise VacancyStateError("Pakket en extra opties kunnen na het indienen niet meer worden gewijzigd")
        if not changes:
            return vacancy
        return await self.repository.update(vacancy.id, changes)

    async def delete_vacancy(self, vacancy_id: str, employer_id: str) -> None:
        vacancy = await self.get_for_employer(vacancy_id, employer_id)
        if vacancy.status != CONCEPT:
            raise VacancyStateError("Alleen concept vacatures kunnen worden verwijderd")
        await self.repository.delete(vacancy.id)
        logger.info("Vacancy %s deleted", vacancy.id)

    async def submit(self, vacancy_id: str, employer_id: str, user_id: str | None) -> SubmitResult:
        """Charge the package (plus upsells) and hand the vacancy over for approval.

        Every check runs before the wallet is touched, so a rejected
        submission leaves balance and ledger unchanged.
        """
        vacancy = await self.get_for_employer(vacancy_id, employer_id)
        if vacancy.status != CONCEPT:
            raise VacancyStateError("Alleen concept vacatures kunnen worden ingediend")

        missing = missing_required_fields(vacancy)
        if missing:
            raise VacancyValidationError("Vul alle verplichte velden in", missing)

        if not vacancy.package_id:
            raise VacancyValidationError("Selecteer eerst een vacaturepakket", ["package_id"])
        quote = await self.products.quote_vacancy(vacancy.package_id, vacancy.selected_upsells)
        cost = quote.total_credits

        check = await self.wallets.check_credits(employer_id, cost)
        if not check.sufficient:
            raise InsufficientCreditsError(required=cost, available=check.available)

        spent = await self.wallets.spend(
            employer_id=employer_id,
            amount=cost,
            context="vacancy",
            user_id=user_id,
            vacancy_id=vacancy.id,
            product_id=quote.package.id,
        )
        now = utcnow()
        vacancy = await self.repository.update(
            vacancy.id,
            {"status": AWAITING_APPROVAL, "submitted_at": now, "status_changed_at": now},
        )
        logger.info("Vacancy %s submitted for %s credits", vacancy.id, cost)
        return SubmitResult(
            vacancy=vacancy,
            credits_spent=cost,
            new_balance=spent.wallet.balance,
            transaction_id=spent.transaction.id,
            package_name=quote.package.display_name,
        )

    async def republish(self, vacancy_id: str, employer_id: str, today: date | None = None) -> Vacancy:
        vacancy = await self.get_for_employer(vacancy_id, employer_id)
        if vacancy.status != UNPUBLISHED:
            raise VacancyStateError("Alleen gedepubliceerde vacatures kunnen opnieuw worden gepubliceerd")

        reference = today or current_date(self.timezone)
        if vacancy.closing_date is not None and vacancy.closing_date <= reference:
            raise VacancyStateError(
                "De sluitingsdatum van deze vacature is verlopen. "
                "Gebruik de boost-optie om de looptijd te verlengen."
            )

        now = utcnow()
        vacancy = await self.repository.update(
            vacancy.id,
            {"status": PUBLISHED, "last_published_at": now, "status_changed_at": now, "needs_sync": True},
        )
        logger.info("Vacancy %s republished", vacancy.id)
        return vacancy

    async def depublish(self, vacancy_id: str, employer_id: str) -> Vacancy:
        vacancy = await self.get_for_employer(vacancy_id, employer_id)
        if vacancy.status != PUBLISHED:
            raise VacancyStateError("Alleen gepubliceerde vacatures kunnen offline worden gehaald")

        now = utcnow()
        vacancy = await self.repository.update(
            vacancy.id,
            {"status": UNPUBLISHED, "depublished_at": now, "status_changed_at": now, "needs_sync": True},
        )
        logger.info("Vacancy %s depublished", vacancy.id)
        return vacancy

    async def boost(
        self,
        vacancy_id: str,
        employer_id: str,
        user_id: str | None,
        upsell_ids: Sequence[str],
    ) -> BoostResult:
        vacancy = await self.get_for_employer(vacancy_id, employer_id)
        if vacancy.status not in BOOSTABLE_STATUSES:
            raise VacancyStateError("Alleen gepubliceerde of verlopen vacatures kunnen worden geboost")

        quote = await self.products.quote_boost(list(upsell_ids))
        cost = quote.total_credits
        check = await self.wallets.check_credits(employer_id, cost)
        if not check.sufficient:
            raise InsufficientCreditsError(required=cost, available=check.available)

        spent = await self.wallets.spend(
            employer_id=employer_id,
            amount=cost,
            context="boost",
            user_id=user_id,
            vacancy_id=vacancy.id,
        )
        boosted_ids = [upsell.id for upsell in quote.upsells]
        vacancy = await self.repository.update(
            vacancy.id,
            {"selected_upsells": [*vacancy.selected_upsells, *boosted_ids], "needs_sync": True},
        )
        logger.info("Vacancy %s boosted with %s for %s credits", vacancy.id, boosted_ids, cost)
        return BoostResult(
            vacancy=vacancy,
            credits_spent=cost,
            new_balance=spent.wallet.balance,
            upsell_ids=boosted_ids,
            upsell_names=[upsell.display_name for upsell in quote.upsells],
        )

    @staticmethod
    def _clean_changes(data: Mapping[str, Any]) -> dict[str, Any]:
        changes = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        input_type = changes.get("input_type")
        if input_type is not None and input_type not in INPUT_TYPES:
            raise VacancyValidationError(f"Ongeldig invoertype: {input_type}", ["input_type"])
        if "selected_upsells" in changes:
            changes["selected_upsells"] = list(changes["selected_upsells"] or [])
        return changes
