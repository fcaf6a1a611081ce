"""Domain services for onboarding and account management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.infrastructure.database.repositories.account_repository import (
    SqlEmployerRepository,
    SqlRoleRepository,
    SqlUserRepository,
)
from employer_portal.infrastructure.database.repositories.lookup_repository import SqlLookupRepository
from employer_portal.infrastructure.database.repositories.media_repository import SqlMediaAssetRepository
from employer_portal.infrastructure.database.repositories.vacancy_repository import SqlVacancyRepository
from employer_portal.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from employer_portal.modules.lookups.repository import LookupRepository
from employer_portal.modules.media.repository import MediaAssetRepository
from employer_portal.modules.vacancies.repository import VacancyRepository
from employer_portal.modules.wallets.repository import WalletRepository

from .exceptions import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    AccountPermissionError,
    EmployerNotFoundError,
    InvalidAccountSectionError,
)
from .models import (
    EMPLOYER_ACTIVE,
    EMPLOYER_EDITABLE_FIELDS,
    EMPLOYER_ROLE,
    EMPLOYER_STATUSES,
    SECTION_FIELDS,
    USER_ACTIVE,
    USER_EDITABLE_FIELDS,
    USER_PENDING_ONBOARDING,
    AccountOverview,
    Employer,
    GalleryImage,
    OnboardingInput,
    OnboardingResult,
    User,
)
from .repository import EmployerRepository, RoleRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OnboardingUpdate:
    user: User
    employer: Employer | None
    updated_fields: list[str]
    completed: bool = False


class AccountService:
    """Encapsulates onboarding and profile use cases."""

    def __init__(
        self,
        users: UserRepository,
        employers: EmployerRepository,
        roles: RoleRepository,
        wallets: WalletRepository,
        media: MediaAssetRepository,
        lookups: LookupRepository,
        vacancies: VacancyRepository,
    ) -> None:
        self._users = users
        self._employers = employers
        self._roles = roles
        self._wallets = wallets
        self._media = media
        self._lookups = lookups
        self._vacancies = vacancies

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        return cls(
            SqlUserRepository(session),
            SqlEmployerRepository(session),
            SqlRoleRepository(session),
            SqlWalletRepository(session),
            SqlMediaAssetRepository(session),
            SqlLookupRepository(session),
            SqlVacancyRepository(session),
        )

    async def get_user(self, user_id: str) -> User | None:
        return await self._users.get_by_id(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        return await self._users.get_by_email(email)

    async def get_employer(self, employer_id: str) -> Employer:
        employer = await self._employers.get_by_id(employer_id)
        if employer is None:
            raise EmployerNotFoundError("Werkgever niet gevonden")
        return employer

    async def resolve_employer_role(self) -> str:
        return await self._roles.get_or_create(EMPLOYER_ROLE)

    async def mark_login(self, user_id: str) -> None:
        await self._users.set_last_login(user_id, datetime.now(timezone.utc))

    async def start_onboarding(self, payload: OnboardingInput, *, employer_role_id: str | None) -> OnboardingResult:
        email = (payload.email or "").strip().lower()
        if not email:
            raise InvalidAccountSectionError("E-mailadres is verplicht")

        existing = await self._users.get_by_email(email)
        if existing is not None:
            raise AccountAlreadyExistsError(
                "Er bestaat al een account met dit e-mailadres. Log in om verder te gaan."
            )

        employer = await self._employers.create_employer(role_id=employer_role_id)
        user = await self._users.create_user(
            email=email,
            employer_id=employer.id,
            status=USER_PENDING_ONBOARDING,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
        )
        wallet = await self._wallets.create_wallet(employer.id)
        logger.info("Onboarding started for %s (employer %s)", email, employer.id)
        return OnboardingResult(user=user, employer=employer, wallet_id=wallet.id)

    async def update_onboarding(self, user: User, changes: Mapping[str, Any]) -> OnboardingUpdate:
        updated_fields = [key for key, value in changes.items() if value is not None]

        if any(changes.get(key) is not None for key in USER_EDITABLE_FIELDS):
            user_changes = {key: changes[key] for key in USER_EDITABLE_FIELDS if changes.get(key) is not None}
            status = changes.get("status")
            if status is not None:
                if status not in (USER_PENDING_ONBOARDING, USER_ACTIVE):
                    raise InvalidAccountSectionError(f"Ongeldige status: {status}")
                user_changes["status"] = status
            updated = await self._users.update_user(user.id, user_changes)
            return OnboardingUpdate(user=updated, employer=None, updated_fields=updated_fields)

        if not user.employer_id:
            raise EmployerNotFoundError("Geen werkgever gekoppeld")

        employer_changes = {
            key: changes[key] for key in EMPLOYER_EDITABLE_FIELDS if changes.get(key) is not None
        }
        status = employer_changes.get("status")
        if status is not None and status not in EMPLOYER_STATUSES:
            raise InvalidAccountSectionError(f"Ongeldige status: {status}")

        employer = await self._employers.update_employer(user.employer_id, employer_changes)
        completed = status == EMPLOYER_ACTIVE
        if completed and user.status != USER_ACTIVE:
            user = await self._users.update_user(user.id, {"status": USER_ACTIVE})
        if completed:
            logger.info("Onboarding completed for employer %s", employer.id)
        return OnboardingUpdate(user=user, employer=employer, updated_fields=updated_fields, completed=completed)

    async def find_by_kvk(self, kvk: str) -> Employer | None:
        if not kvk or not kvk.strip():
            raise InvalidAccountSectionError("KVK-nummer is verplicht")
        return await self._employers.get_by_kvk(kvk)

    async def get_overview(self, user: User) -> AccountOverview:
        if not user.employer_id:
            return AccountOverview(user=user, employer=None)

        employer = await self._employers.get_by_id(user.employer_id)
        if employer is None:
            return AccountOverview(user=user, employer=None)

        overview = AccountOverview(user=user, employer=employer)
        wallet = await self._wallets.get_by_employer(employer.id)
        if wallet is not None:
            overview.balance = wallet.balance
            overview.total_purchased = wallet.total_purchased
            overview.total_spent = wallet.total_spent

        if employer.sector_id:
            sector = await self._lookups.get_by_id(employer.sector_id)
            overview.sector_name = sector.name if sector else None

        referenced = [employer.logo_id, employer.header_image_id, *employer.gallery]
        assets = {asset.id: asset for asset in await self._media.get_many(referenced)}
        if employer.logo_id in assets:
            overview.logo_url = assets[employer.logo_id].url
        if employer.header_image_id in assets:
            overview.header_image_url = assets[employer.header_image_id].url
        overview.gallery_images = [
            GalleryImage(id=asset_id, url=assets[asset_id].url)
            for asset_id in employer.gallery
            if asset_id in assets
        ]
        return overview

    async def update_section(self, user: User, section: str | None, data: Mapping[str, Any]) -> User | Employer:
        if not section:
            raise InvalidAccountSectionError("Sectie is verplicht")

        if section == "personal":
            changes = {key: data[key] for key in ("first_name", "last_name") if data.get(key) is not None}
            return await self._users.update_user(user.id, changes)

        if section not in SECTION_FIELDS:
            raise InvalidAccountSectionError(f"Ongeldige sectie: {section}")
        if not user.employer_id:
            raise EmployerNotFoundError("Geen werkgever gekoppeld")

        changes = {key: data[key] for key in SECTION_FIELDS[section] if key in data}
        if section == "website":
            changes["needs_sync"] = True
        if section == "onboarding":
            changes["onboarding_dismissed"] = bool(data.get("onboarding_dismissed"))
        return await self._employers.update_employer(user.employer_id, changes)

    async def switch_employer(self, user: User, employer_id: str) -> Employer:
        """Make one of an intermediary's managed employers the active one."""
        if not user.is_intermediary():
            raise AccountPermissionError("Alleen intermediairs kunnen van werkgever wisselen")
        if employer_id not in user.managed_employer_ids:
            raise AccountPermissionError("Deze werkgever staat niet in je lijst met beheerde werkgevers")

        employer = await self.get_employer(employer_id)
        await self._users.update_user(user.id, {"active_employer_id": employer.id})
        logger.info("Intermediary %s switched to employer %s", user.id, employer.id)
        return employer

    async def delete_account(self, user: User) -> bool:
        """Remove the user; returns True when the employer went with it."""
        current = await self._users.get_by_id(user.id)
        if current is None:
            raise AccountNotFoundError(user.id)

        await self._users.delete_user(user.id)
        employer_id = current.employer_id
        if not employer_id or await self._users.count_by_employer(employer_id) > 0:
            return False

        await self._wallets.delete_for_employer(employer_id)
        await self._vacancies.delete_for_employer(employer_id)
        await self._media.delete_for_employer(employer_id)
        await self._employers.delete_employer(employer_id)
        logger.info("Employer %s removed together with its last user", employer_id)
        return True
