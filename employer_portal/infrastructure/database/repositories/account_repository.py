"""SQLAlchemy implementations of the user, employer and role repositories."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.timeutils import ensure_aware
from employer_portal.db.models import Employer as EmployerModel, Role as RoleModel, User as UserModel
from employer_portal.modules.accounts.exceptions import AccountNotFoundError, EmployerNotFoundError
from employer_portal.modules.accounts.models import EMPLOYER_DRAFT, USER_TYPE_EMPLOYER, Employer, User
from employer_portal.modules.accounts.repository import (
    EmployerRepository,
    RoleRepository,
    UserRepository,
)


class SqlUserRepository(UserRepository):
    """User repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return self._to_domain(model)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def create_user(
        self,
        *,
        email: str,
        employer_id: str | None,
        status: str,
        first_name: str | None,
        last_name: str | None,
        role: str | None,
        **extra: Any,
    ) -> User:
        model = UserModel(
            email=email.strip().lower(),
            employer_id=employer_id,
            status=status,
            first_name=first_name,
            last_name=last_name,
            role=role,
            **{"managed_employer_ids": [], **extra},
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            raise AccountNotFoundError(user_id)
        for key, value in changes.items():
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def set_last_login(self, user_id: str, timestamp: datetime) -> None:
        stmt = update(UserModel).where(UserModel.id == user_id).values(last_login_at=timestamp)
        await self._session.execute(stmt)

    async def get_by_invite_hash(self, token_hash: str) -> User | None:
        stmt = select(UserModel).where(UserModel.invite_token_hash == token_hash)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_by_employer(self, employer_id: str, statuses: Iterable[str] | None = None) -> list[User]:
        stmt = select(UserModel).where(UserModel.employer_id == employer_id)
        if statuses is not None:
            stmt = stmt.where(UserModel.status.in_(list(statuses)))
        stmt = stmt.order_by(UserModel.created_at, UserModel.email)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_by_employer(self, employer_id: str) -> int:
        stmt = select(func.count()).select_from(UserModel).where(UserModel.employer_id == employer_id)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def delete_user(self, user_id: str) -> None:
        await self._session.execute(delete(UserModel).where(UserModel.id == user_id))

    @staticmethod
    def _to_domain(model: UserModel | None) -> User | None:
        if model is None:
            return None
        return User(
            id=str(model.id),
            email=model.email,
            status=model.status,
            employer_id=model.employer_id,
            first_name=model.first_name,
            last_name=model.last_name,
            role=model.role,
            user_type=model.user_type or USER_TYPE_EMPLOYER,
            active_employer_id=model.active_employer_id,
            managed_employer_ids=list(model.managed_employer_ids or []),
            invited_by=model.invited_by,
            invite_expires_at=ensure_aware(model.invite_expires_at),
            created_at=model.created_at,
            last_login_at=model.last_login_at,
        )


class SqlEmployerRepository(EmployerRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, employer_id: str) -> Employer | None:
        model = await self._session.get(EmployerModel, employer_id)
        return self._to_domain(model)

    async def get_by_kvk(self, kvk: str) -> Employer | None:
        stmt = select(EmployerModel).where(EmployerModel.kvk == kvk.strip()).limit(1)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def create_employer(self, *, role_id: str | None) -> Employer:
        model = EmployerModel(role_id=role_id, status=EMPLOYER_DRAFT, gallery=[])
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_employer(self, employer_id: str, changes: Mapping[str, Any]) -> Employer:
        model = await self._session.get(EmployerModel, employer_id)
        if model is None:
            raise EmployerNotFoundError(employer_id)
        for key, value in changes.items():
            if key == "gallery":
                value = list(value or [])
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete_employer(self, employer_id: str) -> None:
        await self._session.execute(delete(EmployerModel).where(EmployerModel.id == employer_id))

    @staticmethod
    def _to_domain(model: EmployerModel | None) -> Employer | None:
        if model is None:
            return None
        return Employer(
            id=str(model.id),
            status=model.status,
            company_name=model.company_name,
            display_name=model.display_name,
            kvk=model.kvk,
            phone=model.phone,
            website_url=model.website_url,
            reference_nr=model.reference_nr,
            invoice_contact_name=model.invoice_contact_name,
            invoice_email=model.invoice_email,
            invoice_street=model.invoice_street,
            invoice_house_number=model.invoice_house_number,
            invoice_house_number_addition=model.invoice_house_number_addition,
            invoice_postal_code=model.invoice_postal_code,
            invoice_city=model.invoice_city,
            sector_id=model.sector_id,
            location=model.location,
            short_description=model.short_description,
            video_url=model.video_url,
            logo_id=model.logo_id,
            header_image_id=model.header_image_id,
            gallery=list(model.gallery or []),
            role_id=model.role_id,
            onboarding_dismissed=bool(model.onboarding_dismissed),
            needs_sync=bool(model.needs_sync),
            created_at=model.created_at,
        )


class SqlRoleRepository(RoleRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_or_create(self, name: str) -> str:
        stmt = select(RoleModel.id).where(RoleModel.name == name)
        result = await self._session.execute(stmt)
        role_id = result.scalar_one_or_none()
        if role_id is not None:
            return role_id
        model = RoleModel(name=name)
        self._session.add(model)
        await self._session.flush()
        return model.id
