"""SQLAlchemy implementation of the vacancy repository."""

from __future__ import annotations

from dataclasses import fields as dataclass_fields
from typing import Any, Iterable, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import Vacancy as VacancyModel
from employer_portal.modules.vacancies.exceptions import VacancyNotFoundError
from employer_portal.modules.vacancies.models import CONCEPT, Vacancy

_DOMAIN_FIELDS = tuple(f.name for f in dataclass_fields(Vacancy))


class SqlVacancyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, vacancy_id: str) -> Vacancy | None:
        model = await self._session.get(VacancyModel, vacancy_id)
        return self._to_domain(model) if model else None

    async def list_by_employer(self, employer_id: str, statuses: Iterable[str] | None = None) -> list[Vacancy]:
        stmt = (
            select(VacancyModel)
            .where(VacancyModel.employer_id == employer_id)
            .order_by(VacancyModel.created_at.desc())
        )
        wanted = [status for status in (statuses or []) if status]
        if wanted:
            stmt = stmt.where(VacancyModel.status.in_(wanted))
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create(self, *, employer_id: str, created_by: str | None, fields: Mapping[str, Any]) -> Vacancy:
        model = VacancyModel(employer_id=employer_id, created_by=created_by, status=CONCEPT, selected_upsells=[])
        for key, value in fields.items():
            setattr(model, key, value)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update(self, vacancy_id: str, changes: Mapping[str, Any]) -> Vacancy:
        model = await self._session.get(VacancyModel, vacancy_id)
        if model is None:
            raise VacancyNotFoundError(vacancy_id)
        for key, value in changes.items():
            if key == "selected_upsells":
                value = list(value or [])
            setattr(model, key, value)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete(self, vacancy_id: str) -> None:
        await self._session.execute(delete(VacancyModel).where(VacancyModel.id == vacancy_id))

    async def delete_for_employer(self, employer_id: str) -> None:
        await self._session.execute(delete(VacancyModel).where(VacancyModel.employer_id == employer_id))

    @staticmethod
    def _to_domain(model: VacancyModel) -> Vacancy:
        values = {name: getattr(model, name) for name in _DOMAIN_FIELDS}
        values["selected_upsells"] = list(model.selected_upsells or [])
        values["show_apply_form"] = bool(model.show_apply_form)
        values["needs_sync"] = bool(model.needs_sync)
        return Vacancy(**values)
