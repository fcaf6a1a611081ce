"""Repository protocol for vacancies."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, Sequence

from .models import Vacancy


class VacancyRepository(Protocol):
    async def get_by_id(self, vacancy_id: str) -> Vacancy | None:
        ...

    async def list_by_employer(self, employer_id: str, statuses: Iterable[str] | None = None) -> Sequence[Vacancy]:
        ...

    async def create(self, *, employer_id: str, created_by: str | None, fields: Mapping[str, Any]) -> Vacancy:
        ...

    async def update(self, vacancy_id: str, changes: Mapping[str, Any]) -> Vacancy:
        ...

    async def delete(self, vacancy_id: str) -> None:
        ...

    async def delete_for_employer(self, employer_id: str) -> None:
        ...
