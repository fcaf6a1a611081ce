"""Lookup service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.infrastructure.database.repositories.lookup_repository import SqlLookupRepository

from .models import LOOKUP_KINDS, Lookup
from .repository import LookupRepository


@dataclass(slots=True)
class LookupService:
    repository: LookupRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "LookupService":
        return cls(SqlLookupRepository(session))

    async def list_grouped(self, kinds: Iterable[str] | None = None) -> dict[str, list[Lookup]]:
        wanted = [kind for kind in (kinds or LOOKUP_KINDS) if kind in LOOKUP_KINDS]
        grouped: dict[str, list[Lookup]] = {kind: [] for kind in wanted}
        if not wanted:
            return grouped
        for lookup in await self.repository.list_by_kinds(wanted):
            grouped[lookup.kind].append(lookup)
        return grouped

    async def get_name(self, lookup_id: str | None) -> str | None:
        if not lookup_id:
            return None
        lookup = await self.repository.get_by_id(lookup_id)
        return lookup.name if lookup else None

    async def ensure(self, kind: str, name: str, sort_order: int = 0) -> Lookup:
        if kind not in LOOKUP_KINDS:
            raise ValueError(f"Onbekend lookup type: {kind}")
        return await self.repository.get_or_create(kind, name, sort_order)
