"""SQLAlchemy implementation of the lookup repository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import Lookup as LookupModel
from employer_portal.modules.lookups.models import Lookup


class SqlLookupRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, lookup_id: str) -> Lookup | None:
        model = await self._session.get(LookupModel, lookup_id)
        return self._to_domain(model) if model else None

    async def list_by_kinds(self, kinds: Iterable[str]) -> list[Lookup]:
        stmt = (
            select(LookupModel)
            .where(LookupModel.kind.in_(list(kinds)))
            .order_by(LookupModel.kind, LookupModel.sort_order, LookupModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def get_or_create(self, kind: str, name: str, sort_order: int = 0) -> Lookup:
        stmt = select(LookupModel).where(LookupModel.kind == kind, LookupModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        if model is None:
            model = LookupModel(kind=kind, name=name, sort_order=sort_order)
            self._session.add(model)
            await self._session.flush()
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: LookupModel) -> Lookup:
        return Lookup(id=model.id, kind=model.kind, name=model.name, sort_order=model.sort_order or 0)
