"""SQLAlchemy implementation of the event log repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import Event as EventModel
from employer_portal.modules.events.models import EventRecord


class SqlEventRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, record: EventRecord) -> EventRecord:
        model = EventModel(
            event_type=record.event_type,
            actor_user_id=record.actor_user_id,
            target_user_id=record.target_user_id,
            employer_id=record.employer_id,
            vacancy_id=record.vacancy_id,
            payload=record.payload,
            source=record.source,
            ip_address=record.ip_address,
            status=record.status,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def list_events(self, *, employer_id: str | None = None, event_type: str | None = None) -> list[EventRecord]:
        stmt = select(EventModel).order_by(EventModel.created_at)
        if employer_id is not None:
            stmt = stmt.where(EventModel.employer_id == employer_id)
        if event_type is not None:
            stmt = stmt.where(EventModel.event_type == event_type)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: EventModel) -> EventRecord:
        return EventRecord(
            id=model.id,
            event_type=model.event_type,
            actor_user_id=model.actor_user_id,
            target_user_id=model.target_user_id,
            employer_id=model.employer_id,
            vacancy_id=model.vacancy_id,
            payload=model.payload,
            source=model.source,
            ip_address=model.ip_address,
            status=model.status,
            created_at=model.created_at,
        )
