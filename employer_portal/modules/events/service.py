"""Fire-and-forget audit logging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employer_portal.infrastructure.database.repositories.event_repository import SqlEventRepository

from .models import EVENT_SOURCES, EVENT_TYPES, EventRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EventLogger:
    """Writes events in their own session so a failure never touches the caller's transaction."""

    session_factory: async_sessionmaker[AsyncSession]

    async def log(
        self,
        event_type: str,
        *,
        actor_user_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        employer_id: Optional[str] = None,
        vacancy_id: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
        source: str = "web",
        ip_address: Optional[str] = None,
    ) -> EventRecord | None:
        if event_type not in EVENT_TYPES:
            logger.warning("Unknown event type %s", event_type)
        if source not in EVENT_SOURCES:
            source = "system"

        record = EventRecord(
            event_type=event_type,
            actor_user_id=actor_user_id,
            target_user_id=target_user_id,
            employer_id=employer_id,
            vacancy_id=vacancy_id,
            payload=payload,
            source=source,
            ip_address=ip_address,
        )
        try:
            async with self.session_factory() as session:
                stored = await SqlEventRepository(session).add(record)
                await session.commit()
        except Exception as exc:
            logger.error("Failed to log event %s: %s", event_type, exc)
            return None
        return stored
