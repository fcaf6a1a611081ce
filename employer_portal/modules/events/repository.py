"""Repository protocol for the audit event log."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import EventRecord


class EventRepository(Protocol):
    async def add(self, record: EventRecord) -> EventRecord:
        ...

    async def list_events(self, *, employer_id: str | None = None, event_type: str | None = None) -> Sequence[EventRecord]:
        ...
