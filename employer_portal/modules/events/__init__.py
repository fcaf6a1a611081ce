"""Audit event log exports."""

from .models import EVENT_SOURCES, EVENT_TYPES, EventRecord

__all__ = ["EVENT_SOURCES", "EVENT_TYPES", "EventRecord"]
