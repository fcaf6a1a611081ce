"""Audit event types and records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

EVENT_TYPES = frozenset(
    {
        "user_created",
        "user_updated",
        "user_login",
        "user_logout",
        "user_email_verified",
        "employer_created",
        "employer_updated",
        "employer_deleted",
        "wallet_created",
        "credits_purchased",
        "vacancy_created",
        "vacancy_updated",
        "vacancy_submitted",
        "vacancy_deleted",
        "vacancy_publish",
        "vacancy_depublish",
        "vacancy_boost",
        "media_uploaded",
        "media_deleted",
        "onboarding_started",
        "onboarding_completed",
        "user_invited",
        "user_joined_employer",
        "user_removed",
        "credits_expired",
    }
)

EVENT_SOURCES = frozenset({"web", "api", "admin", "system", "automation"})


@dataclass(slots=True)
class EventRecord:
    event_type: str
    actor_user_id: Optional[str] = None
    target_user_id: Optional[str] = None
    employer_id: Optional[str] = None
    vacancy_id: Optional[str] = None
    payload: Optional[dict[str, Any]] = None
    source: str = "web"
    ip_address: Optional[str] = None
    status: str = "new"
    id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
