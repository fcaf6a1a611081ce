"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from employer_portal.core.config import Settings, get_settings
from employer_portal.infrastructure.database.session import build_session_factory, get_engine
from employer_portal.infrastructure.mail import Mailer, build_mailer
from employer_portal.infrastructure.media.storage import build_media_storage
from employer_portal.infrastructure.ratelimit import InMemoryRateLimiter
from employer_portal.infrastructure.sync import SyncNotifier, WebhookSyncNotifier
from employer_portal.modules.events.service import EventLogger
from employer_portal.modules.media.repository import MediaStorage


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    media_storage: MediaStorage
    mailer: Mailer
    sync_notifier: SyncNotifier
    rate_limiter: InMemoryRateLimiter
    event_logger: EventLogger = field(init=False)
    employer_role_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.event_logger = EventLogger(self.session_factory)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        engine: AsyncEngine | None = None,
    ) -> "ApplicationContainer":
        engine = engine or get_engine()
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            media_storage=build_media_storage(settings.media),
            mailer=build_mailer(settings.email),
            sync_notifier=WebhookSyncNotifier.from_settings(settings.sync),
            rate_limiter=InMemoryRateLimiter.from_settings(settings.rate_limit),
        )


@lru_cache()
def get_container() -> ApplicationContainer:
    return ApplicationContainer.from_settings(get_settings())


__all__ = ["ApplicationContainer", "get_container"]
