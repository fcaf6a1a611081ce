"""Outbound webhooks that tell the public job board to re-sync an entity."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from employer_portal.core.config import SyncSettings

logger = logging.getLogger(__name__)


class SyncNotifier(Protocol):
    async def vacancy_changed(self, vacancy_id: str) -> bool:
        ...

    async def employer_changed(self, employer_id: str) -> bool:
        ...


class WebhookSyncNotifier:
    """POSTs the entity id to the configured webhook; failures are logged, never raised."""

    def __init__(
        self,
        vacancy_webhook_url: Optional[str],
        employer_webhook_url: Optional[str],
        timeout_seconds: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.vacancy_webhook_url = vacancy_webhook_url
        self.employer_webhook_url = employer_webhook_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> "WebhookSyncNotifier":
        return cls(settings.vacancy_webhook_url, settings.employer_webhook_url, settings.timeout_seconds)

    async def vacancy_changed(self, vacancy_id: str) -> bool:
        return await self._post(self.vacancy_webhook_url, {"vacancy_id": vacancy_id})

    async def employer_changed(self, employer_id: str) -> bool:
        return await self._post(self.employer_webhook_url, {"employer_id": employer_id})

    async def _post(self, url: Optional[str], payload: dict[str, str]) -> bool:
        if not url:
            logger.debug("No sync webhook configured, skipping %s", payload)
            return False

        timeout = httpx.Timeout(self.timeout_seconds, connect=5.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Sync webhook %s failed for %s: %s", url, payload, exc)
            return False

        logger.info("Sync webhook triggered for %s", payload)
        return True


__all__ = ["SyncNotifier", "WebhookSyncNotifier"]
