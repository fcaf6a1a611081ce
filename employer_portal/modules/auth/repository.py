"""Repository protocol for sign-in tokens."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import VerificationToken


class VerificationTokenRepository(Protocol):
    async def create(
        self,
        *,
        identifier: str,
        token_hash: str,
        expires: datetime,
        request_type: str,
        user_id: str | None,
    ) -> VerificationToken:
        ...

    async def get_by_hash(self, token_hash: str) -> VerificationToken | None:
        ...

    async def revoke_pending(self, identifier: str) -> int:
        ...

    async def mark_used(self, token_id: str, used_at: datetime) -> bool:
        ...
