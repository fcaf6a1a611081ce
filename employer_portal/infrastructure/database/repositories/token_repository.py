"""SQLAlchemy implementation of the sign-in token repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.timeutils import ensure_aware
from employer_portal.db.models import VerificationToken as VerificationTokenModel
from employer_portal.modules.auth.models import TOKEN_PENDING, TOKEN_REVOKED, TOKEN_USED, VerificationToken


class SqlVerificationTokenRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        identifier: str,
        token_hash: str,
        expires: datetime,
        request_type: str,
        user_id: str | None,
    ) -> VerificationToken:
        model = VerificationTokenModel(
            identifier=identifier,
            token_hash=token_hash,
            expires=expires,
            status=TOKEN_PENDING,
            request_type=request_type,
            user_id=user_id,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def get_by_hash(self, token_hash: str) -> VerificationToken | None:
        result = await self._session.execute(
            select(VerificationTokenModel).where(VerificationTokenModel.token_hash == token_hash)
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def revoke_pending(self, identifier: str) -> int:
        result = await self._session.execute(
            update(VerificationTokenModel)
            .where(
                VerificationTokenModel.identifier == identifier,
                VerificationTokenModel.status == TOKEN_PENDING,
            )
            .values(status=TOKEN_REVOKED)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def mark_used(self, token_id: str, used_at: datetime) -> bool:
        """Consume a pending token; False when another request got there first."""
        result = await self._session.execute(
            update(VerificationTokenModel)
            .where(
                VerificationTokenModel.id == token_id,
                VerificationTokenModel.status == TOKEN_PENDING,
            )
            .values(status=TOKEN_USED, used_at=used_at)
            .execution_options(synchronize_session="fetch")
        )
        return bool(result.rowcount)

    @staticmethod
    def _to_domain(model: VerificationTokenModel) -> VerificationToken:
        return VerificationToken(
            id=model.id,
            identifier=model.identifier,
            token_hash=model.token_hash,
            expires=ensure_aware(model.expires),
            status=model.status,
            request_type=model.request_type,
            user_id=model.user_id,
            created_at=ensure_aware(model.created_at),
            used_at=ensure_aware(model.used_at),
        )
