"""Passwordless sign-in: issuing and redeeming magic links."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Awaitable, Callable
from urllib.parse import urlencode

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.config import MagicLinkSettings
from employer_portal.core.crypto import generate_token, hash_token
from employer_portal.core.timeutils import utcnow
from employer_portal.infrastructure.database.repositories.account_repository import SqlUserRepository
from employer_portal.infrastructure.database.repositories.token_repository import SqlVerificationTokenRepository
from employer_portal.infrastructure.mail import Mailer, MailerError
from employer_portal.modules.accounts.models import USER_PENDING_ONBOARDING, User
from employer_portal.modules.accounts.repository import UserRepository

from .emails import render_magic_link_email
from .exceptions import EmailDeliveryError, InvalidTokenError, TokenExpiredError
from .models import (
    REQUEST_LOGIN,
    REQUEST_VERIFICATION,
    TOKEN_PENDING,
    MagicLinkRequest,
    SessionClaims,
    VerificationToken,
    VerifiedLogin,
)
from .repository import VerificationTokenRepository

logger = logging.getLogger(__name__)


def claims_for(user: User) -> SessionClaims:
    return SessionClaims(sub=user.id, email=user.email, employer_id=user.employer_id, status=user.status)


class MagicLinkService:
    """Issues single-use sign-in links and turns redeemed links into session claims."""

    def __init__(
        self,
        tokens: VerificationTokenRepository,
        users: UserRepository,
        mailer: Mailer,
        *,
        settings: MagicLinkSettings,
        secret_key: str,
        public_url: str,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._mailer = mailer
        self._settings = settings
        self._secret_key = secret_key
        self._public_url = public_url.rstrip("/")
        self._sleep = sleep

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        mailer: Mailer,
        *,
        settings: MagicLinkSettings,
        secret_key: str,
        public_url: str,
    ) -> "MagicLinkService":
        return cls(
            SqlVerificationTokenRepository(session),
            SqlUserRepository(session),
            mailer,
            settings=settings,
            secret_key=secret_key,
            public_url=public_url,
        )

    async def request_link(self, email: str) -> MagicLinkRequest | None:
        """Email a fresh link; returns None for addresses without an account."""
        identifier = (email or "").strip().lower()
        user = await self._users.get_by_email(identifier) if identifier else None
        if user is None:
            logger.info("Magic link requested for unknown address")
            return None

        request_type = REQUEST_LOGIN if user.is_active() else REQUEST_VERIFICATION
        revoked = await self._tokens.revoke_pending(identifier)
        if revoked:
            logger.debug("Revoked %s pending token(s) for user %s", revoked, user.id)

        token = generate_token()
        expires = utcnow() + timedelta(hours=self._settings.token_ttl_hours)
        await self._tokens.create(
            identifier=identifier,
            token_hash=hash_token(token, self._secret_key),
            expires=expires,
            request_type=request_type,
            user_id=user.id,
        )

        url = self._build_url(token, identifier)
        message = render_magic_link_email(
            to=identifier,
            request_type=request_type,
            url=url,
            ttl_hours=self._settings.token_ttl_hours,
            public_url=self._public_url,
        )
        try:
            await self._mailer.send(message)
        except MailerError as exc:
            raise EmailDeliveryError("Email kon niet worden verzonden. Probeer het later opnieuw.") from exc

        logger.info("Magic link (%s) issued for user %s", request_type, user.id)
        return MagicLinkRequest(email=identifier, request_type=request_type, url=url, expires=expires)

    async def verify(self, token: str) -> VerifiedLogin:
        if not token:
            raise InvalidTokenError("Ongeldige of verlopen link")

        record = await self._lookup(hash_token(token, self._secret_key))
        if record is None or record.status != TOKEN_PENDING:
            raise InvalidTokenError("Ongeldige of verlopen link")
        if record.expires <= utcnow():
            raise TokenExpiredError("Deze link is verlopen. Vraag een nieuwe link aan.")

        user = await self._users.get_by_email(record.identifier)
        if user is None:
            raise InvalidTokenError("Ongeldige of verlopen link")

        now = utcnow()
        if not await self._tokens.mark_used(record.id, now):
            raise InvalidTokenError("Ongeldige of verlopen link")
        await self._users.set_last_login(user.id, now)

        logger.info("User %s signed in via %s link", user.id, record.request_type)
        return VerifiedLogin(
            claims=claims_for(user),
            request_type=record.request_type,
            was_pending=user.status == USER_PENDING_ONBOARDING,
        )

    async def session_claims(self, user_id: str) -> SessionClaims | None:
        user = await self._users.get_by_id(user_id)
        return claims_for(user) if user else None

    async def _lookup(self, token_hash: str) -> VerificationToken | None:
        # A link clicked right after it was issued can race the write that stored it.
        attempts = max(1, self._settings.lookup_attempts)
        for attempt in range(1, attempts + 1):
            record = await self._tokens.get_by_hash(token_hash)
            if record is not None:
                return record
            if attempt < attempts:
                logger.debug("Token not found (attempt %s/%s), retrying", attempt, attempts)
                await self._sleep(self._settings.lookup_delay_seconds)
        return None

    def _build_url(self, token: str, email: str) -> str:
        path = self._settings.verify_path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._public_url}{path}?{urlencode({'token': token, 'email': email})}"
