"""Session token (JWT) helpers."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt

from employer_portal.core.config import Settings, get_settings
from employer_portal.core.timeutils import utcnow
from employer_portal.modules.auth.models import SessionClaims


class InvalidSessionError(Exception):
    """Raised when a bearer token cannot be decoded or lacks required claims."""


def create_session_token(
    claims: SessionClaims,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    settings = settings or get_settings()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.session_max_age_minutes))
    payload = {
        "sub": claims.sub,
        "email": claims.email,
        "employer_id": claims.employer_id,
        "status": claims.status,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str, settings: Optional[Settings] = None) -> SessionClaims:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise InvalidSessionError("Niet ingelogd") from exc

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise InvalidSessionError("Niet ingelogd")
    return SessionClaims(
        sub=user_id,
        email=email,
        employer_id=payload.get("employer_id"),
        status=payload.get("status") or "",
    )


__all__ = ["InvalidSessionError", "create_session_token", "decode_session_token"]
