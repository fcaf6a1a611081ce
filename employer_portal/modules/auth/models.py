"""Domain models for magic-link authentication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

TOKEN_PENDING = "pending"
TOKEN_USED = "used"
TOKEN_REVOKED = "revoked"

REQUEST_LOGIN = "login"
REQUEST_VERIFICATION = "verification"


@dataclass(slots=True)
class VerificationToken:
    id: str
    identifier: str
    token_hash: str
    expires: datetime
    status: str
    request_type: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    used_at: Optional[datetime] = None


@dataclass(slots=True)
class MagicLinkRequest:
    email: str
    request_type: str
    url: str
    expires: datetime


@dataclass(slots=True)
class SessionClaims:
    sub: str
    email: str
    employer_id: Optional[str]
    status: str


@dataclass(slots=True)
class VerifiedLogin:
    claims: SessionClaims
    request_type: str
    was_pending: bool
