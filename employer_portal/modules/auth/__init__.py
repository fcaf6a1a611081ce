"""Magic-link authentication package."""

from .exceptions import AuthError, EmailDeliveryError, InvalidTokenError, TokenExpiredError
from .models import MagicLinkRequest, SessionClaims, VerificationToken, VerifiedLogin

__all__ = [
    "AuthError",
    "EmailDeliveryError",
    "InvalidTokenError",
    "MagicLinkRequest",
    "SessionClaims",
    "TokenExpiredError",
    "VerificationToken",
    "VerifiedLogin",
]
