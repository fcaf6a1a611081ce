"""Utilities for magic-link token generation and hashing."""

from __future__ import annotations

import hashlib
import hmac
import secrets


def generate_token(nbytes: int = 32) -> str:
    """Return a URL-safe random token for a sign-in link."""
    return secrets.token_urlsafe(nbytes)


def hash_token(token: str, secret: str) -> str:
    """Keyed hash under which a token is stored; the plain token never hits the database."""
    return hmac.new(secret.encode("utf-8"), token.encode("utf-8"), hashlib.sha256).hexdigest()


__all__ = ["generate_token", "hash_token"]
