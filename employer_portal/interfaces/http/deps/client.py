"""Request metadata and rate limiting helpers."""

from __future__ import annotations

from fastapi import Request, status

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error


def client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(container: ApplicationContainer, bucket: str, identifier: str) -> None:
    result = container.rate_limiter.hit(bucket, identifier)
    if not result.success:
        raise api_error(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Te veel verzoeken. Probeer het later opnieuw.",
            retry_after=result.retry_after,
        )


__all__ = ["client_ip", "enforce_rate_limit"]
