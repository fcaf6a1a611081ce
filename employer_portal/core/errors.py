"""JSON error bodies shared by every endpoint."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Er is een onverwachte fout opgetreden. Probeer het later opnieuw."

# Substring -> user facing message, checked in order against the lowercased error text.
KNOWN_CAUSES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("timeout", "timed out"), "De server reageerde niet op tijd. Probeer het opnieuw."),
    (("rate limit", "too many requests", "429"), "Te veel verzoeken. Wacht even en probeer het opnieuw."),
    (
        ("getaddrinfo", "name or service not known", "enotfound", "dns"),
        "Kan geen verbinding maken met een externe dienst. Controleer de verbinding en probeer het opnieuw.",
    ),
)


def api_error(status_code: int, message: str, **extra: Any) -> HTTPException:
    """HTTPException whose body becomes ``{"error": message, **extra}``."""
    return HTTPException(status_code=status_code, detail={"error": message, **extra})


def translate_error_message(exc: BaseException) -> str:
    text = f"{type(exc).__name__} {exc}".lower()
    for needles, message in KNOWN_CAUSES:
        if any(needle in text for needle in needles):
            return message
    return GENERIC_ERROR


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        body = dict(exc.detail)
    else:
        body = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body), headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in error["loc"][1:]) for error in exc.errors() if error.get("loc")]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Ongeldige invoer", "fields": fields},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": translate_error_message(exc)},
    )


def install_error_handlers(app: FastAPI) -> None:
    # Starlette raises its own class for unmatched routes and methods; FastAPI's subclasses it.
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)


__all__ = ["GENERIC_ERROR", "api_error", "install_error_handlers", "translate_error_message"]
