"""Database session and container dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer


def get_app_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


async def get_db_session(
    container: ApplicationContainer = Depends(get_app_container),
) -> AsyncGenerator[AsyncSession, None]:
    """One unit of work per request; handlers commit explicitly, anything else is rolled back."""
    async with container.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


__all__ = ["get_app_container", "get_db_session"]
