"""Current-user dependency providers."""

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.core.security import InvalidSessionError, decode_session_token
from employer_portal.modules.accounts.models import User
from employer_portal.modules.accounts.service import AccountService

from .database import get_app_container, get_db_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> User:
    if credentials is None:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Niet ingelogd")
    try:
        claims = decode_session_token(credentials.credentials, container.settings)
    except InvalidSessionError as exc:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Niet ingelogd") from exc

    user = await AccountService.with_session(db).get_user(claims.sub)
    if user is None:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Niet ingelogd")
    return user


async def get_current_employer_user(user: User = Depends(get_current_user)) -> User:
    """The signed-in user scoped to the employer they act for."""
    if user.is_intermediary():
        if not user.active_employer_id:
            raise api_error(status.HTTP_400_BAD_REQUEST, "Selecteer eerst een werkgever")
        return user.acting_user()
    if not user.employer_id:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Geen werkgever gekoppeld")
    return user


__all__ = [
    "bearer_scheme",
    "get_current_employer_user",
    "get_current_user",
]
