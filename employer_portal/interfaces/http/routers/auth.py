"""Magic-link sign-in and session endpoints."""
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.core.security import create_session_token
from employer_portal.infrastructure.ratelimit import EMAIL, LOGIN
from employer_portal.interfaces.http.deps import (
    client_ip,
    enforce_rate_limit,
    get_app_container,
    get_current_user,
    get_db_session,
)
from employer_portal.modules.accounts.models import User
from employer_portal.modules.auth import EmailDeliveryError, InvalidTokenError, SessionClaims
from employer_portal.modules.auth.service import MagicLinkService, claims_for
from employer_portal.schemas import (
    MagicLinkRequest,
    MagicLinkResponse,
    SessionResponse,
    SessionUser,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter()


def build_magic_link_service(db: AsyncSession, container: ApplicationContainer) -> MagicLinkService:
    settings = container.settings
    return MagicLinkService.with_session(
        db,
        container.mailer,
        settings=settings.magic_link,
        secret_key=settings.secret_key,
        public_url=settings.server.public_url,
    )


def _session_response(claims: SessionClaims, container: ApplicationContainer) -> dict:
    return {
        "access_token": create_session_token(claims, container.settings),
        "user": SessionUser(id=claims.sub, email=claims.email, employer_id=claims.employer_id, status=claims.status),
    }


@router.post(
    "/magic-link",
    response_model=MagicLinkResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Request a sign-in link by email",
)
async def request_magic_link(
    payload: MagicLinkRequest,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> MagicLinkResponse:
    email = payload.email.strip().lower()
    enforce_rate_limit(container, EMAIL, email)

    service = build_magic_link_service(db, container)
    try:
        await service.request_link(email)
    except EmailDeliveryError as exc:
        raise api_error(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc
    await db.commit()
    return MagicLinkResponse()


@router.post("/verify", response_model=VerifyResponse, summary="Redeem a sign-in link")
async def verify_magic_link(
    payload: VerifyRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> VerifyResponse:
    ip_address = client_ip(request)
    enforce_rate_limit(container, LOGIN, ip_address)

    service = build_magic_link_service(db, container)
    try:
        login = await service.verify(payload.token)
    except InvalidTokenError as exc:
        raise api_error(status.HTTP_401_UNAUTHORIZED, str(exc)) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_email_verified" if login.was_pending else "user_login",
        actor_user_id=login.claims.sub,
        employer_id=login.claims.employer_id,
        ip_address=ip_address,
    )
    return VerifyResponse(request_type=login.request_type, **_session_response(login.claims, container))


@router.get("/session", response_model=SessionResponse, summary="Current session with fresh claims")
async def current_session(
    user: User = Depends(get_current_user),
    container: ApplicationContainer = Depends(get_app_container),
) -> SessionResponse:
    return SessionResponse(**_session_response(claims_for(user), container))


@router.post("/logout", summary="Sign out")
async def logout(
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    container: ApplicationContainer = Depends(get_app_container),
) -> dict:
    background_tasks.add_task(
        container.event_logger.log,
        "user_logout",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        ip_address=client_ip(request),
    )
    return {"success": True}
