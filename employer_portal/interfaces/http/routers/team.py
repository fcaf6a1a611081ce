"""Team members, invitations and accepting an invitation."""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.core.security import create_session_token
from employer_portal.infrastructure.ratelimit import INVITE
from employer_portal.interfaces.http.deps import (
    client_ip,
    get_app_container,
    get_current_employer_user,
    get_db_session,
)
from employer_portal.modules.accounts import EmployerNotFoundError, User
from employer_portal.modules.auth.service import claims_for
from employer_portal.modules.team import (
    InvitationExpiredError,
    InvitationNotFoundError,
    TeamConflictError,
    TeamError,
    TeamMemberNotFoundError,
    TeamPermissionError,
    TeamValidationError,
)
from employer_portal.modules.team.service import TeamService
from employer_portal.schemas import (
    InvitationAcceptRequest,
    InvitationCheckResponse,
    SessionResponse,
    SessionUser,
    TeamInviteRequest,
    TeamInviteResponse,
    TeamListResponse,
    TeamMemberResponse,
    TeamRemoveRequest,
)

router = APIRouter()

_STATUS_FOR_ERROR = (
    (TeamValidationError, status.HTTP_400_BAD_REQUEST),
    (TeamPermissionError, status.HTTP_403_FORBIDDEN),
    (TeamMemberNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvitationNotFoundError, status.HTTP_404_NOT_FOUND),
    (TeamConflictError, status.HTTP_409_CONFLICT),
    (InvitationExpiredError, status.HTTP_410_GONE),
)


def build_team_service(db: AsyncSession, container: ApplicationContainer) -> TeamService:
    settings = container.settings
    return TeamService.with_session(
        db,
        container.mailer,
        settings=settings.team,
        secret_key=settings.secret_key,
        public_url=settings.server.public_url,
    )


def team_error(exc: Exception, **extra) -> HTTPException:
    if isinstance(exc, EmployerNotFoundError):
        return api_error(status.HTTP_404_NOT_FOUND, str(exc), **extra)
    for error_type, status_code in _STATUS_FOR_ERROR:
        if isinstance(exc, error_type):
            return api_error(status_code, str(exc), **extra)
    return api_error(status.HTTP_400_BAD_REQUEST, str(exc), **extra)


@router.get("", response_model=TeamListResponse, summary="Invited and active members of the employer")
async def list_team(
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> TeamListResponse:
    members = await build_team_service(db, container).list_members(user.employer_id)
    return TeamListResponse(team=[TeamMemberResponse.model_validate(member) for member in members])


@router.delete("", summary="Withdraw an invitation or remove a team member")
async def remove_team_member(
    payload: TeamRemoveRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> dict:
    try:
        removed = await build_team_service(db, container).remove_member(user, payload.user_id)
    except TeamError as exc:
        raise team_error(exc) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_removed",
        actor_user_id=user.id,
        target_user_id=removed.user.id,
        employer_id=user.employer_id,
        payload={
            "target_email": removed.user.email,
            "was_invited": removed.was_invited,
            "self_removal": removed.user.id == user.id,
        },
        ip_address=client_ip(request),
    )
    return {"success": True}


@router.post(
    "/invite",
    response_model=TeamInviteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a colleague by email",
)
async def invite_team_member(
    payload: TeamInviteRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> TeamInviteResponse:
    ip_address = client_ip(request)
    limit = container.rate_limiter.hit(INVITE, ip_address)
    if not limit.success:
        raise api_error(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Te veel uitnodigingen verstuurd. Probeer het over een uur opnieuw.",
            retry_after=limit.retry_after,
        )

    try:
        invitation = await build_team_service(db, container).invite(user, payload.email)
    except (TeamError, EmployerNotFoundError) as exc:
        raise team_error(exc) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_invited",
        actor_user_id=user.id,
        target_user_id=invitation.user.id,
        employer_id=user.employer_id,
        payload={"invited_email": invitation.user.email, "email_sent": invitation.email_sent},
        ip_address=ip_address,
    )
    return TeamInviteResponse(email_sent=invitation.email_sent)


@router.get("/accept", response_model=InvitationCheckResponse, summary="Look up an invitation by token")
async def check_invitation(
    token: str = Query(default=""),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InvitationCheckResponse:
    try:
        details = await build_team_service(db, container).check_invitation(token)
    except TeamError as exc:
        raise team_error(exc, valid=False) from exc
    return InvitationCheckResponse(email=details.user.email, company_name=details.company_name)


@router.post("/accept", response_model=SessionResponse, summary="Accept an invitation and sign in")
async def accept_invitation(
    payload: InvitationAcceptRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SessionResponse:
    try:
        user = await build_team_service(db, container).accept_invitation(
            payload.token,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
        )
    except TeamError as exc:
        raise team_error(exc) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_joined_employer",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"via": "invitation"},
        ip_address=client_ip(request),
    )
    claims = claims_for(user)
    return SessionResponse(
        access_token=create_session_token(claims, container.settings),
        user=SessionUser(id=claims.sub, email=claims.email, employer_id=claims.employer_id, status=claims.status),
    )
