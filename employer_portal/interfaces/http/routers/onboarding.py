"""Account creation and the onboarding wizard."""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.infrastructure.ratelimit import ONBOARDING
from employer_portal.interfaces.http.deps import (
    client_ip,
    enforce_rate_limit,
    get_app_container,
    get_current_user,
    get_db_session,
)
from employer_portal.interfaces.http.routers.auth import build_magic_link_service
from employer_portal.interfaces.http.routers.team import build_team_service, team_error
from employer_portal.modules.accounts import (
    AccountAlreadyExistsError,
    EmployerNotFoundError,
    InvalidAccountSectionError,
    OnboardingInput,
    User,
)
from employer_portal.modules.accounts.service import AccountService
from employer_portal.modules.auth import EmailDeliveryError
from employer_portal.modules.auth.service import claims_for
from employer_portal.modules.team import TeamError
from employer_portal.schemas import (
    EmployerSummary,
    JoinCheckRequest,
    JoinCheckResponse,
    JoinCompleteRequest,
    JoinCompleteResponse,
    KvkCheckResponse,
    OnboardingStartRequest,
    OnboardingStartResponse,
    OnboardingUpdateRequest,
    OnboardingUpdateResponse,
    SessionUser,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=OnboardingStartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create employer, user and wallet and send a verification link",
)
async def start_onboarding(
    payload: OnboardingStartRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> OnboardingStartResponse:
    ip_address = client_ip(request)
    enforce_rate_limit(container, ONBOARDING, ip_address)

    service = AccountService.with_session(db)
    try:
        result = await service.start_onboarding(
            OnboardingInput(
                email=payload.email,
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=payload.role,
            ),
            employer_role_id=container.employer_role_id,
        )
    except AccountAlreadyExistsError as exc:
        raise api_error(status.HTTP_409_CONFLICT, str(exc)) from exc
    except InvalidAccountSectionError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    await db.commit()

    email_sent = True
    try:
        await build_magic_link_service(db, container).request_link(result.user.email)
        await db.commit()
    except EmailDeliveryError:
        logger.warning("Verification email for new user %s could not be sent", result.user.id)
        await db.rollback()
        email_sent = False

    user_id, employer_id = result.user.id, result.employer.id
    for event_type, extra in (
        ("employer_created", {}),
        ("user_created", {"target_user_id": user_id}),
        ("wallet_created", {"payload": {"wallet_id": result.wallet_id}}),
        ("onboarding_started", {"payload": {"email": result.user.email}}),
    ):
        background_tasks.add_task(
            container.event_logger.log,
            event_type,
            actor_user_id=user_id,
            employer_id=employer_id,
            ip_address=ip_address,
            **extra,
        )

    return OnboardingStartResponse(
        user_id=user_id,
        employer_id=employer_id,
        wallet_id=result.wallet_id,
        email_sent=email_sent,
    )


@router.patch("", response_model=OnboardingUpdateResponse, summary="Save onboarding progress")
async def update_onboarding(
    payload: OnboardingUpdateRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> OnboardingUpdateResponse:
    service = AccountService.with_session(db)
    try:
        update = await service.update_onboarding(user, payload.model_dump(exclude_none=True))
    except EmployerNotFoundError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except InvalidAccountSectionError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    await db.commit()

    ip_address = client_ip(request)
    event_type = "employer_updated" if update.employer is not None else "user_updated"
    background_tasks.add_task(
        container.event_logger.log,
        event_type,
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"updated_fields": update.updated_fields},
        ip_address=ip_address,
    )
    if update.completed:
        background_tasks.add_task(
            container.event_logger.log,
            "onboarding_completed",
            actor_user_id=user.id,
            employer_id=user.employer_id,
            ip_address=ip_address,
        )
        background_tasks.add_task(container.sync_notifier.employer_changed, update.employer.id)

    return OnboardingUpdateResponse(updated_fields=update.updated_fields, completed=update.completed)


@router.get("/kvk", response_model=KvkCheckResponse, summary="Check whether a KVK number is already registered")
async def check_kvk(
    kvk: str = Query(default=""),
    _: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> KvkCheckResponse:
    service = AccountService.with_session(db)
    try:
        employer = await service.find_by_kvk(kvk)
    except InvalidAccountSectionError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    if employer is None:
        return KvkCheckResponse(exists=False)
    return KvkCheckResponse(exists=True, employer=EmployerSummary.model_validate(employer))


@router.post("/join", response_model=JoinCheckResponse, summary="Check whether an email may join an existing employer")
async def check_join(
    payload: JoinCheckRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> JoinCheckResponse:
    enforce_rate_limit(container, ONBOARDING, client_ip(request))
    try:
        check = await build_team_service(db, container).check_join(payload.email, payload.employer_id)
    except (TeamError, EmployerNotFoundError) as exc:
        raise team_error(exc) from exc
    return JoinCheckResponse(
        valid=check.valid,
        employer=EmployerSummary.model_validate(check.employer) if check.valid else None,
        error=check.message,
    )


@router.patch("/join", response_model=JoinCompleteResponse, summary="Link the signed-in user to an existing employer")
async def complete_join(
    payload: JoinCompleteRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> JoinCompleteResponse:
    try:
        result = await build_team_service(db, container).complete_join(user, payload.employer_id)
    except (TeamError, EmployerNotFoundError) as exc:
        raise team_error(exc) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_joined_employer",
        actor_user_id=user.id,
        employer_id=result.employer.id,
        payload={"via": "domain_match", "employer_name": result.employer.name},
        ip_address=client_ip(request),
    )
    claims = claims_for(result.user)
    return JoinCompleteResponse(
        user=SessionUser(id=claims.sub, email=claims.email, employer_id=claims.employer_id, status=claims.status),
        employer=EmployerSummary.model_validate(result.employer),
    )
