"""Intermediary accounts acting for the employers they manage."""
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.interfaces.http.deps import client_ip, get_app_container, get_current_user, get_db_session
from employer_portal.modules.accounts import AccountPermissionError, EmployerNotFoundError, User
from employer_portal.modules.accounts.service import AccountService
from employer_portal.schemas import EmployerSummary, SwitchEmployerRequest, SwitchEmployerResponse

router = APIRouter()


@router.post("/switch-employer", response_model=SwitchEmployerResponse, summary="Change the active employer")
async def switch_employer(
    payload: SwitchEmployerRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SwitchEmployerResponse:
    try:
        employer = await AccountService.with_session(db).switch_employer(user, payload.employer_id)
    except AccountPermissionError as exc:
        raise api_error(status.HTTP_403_FORBIDDEN, str(exc)) from exc
    except EmployerNotFoundError as exc:
        raise api_error(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_updated",
        actor_user_id=user.id,
        employer_id=employer.id,
        payload={"action": "switch_active_employer", "employer_id": employer.id, "employer_name": employer.name},
        ip_address=client_ip(request),
    )
    return SwitchEmployerResponse(data=EmployerSummary.model_validate(employer))
