"""Vacancy drafting, paid submission and lifecycle endpoints."""
from typing import NoReturn, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.infrastructure.ratelimit import API
from employer_portal.interfaces.http.deps import (
    client_ip,
    enforce_rate_limit,
    get_app_container,
    get_current_employer_user,
    get_db_session,
)
from employer_portal.modules.accounts import User
from employer_portal.modules.products import ProductError
from employer_portal.modules.vacancies import (
    VacancyAccessDeniedError,
    VacancyError,
    VacancyNotFoundError,
    VacancyValidationError,
)
from employer_portal.modules.vacancies.service import VacancyService
from employer_portal.modules.wallets import InsufficientCreditsError, WalletError, WalletNotFoundError
from employer_portal.schemas import (
    BoostRequest,
    BoostResponse,
    SubmitResponse,
    VacancyListResponse,
    VacancyResponse,
    VacancyWrite,
)

router = APIRouter()


def _raise_vacancy_error(exc: Exception, insufficient_message: str = "Onvoldoende credits") -> NoReturn:
    if isinstance(exc, VacancyNotFoundError):
        raise api_error(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    if isinstance(exc, VacancyAccessDeniedError):
        raise api_error(status.HTTP_403_FORBIDDEN, str(exc)) from exc
    if isinstance(exc, VacancyValidationError):
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc), fields=exc.fields) from exc
    if isinstance(exc, InsufficientCreditsError):
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            insufficient_message,
            required=exc.required,
            available=exc.available,
            shortage=exc.shortage,
        ) from exc
    if isinstance(exc, WalletNotFoundError):
        raise api_error(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc


def _log(background_tasks: BackgroundTasks, container: ApplicationContainer, event_type: str, user: User,
         vacancy_id: str, request: Request, payload: Optional[dict] = None) -> None:
    background_tasks.add_task(
        container.event_logger.log,
        event_type,
        actor_user_id=user.id,
        employer_id=user.employer_id,
        vacancy_id=vacancy_id,
        payload=payload,
        ip_address=client_ip(request),
    )


@router.get("", response_model=VacancyListResponse, summary="List the employer's vacancies")
async def list_vacancies(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
) -> VacancyListResponse:
    statuses = [item.strip() for item in status_filter.split(",")] if status_filter else None
    vacancies = await VacancyService.with_session(db).list_vacancies(user.employer_id, statuses)
    return VacancyListResponse(
        total=len(vacancies),
        vacancies=[VacancyResponse.model_validate(vacancy) for vacancy in vacancies],
    )


@router.post("", response_model=VacancyResponse, status_code=status.HTTP_201_CREATED, summary="Create a concept")
async def create_vacancy(
    payload: VacancyWrite,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> VacancyResponse:
    try:
        vacancy = await VacancyService.with_session(db).create_vacancy(
            user.employer_id, user.id, payload.model_dump(exclude_unset=True)
        )
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_created", user, vacancy.id, request)
    return VacancyResponse.model_validate(vacancy)


@router.get("/{vacancy_id}", response_model=VacancyResponse, summary="Vacancy details")
async def get_vacancy(
    vacancy_id: str,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
) -> VacancyResponse:
    try:
        vacancy = await VacancyService.with_session(db).get_for_employer(
            vacancy_id, user.employer_id, user.managed_employer_ids
        )
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    return VacancyResponse.model_validate(vacancy)


@router.patch("/{vacancy_id}", response_model=VacancyResponse, summary="Update vacancy content")
async def update_vacancy(
    vacancy_id: str,
    payload: VacancyWrite,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> VacancyResponse:
    changes = payload.model_dump(exclude_unset=True)
    try:
        vacancy = await VacancyService.with_session(db).update_vacancy(
            vacancy_id, user.employer_id, changes, user.managed_employer_ids
        )
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_updated", user, vacancy.id, request,
         {"updated_fields": sorted(changes)})
    return VacancyResponse.model_validate(vacancy)


@router.delete("/{vacancy_id}", summary="Delete a concept")
async def delete_vacancy(
    vacancy_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> dict:
    try:
        await VacancyService.with_session(db).delete_vacancy(vacancy_id, user.employer_id)
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_deleted", user, vacancy_id, request)
    return {"success": True}


@router.post("/{vacancy_id}/submit", response_model=SubmitResponse, summary="Pay for and submit a concept")
async def submit_vacancy(
    vacancy_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> SubmitResponse:
    enforce_rate_limit(container, API, user.id)
    try:
        result = await VacancyService.with_session(db).submit(vacancy_id, user.employer_id, user.id)
    except (VacancyError, ProductError, WalletError) as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_submitted", user, vacancy_id, request,
         {"credits_spent": result.credits_spent, "transaction_id": result.transaction_id})
    return SubmitResponse(
        vacancy=VacancyResponse.model_validate(result.vacancy),
        credits_spent=result.credits_spent,
        new_balance=result.new_balance,
        transaction_id=result.transaction_id,
        package_name=result.package_name,
    )


@router.post("/{vacancy_id}/publish", response_model=VacancyResponse, summary="Republish an unpublished vacancy")
async def publish_vacancy(
    vacancy_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> VacancyResponse:
    try:
        vacancy = await VacancyService.with_session(db, container.settings.timezone).republish(
            vacancy_id, user.employer_id
        )
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_publish", user, vacancy.id, request)
    background_tasks.add_task(container.sync_notifier.vacancy_changed, vacancy.id)
    return VacancyResponse.model_validate(vacancy)


@router.post("/{vacancy_id}/depublish", response_model=VacancyResponse, summary="Take a vacancy offline")
async def depublish_vacancy(
    vacancy_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> VacancyResponse:
    try:
        vacancy = await VacancyService.with_session(db).depublish(vacancy_id, user.employer_id)
    except VacancyError as exc:
        _raise_vacancy_error(exc)
    await db.commit()

    _log(background_tasks, container, "vacancy_depublish", user, vacancy.id, request)
    background_tasks.add_task(container.sync_notifier.vacancy_changed, vacancy.id)
    return VacancyResponse.model_validate(vacancy)


@router.post("/{vacancy_id}/boost", response_model=BoostResponse, summary="Buy boost options for a live vacancy")
async def boost_vacancy(
    vacancy_id: str,
    payload: BoostRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> BoostResponse:
    enforce_rate_limit(container, API, user.id)
    try:
        result = await VacancyService.with_session(db).boost(
            vacancy_id, user.employer_id, user.id, payload.upsell_ids
        )
    except (VacancyError, ProductError, WalletError) as exc:
        _raise_vacancy_error(exc, insufficient_message="Niet genoeg credits beschikbaar")
    await db.commit()

    _log(background_tasks, container, "vacancy_boost", user, vacancy_id, request,
         {"upsells": result.upsell_names, "credits_spent": result.credits_spent})
    background_tasks.add_task(container.sync_notifier.vacancy_changed, vacancy_id)
    return BoostResponse(
        vacancy=VacancyResponse.model_validate(result.vacancy),
        credits_spent=result.credits_spent,
        new_balance=result.new_balance,
        upsells_added=result.upsell_names,
    )
