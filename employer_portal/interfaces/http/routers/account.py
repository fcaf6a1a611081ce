"""Account overview, per-section profile edits and account removal."""
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.interfaces.http.deps import client_ip, get_app_container, get_current_user, get_db_session
from employer_portal.modules.accounts import (
    AccountNotFoundError,
    AccountOverview,
    EmployerNotFoundError,
    InvalidAccountSectionError,
    User,
)
from employer_portal.modules.accounts.service import AccountService
from employer_portal.modules.wallets import ExpiringCredits
from employer_portal.modules.wallets.service import WalletService
from employer_portal.schemas import (
    AccountBilling,
    AccountCompany,
    AccountDeleteResponse,
    AccountPersonal,
    AccountResponse,
    AccountUpdateRequest,
    AccountWebsite,
    CreditSummary,
    ExpiringCreditsResponse,
    GalleryImageResponse,
)

router = APIRouter()


def _to_response(overview: AccountOverview, expiring: ExpiringCredits | None = None) -> AccountResponse:
    user, employer = overview.user, overview.employer
    response = AccountResponse(
        personal=AccountPersonal(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            role=user.role,
        ),
        credits=CreditSummary(
            available=overview.balance,
            total_purchased=overview.total_purchased,
            total_spent=overview.total_spent,
            expiring_soon=ExpiringCreditsResponse.model_validate(expiring) if expiring else None,
        ),
        profile_complete=overview.profile_complete,
        profile_missing_fields=overview.profile_missing_fields,
    )
    if employer is None:
        return response

    response.company = AccountCompany(company_name=employer.company_name, kvk=employer.kvk, phone=employer.phone)
    response.billing = AccountBilling(
        reference_nr=employer.reference_nr,
        invoice_contact_name=employer.invoice_contact_name,
        invoice_email=employer.invoice_email,
        invoice_street=employer.invoice_street,
        invoice_house_number=employer.invoice_house_number,
        invoice_house_number_addition=employer.invoice_house_number_addition,
        invoice_postal_code=employer.invoice_postal_code,
        invoice_city=employer.invoice_city,
    )
    response.website = AccountWebsite(
        display_name=employer.display_name,
        website_url=employer.website_url,
        short_description=employer.short_description,
        video_url=employer.video_url,
        sector_id=employer.sector_id,
        sector_name=overview.sector_name,
        location=employer.location,
        logo_id=employer.logo_id,
        logo_url=overview.logo_url,
        header_image_id=employer.header_image_id,
        header_image_url=overview.header_image_url,
        gallery=[GalleryImageResponse.model_validate(image) for image in overview.gallery_images],
    )
    response.onboarding_dismissed = employer.onboarding_dismissed
    return response


async def _expiring_credits(db: AsyncSession, container: ApplicationContainer, user: User) -> ExpiringCredits | None:
    if not user.employer_id:
        return None
    return await WalletService.with_session(db).expiring_soon(
        user.employer_id, container.settings.credits.expiry_warning_days
    )


@router.get("", response_model=AccountResponse, summary="Account overview")
async def get_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountResponse:
    user = user.acting_user()
    overview = await AccountService.with_session(db).get_overview(user)
    return _to_response(overview, await _expiring_credits(db, container, user))


@router.patch("", response_model=AccountResponse, summary="Update one account section")
async def update_account(
    payload: AccountUpdateRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountResponse:
    user = user.acting_user()
    service = AccountService.with_session(db)
    try:
        await service.update_section(user, payload.section, payload.data)
    except InvalidAccountSectionError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except EmployerNotFoundError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "user_updated" if payload.section == "personal" else "employer_updated",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"section": payload.section, "fields": sorted(payload.data)},
        ip_address=client_ip(request),
    )
    if payload.section == "website" and user.employer_id:
        background_tasks.add_task(container.sync_notifier.employer_changed, user.employer_id)

    refreshed = await service.get_user(user.id)
    refreshed = refreshed.acting_user() if refreshed else user
    overview = await service.get_overview(refreshed)
    return _to_response(overview, await _expiring_credits(db, container, refreshed))


@router.delete("", response_model=AccountDeleteResponse, summary="Delete the signed-in account")
async def delete_account(
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> AccountDeleteResponse:
    try:
        employer_deleted = await AccountService.with_session(db).delete_account(user)
    except AccountNotFoundError as exc:
        raise api_error(status.HTTP_404_NOT_FOUND, "Account niet gevonden") from exc
    await db.commit()

    if employer_deleted:
        background_tasks.add_task(
            container.event_logger.log,
            "employer_deleted",
            actor_user_id=user.id,
            employer_id=user.employer_id,
            ip_address=client_ip(request),
        )
    return AccountDeleteResponse(employer_deleted=employer_deleted)
