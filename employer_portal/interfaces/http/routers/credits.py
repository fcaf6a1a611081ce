"""Wallet balance, ledger and credit bundle checkout."""
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
from employer_portal.modules.accounts import EmployerNotFoundError, User
from employer_portal.modules.accounts.service import AccountService
from employer_portal.modules.wallets import ProductNotPurchasableError, WalletNotFoundError
from employer_portal.modules.wallets.service import WalletService
from employer_portal.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    CreditTransactionListResponse,
    CreditTransactionResponse,
    ExpiringCreditsResponse,
    WalletResponse,
)

router = APIRouter()


@router.get("/credits", response_model=WalletResponse, summary="Credit balance")
async def get_credits(
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> WalletResponse:
    service = WalletService.with_session(db)
    wallet = await service.ensure_wallet(user.employer_id)
    expiring = await service.expiring_soon(user.employer_id, container.settings.credits.expiry_warning_days)
    await db.commit()
    return WalletResponse(
        available=wallet.balance,
        total_purchased=wallet.total_purchased,
        total_spent=wallet.total_spent,
        expiring_soon=ExpiringCreditsResponse.model_validate(expiring) if expiring else None,
    )


@router.get(
    "/credits/transactions",
    response_model=CreditTransactionListResponse,
    summary="Credit ledger, newest first",
)
async def list_transactions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
) -> CreditTransactionListResponse:
    records = await WalletService.with_session(db).list_transactions(user.employer_id, limit, offset)
    return CreditTransactionListResponse(
        transactions=[CreditTransactionResponse.model_validate(record) for record in records]
    )


@router.post("/checkout", response_model=CheckoutResponse, summary="Buy a credit bundle")
async def checkout(
    payload: CheckoutRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> CheckoutResponse:
    enforce_rate_limit(container, API, user.id)
    wallet_service = WalletService.with_session(db, container.settings.credits.validity_days)
    try:
        employer = await AccountService.with_session(db).get_employer(user.employer_id)
        await wallet_service.ensure_wallet(user.employer_id)
        result = await wallet_service.purchase(
            employer_id=user.employer_id,
            product_id=payload.product_id,
            user_id=user.id,
            context=payload.context,
            invoice_details=employer.invoice_details(),
        )
    except ProductNotPurchasableError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except (EmployerNotFoundError, WalletNotFoundError) as exc:
        raise api_error(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "credits_purchased",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"product_id": payload.product_id, "credits": result.transaction.credits_amount},
        ip_address=client_ip(request),
    )
    return CheckoutResponse(
        transaction_id=result.transaction.id,
        credits_added=result.transaction.credits_amount,
        new_balance=result.wallet.balance,
    )
