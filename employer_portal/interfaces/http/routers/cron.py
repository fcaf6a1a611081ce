"""Jobs triggered by the external scheduler."""
import hmac
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.interfaces.http.deps import get_app_container, get_db_session
from employer_portal.modules.wallets.service import WalletService
from employer_portal.schemas import CreditExpiryResponse

logger = logging.getLogger(__name__)

router = APIRouter()

cron_bearer = HTTPBearer(auto_error=False)


def require_cron_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(cron_bearer),
    container: ApplicationContainer = Depends(get_app_container),
) -> None:
    secret = container.settings.security.cron_secret
    if not secret or credentials is None:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    if not hmac.compare_digest(credentials.credentials.encode(), secret.encode()):
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


@router.api_route(
    "/expire-credits",
    methods=["GET", "POST"],
    response_model=CreditExpiryResponse,
    dependencies=[Depends(require_cron_secret)],
    summary="Write off credit batches past their expiry date",
)
async def expire_credits(
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> CreditExpiryResponse:
    expired = await WalletService.with_session(db).expire_batches()
    await db.commit()

    for batch in expired:
        background_tasks.add_task(
            container.event_logger.log,
            "credits_expired",
            employer_id=batch.employer_id,
            payload={
                "batch_id": batch.batch_id,
                "credits_expired": batch.credits_expired,
                "expires_at": batch.expires_at.isoformat() if batch.expires_at else None,
            },
            source="system",
        )

    total = sum(batch.credits_expired for batch in expired)
    logger.info("Credit expiry run: %s batches, %s credits", len(expired), total)
    return CreditExpiryResponse(processed=len(expired), total_expired=total)
