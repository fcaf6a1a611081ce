from fastapi import APIRouter

from employer_portal.interfaces.http.routers import (
    account,
    auth,
    catalog,
    credits,
    cron,
    intermediary,
    media,
    onboarding,
    team,
    vacancies,
)


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
    router.include_router(account.router, prefix="/account", tags=["account"])
    router.include_router(team.router, prefix="/team", tags=["team"])
    router.include_router(intermediary.router, prefix="/intermediary", tags=["intermediary"])
    router.include_router(media.router, prefix="/media", tags=["media"])
    router.include_router(vacancies.router, prefix="/vacancies", tags=["vacancies"])
    router.include_router(credits.router, tags=["credits"])
    router.include_router(catalog.router, tags=["catalog"])
    router.include_router(cron.router, prefix="/cron", tags=["cron"])
    return router


__all__ = [
    "create_api_router",
]
