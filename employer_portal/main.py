import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from employer_portal import __version__
from employer_portal.api import create_api_router
from employer_portal.core.config import get_settings
from employer_portal.core.container import ApplicationContainer, get_container
from employer_portal.core.errors import install_error_handlers
from employer_portal.infrastructure.database import init_db
from employer_portal.modules.accounts.service import AccountService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def resolve_employer_role(container: ApplicationContainer) -> str:
    async with container.session_factory() as session:
        role_id = await AccountService.with_session(session).resolve_employer_role()
        await session.commit()
    return role_id


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    await init_db(container.engine)
    container.employer_role_id = await resolve_employer_role(container)
    logger.info("Employer role resolved: %s", container.employer_role_id)
    yield


def create_app(container: Optional[ApplicationContainer] = None) -> FastAPI:
    container = container or get_container()
    settings = container.settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        description="Werkgeversportaal: vacatures, credits en media",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    if settings.media.backend == "local":
        media_dir = settings.media.local_dir
        media_dir.mkdir(parents=True, exist_ok=True)
        app.mount(settings.media.local_base_url, StaticFiles(directory=str(media_dir)), name="media")

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "employer_portal.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    run()
