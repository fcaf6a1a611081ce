"""
Shared fixtures: a throwaway SQLite database, in-memory stand-ins for the
outbound adapters and an HTTP client bound to the ASGI app.
"""
from datetime import date, timedelta
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from employer_portal.core.config import Settings
from employer_portal.core.container import ApplicationContainer
from employer_portal.core.security import create_session_token
from employer_portal.infrastructure.database import build_engine, build_session_factory, init_db
from employer_portal.infrastructure.database.repositories.account_repository import SqlUserRepository
from employer_portal.infrastructure.mail import MailerError
from employer_portal.infrastructure.ratelimit import InMemoryRateLimiter
from employer_portal.main import create_app, resolve_employer_role
from employer_portal.modules.accounts import OnboardingInput
from employer_portal.modules.accounts.models import USER_ACTIVE
from employer_portal.modules.accounts.service import AccountService
from employer_portal.modules.auth.service import claims_for
from employer_portal.modules.media.models import StoredMedia
from employer_portal.modules.products import ProductCreateInput
from employer_portal.modules.products.models import ADD_VACANCY, BOOST_OPTION, CREDIT_BUNDLE, UPSELL, VACANCY_PACKAGE
from employer_portal.modules.products.service import ProductService
from employer_portal.modules.wallets.service import WalletService


class RecordingMailer:
    def __init__(self) -> None:
        self.sent = []
        self.fail = False

    async def send(self, message) -> None:
        if self.fail:
            raise MailerError("smtp unavailable")
        self.sent.append(message)

    def last_token(self) -> str:
        body = self.sent[-1].text
        url = next(word for word in body.split() if "token=" in word)
        return parse_qs(urlparse(url).query)["token"][0]


class FakeMediaStorage:
    def __init__(self) -> None:
        self.uploads = []

    async def upload(self, content, *, filename, content_type, folder) -> StoredMedia:
        self.uploads.append((folder, filename, content_type, len(content)))
        public_id = f"{folder}/{len(self.uploads)}"
        return StoredMedia(
            secure_url=f"https://cdn.test/{public_id}.png",
            public_id=public_id,
            bytes=len(content),
            format="png",
        )


class RecordingSyncNotifier:
    def __init__(self) -> None:
        self.vacancies = []
        self.employers = []

    async def vacancy_changed(self, vacancy_id: str) -> bool:
        self.vacancies.append(vacancy_id)
        return True

    async def employer_changed(self, employer_id: str) -> bool:
        self.employers.append(employer_id)
        return True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"},
        security={"secret_key": "test-secret-key"},
        magic_link={"lookup_attempts": 3, "lookup_delay_seconds": 0},
        media={"backend": "local", "local_dir": tmp_path / "media"},
        server={"public_url": "https://portal.test"},
    )


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings.database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def media_storage():
    return FakeMediaStorage()


@pytest.fixture
def sync_notifier():
    return RecordingSyncNotifier()


@pytest.fixture
async def container(settings, engine, session_factory, mailer, media_storage, sync_notifier):
    container = ApplicationContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        media_storage=media_storage,
        mailer=mailer,
        sync_notifier=sync_notifier,
        rate_limiter=InMemoryRateLimiter.from_settings(settings.rate_limit),
    )
    # ASGITransport does not drive the lifespan, so resolve the role here.
    container.employer_role_id = await resolve_employer_role(container)
    return container


@pytest.fixture
async def client(container):
    app = create_app(container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def catalog(session):
    """Package of 16 credits, two upsells and a credit bundle, keyed by slug."""
    service = ProductService.with_session(session)
    products = {}
    for payload in (
        ProductCreateInput(slug="basic", display_name="Basis", type=VACANCY_PACKAGE, credits=16,
                           price_cents=39500, availability=[ADD_VACANCY]),
        ProductCreateInput(slug="featured", display_name="Uitgelicht", type=UPSELL, credits=3,
                           price_cents=7500, availability=[ADD_VACANCY, BOOST_OPTION]),
        ProductCreateInput(slug="same_day", display_name="Dezelfde dag online", type=UPSELL, credits=3,
                           price_cents=7500, availability=[ADD_VACANCY]),
        ProductCreateInput(slug="credits_20", display_name="20 credits", type=CREDIT_BUNDLE, credits=20,
                           price_cents=45000),
    ):
        product = await service.ensure_product(payload)
        products[product.slug] = product
    await session.commit()
    return products


async def create_employer_user(session, email="hr@acme.nl", *, balance=0, active=True):
    """Onboard an employer, optionally activate the user and fund the wallet."""
    service = AccountService.with_session(session)
    result = await service.start_onboarding(OnboardingInput(email=email, first_name="Sanne"), employer_role_id=None)
    user = result.user
    if active:
        user = await SqlUserRepository(session).update_user(user.id, {"status": USER_ACTIVE})
    if balance:
        await WalletService.with_session(session).add(result.employer.id, balance)
    await session.commit()
    return user


@pytest.fixture
async def employer_user(session):
    return await create_employer_user(session)


def auth_headers(user, settings) -> dict:
    return {"Authorization": f"Bearer {create_session_token(claims_for(user), settings)}"}


def complete_vacancy_fields(**overrides) -> dict:
    fields = {
        "title": "Beleidsmedewerker",
        "intro_txt": "Korte introductie",
        "description": "Uitgebreide omschrijving",
        "location": "Utrecht",
        "region_id": "region-utrecht",
        "sector_id": "sector-overheid",
        "function_type_id": "function-beleid",
        "apply_url": "https://acme.nl/vacatures/1",
        "closing_date": date.today() + timedelta(days=30),
    }
    fields.update(overrides)
    return fields
