"""Tests for the rate limiter, error translation, sync webhooks and mail rendering."""
import json
from datetime import date, datetime, timezone

import httpx
import pytest

from employer_portal.core.config import EmailSettings, RateLimitSettings
from employer_portal.core.errors import GENERIC_ERROR, translate_error_message
from employer_portal.core.timeutils import today
from employer_portal.infrastructure.mail import ConsoleMailer, SmtpMailer, build_mailer
from employer_portal.infrastructure.ratelimit import API, LOGIN, InMemoryRateLimiter, RateLimitRule
from employer_portal.infrastructure.sync import WebhookSyncNotifier
from employer_portal.modules.auth.emails import render_magic_link_email
from employer_portal.modules.auth.models import REQUEST_LOGIN, REQUEST_VERIFICATION


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    def test_blocks_after_limit_until_window_passes(self):
        clock = FakeClock()
        limiter = InMemoryRateLimiter({LOGIN: RateLimitRule(limit=2, window_seconds=60)}, clock=clock)

        first = limiter.hit(LOGIN, "10.0.0.1")
        second = limiter.hit(LOGIN, "10.0.0.1")
        blocked = limiter.hit(LOGIN, "10.0.0.1")

        assert first.success and first.remaining == 1
        assert second.success and second.remaining == 0
        assert not blocked.success
        assert blocked.retry_after == 60

        clock.now += 61
        assert limiter.hit(LOGIN, "10.0.0.1").success

    def test_identifiers_and_buckets_are_independent(self):
        limiter = InMemoryRateLimiter(
            {LOGIN: RateLimitRule(1, 60), API: RateLimitRule(1, 60)},
            clock=FakeClock(),
        )

        assert limiter.hit(LOGIN, "a").success
        assert limiter.hit(LOGIN, "b").success
        assert limiter.hit(API, "a").success
        assert not limiter.hit(LOGIN, "a").success

    def test_disabled_limiter_always_allows(self):
        limiter = InMemoryRateLimiter.from_settings(RateLimitSettings(enabled=False, login_limit=1))

        assert all(limiter.hit(LOGIN, "a").success for _ in range(5))

    def test_reset(self):
        limiter = InMemoryRateLimiter({LOGIN: RateLimitRule(1, 60)}, clock=FakeClock())
        limiter.hit(LOGIN, "a")

        limiter.reset()

        assert limiter.hit(LOGIN, "a").success


class TestBusinessDate:
    def test_late_evening_utc_is_already_tomorrow_in_amsterdam(self):
        moment = datetime(2026, 10, 19, 22, 30, tzinfo=timezone.utc)

        assert today("Europe/Amsterdam", now=moment) == date(2026, 10, 20)
        assert today("UTC", now=moment) == date(2026, 10, 19)

    def test_naive_moments_are_utc(self):
        assert today("Europe/Amsterdam", now=datetime(2026, 1, 5, 23, 15)) == date(2026, 1, 6)


class TestErrorTranslation:
    @pytest.mark.parametrize(
        "exc,expected",
        [
            (TimeoutError("read timed out"), "De server reageerde niet op tijd. Probeer het opnieuw."),
            (RuntimeError("429 Too Many Requests"), "Te veel verzoeken. Wacht even en probeer het opnieuw."),
            (OSError("getaddrinfo failed"), "Kan geen verbinding maken"),
            (ValueError("something odd"), GENERIC_ERROR),
        ],
    )
    def test_known_causes(self, exc, expected):
        assert translate_error_message(exc).startswith(expected)


class TestWebhookSyncNotifier:
    async def test_posts_vacancy_id(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        notifier = WebhookSyncNotifier(
            "https://board.test/sync/vacancy",
            "https://board.test/sync/employer",
            transport=httpx.MockTransport(handler),
        )

        assert await notifier.vacancy_changed("vac-1") is True
        assert await notifier.employer_changed("emp-1") is True
        assert str(requests[0].url) == "https://board.test/sync/vacancy"
        assert json.loads(requests[0].content) == {"vacancy_id": "vac-1"}
        assert json.loads(requests[1].content) == {"employer_id": "emp-1"}

    async def test_failures_are_swallowed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        notifier = WebhookSyncNotifier("https://board.test/sync/vacancy", None, transport=httpx.MockTransport(handler))

        assert await notifier.vacancy_changed("vac-1") is False

    async def test_unconfigured_webhook_is_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        notifier = WebhookSyncNotifier(None, None, transport=httpx.MockTransport(handler))

        assert await notifier.employer_changed("emp-1") is False


class TestMail:
    def test_backend_selection(self):
        assert isinstance(build_mailer(EmailSettings()), ConsoleMailer)
        assert isinstance(build_mailer(EmailSettings(backend="smtp")), SmtpMailer)

    def test_smtp_message_has_text_and_html_parts(self):
        email = render_magic_link_email(
            to="hr@acme.nl",
            request_type=REQUEST_LOGIN,
            url="https://portal.test/auth/verify?token=abc&email=hr%40acme.nl",
            ttl_hours=24,
            public_url="https://portal.test/",
        )

        mime = SmtpMailer(EmailSettings(sender="Colourful jobs <noreply@test>"))._build_message(email)

        assert mime["To"] == "hr@acme.nl"
        assert mime["Subject"] == "Inloggen bij Colourful jobs"
        assert mime.get_body(("plain",)).get_content().strip().startswith("Inloggen bij Colourful jobs")
        assert "token=abc&amp;email=" in mime.get_body(("html",)).get_content()

    def test_verification_mail(self):
        email = render_magic_link_email(
            to="new@acme.nl",
            request_type=REQUEST_VERIFICATION,
            url="https://portal.test/auth/verify?token=xyz",
            ttl_hours=12,
            public_url="https://portal.test",
        )

        assert email.subject == "Verifieer je email voor Colourful jobs"
        assert "12 uur" in email.text
        assert "https://portal.test/email/colourful-jobs_logo.png" in email.html
