"""End-to-end tests through the HTTP API."""
from datetime import timedelta

from sqlalchemy import select, update

from conftest import auth_headers, complete_vacancy_fields, create_employer_user
from employer_portal.core.timeutils import utcnow
from employer_portal.db.models import CreditTransaction, Event
from employer_portal.infrastructure.database.repositories.account_repository import (
    SqlEmployerRepository,
    SqlUserRepository,
)
from employer_portal.infrastructure.database.repositories.vacancy_repository import SqlVacancyRepository
from employer_portal.modules.accounts.models import USER_ACTIVE, USER_TYPE_INTERMEDIARY
from employer_portal.modules.lookups.service import LookupService
from employer_portal.modules.vacancies.models import AWAITING_APPROVAL, PUBLISHED, UNPUBLISHED

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _vacancy_body(catalog, **overrides) -> dict:
    body = complete_vacancy_fields(**{"package_id": catalog["basic"].id, **overrides})
    if body.get("closing_date") is not None:
        body["closing_date"] = body["closing_date"].isoformat()
    return body


async def _event_types(session_factory) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(select(Event.event_type))
        return list(result.scalars().all())


class TestHealthAndErrors:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_validation_errors_use_error_body(self, client):
        response = await client.post("/api/auth/magic-link", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Ongeldige invoer", "fields": ["email"]}

    async def test_missing_session(self, client):
        response = await client.get("/api/account")

        assert response.status_code == 401
        assert response.json() == {"error": "Niet ingelogd"}

    async def test_garbage_token(self, client):
        response = await client.get("/api/account", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    async def test_unknown_route_uses_error_body(self, client):
        response = await client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_wrong_method_uses_error_body(self, client):
        response = await client.delete("/health")

        assert response.status_code == 405
        assert "error" in response.json()


class TestOnboardingAndSignIn:
    async def test_onboarding_sends_verification_link(self, client, mailer, session_factory):
        response = await client.post(
            "/api/onboarding",
            json={"email": "New@Acme.nl", "first_name": "Sanne", "last_name": "de Vries"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email_sent"] is True
        assert body["wallet_id"]
        assert mailer.sent[-1].to == "new@acme.nl"
        assert mailer.sent[-1].subject == "Verifieer je email voor Colourful jobs"

        events = await _event_types(session_factory)
        for event_type in ("employer_created", "user_created", "wallet_created", "onboarding_started"):
            assert event_type in events

    async def test_duplicate_email_conflicts(self, client):
        await client.post("/api/onboarding", json={"email": "new@acme.nl"})

        response = await client.post("/api/onboarding", json={"email": "NEW@acme.nl"})

        assert response.status_code == 409
        assert "bestaat al een account" in response.json()["error"]

    async def test_onboarding_survives_mail_outage(self, client, mailer):
        mailer.fail = True

        response = await client.post("/api/onboarding", json={"email": "new@acme.nl"})

        assert response.status_code == 201
        assert response.json()["email_sent"] is False

    async def test_verify_then_complete_onboarding(self, client, mailer, sync_notifier):
        started = (await client.post("/api/onboarding", json={"email": "new@acme.nl"})).json()

        verified = await client.post("/api/auth/verify", json={"token": mailer.last_token()})

        assert verified.status_code == 200
        body = verified.json()
        assert body["request_type"] == "verification"
        assert body["user"]["status"] == "pending_onboarding"
        assert body["user"]["employer_id"] == started["employer_id"]
        headers = {"Authorization": f"Bearer {body['access_token']}"}

        completed = await client.patch(
            "/api/onboarding",
            json={"company_name": "Acme", "kvk": "12345678", "status": "active"},
            headers=headers,
        )

        assert completed.status_code == 200
        assert completed.json()["completed"] is True
        assert sync_notifier.employers == [started["employer_id"]]

        session = await client.get("/api/auth/session", headers=headers)
        assert session.json()["user"]["status"] == "active"

        kvk = await client.get("/api/onboarding/kvk", params={"kvk": "12345678"}, headers=headers)
        assert kvk.json()["exists"] is True
        assert kvk.json()["employer"]["company_name"] == "Acme"

    async def test_link_cannot_be_reused(self, client, mailer):
        await client.post("/api/onboarding", json={"email": "new@acme.nl"})
        token = mailer.last_token()
        await client.post("/api/auth/verify", json={"token": token})

        response = await client.post("/api/auth/verify", json={"token": token})

        assert response.status_code == 401
        assert response.json()["error"] == "Ongeldige of verlopen link"

    async def test_magic_link_for_unknown_email_looks_the_same(self, client, mailer, employer_user):
        known = await client.post("/api/auth/magic-link", json={"email": "hr@acme.nl"})
        unknown = await client.post("/api/auth/magic-link", json={"email": "nobody@acme.nl"})

        assert known.status_code == unknown.status_code == 202
        assert known.json() == unknown.json()
        assert [message.to for message in mailer.sent] == ["hr@acme.nl"]

    async def test_login_link_and_logout(self, client, mailer, employer_user, session_factory):
        await client.post("/api/auth/magic-link", json={"email": "hr@acme.nl"})
        verified = (await client.post("/api/auth/verify", json={"token": mailer.last_token()})).json()
        headers = {"Authorization": f"Bearer {verified['access_token']}"}

        assert verified["request_type"] == "login"
        response = await client.post("/api/auth/logout", headers=headers)

        assert response.status_code == 200
        events = await _event_types(session_factory)
        assert "user_login" in events
        assert "user_logout" in events

    async def test_magic_link_rate_limit(self, client, employer_user):
        for _ in range(3):
            assert (await client.post("/api/auth/magic-link", json={"email": "hr@acme.nl"})).status_code == 202

        response = await client.post("/api/auth/magic-link", json={"email": "hr@acme.nl"})

        assert response.status_code == 429
        assert response.json()["retry_after"] > 0


class TestAccount:
    async def test_overview_and_section_update(self, client, settings, employer_user, sync_notifier):
        headers = auth_headers(employer_user, settings)

        overview = (await client.get("/api/account", headers=headers)).json()
        assert overview["personal"]["email"] == "hr@acme.nl"
        assert overview["credits"]["available"] == 0
        assert overview["profile_complete"] is False
        assert overview["profile_missing_fields"] == ["Weergavenaam", "Sector", "Logo"]

        updated = await client.patch(
            "/api/account",
            json={"section": "website", "data": {"display_name": "Acme Jobs", "location": "Utrecht"}},
            headers=headers,
        )

        assert updated.status_code == 200
        assert updated.json()["website"]["display_name"] == "Acme Jobs"
        assert updated.json()["profile_missing_fields"] == ["Sector", "Logo"]
        assert sync_notifier.employers == [employer_user.employer_id]

    async def test_unknown_section(self, client, settings, employer_user):
        response = await client.patch(
            "/api/account", json={"section": "secrets", "data": {}}, headers=auth_headers(employer_user, settings)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Ongeldige sectie: secrets"

    async def test_delete_last_user_removes_employer(self, client, settings, session, catalog):
        user = await create_employer_user(session, balance=20)
        headers = auth_headers(user, settings)
        await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)

        response = await client.delete("/api/account", headers=headers)

        assert response.status_code == 200
        assert response.json()["employer_deleted"] is True
        assert (await client.get("/api/account", headers=headers)).status_code == 401


class TestVacancyApi:
    async def test_submit_with_insufficient_credits(self, client, settings, session, catalog):
        user = await create_employer_user(session, balance=10)
        headers = auth_headers(user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()

        response = await client.post(f"/api/vacancies/{vacancy['id']}/submit", headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Onvoldoende credits", "required": 16, "available": 10, "shortage": 6}
        detail = (await client.get(f"/api/vacancies/{vacancy['id']}", headers=headers)).json()
        assert detail["status"] == "concept"
        assert (await client.get("/api/credits", headers=headers)).json()["available"] == 10

    async def test_buy_credits_then_submit(self, client, settings, session, catalog, session_factory):
        user = await create_employer_user(session, balance=10)
        headers = auth_headers(user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()

        checkout = await client.post("/api/checkout", json={"product_id": catalog["credits_20"].id}, headers=headers)
        assert checkout.status_code == 200
        assert checkout.json()["new_balance"] == 30

        response = await client.post(f"/api/vacancies/{vacancy['id']}/submit", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["vacancy"]["status"] == AWAITING_APPROVAL
        assert body["credits_spent"] == 16
        assert body["new_balance"] == 14
        ledger = (await client.get("/api/credits/transactions", headers=headers)).json()["transactions"]
        assert sorted(tx["type"] for tx in ledger) == ["purchase", "spend"]
        assert "vacancy_submitted" in await _event_types(session_factory)

    async def test_submit_with_missing_fields(self, client, settings, session, catalog):
        user = await create_employer_user(session, balance=20)
        headers = auth_headers(user, settings)
        body = _vacancy_body(catalog)
        del body["location"]
        vacancy = (await client.post("/api/vacancies", json=body, headers=headers)).json()

        response = await client.post(f"/api/vacancies/{vacancy['id']}/submit", headers=headers)

        assert response.status_code == 400
        assert response.json()["fields"] == ["location"]
        assert (await client.get("/api/credits", headers=headers)).json()["available"] == 20

    async def test_checkout_rejects_packages(self, client, settings, employer_user, catalog):
        response = await client.post(
            "/api/checkout", json={"product_id": catalog["basic"].id}, headers=auth_headers(employer_user, settings)
        )

        assert response.status_code == 400

    async def test_foreign_vacancy_is_forbidden(self, client, settings, session, catalog, employer_user):
        vacancy = (
            await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=auth_headers(employer_user, settings))
        ).json()
        other = await create_employer_user(session, "other@acme.nl")

        response = await client.get(f"/api/vacancies/{vacancy['id']}", headers=auth_headers(other, settings))

        assert response.status_code == 403
        assert response.json()["error"] == "Geen toegang tot deze vacature"
        assert (await client.get("/api/vacancies/missing", headers=auth_headers(other, settings))).status_code == 404

    async def test_patch_cannot_change_status(self, client, settings, employer_user, catalog):
        headers = auth_headers(employer_user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()

        response = await client.patch(f"/api/vacancies/{vacancy['id']}", json={"status": "published"}, headers=headers)
        updated = await client.patch(
            f"/api/vacancies/{vacancy['id']}", json={"title": "Nieuwe titel", "status": "concept"}, headers=headers
        )

        assert response.status_code == 400
        assert updated.status_code == 200
        assert updated.json()["title"] == "Nieuwe titel"

    async def test_upsells_are_fixed_after_submit(self, client, settings, session, catalog):
        user = await create_employer_user(session, balance=20)
        headers = auth_headers(user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()
        await client.post(f"/api/vacancies/{vacancy['id']}/submit", headers=headers)

        response = await client.patch(
            f"/api/vacancies/{vacancy['id']}",
            json={"selected_upsells": [catalog["featured"].id, catalog["same_day"].id]},
            headers=headers,
        )

        assert response.status_code == 400
        detail = (await client.get(f"/api/vacancies/{vacancy['id']}", headers=headers)).json()
        assert detail["selected_upsells"] == []
        assert (await client.get("/api/credits", headers=headers)).json()["available"] == 4

    async def test_list_and_delete(self, client, settings, employer_user, catalog):
        headers = auth_headers(employer_user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()

        listed = (await client.get("/api/vacancies", params={"status": "concept"}, headers=headers)).json()
        assert listed["total"] == 1

        assert (await client.delete(f"/api/vacancies/{vacancy['id']}", headers=headers)).status_code == 200
        assert (await client.get("/api/vacancies", headers=headers)).json()["total"] == 0

    async def test_depublish_and_republish_trigger_sync(
        self, client, settings, session, employer_user, catalog, sync_notifier
    ):
        headers = auth_headers(employer_user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()
        await SqlVacancyRepository(session).update(vacancy["id"], {"status": PUBLISHED})
        await session.commit()

        depublished = await client.post(f"/api/vacancies/{vacancy['id']}/depublish", headers=headers)
        republished = await client.post(f"/api/vacancies/{vacancy['id']}/publish", headers=headers)

        assert depublished.json()["status"] == UNPUBLISHED
        assert republished.json()["status"] == PUBLISHED
        assert sync_notifier.vacancies == [vacancy["id"], vacancy["id"]]

    async def test_boost_with_insufficient_credits(self, client, settings, session, catalog):
        user = await create_employer_user(session, balance=2)
        headers = auth_headers(user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()
        await SqlVacancyRepository(session).update(vacancy["id"], {"status": PUBLISHED})
        await session.commit()

        response = await client.post(
            f"/api/vacancies/{vacancy['id']}/boost",
            json={"upsell_ids": [catalog["featured"].id]},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Niet genoeg credits beschikbaar"
        assert response.json()["shortage"] == 1

    async def test_boost(self, client, settings, session, catalog, sync_notifier):
        user = await create_employer_user(session, balance=5)
        headers = auth_headers(user, settings)
        vacancy = (await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=headers)).json()
        await SqlVacancyRepository(session).update(vacancy["id"], {"status": PUBLISHED})
        await session.commit()

        response = await client.post(
            f"/api/vacancies/{vacancy['id']}/boost",
            json={"upsell_ids": [catalog["featured"].id]},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["upsells_added"] == ["Uitgelicht"]
        assert response.json()["new_balance"] == 2
        assert sync_notifier.vacancies == [vacancy["id"]]


class TestMediaApi:
    async def test_upload_logo_and_list(self, client, settings, employer_user, media_storage):
        headers = auth_headers(employer_user, settings)

        uploaded = await client.post(
            "/api/media",
            files={"file": ("logo.png", PNG, "image/png")},
            data={"type": "logo"},
            headers=headers,
        )

        assert uploaded.status_code == 201
        assert uploaded.json()["format"] == "PNG"
        library = (await client.get("/api/media", headers=headers)).json()
        assert library["logo"]["id"] == uploaded.json()["id"]
        assert library["images"] == []

        removal = await client.delete(
            "/api/media", params={"id": uploaded.json()["id"], "type": "logo"}, headers=headers
        )
        assert removal.status_code == 400

    async def test_invalid_upload_type(self, client, settings, employer_user):
        response = await client.post(
            "/api/media",
            files={"file": ("logo.jpg", PNG, "image/jpeg")},
            data={"type": "logo"},
            headers=auth_headers(employer_user, settings),
        )

        assert response.status_code == 400
        assert "PNG of SVG" in response.json()["error"]

    async def test_header_action_and_delete(self, client, settings, employer_user):
        headers = auth_headers(employer_user, settings)
        image = (
            await client.post(
                "/api/media",
                files={"file": ("office.png", PNG, "image/png")},
                data={"type": "sfeerbeeld"},
                headers=headers,
            )
        ).json()

        action = await client.patch("/api/media", json={"id": image["id"], "action": "set_header"}, headers=headers)
        assert action.json()["header_image_id"] == image["id"]

        deleted = await client.delete("/api/media", params={"id": image["id"]}, headers=headers)
        assert deleted.json()["deleted_id"] == image["id"]
        library = (await client.get("/api/media", headers=headers)).json()
        assert library["header_image_id"] is None
        assert library["images"] == []


class TestCatalogApi:
    async def test_products_filtered_by_usage(self, client, catalog):
        response = await client.get("/api/products", params={"type": "upsell", "availability": "boost-option"})

        assert [product["slug"] for product in response.json()["products"]] == ["featured"]

    async def test_lookups_grouped(self, client, session):
        await LookupService.with_session(session).ensure("regions", "Utrecht")
        await session.commit()

        response = await client.get("/api/lookups", params={"kinds": "regions,sectors"})

        body = response.json()
        assert [item["name"] for item in body["regions"]] == ["Utrecht"]
        assert body["sectors"] == []


class TestTeamApi:
    async def test_invite_accept_and_list(self, client, settings, session, mailer, employer_user, session_factory):
        await SqlEmployerRepository(session).update_employer(employer_user.employer_id, {"company_name": "Acme"})
        await session.commit()
        headers = auth_headers(employer_user, settings)

        invited = await client.post("/api/team/invite", json={"email": "collega@acme.nl"}, headers=headers)
        assert invited.status_code == 201
        assert invited.json()["email_sent"] is True
        token = mailer.sent[-1].text.split("/invitation/")[1].split()[0]

        check = await client.get("/api/team/accept", params={"token": token})
        assert check.json() == {"valid": True, "email": "collega@acme.nl", "company_name": "Acme"}

        accepted = await client.post(
            "/api/team/accept", json={"token": token, "first_name": "Pim", "last_name": "de Vries"}
        )
        assert accepted.status_code == 200
        session_body = accepted.json()
        assert session_body["user"]["employer_id"] == employer_user.employer_id
        assert session_body["user"]["status"] == USER_ACTIVE

        members = (await client.get("/api/team", headers=headers)).json()["team"]
        assert sorted(member["email"] for member in members) == ["collega@acme.nl", "hr@acme.nl"]
        events = await _event_types(session_factory)
        assert "user_invited" in events
        assert "user_joined_employer" in events

    async def test_used_invitation_is_gone(self, client, settings, mailer, employer_user):
        headers = auth_headers(employer_user, settings)
        await client.post("/api/team/invite", json={"email": "collega@acme.nl"}, headers=headers)
        token = mailer.sent[-1].text.split("/invitation/")[1].split()[0]
        await client.post("/api/team/accept", json={"token": token, "first_name": "Pim", "last_name": "de Vries"})

        response = await client.get("/api/team/accept", params={"token": token})

        assert response.status_code == 404
        assert response.json()["valid"] is False

    async def test_duplicate_invite_conflicts(self, client, settings, employer_user):
        headers = auth_headers(employer_user, settings)

        response = await client.post("/api/team/invite", json={"email": "hr@acme.nl"}, headers=headers)

        assert response.status_code == 409

    async def test_last_member_cannot_leave(self, client, settings, employer_user):
        response = await client.request(
            "DELETE", "/api/team", json={"user_id": employer_user.id}, headers=auth_headers(employer_user, settings)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Er moet minimaal één actief teamlid overblijven"

    async def test_join_by_domain(self, client, settings, session, employer_user):
        await SqlEmployerRepository(session).update_employer(
            employer_user.employer_id, {"website_url": "https://www.acme.nl"}
        )
        newcomer = await create_employer_user(session, "nieuw@acme.nl", active=False)

        refused = await client.post(
            "/api/onboarding/join", json={"email": "nieuw@gmail.com", "employer_id": employer_user.employer_id}
        )
        check = await client.post(
            "/api/onboarding/join", json={"email": "nieuw@acme.nl", "employer_id": employer_user.employer_id}
        )
        joined = await client.patch(
            "/api/onboarding/join",
            json={"employer_id": employer_user.employer_id},
            headers=auth_headers(newcomer, settings),
        )

        assert refused.json()["valid"] is False
        assert check.json()["valid"] is True
        assert joined.status_code == 200
        assert joined.json()["user"]["employer_id"] == employer_user.employer_id


class TestIntermediaryApi:
    async def create_intermediary(self, session, managed):
        user = await SqlUserRepository(session).create_user(
            email="bureau@werving.nl",
            employer_id=None,
            status=USER_ACTIVE,
            first_name="Iris",
            last_name=None,
            role=None,
            user_type=USER_TYPE_INTERMEDIARY,
            managed_employer_ids=managed,
        )
        await session.commit()
        return user

    async def test_switch_then_act_for_employer(self, client, settings, session, catalog):
        first = await create_employer_user(session, "hr@acme.nl", balance=7)
        second = await create_employer_user(session, "hr@beta.nl")
        vacancy = (
            await client.post("/api/vacancies", json=_vacancy_body(catalog), headers=auth_headers(second, settings))
        ).json()
        intermediary = await self.create_intermediary(session, [first.employer_id, second.employer_id])
        headers = auth_headers(intermediary, settings)

        before = await client.get("/api/credits", headers=headers)
        switched = await client.post(
            "/api/intermediary/switch-employer", json={"employer_id": first.employer_id}, headers=headers
        )

        assert before.status_code == 400
        assert switched.status_code == 200
        assert switched.json()["data"]["id"] == first.employer_id
        assert (await client.get("/api/credits", headers=headers)).json()["available"] == 7
        managed = await client.get(f"/api/vacancies/{vacancy['id']}", headers=headers)
        assert managed.status_code == 200

    async def test_unmanaged_employer_is_forbidden(self, client, settings, session, employer_user):
        intermediary = await self.create_intermediary(session, [])

        response = await client.post(
            "/api/intermediary/switch-employer",
            json={"employer_id": employer_user.employer_id},
            headers=auth_headers(intermediary, settings),
        )

        assert response.status_code == 403


class TestCronApi:
    async def test_requires_the_secret(self, client, settings):
        assert (await client.post("/api/cron/expire-credits")).status_code == 401

        settings.security.cron_secret = "cron-secret"
        wrong = await client.post("/api/cron/expire-credits", headers={"Authorization": "Bearer nope"})

        assert wrong.status_code == 401

    async def test_expire_credits(self, client, settings, session, catalog, employer_user, session_factory):
        settings.security.cron_secret = "cron-secret"
        headers = auth_headers(employer_user, settings)
        await client.post("/api/checkout", json={"product_id": catalog["credits_20"].id}, headers=headers)
        await session.execute(
            update(CreditTransaction)
            .where(CreditTransaction.type == "purchase")
            .values(expires_at=utcnow() - timedelta(days=1))
        )
        await session.commit()

        response = await client.get("/api/cron/expire-credits", headers={"Authorization": "Bearer cron-secret"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "processed": 1, "total_expired": 20}
        credits = (await client.get("/api/credits", headers=headers)).json()
        assert credits["available"] == 0
        assert credits["total_spent"] == 20
        assert "credits_expired" in await _event_types(session_factory)
