"""Team management: invitations, membership and joining an existing employer."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.config import TeamSettings
from employer_portal.core.crypto import generate_token, hash_token
from employer_portal.core.timeutils import utcnow
from employer_portal.infrastructure.database.repositories.account_repository import (
    SqlEmployerRepository,
    SqlUserRepository,
)
from employer_portal.infrastructure.mail import Mailer, MailerError
from employer_portal.modules.accounts.exceptions import EmployerNotFoundError
from employer_portal.modules.accounts.models import USER_ACTIVE, USER_INVITED, USER_PENDING_ONBOARDING, Employer, User
from employer_portal.modules.accounts.repository import EmployerRepository, UserRepository

from .emails import render_invitation_email
from .exceptions import (
    InvitationExpiredError,
    InvitationNotFoundError,
    LastActiveMemberError,
    TeamConflictError,
    TeamMemberNotFoundError,
    TeamPermissionError,
    TeamValidationError,
)
from .models import (
    DOMAIN_MISMATCH_MESSAGE,
    Invitation,
    InvitationDetails,
    JoinCheck,
    JoinResult,
    RemovedMember,
    domains_match,
    is_valid_email,
)

logger = logging.getLogger(__name__)

TEAM_STATUSES = (USER_INVITED, USER_ACTIVE)


class TeamService:
    """Invites colleagues to an employer account and manages who belongs to it."""

    def __init__(
        self,
        users: UserRepository,
        employers: EmployerRepository,
        mailer: Mailer,
        *,
        settings: TeamSettings,
        secret_key: str,
        public_url: str,
    ) -> None:
        self._users = users
        self._employers = employers
        self._mailer = mailer
        self._settings = settings
        self._secret_key = secret_key
        self._public_url = public_url.rstrip("/")

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        mailer: Mailer,
        *,
        settings: TeamSettings,
        secret_key: str,
        public_url: str,
    ) -> "TeamService":
        return cls(
            SqlUserRepository(session),
            SqlEmployerRepository(session),
            mailer,
            settings=settings,
            secret_key=secret_key,
            public_url=public_url,
        )

    async def list_members(self, employer_id: str) -> list[User]:
        return await self._users.list_by_employer(employer_id, TEAM_STATUSES)

    async def invite(self, inviter: User, email: str) -> Invitation:
        """Create (or re-arm) an invited user and email the invitation link.

        A failed delivery does not undo the invitation; the caller gets
        ``email_sent=False`` instead.
        """
        address = (email or "").strip().lower()
        if not address:
            raise TeamValidationError("E-mailadres is verplicht")
        if not is_valid_email(address):
            raise TeamValidationError("Ongeldig e-mailadres")

        employer = await self._require_employer(inviter.employer_id)
        token = generate_token()
        invite_fields = {
            "employer_id": employer.id,
            "status": USER_INVITED,
            "invite_token_hash": hash_token(token, self._secret_key),
            "invite_expires_at": utcnow() + timedelta(hours=self._settings.invite_ttl_hours),
            "invited_by": inviter.id,
        }

        existing = await self._users.get_by_email(address)
        if existing is None:
            invited = await self._users.create_user(
                email=address,
                first_name=None,
                last_name=None,
                role=None,
                **invite_fields,
            )
        else:
            self._ensure_invitable(existing, employer.id)
            invited = await self._users.update_user(existing.id, invite_fields)

        company_name = employer.name or "het werkgeversaccount"
        url = f"{self._public_url}{self._invite_path()}/{token}"
        message = render_invitation_email(
            to=address,
            inviter_name=inviter.full_name or inviter.email,
            company_name=company_name,
            url=url,
            ttl_hours=self._settings.invite_ttl_hours,
            public_url=self._public_url,
        )
        email_sent = True
        try:
            await self._mailer.send(message)
        except MailerError:
            logger.warning("Invitation email for user %s could not be sent", invited.id)
            email_sent = False

        logger.info("User %s invited to employer %s by %s", invited.id, employer.id, inviter.id)
        return Invitation(user=invited, company_name=company_name, url=url, email_sent=email_sent)

    async def check_invitation(self, token: str) -> InvitationDetails:
        if not token:
            raise TeamValidationError("Token is verplicht")

        invited = await self._users.get_by_invite_hash(hash_token(token, self._secret_key))
        if invited is None:
            raise InvitationNotFoundError("Uitnodiging niet gevonden of al gebruikt.")
        if invited.invite_expires_at is not None and invited.invite_expires_at < utcnow():
            raise InvitationExpiredError("Deze uitnodiging is verlopen. Vraag een nieuwe uitnodiging aan.")
        if invited.status != USER_INVITED:
            raise InvitationExpiredError("Deze uitnodiging is al geaccepteerd.")

        employer = await self._employers.get_by_id(invited.employer_id) if invited.employer_id else None
        return InvitationDetails(user=invited, company_name=employer.name if employer else "")

    async def accept_invitation(
        self, token: str, *, first_name: str, last_name: str, role: Optional[str] = None
    ) -> User:
        if not (first_name or "").strip() or not (last_name or "").strip():
            raise TeamValidationError("Voornaam en achternaam zijn verplicht")

        details = await self.check_invitation(token)
        changes = {
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "status": USER_ACTIVE,
            "invite_token_hash": None,
            "invite_expires_at": None,
        }
        if role:
            changes["role"] = role
        user = await self._users.update_user(details.user.id, changes)
        logger.info("User %s accepted the invitation for employer %s", user.id, user.employer_id)
        return user

    async def remove_member(self, actor: User, target_user_id: str) -> RemovedMember:
        """Delete a pending invitation or unlink an active member from the employer."""
        if not target_user_id:
            raise TeamValidationError("Gebruiker is verplicht")

        target = await self._users.get_by_id(target_user_id)
        if target is None:
            raise TeamMemberNotFoundError("Teamlid niet gevonden")
        if not actor.employer_id or target.employer_id != actor.employer_id:
            raise TeamPermissionError("Deze gebruiker hoort niet bij je team")

        was_invited = target.status == USER_INVITED
        if not was_invited:
            members = await self._users.list_by_employer(actor.employer_id)
            active = [member for member in members if member.status != USER_INVITED]
            if len(active) <= 1:
                raise LastActiveMemberError("Er moet minimaal één actief teamlid overblijven")

        if was_invited:
            await self._users.delete_user(target.id)
        else:
            await self._users.update_user(target.id, {"employer_id": None, "status": USER_PENDING_ONBOARDING})
        logger.info("User %s removed from employer %s by %s", target.id, actor.employer_id, actor.id)
        return RemovedMember(user=target, was_invited=was_invited)

    async def check_join(self, email: str, employer_id: str) -> JoinCheck:
        address = (email or "").strip().lower()
        if not address:
            raise TeamValidationError("E-mailadres is verplicht")
        employer = await self._require_employer(employer_id)

        existing = await self._users.get_by_email(address)
        if existing is not None and existing.is_active():
            raise TeamConflictError("Er bestaat al een account met dit e-mailadres. Log in om verder te gaan.")
        if not employer.website_url:
            raise TeamValidationError(
                "Dit werkgeversaccount heeft geen website-URL geconfigureerd. Neem contact op met Colourful jobs."
            )

        if not domains_match(address, employer.website_url):
            return JoinCheck(valid=False, employer=employer, message=DOMAIN_MISMATCH_MESSAGE)
        return JoinCheck(valid=True, employer=employer)

    async def complete_join(self, user: User, employer_id: str) -> JoinResult:
        employer = await self._require_employer(employer_id)
        if user.is_active() and user.employer_id and user.employer_id != employer.id:
            raise TeamConflictError("Je account is al gekoppeld aan een andere werkgever.")
        if not domains_match(user.email, employer.website_url or ""):
            raise TeamPermissionError(DOMAIN_MISMATCH_MESSAGE)

        joined = await self._users.update_user(user.id, {"employer_id": employer.id, "status": USER_ACTIVE})
        logger.info("User %s joined employer %s", joined.id, employer.id)
        return JoinResult(user=joined, employer=employer)

    async def _require_employer(self, employer_id: Optional[str]) -> Employer:
        employer = await self._employers.get_by_id(employer_id) if employer_id else None
        if employer is None:
            raise EmployerNotFoundError("Werkgever niet gevonden")
        return employer

    @staticmethod
    def _ensure_invitable(existing: User, employer_id: str) -> None:
        if existing.employer_id == employer_id:
            if existing.status == USER_INVITED:
                raise TeamConflictError("Dit e-mailadres heeft al een openstaande uitnodiging.")
            if existing.status == USER_ACTIVE:
                raise TeamConflictError("Dit e-mailadres is al een teamlid.")
        if existing.is_active() and existing.employer_id:
            raise TeamConflictError("Dit e-mailadres heeft al een account bij Colourful jobs.")

    def _invite_path(self) -> str:
        path = self._settings.invite_path.rstrip("/")
        return path if path.startswith("/") else f"/{path}"
