"""Team membership, invitations and domain checks for joining an employer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from employer_portal.modules.accounts.models import Employer, User

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DOMAIN_MISMATCH_MESSAGE = (
    "De domeinnaam van je e-mailadres komt niet overeen met dit werkgeversaccount. "
    "Neem contact op met een contactpersoon binnen het bedrijf of met Colourful jobs."
)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def email_domain(email: str) -> Optional[str]:
    if not email or email.count("@") != 1:
        return None
    domain = email.split("@")[1].strip().lower()
    return domain or None


def website_domain(url: str) -> Optional[str]:
    """Hostname without a leading ``www.``; None for anything that is not an absolute URL."""
    if not url:
        return None
    host = urlparse(url.strip()).hostname
    if not host:
        return None
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def domains_match(email: str, url: str) -> bool:
    left, right = email_domain(email), website_domain(url)
    return left is not None and left == right


@dataclass(slots=True)
class Invitation:
    user: User
    company_name: str
    url: str
    email_sent: bool


@dataclass(slots=True)
class InvitationDetails:
    user: User
    company_name: str


@dataclass(slots=True)
class RemovedMember:
    user: User
    was_invited: bool


@dataclass(slots=True)
class JoinCheck:
    valid: bool
    employer: Employer
    message: Optional[str] = None


@dataclass(slots=True)
class JoinResult:
    user: User
    employer: Employer
