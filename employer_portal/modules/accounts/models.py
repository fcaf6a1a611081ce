"""Domain models for users and employers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

USER_PENDING_ONBOARDING = "pending_onboarding"
USER_INVITED = "invited"
USER_ACTIVE = "active"
USER_STATUSES = {USER_PENDING_ONBOARDING, USER_INVITED, USER_ACTIVE}

USER_TYPE_EMPLOYER = "employer"
USER_TYPE_INTERMEDIARY = "intermediary"

EMPLOYER_DRAFT = "draft"
EMPLOYER_ACTIVE = "active"
EMPLOYER_STATUSES = {EMPLOYER_DRAFT, EMPLOYER_ACTIVE}

EMPLOYER_ROLE = "employer"

USER_EDITABLE_FIELDS = ("first_name", "last_name", "role")

# Writable employer columns per account section.
SECTION_FIELDS: dict[str, tuple[str, ...]] = {
    "company": ("company_name", "phone", "kvk"),
    "billing": (
        "reference_nr",
        "invoice_contact_name",
        "invoice_email",
        "invoice_street",
        "invoice_house_number",
        "invoice_house_number_addition",
        "invoice_postal_code",
        "invoice_city",
    ),
    "website": (
        "display_name",
        "website_url",
        "short_description",
        "video_url",
        "sector_id",
        "location",
        "logo_id",
        "header_image_id",
        "gallery",
    ),
    "onboarding": ("onboarding_dismissed",),
}

EMPLOYER_EDITABLE_FIELDS = tuple(
    dict.fromkeys(
        SECTION_FIELDS["company"]
        + SECTION_FIELDS["billing"]
        + SECTION_FIELDS["website"]
        + ("status",)
    )
)


@dataclass(slots=True)
class User:
    id: str
    email: str
    status: str
    employer_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    user_type: str = USER_TYPE_EMPLOYER
    active_employer_id: Optional[str] = None
    managed_employer_ids: list[str] = field(default_factory=list)
    invited_by: Optional[str] = None
    invite_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_active(self) -> bool:
        return self.status == USER_ACTIVE

    def is_intermediary(self) -> bool:
        return self.user_type == USER_TYPE_INTERMEDIARY

    def acting_user(self) -> "User":
        """The user as seen by employer-scoped operations.

        Intermediaries act for whichever managed employer they switched to.
        """
        if self.is_intermediary():
            return replace(self, employer_id=self.active_employer_id)
        return self

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(slots=True)
class Employer:
    id: str
    status: str
    company_name: Optional[str] = None
    display_name: Optional[str] = None
    kvk: Optional[str] = None
    phone: Optional[str] = None
    website_url: Optional[str] = None
    reference_nr: Optional[str] = None
    invoice_contact_name: Optional[str] = None
    invoice_email: Optional[str] = None
    invoice_street: Optional[str] = None
    invoice_house_number: Optional[str] = None
    invoice_house_number_addition: Optional[str] = None
    invoice_postal_code: Optional[str] = None
    invoice_city: Optional[str] = None
    sector_id: Optional[str] = None
    location: Optional[str] = None
    short_description: Optional[str] = None
    video_url: Optional[str] = None
    logo_id: Optional[str] = None
    header_image_id: Optional[str] = None
    gallery: list[str] = field(default_factory=list)
    role_id: Optional[str] = None
    onboarding_dismissed: bool = False
    needs_sync: bool = False
    created_at: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.display_name or self.company_name or ""

    def invoice_details(self) -> dict[str, Optional[str]]:
        return {
            "company_name": self.company_name,
            "kvk": self.kvk,
            "reference_nr": self.reference_nr,
            "contact_name": self.invoice_contact_name,
            "email": self.invoice_email,
            "street": self.invoice_street,
            "house_number": self.invoice_house_number,
            "house_number_addition": self.invoice_house_number_addition,
            "postal_code": self.invoice_postal_code,
            "city": self.invoice_city,
        }


@dataclass(slots=True)
class OnboardingInput:
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None


@dataclass(slots=True)
class OnboardingResult:
    user: User
    employer: Employer
    wallet_id: str


@dataclass(slots=True)
class GalleryImage:
    id: str
    url: str


@dataclass(slots=True)
class AccountOverview:
    user: User
    employer: Optional[Employer]
    balance: int = 0
    total_purchased: int = 0
    total_spent: int = 0
    sector_name: Optional[str] = None
    logo_url: Optional[str] = None
    header_image_url: Optional[str] = None
    gallery_images: list[GalleryImage] = field(default_factory=list)

    @property
    def profile_missing_fields(self) -> list[str]:
        missing: list[str] = []
        if self.employer is None or not (self.employer.display_name or "").strip():
            missing.append("Weergavenaam")
        if not self.sector_name:
            missing.append("Sector")
        if not self.logo_url:
            missing.append("Logo")
        return missing

    @property
    def profile_complete(self) -> bool:
        return not self.profile_missing_fields
