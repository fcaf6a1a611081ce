"""Domain models for vacancies and their lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

CONCEPT = "concept"
AWAITING_APPROVAL = "awaiting_approval"
PUBLISHED = "published"
EXPIRED = "expired"
UNPUBLISHED = "unpublished"
NEEDS_ADJUSTMENT = "needs_adjustment"
VACANCY_STATUSES = (CONCEPT, AWAITING_APPROVAL, PUBLISHED, EXPIRED, UNPUBLISHED, NEEDS_ADJUSTMENT)
BOOSTABLE_STATUSES = (PUBLISHED, EXPIRED)

SELF_SERVICE = "self_service"
WE_DO_IT_FOR_YOU = "we_do_it_for_you"
INPUT_TYPES = (SELF_SERVICE, WE_DO_IT_FOR_YOU)

CONTENT_FIELDS = (
    "title",
    "intro_txt",
    "description",
    "location",
    "employment_type",
    "hrs_per_week",
    "salary",
    "region_id",
    "sector_id",
    "function_type_id",
    "education_level_id",
    "field_id",
    "apply_url",
    "application_email",
    "show_apply_form",
    "contact_name",
    "contact_role",
    "contact_email",
    "contact_phone",
)

# Client-writable columns; everything else is owned by the lifecycle operations.
EDITABLE_FIELDS = CONTENT_FIELDS + ("input_type", "package_id", "selected_upsells", "closing_date")
# Settled by payment on submit; fixed once the vacancy leaves concept.
PRICED_FIELDS = ("package_id", "selected_upsells")


@dataclass(slots=True)
class Vacancy:
    id: str
    employer_id: str
    status: str
    input_type: str = SELF_SERVICE
    created_by: Optional[str] = None
    package_id: Optional[str] = None
    selected_upsells: list[str] = field(default_factory=list)
    title: Optional[str] = None
    intro_txt: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    hrs_per_week: Optional[str] = None
    salary: Optional[str] = None
    region_id: Optional[str] = None
    sector_id: Optional[str] = None
    function_type_id: Optional[str] = None
    education_level_id: Optional[str] = None
    field_id: Optional[str] = None
    apply_url: Optional[str] = None
    application_email: Optional[str] = None
    show_apply_form: bool = False
    contact_name: Optional[str] = None
    contact_role: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    closing_date: Optional[date] = None
    needs_sync: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    last_published_at: Optional[datetime] = None
    depublished_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def missing_required_fields(vacancy: Vacancy) -> list[str]:
    """Field names that must be filled in before the vacancy can be submitted."""
    missing: list[str] = []
    if vacancy.input_type == SELF_SERVICE:
        if _blank(vacancy.title):
            missing.append("title")
        if _blank(vacancy.intro_txt):
            missing.append("intro_txt")
        if _blank(vacancy.description):
            missing.append("description")
        if _blank(vacancy.location):
            missing.append("location")
        if not vacancy.region_id:
            missing.append("region")
        if not vacancy.sector_id:
            missing.append("sector")
        if not vacancy.function_type_id:
            missing.append("function_type")
    elif _blank(vacancy.description):
        missing.append("description")

    if not vacancy.show_apply_form and _blank(vacancy.apply_url):
        missing.append("apply_url")
    if vacancy.show_apply_form and _blank(vacancy.application_email):
        missing.append("application_email")
    return missing


@dataclass(slots=True)
class SubmitResult:
    vacancy: Vacancy
    credits_spent: int
    new_balance: int
    transaction_id: str
    package_name: str


@dataclass(slots=True)
class BoostResult:
    vacancy: Vacancy
    credits_spent: int
    new_balance: int
    upsell_ids: list[str]
    upsell_names: list[str]
