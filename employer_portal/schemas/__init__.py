"""Pydantic schemas used across the project."""
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MagicLinkRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class MagicLinkResponse(BaseModel):
    ok: bool = True
    message: str = "Als dit e-mailadres bij ons bekend is, ontvang je binnen enkele minuten een link."


class VerifyRequest(BaseModel):
    token: str = Field(..., min_length=1)


class SessionUser(BaseModel):
    id: str
    email: str
    employer_id: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser


class VerifyResponse(SessionResponse):
    request_type: str


class OnboardingStartRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[str] = Field(default=None, max_length=100)


class OnboardingStartResponse(BaseModel):
    user_id: str
    employer_id: str
    wallet_id: str
    email_sent: bool


class OnboardingUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = None
    kvk: Optional[str] = None
    reference_nr: Optional[str] = None
    invoice_contact_name: Optional[str] = None
    invoice_email: Optional[str] = None
    invoice_street: Optional[str] = None
    invoice_house_number: Optional[str] = None
    invoice_house_number_addition: Optional[str] = None
    invoice_postal_code: Optional[str] = None
    invoice_city: Optional[str] = None
    display_name: Optional[str] = None
    website_url: Optional[str] = None
    short_description: Optional[str] = None
    video_url: Optional[str] = None
    sector_id: Optional[str] = None
    location: Optional[str] = None
    logo_id: Optional[str] = None
    header_image_id: Optional[str] = None
    gallery: Optional[list[str]] = None


class OnboardingUpdateResponse(BaseModel):
    success: bool = True
    updated_fields: list[str]
    completed: bool = False


class EmployerSummary(BaseModel):
    id: str
    company_name: Optional[str] = None
    display_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class KvkCheckResponse(BaseModel):
    exists: bool
    employer: Optional[EmployerSummary] = None


class AccountUpdateRequest(BaseModel):
    section: str
    data: dict[str, Any] = Field(default_factory=dict)


class GalleryImageResponse(BaseModel):
    id: str
    url: str

    model_config = ConfigDict(from_attributes=True)


class AccountPersonal(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: Optional[str] = None


class AccountCompany(BaseModel):
    company_name: Optional[str] = None
    kvk: Optional[str] = None
    phone: Optional[str] = None


class AccountBilling(BaseModel):
    reference_nr: Optional[str] = None
    invoice_contact_name: Optional[str] = None
    invoice_email: Optional[str] = None
    invoice_street: Optional[str] = None
    invoice_house_number: Optional[str] = None
    invoice_house_number_addition: Optional[str] = None
    invoice_postal_code: Optional[str] = None
    invoice_city: Optional[str] = None


class AccountWebsite(BaseModel):
    display_name: Optional[str] = None
    website_url: Optional[str] = None
    short_description: Optional[str] = None
    video_url: Optional[str] = None
    sector_id: Optional[str] = None
    sector_name: Optional[str] = None
    location: Optional[str] = None
    logo_id: Optional[str] = None
    logo_url: Optional[str] = None
    header_image_id: Optional[str] = None
    header_image_url: Optional[str] = None
    gallery: list[GalleryImageResponse] = Field(default_factory=list)


class ExpiringCreditsResponse(BaseModel):
    total: int
    days_until: int
    earliest_date: date

    model_config = ConfigDict(from_attributes=True)


class CreditSummary(BaseModel):
    available: int = 0
    total_purchased: int = 0
    total_spent: int = 0
    expiring_soon: Optional[ExpiringCreditsResponse] = None


class AccountResponse(BaseModel):
    personal: AccountPersonal
    company: Optional[AccountCompany] = None
    billing: Optional[AccountBilling] = None
    website: Optional[AccountWebsite] = None
    credits: CreditSummary
    onboarding_dismissed: bool = False
    profile_complete: bool
    profile_missing_fields: list[str]


class AccountDeleteResponse(BaseModel):
    success: bool = True
    employer_deleted: bool


class VacancyWrite(BaseModel):
    """Body for create and update; unknown or lifecycle-owned keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    input_type: Optional[str] = None
    package_id: Optional[str] = None
    selected_upsells: Optional[list[str]] = None
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
    show_apply_form: Optional[bool] = None
    contact_name: Optional[str] = None
    contact_role: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    closing_date: Optional[date] = None
    status: Optional[str] = None


class VacancyResponse(BaseModel):
    id: str
    employer_id: str
    status: str
    input_type: str
    created_by: Optional[str] = None
    package_id: Optional[str] = None
    selected_upsells: list[str] = Field(default_factory=list)
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

    model_config = ConfigDict(from_attributes=True)


class VacancyListResponse(BaseModel):
    total: int
    vacancies: list[VacancyResponse]


class SubmitResponse(BaseModel):
    success: bool = True
    vacancy: VacancyResponse
    credits_spent: int
    new_balance: int
    transaction_id: str
    package_name: str


class BoostRequest(BaseModel):
    upsell_ids: list[str] = Field(default_factory=list)


class BoostResponse(BaseModel):
    success: bool = True
    vacancy: VacancyResponse
    credits_spent: int
    new_balance: int
    upsells_added: list[str]


class WalletResponse(BaseModel):
    available: int
    total_purchased: int
    total_spent: int
    expiring_soon: Optional[ExpiringCreditsResponse] = None


class CreditTransactionResponse(BaseModel):
    id: str
    type: str
    status: str
    context: Optional[str] = None
    reference_type: Optional[str] = None
    credits_amount: int
    money_amount_cents: Optional[int] = None
    vacancy_id: Optional[str] = None
    product_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    remaining_credits: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreditTransactionListResponse(BaseModel):
    transactions: list[CreditTransactionResponse]


class CheckoutRequest(BaseModel):
    product_id: str
    context: str = "dashboard"


class CheckoutResponse(BaseModel):
    success: bool = True
    transaction_id: str
    credits_added: int
    new_balance: int


class ProductResponse(BaseModel):
    id: str
    slug: str
    display_name: str
    description: Optional[str] = None
    type: str
    credits: int
    price_cents: int
    base_price_cents: Optional[int] = None
    duration_days: Optional[int] = None
    availability: list[str] = Field(default_factory=list)
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class LookupResponse(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class MediaAssetResponse(BaseModel):
    id: str
    type: str
    url: str
    format: Optional[str] = None
    file_size: Optional[int] = None
    file_size_label: Optional[str] = None
    alt_text: Optional[str] = None
    created_at: Optional[datetime] = None


class MediaLibraryResponse(BaseModel):
    logo: Optional[MediaAssetResponse] = None
    images: list[MediaAssetResponse]
    header_image_id: Optional[str] = None
    max_images: int


class MediaActionRequest(BaseModel):
    id: Optional[str] = None
    action: Optional[str] = None


class MediaActionResponse(BaseModel):
    success: bool = True
    header_image_id: Optional[str] = None


class MediaDeleteResponse(BaseModel):
    success: bool = True
    deleted_id: str


class CreditExpiryResponse(BaseModel):
    success: bool = True
    processed: int
    total_expired: int


class TeamMemberResponse(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class TeamListResponse(BaseModel):
    team: list[TeamMemberResponse]


class TeamRemoveRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class TeamInviteRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class TeamInviteResponse(BaseModel):
    success: bool = True
    message: str = "Uitnodiging verstuurd"
    email_sent: bool = True


class InvitationCheckResponse(BaseModel):
    valid: bool = True
    email: str
    company_name: str


class InvitationAcceptRequest(BaseModel):
    token: str = Field(..., min_length=1)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: Optional[str] = Field(default=None, max_length=100)


class JoinCheckRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    employer_id: str = Field(..., min_length=1)


class JoinCheckResponse(BaseModel):
    valid: bool
    employer: Optional[EmployerSummary] = None
    error: Optional[str] = None


class JoinCompleteRequest(BaseModel):
    employer_id: str = Field(..., min_length=1)


class JoinCompleteResponse(BaseModel):
    success: bool = True
    user: SessionUser
    employer: EmployerSummary


class SwitchEmployerRequest(BaseModel):
    employer_id: str = Field(..., min_length=1)


class SwitchEmployerResponse(BaseModel):
    success: bool = True
    data: EmployerSummary
