"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from employer_portal.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(50), unique=True, nullable=False)


class Employer(Base):
    __tablename__ = "employers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_name = Column(String(255))
    display_name = Column(String(255))
    kvk = Column(String(20), index=True)
    phone = Column(String(50))
    website_url = Column(String(500))
    reference_nr = Column(String(100))
    invoice_contact_name = Column(String(255))
    invoice_email = Column(String(255))
    invoice_street = Column(String(255))
    invoice_house_number = Column(String(20))
    invoice_house_number_addition = Column(String(20))
    invoice_postal_code = Column(String(20))
    invoice_city = Column(String(100))
    sector_id = Column(String(36))
    location = Column(String(255))
    short_description = Column(Text)
    video_url = Column(String(500))
    logo_id = Column(String(36))
    header_image_id = Column(String(36))
    gallery = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="draft")  # draft, active
    role_id = Column(String(36), ForeignKey("roles.id"))
    onboarding_dismissed = Column(Boolean, nullable=False, default=False)
    needs_sync = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    users = relationship("User", back_populates="employer")
    wallet = relationship("Wallet", back_populates="employer", uselist=False)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    employer_id = Column(String(36), ForeignKey("employers.id"), nullable=True, index=True)
    status = Column(String(30), nullable=False, default="pending_onboarding")  # pending_onboarding, invited, active
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(100))
    user_type = Column(String(20), nullable=False, default="employer")  # employer, intermediary
    active_employer_id = Column(String(36))
    managed_employer_ids = Column(JSON, nullable=False, default=list)
    invite_token_hash = Column(String(128), unique=True, index=True)
    invite_expires_at = Column(DateTime(timezone=True))
    invited_by = Column(String(36))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True))

    employer = relationship("Employer", back_populates="users")


class Wallet(Base):
    __tablename__ = "wallets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    employer_id = Column(String(36), ForeignKey("employers.id"), unique=True, nullable=False)
    owner_type = Column(String(20), nullable=False, default="employer")
    balance = Column(Integer, nullable=False, default=0)
    total_purchased = Column(Integer, nullable=False, default=0)
    total_spent = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employer = relationship("Employer", back_populates="wallet")
    transactions = relationship("CreditTransaction", back_populates="wallet")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    slug = Column(String(100), unique=True, nullable=False)
    display_name = Column(String(255), nullable=False)
    description = Column(Text)
    type = Column(String(30), nullable=False, index=True)  # vacancy_package, credit_bundle, upsell
    credits = Column(Integer, nullable=False, default=0)
    price_cents = Column(Integer, nullable=False, default=0)
    base_price_cents = Column(Integer)
    duration_days = Column(Integer)
    availability = Column(JSON, nullable=False, default=list)  # add-vacancy, boost-option
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CreditTransaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id"), nullable=False, index=True)
    employer_id = Column(String(36), ForeignKey("employers.id"), nullable=False, index=True)
    user_id = Column(String(36))
    vacancy_id = Column(String(36), ForeignKey("vacancies.id"), nullable=True, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=True)
    type = Column(String(20), nullable=False)  # purchase, spend, refund, adjustment, expiration
    status = Column(String(20), nullable=False)  # paid, failed, refunded, open
    reference_type = Column(String(20))  # vacancy, order, admin, system
    context = Column(String(20))  # dashboard, vacancy, boost, renew, transactions
    credits_amount = Column(Integer, nullable=False)
    money_amount_cents = Column(Integer)
    invoice_details_snapshot = Column(JSON)
    # purchase batches only: credits left to spend before expires_at
    expires_at = Column(DateTime(timezone=True), index=True)
    remaining_credits = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    wallet = relationship("Wallet", back_populates="transactions")


class Vacancy(Base):
    __tablename__ = "vacancies"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    employer_id = Column(String(36), ForeignKey("employers.id"), nullable=False, index=True)
    created_by = Column(String(36))
    status = Column(String(30), nullable=False, default="concept")
    input_type = Column(String(30), nullable=False, default="self_service")
    package_id = Column(String(36), ForeignKey("products.id"), nullable=True)
    selected_upsells = Column(JSON, nullable=False, default=list)
    title = Column(String(255))
    intro_txt = Column(Text)
    description = Column(Text)
    location = Column(String(255))
    employment_type = Column(String(50))
    hrs_per_week = Column(String(50))
    salary = Column(String(100))
    region_id = Column(String(36))
    sector_id = Column(String(36))
    function_type_id = Column(String(36))
    education_level_id = Column(String(36))
    field_id = Column(String(36))
    apply_url = Column(String(500))
    application_email = Column(String(255))
    show_apply_form = Column(Boolean, nullable=False, default=False)
    contact_name = Column(String(255))
    contact_role = Column(String(255))
    contact_email = Column(String(255))
    contact_phone = Column(String(50))
    closing_date = Column(Date)
    needs_sync = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    submitted_at = Column(DateTime(timezone=True))
    last_published_at = Column(DateTime(timezone=True))
    depublished_at = Column(DateTime(timezone=True))
    status_changed_at = Column(DateTime(timezone=True))


class MediaAsset(Base):
    __tablename__ = "media_assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    employer_id = Column(String(36), ForeignKey("employers.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # logo, sfeerbeeld
    url = Column(String(1000), nullable=False)
    public_id = Column(String(500))
    format = Column(String(20))
    file_size = Column(Integer)
    alt_text = Column(String(500))
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Lookup(Base):
    __tablename__ = "lookups"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    kind = Column(String(30), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    event_type = Column(String(50), nullable=False, index=True)
    actor_user_id = Column(String(36))
    target_user_id = Column(String(36))
    employer_id = Column(String(36), index=True)
    vacancy_id = Column(String(36))
    payload = Column(JSON)
    source = Column(String(20), nullable=False, default="web")
    ip_address = Column(String(45))
    status = Column(String(20), nullable=False, default="new")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    identifier = Column(String(255), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)
    expires = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, used, revoked
    request_type = Column(String(20), nullable=False, default="login")  # login, verification
    user_id = Column(String(36))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    used_at = Column(DateTime(timezone=True))
