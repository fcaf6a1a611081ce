"""employer portal schema

Revision ID: 5e1f0c2a9b7d
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5e1f0c2a9b7d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False, unique=True),
    )

    op.create_table(
        "employers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("company_name", sa.String(length=255)),
        sa.Column("display_name", sa.String(length=255)),
        sa.Column("kvk", sa.String(length=20)),
        sa.Column("phone", sa.String(length=50)),
        sa.Column("website_url", sa.String(length=500)),
        sa.Column("reference_nr", sa.String(length=100)),
        sa.Column("invoice_contact_name", sa.String(length=255)),
        sa.Column("invoice_email", sa.String(length=255)),
        sa.Column("invoice_street", sa.String(length=255)),
        sa.Column("invoice_house_number", sa.String(length=20)),
        sa.Column("invoice_house_number_addition", sa.String(length=20)),
        sa.Column("invoice_postal_code", sa.String(length=20)),
        sa.Column("invoice_city", sa.String(length=100)),
        sa.Column("sector_id", sa.String(length=36)),
        sa.Column("location", sa.String(length=255)),
        sa.Column("short_description", sa.Text()),
        sa.Column("video_url", sa.String(length=500)),
        sa.Column("logo_id", sa.String(length=36)),
        sa.Column("header_image_id", sa.String(length=36)),
        sa.Column("gallery", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("role_id", sa.String(length=36), sa.ForeignKey("roles.id")),
        sa.Column("onboarding_dismissed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("needs_sync", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_employers_kvk", "employers", ["kvk"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("employer_id", sa.String(length=36), sa.ForeignKey("employers.id")),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="pending_onboarding"),
        sa.Column("first_name", sa.String(length=100)),
        sa.Column("last_name", sa.String(length=100)),
        sa.Column("role", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_employer_id", "users", ["employer_id"])

    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("employer_id", sa.String(length=36), sa.ForeignKey("employers.id"), nullable=False, unique=True),
        sa.Column("owner_type", sa.String(length=20), nullable=False, server_default="employer"),
        sa.Column("balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_purchased", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("slug", sa.String(length=100), nullable=False, unique=True),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("base_price_cents", sa.Integer()),
        sa.Column("duration_days", sa.Integer()),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_products_type", "products", ["type"])

    op.create_table(
        "vacancies",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("employer_id", sa.String(length=36), sa.ForeignKey("employers.id"), nullable=False),
        sa.Column("created_by", sa.String(length=36)),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="concept"),
        sa.Column("input_type", sa.String(length=30), nullable=False, server_default="self_service"),
        sa.Column("package_id", sa.String(length=36), sa.ForeignKey("products.id")),
        sa.Column("selected_upsells", sa.JSON(), nullable=False),
        sa.Column("title", sa.String(length=255)),
        sa.Column("intro_txt", sa.Text()),
        sa.Column("description", sa.Text()),
        sa.Column("location", sa.String(length=255)),
        sa.Column("employment_type", sa.String(length=50)),
        sa.Column("hrs_per_week", sa.String(length=50)),
        sa.Column("salary", sa.String(length=100)),
        sa.Column("region_id", sa.String(length=36)),
        sa.Column("sector_id", sa.String(length=36)),
        sa.Column("function_type_id", sa.String(length=36)),
        sa.Column("education_level_id", sa.String(length=36)),
        sa.Column("field_id", sa.String(length=36)),
        sa.Column("apply_url", sa.String(length=500)),
        sa.Column("application_email", sa.String(length=255)),
        sa.Column("show_apply_form", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contact_name", sa.String(length=255)),
        sa.Column("contact_role", sa.String(length=255)),
        sa.Column("contact_email", sa.String(length=255)),
        sa.Column("contact_phone", sa.String(length=50)),
        sa.Column("closing_date", sa.Date()),
        sa.Column("needs_sync", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("submitted_at", sa.DateTime(timezone=True)),
        sa.Column("last_published_at", sa.DateTime(timezone=True)),
        sa.Column("depublished_at", sa.DateTime(timezone=True)),
        sa.Column("status_changed_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_vacancies_employer_id", "vacancies", ["employer_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet_id", sa.String(length=36), sa.ForeignKey("wallets.id"), nullable=False),
        sa.Column("employer_id", sa.String(length=36), sa.ForeignKey("employers.id"), nullable=False),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("vacancy_id", sa.String(length=36), sa.ForeignKey("vacancies.id")),
        sa.Column("product_id", sa.String(length=36), sa.ForeignKey("products.id")),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("reference_type", sa.String(length=20)),
        sa.Column("context", sa.String(length=20)),
        sa.Column("credits_amount", sa.Integer(), nullable=False),
        sa.Column("money_amount_cents", sa.Integer()),
        sa.Column("invoice_details_snapshot", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_transactions_wallet_id", "transactions", ["wallet_id"])
    op.create_index("ix_transactions_employer_id", "transactions", ["employer_id"])
    op.create_index("ix_transactions_vacancy_id", "transactions", ["vacancy_id"])

    op.create_table(
        "media_assets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("employer_id", sa.String(length=36), sa.ForeignKey("employers.id"), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("public_id", sa.String(length=500)),
        sa.Column("format", sa.String(length=20)),
        sa.Column("file_size", sa.Integer()),
        sa.Column("alt_text", sa.String(length=500)),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_media_assets_employer_id", "media_assets", ["employer_id"])

    op.create_table(
        "lookups",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("kind", sa.String(length=30), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_lookups_kind", "lookups", ["kind"])

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("actor_user_id", sa.String(length=36)),
        sa.Column("target_user_id", sa.String(length=36)),
        sa.Column("employer_id", sa.String(length=36)),
        sa.Column("vacancy_id", sa.String(length=36)),
        sa.Column("payload", sa.JSON()),
        sa.Column("source", sa.String(length=20), nullable=False, server_default="web"),
        sa.Column("ip_address", sa.String(length=45)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="new"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_event_type", "events", ["event_type"])
    op.create_index("ix_events_employer_id", "events", ["employer_id"])

    op.create_table(
        "verification_tokens",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("identifier", sa.String(length=255), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False, unique=True),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("request_type", sa.String(length=20), nullable=False, server_default="login"),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("used_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_verification_tokens_identifier", "verification_tokens", ["identifier"])


def downgrade() -> None:
    op.drop_index("ix_verification_tokens_identifier", table_name="verification_tokens")
    op.drop_table("verification_tokens")
    op.drop_index("ix_events_employer_id", table_name="events")
    op.drop_index("ix_events_event_type", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_lookups_kind", table_name="lookups")
    op.drop_table("lookups")
    op.drop_index("ix_media_assets_employer_id", table_name="media_assets")
    op.drop_table("media_assets")
    op.drop_index("ix_transactions_vacancy_id", table_name="transactions")
    op.drop_index("ix_transactions_employer_id", table_name="transactions")
    op.drop_index("ix_transactions_wallet_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_vacancies_employer_id", table_name="vacancies")
    op.drop_table("vacancies")
    op.drop_index("ix_products_type", table_name="products")
    op.drop_table("products")
    op.drop_table("wallets")
    op.drop_index("ix_users_employer_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_employers_kvk", table_name="employers")
    op.drop_table("employers")
    op.drop_table("roles")
