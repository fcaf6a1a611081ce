"""team invitations, intermediaries and expiring credit batches

Revision ID: 8c3d47e1a6f2
Revises: 5e1f0c2a9b7d
Create Date: 2026-10-19 14:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "8c3d47e1a6f2"
down_revision = "5e1f0c2a9b7d"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("users") as batch:
        batch.add_column(sa.Column("user_type", sa.String(length=20), nullable=False, server_default="employer"))
        batch.add_column(sa.Column("active_employer_id", sa.String(length=36)))
        batch.add_column(sa.Column("managed_employer_ids", sa.JSON(), nullable=False, server_default="[]"))
        batch.add_column(sa.Column("invite_token_hash", sa.String(length=128)))
        batch.add_column(sa.Column("invite_expires_at", sa.DateTime(timezone=True)))
        batch.add_column(sa.Column("invited_by", sa.String(length=36)))
        batch.create_index("ix_users_invite_token_hash", ["invite_token_hash"], unique=True)

    with op.batch_alter_table("transactions") as batch:
        batch.add_column(sa.Column("expires_at", sa.DateTime(timezone=True)))
        batch.add_column(sa.Column("remaining_credits", sa.Integer()))
        batch.create_index("ix_transactions_expires_at", ["expires_at"])


def downgrade() -> None:
    with op.batch_alter_table("transactions") as batch:
        batch.drop_index("ix_transactions_expires_at")
        batch.drop_column("remaining_credits")
        batch.drop_column("expires_at")

    with op.batch_alter_table("users") as batch:
        batch.drop_index("ix_users_invite_token_hash")
        batch.drop_column("invited_by")
        batch.drop_column("invite_expires_at")
        batch.drop_column("invite_token_hash")
        batch.drop_column("managed_employer_ids")
        batch.drop_column("active_employer_id")
        batch.drop_column("user_type")
