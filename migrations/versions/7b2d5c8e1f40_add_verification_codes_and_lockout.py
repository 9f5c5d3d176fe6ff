"""add verification_codes table and lockout counters

Revision ID: 7b2d5c8e1f40
Revises: 4e1f0a9b2c3d
Create Date: 2026-10-02 00:00:00.000000

Codes are stored hashed and never deleted; consumed_at marks the one that
verified the account. Existing users start with zeroed counters.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7b2d5c8e1f40"
down_revision = "4e1f0a9b2c3d"
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.add_column(
            sa.Column("failed_login_count", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.add_column(
            sa.Column("failed_verification_count", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.add_column(sa.Column("blocked_until", sa.DateTime(), nullable=True))

    op.create_table(
        "verification_codes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("code_hash", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("consumed_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("verification_codes", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_verification_codes_user_id"), ["user_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_verification_codes_expires_at"), ["expires_at"], unique=False)


def downgrade():
    with op.batch_alter_table("verification_codes", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_verification_codes_expires_at"))
        batch_op.drop_index(batch_op.f("ix_verification_codes_user_id"))
    op.drop_table("verification_codes")

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.drop_column("blocked_until")
        batch_op.drop_column("failed_verification_count")
        batch_op.drop_column("failed_login_count")
