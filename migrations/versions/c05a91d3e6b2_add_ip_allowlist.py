"""add ip_allowlist table

Revision ID: c05a91d3e6b2
Revises: 7b2d5c8e1f40
Create Date: 2026-10-09 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "c05a91d3e6b2"
down_revision = "7b2d5c8e1f40"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "ip_allowlist",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ip", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(length=120), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("ip_allowlist", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_ip_allowlist_ip"), ["ip"], unique=True)


def downgrade():
    with op.batch_alter_table("ip_allowlist", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_ip_allowlist_ip"))
    op.drop_table("ip_allowlist")
