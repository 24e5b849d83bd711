"""create orders table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID

# revision identifiers, used by Alembic
revision = "003"
down_revision = "002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    orderstatus = sa.Enum(
        "pending", "approved", "rejected", "shipped", "delivered",
        name="orderstatus",
    )
    orderstatus.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "orders",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "profile_id",
            UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", name="fk_orders_profile_id_profiles"),
            nullable=False,
        ),
        sa.Column("ship_from", sa.String(100), nullable=False),
        sa.Column("ship_to", sa.String(100), nullable=False),
        sa.Column("weight", sa.Numeric(precision=10, scale=3), nullable=False),
        sa.Column("package_type", sa.String(100), nullable=False),
        sa.Column("from_address", sa.String(500), nullable=True),
        sa.Column("to_address", sa.String(500), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("currency", sa.String(3), server_default="USD", nullable=False),
        sa.Column("naira_cost", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column(
            "status",
            ENUM(name="orderstatus", create_type=False),
            server_default="pending",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("weight > 0", name="ck_orders_weight_positive"),
    )
    op.create_index("ix_orders_profile_id", "orders", ["profile_id"])


def downgrade() -> None:
    op.drop_index("ix_orders_profile_id", table_name="orders")
    op.drop_table("orders")

    sa.Enum(name="orderstatus").drop(op.get_bind(), checkfirst=True)
