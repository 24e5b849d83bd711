"""create pricing table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "pricing",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("from_country", sa.String(100), nullable=False),
        sa.Column("to_country", sa.String(100), nullable=False),
        sa.Column("package_type", sa.String(100), nullable=False),
        sa.Column(
            "base_price",
            sa.Numeric(precision=12, scale=2),
            server_default="0",
            nullable=True,
        ),
        sa.Column("price_per_kg", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("naira_base_price", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("naira_price_per_kg", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("currency", sa.String(3), server_default="USD", nullable=False),
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
        sa.UniqueConstraint(
            "from_country", "to_country", "package_type",
            name="uq_pricing_route_package",
        ),
        sa.CheckConstraint(
            "price_per_kg > 0",
            name="ck_pricing_price_per_kg_positive",
        ),
        sa.CheckConstraint(
            "base_price IS NULL OR base_price >= 0",
            name="ck_pricing_base_price_non_negative",
        ),
    )


def downgrade() -> None:
    op.drop_table("pricing")
