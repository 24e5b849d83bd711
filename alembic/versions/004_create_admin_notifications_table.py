"""create admin_notifications table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, UUID

# revision identifiers, used by Alembic
revision = "004"
down_revision = "003"
branch_labels = None
depends_on = None


def upgrade() -> None:
    notificationkind = sa.Enum(
        "new_order", "new_user", "api_key_regenerated",
        name="notificationkind",
    )
    notificationkind.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "admin_notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "kind",
            ENUM(name="notificationkind", create_type=False),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_admin_notifications_created_at", "admin_notifications", ["created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_admin_notifications_created_at", table_name="admin_notifications")
    op.drop_table("admin_notifications")

    sa.Enum(name="notificationkind").drop(op.get_bind(), checkfirst=True)
