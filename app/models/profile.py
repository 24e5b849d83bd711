"""
Profile model — one row per account known to the managed auth provider.

The ``api_key`` column is the bearer credential for the public pricing
API and every key-authenticated route. Keys are opaque UUID strings,
compared verbatim, and unique across profiles.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def generate_api_key() -> str:
    """Return a fresh random API key."""
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    # Identity issued by the auth provider
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(150))
    company_name: Mapped[str | None] = mapped_column(String(200))
    phone: Mapped[str | None] = mapped_column(String(20))

    # Credential
    api_key: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False, default=generate_api_key
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    orders = relationship("Order", back_populates="profile")

    @property
    def display_name(self) -> str:
        return self.full_name or "Unknown User"

    def regenerate_api_key(self) -> str:
        """Replace the API key; the previous key stops working immediately."""
        self.api_key = generate_api_key()
        return self.api_key

    def __repr__(self) -> str:
        return f"<Profile {self.user_id} admin={self.is_admin}>"


@event.listens_for(Profile, "init")
def _set_profile_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "api_key" not in kwargs:
        target.api_key = generate_api_key()
    if "is_admin" not in kwargs:
        target.is_admin = False
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
