"""
PricingRule model — the rate table.

One row prices one (origin country, destination country, package type)
combination with a USD base + per-kg price and an optional NGN pair.
Lookups are exact and case-sensitive; there is no default rate.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Numeric, String, UniqueConstraint, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class PricingRule(Base):
    __tablename__ = "pricing"
    __table_args__ = (
        UniqueConstraint(
            "from_country", "to_country", "package_type",
            name="uq_pricing_route_package",
        ),
        CheckConstraint("price_per_kg > 0", name="price_per_kg_positive"),
        CheckConstraint("base_price IS NULL OR base_price >= 0", name="base_price_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    # Lookup key
    from_country: Mapped[str] = mapped_column(String(100), nullable=False)
    to_country: Mapped[str] = mapped_column(String(100), nullable=False)
    package_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # USD; a NULL base_price reads as 0
    base_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2))
    price_per_kg: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False
    )

    # NGN, used only when both columns are set
    naira_base_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=14, scale=2))
    naira_price_per_kg: Mapped[Decimal | None] = mapped_column(Numeric(precision=14, scale=2))

    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def route(self) -> str:
        return f"{self.from_country} → {self.to_country}"

    def __repr__(self) -> str:
        return f"<PricingRule {self.route} ({self.package_type}) {self.price_per_kg}/kg>"


@event.listens_for(PricingRule, "init")
def _set_pricing_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "base_price" not in kwargs:
        target.base_price = Decimal("0")
    if "currency" not in kwargs:
        target.currency = "USD"
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
