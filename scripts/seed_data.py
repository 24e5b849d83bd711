"""
Development data seeder — populates the database with profiles and a rate table.

Usage:
    python scripts/seed_data.py

Creates:
  - 1 admin profile and 2 customer profiles (API keys printed at the end)
  - 10 pricing rules across West/East African and international routes,
    some with NGN pricing and some USD-only
  - 3 sample orders in various statuses

Idempotent: profiles are matched on user_id and rules on their
(from, to, package type) key.
"""

import asyncio
from decimal import Decimal

from sqlalchemy import select

from app.database import async_session
from app.models.order import Order, OrderStatus
from app.models.pricing import PricingRule
from app.models.profile import Profile

# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

SAMPLE_PROFILES: list[dict] = [
    {
        "user_id": "seed-admin",
        "full_name": "Ngozi Eze",
        "company_name": "ShipQuote Operations",
        "phone": "+2348031234500",
        "is_admin": True,
    },
    {
        "user_id": "seed-customer-1",
        "full_name": "Kwame Mensah",
        "company_name": "Accra Imports Ltd",
        "phone": "+233244123456",
    },
    {
        "user_id": "seed-customer-2",
        "full_name": None,
        "company_name": "Lagos Parcel Hub",
        "phone": "+2348051234502",
    },
]

# ---------------------------------------------------------------------------
# Rate table: (from, to, package type, USD base, USD/kg, NGN base, NGN/kg)
# ---------------------------------------------------------------------------

SAMPLE_RULES: list[tuple] = [
    ("Nigeria", "Ghana", "document", "15", "25", None, None),
    ("Nigeria", "Ghana", "parcel", "20", "18.50", "30000", "27750"),
    ("Nigeria", "Kenya", "document", "10", "5", "15000", "7500"),
    ("Nigeria", "Kenya", "parcel", "25", "12", "37500", "18000"),
    ("Nigeria", "United Kingdom", "document", "30", "22", "45000", "33000"),
    ("Nigeria", "United Kingdom", "parcel", "45", "19.75", None, None),
    ("Ghana", "Nigeria", "document", "12", "20", None, None),
    ("Ghana", "Nigeria", "parcel", "18", "15", None, None),
    ("Nigeria", "United States", "parcel", "55", "24.50", "82500", "36750"),
    ("Kenya", "Nigeria", "document", None, "9", None, None),
]


def _dec(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


async def seed() -> None:
    """Insert sample data into the database. Safe to run multiple times."""

    async with async_session() as session:
        # ==================================================================
        # 1. PROFILES
        # ==================================================================

        existing_users = set(
            (await session.execute(select(Profile.user_id))).scalars().all()
        )

        profiles: list[Profile] = []
        new_profiles = 0
        for data in SAMPLE_PROFILES:
            if data["user_id"] in existing_users:
                result = await session.execute(
                    select(Profile).where(Profile.user_id == data["user_id"])
                )
                profiles.append(result.scalar_one())
                continue
            profile = Profile(**data)
            session.add(profile)
            profiles.append(profile)
            new_profiles += 1

        await session.flush()
        print(f"  Profiles: {new_profiles} new, {len(profiles) - new_profiles} existing")

        # ==================================================================
        # 2. PRICING RULES
        # ==================================================================

        existing_keys = set(
            (await session.execute(
                select(PricingRule.from_country, PricingRule.to_country, PricingRule.package_type)
            )).all()
        )

        new_rules = 0
        for origin, destination, package_type, base, per_kg, ngn_base, ngn_per_kg in SAMPLE_RULES:
            if (origin, destination, package_type) in existing_keys:
                continue
            session.add(PricingRule(
                from_country=origin,
                to_country=destination,
                package_type=package_type,
                base_price=_dec(base),
                price_per_kg=Decimal(per_kg),
                naira_base_price=_dec(ngn_base),
                naira_price_per_kg=_dec(ngn_per_kg),
            ))
            new_rules += 1

        await session.flush()
        print(f"  Pricing rules: {new_rules} new, {len(SAMPLE_RULES) - new_rules} existing")

        # ==================================================================
        # 3. ORDERS
        # ==================================================================

        existing_orders = (await session.execute(select(Order.id))).scalars().all()
        if existing_orders:
            print(f"  Orders: 0 new, {len(existing_orders)} existing")
        else:
            customer = profiles[1]
            samples = [
                # Nigeria → Ghana document, 2 kg: 15 + 25 × 2
                ("Nigeria", "Ghana", "document", "2", "65.00", "USD", None, []),
                ("Nigeria", "Kenya", "parcel", "3.5", "100500.00", "NGN", "100500.00",
                 [OrderStatus.APPROVED]),
                ("Ghana", "Nigeria", "parcel", "10", "168.00", "USD", None,
                 [OrderStatus.APPROVED, OrderStatus.SHIPPED]),
            ]
            for origin, destination, package_type, weight, cost, currency, naira, path in samples:
                order = Order(
                    profile_id=customer.id,
                    ship_from=origin,
                    ship_to=destination,
                    weight=Decimal(weight),
                    package_type=package_type,
                    estimated_cost=Decimal(cost),
                    currency=currency,
                    naira_cost=_dec(naira),
                )
                for step in path:
                    order.transition_to(step)
                session.add(order)
            print(f"  Orders: {len(samples)} new, 0 existing")

        await session.commit()
        _print_summary(profiles)


def _print_summary(profiles: list[Profile]) -> None:
    """Print the seeded API keys so they can be used against /pricing."""
    print("\n  Seed complete!")
    for p in profiles:
        role = "admin" if p.is_admin else "customer"
        print(f"    {p.display_name:<20} {role:<9} api_key={p.api_key}")


if __name__ == "__main__":
    asyncio.run(seed())
