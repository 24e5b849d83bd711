from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.pricing import PricingRule
from app.services.pricing_service import RateCard


class PricingRepository:
    """SQL access to the rate table. Implements ``PricingStore``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_rule(self, origin: str, destination: str, package_type: str) -> PricingRule | None:
        # Exact, case-sensitive match. Newest row wins if legacy duplicates exist.
        result = await self.session.execute(
            select(PricingRule)
            .where(
                PricingRule.from_country == origin,
                PricingRule.to_country == destination,
                PricingRule.package_type == package_type,
            )
            .order_by(PricingRule.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def find_rule(self, origin: str, destination: str, package_type: str) -> RateCard | None:
        rule = await self.get_rule(origin, destination, package_type)
        if rule is None:
            return None
        return RateCard.from_rule(rule)

    async def list_route_keys(self) -> list[tuple[str, str, str]]:
        result = await self.session.execute(
            select(PricingRule.from_country, PricingRule.to_country, PricingRule.package_type)
        )
        return [tuple(row) for row in result.all()]

    async def get_by_id(self, rule_id: uuid.UUID) -> PricingRule | None:
        result = await self.session.execute(select(PricingRule).where(PricingRule.id == rule_id))
        return result.scalar_one_or_none()

    async def list_rules(self) -> list[PricingRule]:
        result = await self.session.execute(
            select(PricingRule).order_by(
                PricingRule.from_country, PricingRule.to_country, PricingRule.package_type,
            )
        )
        return list(result.scalars().all())

    async def add(self, rule: PricingRule) -> PricingRule:
        self.session.add(rule)
        await self.session.flush()
        return rule

    async def delete(self, rule: PricingRule) -> None:
        await self.session.delete(rule)
        await self.session.flush()
