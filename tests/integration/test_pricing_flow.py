"""
End-to-end pricing against PostgreSQL: repositories, constraints, and
the HTTP endpoint over real rows.
"""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.pricing import PricingRule
from app.models.profile import Profile
from app.repositories.pricing_repo import PricingRepository
from app.repositories.profile_repo import ProfileRepository


async def _seed(session):
    profile = Profile(user_id="user-kwame", full_name="Kwame Mensah")
    session.add(profile)
    session.add(PricingRule(
        from_country="Nigeria", to_country="Ghana", package_type="document",
        base_price=Decimal("15.00"), price_per_kg=Decimal("25.00"),
    ))
    session.add(PricingRule(
        from_country="Kenya", to_country="Nigeria", package_type="document",
        base_price=None, price_per_kg=Decimal("9.00"),
    ))
    await session.flush()
    return profile


class TestPricingRepository:

    @pytest.mark.asyncio
    async def test_exact_match(self, db_session):
        await _seed(db_session)
        repo = PricingRepository(db_session)

        card = await repo.find_rule("Nigeria", "Ghana", "document")
        assert card is not None
        assert card.per_kg_usd == Decimal("25.00")
        assert card.has_ngn is False

        assert await repo.find_rule("nigeria", "Ghana", "document") is None
        assert await repo.find_rule("Nigeria", "Ghana", "Document") is None

    @pytest.mark.asyncio
    async def test_null_base_price(self, db_session):
        await _seed(db_session)
        card = await PricingRepository(db_session).find_rule("Kenya", "Nigeria", "document")
        assert card.base_price_usd == Decimal("0")

    @pytest.mark.asyncio
    async def test_duplicate_route_rejected(self, db_session):
        await _seed(db_session)
        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(PricingRule(
                    from_country="Nigeria", to_country="Ghana", package_type="document",
                    price_per_kg=Decimal("30.00"),
                ))

    @pytest.mark.asyncio
    async def test_route_keys(self, db_session):
        await _seed(db_session)
        keys = await PricingRepository(db_session).list_route_keys()
        assert sorted(keys) == [
            ("Kenya", "Nigeria", "document"),
            ("Nigeria", "Ghana", "document"),
        ]

    @pytest.mark.asyncio
    async def test_non_positive_per_kg_rejected(self, db_session):
        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(PricingRule(
                    from_country="Ghana", to_country="Kenya", package_type="parcel",
                    price_per_kg=Decimal("0"),
                ))


class TestProfileRepository:

    @pytest.mark.asyncio
    async def test_lookup_by_key(self, db_session):
        profile = await _seed(db_session)
        principal = await ProfileRepository(db_session).find_by_api_key(profile.api_key)

        assert principal.profile_id == profile.id
        assert principal.display_name == "Kwame Mensah"
        assert await ProfileRepository(db_session).find_by_api_key("missing") is None


class TestPricingEndpoint:

    @pytest.mark.asyncio
    async def test_quote(self, integration_client, db_session):
        profile = await _seed(db_session)
        resp = await integration_client.get(
            "/pricing",
            params={"from": "Nigeria", "to": "Ghana", "weight": "2", "packageType": "document"},
            headers={"Authorization": f"Bearer {profile.api_key}"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["cost"] == 65.0
        assert body["costs"]["ngn"] is None
        assert body["user"] == "Kwame Mensah"

    @pytest.mark.asyncio
    async def test_no_rule(self, integration_client, db_session):
        profile = await _seed(db_session)
        resp = await integration_client.get(
            "/pricing",
            params={"from": "Nigeria", "to": "Kenya", "weight": "2", "packageType": "document"},
            headers={"Authorization": f"Bearer {profile.api_key}"},
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_rule_edit_takes_effect_immediately(self, integration_client, db_session):
        profile = await _seed(db_session)
        params = {"from": "Nigeria", "to": "Ghana", "weight": "2", "packageType": "document"}
        headers = {"Authorization": f"Bearer {profile.api_key}"}

        first = await integration_client.get("/pricing", params=params, headers=headers)
        rule = await PricingRepository(db_session).get_rule("Nigeria", "Ghana", "document")
        rule.price_per_kg = Decimal("30.00")
        await db_session.flush()
        second = await integration_client.get("/pricing", params=params, headers=headers)

        assert first.json()["cost"] == 65.0
        assert second.json()["cost"] == 75.0

    @pytest.mark.asyncio
    async def test_calculator_options(self, integration_client, db_session):
        await _seed(db_session)
        resp = await integration_client.get("/api/v1/quotes/options")

        assert resp.status_code == 200
        body = resp.json()
        assert body["countries"] == ["Ghana", "Kenya", "Nigeria"]
        assert "document" in body["package_types"]
        assert "jewelry" in body["package_types"]
