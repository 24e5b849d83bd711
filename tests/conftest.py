"""
Shared test fixtures for ShipQuote.

Provides an async test client, a database session mock, and in-memory
pricing / principal stores wired in through dependency overrides.
"""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_pricing_store, get_principal_store
from app.database import get_db
from app.models.pricing import PricingRule
from app.models.profile import Profile
from app.services.api_key_service import Principal
from app.services.pricing_service import RateCard

CUSTOMER_KEY = "3f6c1a52-8d0e-4a55-9e8b-2b7d6c0f1a11"
ADMIN_KEY = "a9d4e7b0-1c2f-4e63-8a5b-7f0e9d3c2b44"


# --- In-memory stores ---


class InMemoryPricingStore:
    """PricingStore over a dict keyed by (origin, destination, package type)."""

    def __init__(self):
        self.cards: dict[tuple[str, str, str], RateCard] = {}
        self.lookups: list[tuple[str, str, str]] = []

    def add(self, origin, destination, package_type, base, per_kg, ngn_base=None, ngn_per_kg=None):
        card = RateCard(
            origin=origin,
            destination=destination,
            package_type=package_type,
            base_price_usd=Decimal(str(base)),
            per_kg_usd=Decimal(str(per_kg)),
            base_price_ngn=Decimal(str(ngn_base)) if ngn_base is not None else None,
            per_kg_ngn=Decimal(str(ngn_per_kg)) if ngn_per_kg is not None else None,
        )
        self.cards[(origin, destination, package_type)] = card
        return card

    async def find_rule(self, origin, destination, package_type):
        self.lookups.append((origin, destination, package_type))
        return self.cards.get((origin, destination, package_type))

    async def list_route_keys(self):
        return list(self.cards.keys())


class InMemoryPrincipalStore:
    def __init__(self):
        self.principals: dict[str, Principal] = {}

    def add(self, api_key: str, principal: Principal) -> Principal:
        self.principals[api_key] = principal
        return principal

    async def find_by_api_key(self, api_key):
        return self.principals.get(api_key)


# --- Domain objects ---


@pytest.fixture
def customer() -> Principal:
    return Principal(
        profile_id=uuid.uuid4(),
        user_id="user-kwame",
        display_name="Kwame Mensah",
    )


@pytest.fixture
def admin() -> Principal:
    return Principal(
        profile_id=uuid.uuid4(),
        user_id="user-ngozi",
        display_name="Ngozi Eze",
        is_admin=True,
    )


@pytest.fixture
def pricing_store() -> InMemoryPricingStore:
    store = InMemoryPricingStore()
    store.add("Nigeria", "Ghana", "document", 15, 25)
    store.add("Nigeria", "Kenya", "parcel", 10, 5, ngn_base=15000, ngn_per_kg=7500)
    return store


@pytest.fixture
def principal_store(customer, admin) -> InMemoryPrincipalStore:
    store = InMemoryPrincipalStore()
    store.add(CUSTOMER_KEY, customer)
    store.add(ADMIN_KEY, admin)
    return store


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {CUSTOMER_KEY}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}


def _make_rule(**overrides) -> PricingRule:
    defaults = {
        "from_country": "Nigeria",
        "to_country": "Ghana",
        "package_type": "document",
        "base_price": Decimal("15.00"),
        "price_per_kg": Decimal("25.00"),
    }
    defaults.update(overrides)
    return PricingRule(**defaults)


@pytest.fixture
def make_rule():
    """Factory fixture for creating PricingRule instances."""
    return _make_rule


def _make_profile(**overrides) -> Profile:
    defaults = {
        "user_id": "user-kwame",
        "full_name": "Kwame Mensah",
        "company_name": "Accra Imports Ltd",
    }
    defaults.update(overrides)
    return Profile(**defaults)


@pytest.fixture
def make_profile():
    """Factory fixture for creating Profile instances."""
    return _make_profile


# --- Mock Database Session ---


@pytest.fixture
def mock_result():
    """The object returned by ``db.execute()``; nothing found by default."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars.return_value.first.return_value = None
    result.scalars.return_value.all.return_value = []
    return result


@pytest.fixture
def mock_db(mock_result):
    """AsyncMock database session."""
    db = AsyncMock()
    db.execute = AsyncMock(return_value=mock_result)
    db.scalar = AsyncMock(return_value=0)
    db.flush = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def enqueued():
    """Capture admin notifications instead of sending them to the broker."""
    with patch("app.services.notification_service._enqueue") as mock_enqueue:
        yield mock_enqueue


# --- Dependency Override Helpers ---


@pytest_asyncio.fixture
async def client(mock_db, pricing_store, principal_store, enqueued):
    """
    Async HTTP test client with the session and both stores overridden
    to use test doubles.
    """
    from app.main import app

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pricing_store] = lambda: pricing_store
    app.dependency_overrides[get_principal_store] = lambda: principal_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
