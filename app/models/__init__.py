"""SQLAlchemy ORM models for ShipQuote."""

from app.models.profile import Profile, generate_api_key
from app.models.pricing import PricingRule
from app.models.order import Order, OrderStatus
from app.models.notification import AdminNotification, NotificationKind

__all__ = [
    "Profile", "generate_api_key",
    "PricingRule",
    "Order", "OrderStatus",
    "AdminNotification", "NotificationKind",
]
