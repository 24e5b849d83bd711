"""
Pydantic schemas for shipment orders.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.order import OrderStatus


class OrderCreate(BaseModel):
    """Submit a calculator quote as an order. The price is recomputed server-side."""
    ship_from: str = Field(..., min_length=1, max_length=100, examples=["Nigeria"])
    ship_to: str = Field(..., min_length=1, max_length=100, examples=["Ghana"])
    weight: Decimal = Field(..., gt=0, max_digits=10, decimal_places=3, examples=[2])
    package_type: str = Field(..., min_length=1, max_length=100, examples=["document"])
    currency: str = Field("USD", examples=["USD"])
    from_address: str | None = Field(None, max_length=500)
    to_address: str | None = Field(None, max_length=500)


class OrderRead(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    profile_id: UUID
    ship_from: str
    ship_to: str
    weight: Decimal
    package_type: str
    from_address: str | None
    to_address: str | None
    estimated_cost: Decimal
    currency: str
    naira_cost: Decimal | None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
