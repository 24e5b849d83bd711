"""
Pydantic schemas for the pricing API, quotes, and rate-table administration.

Monetary values on the public API are JSON numbers rounded to 2 decimals.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.services.pricing_service import QuoteResult


# ---------------------------------------------------------------------------
# Quote / pricing API responses
# ---------------------------------------------------------------------------


class CostBreakdownOut(BaseModel):
    base_price: float
    weight_cost: float
    total: float


class CostsOut(BaseModel):
    """Both currency breakdowns; ``ngn`` is null when the rule has no NGN pricing."""
    usd: CostBreakdownOut
    ngn: CostBreakdownOut | None


class QuoteResponse(BaseModel):
    """A priced quote in the primary currency plus both breakdowns."""
    cost: float
    currency: str
    breakdown: CostBreakdownOut
    costs: CostsOut
    route: str
    weight: float
    package_type: str
    estimated_delivery: str

    @classmethod
    def from_result(cls, result: QuoteResult, estimated_delivery: str, **extra):
        return cls(
            cost=float(result.cost),
            currency=result.currency.value,
            breakdown=CostBreakdownOut(**result.breakdown.as_dict()),
            costs=CostsOut(
                usd=CostBreakdownOut(**result.usd.as_dict()),
                ngn=CostBreakdownOut(**result.ngn.as_dict()) if result.ngn else None,
            ),
            route=result.route,
            weight=float(result.request.weight_kg),
            package_type=result.request.package_type,
            estimated_delivery=estimated_delivery,
            **extra,
        )


class PricingResponse(QuoteResponse):
    """Success body of ``GET /pricing``."""
    success: bool = True
    user: str
    timestamp: str


class QuoteOptions(BaseModel):
    """Choices for the calculator form."""
    countries: list[str]
    package_types: list[str]


class QuoteRequestBody(BaseModel):
    """Calculator input for ``POST /api/v1/quotes``."""
    ship_from: str = Field(..., min_length=1, max_length=100, examples=["Nigeria"])
    ship_to: str = Field(..., min_length=1, max_length=100, examples=["Ghana"])
    weight: Decimal = Field(..., gt=0, examples=[2])
    package_type: str = Field(..., min_length=1, max_length=100, examples=["document"])
    currency: str = Field("USD", examples=["NGN"])


# ---------------------------------------------------------------------------
# Rate table administration
# ---------------------------------------------------------------------------


class PricingRuleWrite(BaseModel):
    """Create / replace a pricing rule. Route keys are trimmed, then matched exactly."""

    model_config = {"str_strip_whitespace": True}

    from_country: str = Field(..., min_length=1, max_length=100)
    to_country: str = Field(..., min_length=1, max_length=100)
    package_type: str = Field(..., min_length=1, max_length=100)
    base_price: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    price_per_kg: Decimal = Field(..., gt=0, decimal_places=2)
    naira_base_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    naira_price_per_kg: Decimal | None = Field(None, gt=0, decimal_places=2)

    @model_validator(mode="after")
    def _ngn_pair(self):
        if (self.naira_base_price is None) != (self.naira_price_per_kg is None):
            raise ValueError(
                "naira_base_price and naira_price_per_kg must be set together"
            )
        return self


class PricingRuleRead(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    from_country: str
    to_country: str
    package_type: str
    base_price: Decimal | None
    price_per_kg: Decimal
    naira_base_price: Decimal | None
    naira_price_per_kg: Decimal | None
    currency: str
    created_at: datetime
    updated_at: datetime
