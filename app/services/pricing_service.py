"""
Rate resolution and cost calculation.

Maps (origin, destination, package type, weight, currency) to a cost
breakdown using the stored rate table:

    weight_cost = round2(per_kg_price * weight)
    total       = round2(base_price + per_kg_price * weight)

USD is always priced. NGN is priced when the rule carries both NGN
fields; it becomes the primary currency only when requested *and*
available, otherwise the primary result silently falls back to USD.

The resolver never writes and never caches: every call reads the rule
fresh through the injected ``PricingStore``.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Any, Protocol

from app.core.exceptions import (
    InvalidRecordError,
    InvalidWeightError,
    MissingParametersError,
    NoPricingRuleError,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class Currency(str, Enum):
    USD = "USD"
    NGN = "NGN"

    @classmethod
    def from_request(cls, value: str | None) -> "Currency":
        """Anything other than NGN (case-insensitive) means USD."""
        if value is not None and value.upper() == cls.NGN.value:
            return cls.NGN
        return cls.USD


def round2(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateCard:
    """A validated pricing rule, as read from the rate table."""

    origin: str
    destination: str
    package_type: str
    base_price_usd: Decimal
    per_kg_usd: Decimal
    base_price_ngn: Decimal | None = None
    per_kg_ngn: Decimal | None = None

    def __post_init__(self):
        for name in ("origin", "destination", "package_type"):
            if not getattr(self, name):
                raise InvalidRecordError(f"Pricing rule has an empty {name}")
        if self.base_price_usd < 0:
            raise InvalidRecordError("USD base price must not be negative")
        if self.per_kg_usd <= 0:
            raise InvalidRecordError("USD price per kg must be positive")
        if self.base_price_ngn is not None and self.base_price_ngn < 0:
            raise InvalidRecordError("NGN base price must not be negative")
        if self.per_kg_ngn is not None and self.per_kg_ngn <= 0:
            raise InvalidRecordError("NGN price per kg must be positive")

    @property
    def has_ngn(self) -> bool:
        # A half-filled NGN pair means no NGN pricing.
        return self.base_price_ngn is not None and self.per_kg_ngn is not None

    @classmethod
    def from_rule(cls, rule: Any) -> "RateCard":
        """Build from a ``PricingRule`` row (or anything with the same attributes)."""
        try:
            return cls(
                origin=rule.from_country,
                destination=rule.to_country,
                package_type=rule.package_type,
                base_price_usd=_to_decimal(rule.base_price) or Decimal("0"),
                per_kg_usd=_to_decimal(rule.price_per_kg),
                base_price_ngn=_to_decimal(rule.naira_base_price),
                per_kg_ngn=_to_decimal(rule.naira_price_per_kg),
            )
        except (InvalidOperation, TypeError) as exc:
            raise InvalidRecordError(f"Malformed pricing rule: {exc}") from exc


@dataclass(frozen=True)
class CostBreakdown:
    base_price: Decimal
    weight_cost: Decimal
    total: Decimal

    @classmethod
    def compute(cls, base_price: Decimal, per_kg_price: Decimal, weight_kg: Decimal) -> "CostBreakdown":
        with localcontext() as ctx:
            # Exact product.
            ctx.prec = max(
                ctx.prec,
                len(per_kg_price.as_tuple().digits) + len(weight_kg.as_tuple().digits),
            )
            weight_cost = per_kg_price * weight_kg

            # Sum truncated to at least three decimals; the dropped tail is below
            # 0.001 so it cannot move a half-up rounding at the cent.
            ctx.prec = max(ctx.prec, max(base_price.adjusted(), weight_cost.adjusted()) + 5)
            ctx.rounding = ROUND_DOWN
            total = base_price + weight_cost

        return cls(
            base_price=round2(base_price),
            weight_cost=round2(weight_cost),
            total=round2(total),
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "base_price": float(self.base_price),
            "weight_cost": float(self.weight_cost),
            "total": float(self.total),
        }


@dataclass(frozen=True)
class QuoteRequest:
    origin: str
    destination: str
    weight_kg: Decimal
    package_type: str
    requested_currency: Currency = Currency.USD


@dataclass(frozen=True)
class QuoteResult:
    request: QuoteRequest
    currency: Currency
    usd: CostBreakdown
    ngn: CostBreakdown | None

    @property
    def breakdown(self) -> CostBreakdown:
        """The breakdown in the primary currency."""
        return self.ngn if self.currency is Currency.NGN else self.usd

    @property
    def cost(self) -> Decimal:
        return self.breakdown.total

    @property
    def route(self) -> str:
        return f"{self.request.origin} → {self.request.destination}"


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


def parse_weight(raw: str) -> Decimal:
    """
    Parse a weight string; must be a number > 0 that is also finite as a
    JSON number (the response echoes it as one).
    """
    try:
        weight = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        raise InvalidWeightError()
    if not weight.is_finite() or weight <= 0 or math.isinf(float(weight)):
        raise InvalidWeightError()
    return weight


def parse_quote_request(
    origin: str | None,
    destination: str | None,
    weight: str | None,
    package_type: str | None,
    currency: str | None = None,
) -> QuoteRequest:
    """
    Validate raw query values, fail-fast in this order:

    1. from / to / packageType must be non-empty and weight present
       -> MissingParametersError naming every absent field
    2. weight must be a positive finite number -> InvalidWeightError
    """
    missing = []
    if not origin:
        missing.append("from")
    if not destination:
        missing.append("to")
    if weight is None:
        missing.append("weight")
    if not package_type:
        missing.append("packageType")
    if missing:
        raise MissingParametersError(missing)

    return QuoteRequest(
        origin=origin,
        destination=destination,
        weight_kg=parse_weight(weight),
        package_type=package_type,
        requested_currency=Currency.from_request(currency),
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class PricingStore(Protocol):
    async def find_rule(
        self, origin: str, destination: str, package_type: str,
    ) -> RateCard | None:
        """Exact-match lookup of one rule, or None."""
        ...

    async def list_route_keys(self) -> list[tuple[str, str, str]]:
        """(origin, destination, package type) of every stored rule."""
        ...


def price(card: RateCard, request: QuoteRequest) -> QuoteResult:
    """Pure cost calculation for *request* against *card*."""
    usd = CostBreakdown.compute(card.base_price_usd, card.per_kg_usd, request.weight_kg)
    ngn = None
    if card.has_ngn:
        ngn = CostBreakdown.compute(card.base_price_ngn, card.per_kg_ngn, request.weight_kg)

    if request.requested_currency is Currency.NGN and ngn is not None:
        currency = Currency.NGN
    else:
        currency = Currency.USD

    return QuoteResult(request=request, currency=currency, usd=usd, ngn=ngn)


class RateResolver:
    """Resolves quote requests against the rate table behind *store*."""

    def __init__(self, store: PricingStore):
        self.store = store

    async def resolve(self, request: QuoteRequest) -> QuoteResult:
        card = await self.store.find_rule(
            request.origin, request.destination, request.package_type,
        )
        if card is None:
            logger.info(
                "No pricing rule for route %s -> %s (%s)",
                request.origin, request.destination, request.package_type,
            )
            raise NoPricingRuleError(request.origin, request.destination, request.package_type)
        return price(card, request)


# ---------------------------------------------------------------------------
# Calculator options
# ---------------------------------------------------------------------------

# Offered by the calculator even before a rule exists for them.
PREDEFINED_PACKAGE_TYPES = ("jewelry", "food", "farm produce", "fashion", "fabric")


@dataclass(frozen=True)
class CalculatorOptions:
    countries: tuple[str, ...]
    package_types: tuple[str, ...]


def calculator_options(route_keys: list[tuple[str, str, str]]) -> CalculatorOptions:
    """
    Form choices for the calculator: every country that appears on either
    side of a rule, and the stored package types merged with the
    predefined ones. Both lists are deduplicated and sorted.
    """
    countries = {origin for origin, _, _ in route_keys}
    countries.update(destination for _, destination, _ in route_keys)
    package_types = set(PREDEFINED_PACKAGE_TYPES)
    package_types.update(package_type for _, _, package_type in route_keys)
    return CalculatorOptions(
        countries=tuple(sorted(countries)),
        package_types=tuple(sorted(package_types)),
    )
