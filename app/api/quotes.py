"""
Calculator endpoints.

Same resolution rule as the public pricing API, exposed to the web
calculator so the estimate shown before submitting an order matches the
price the order will be stored with. No API key required.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_pricing_store, get_rate_resolver
from app.config import settings
from app.core.exceptions import internal_errors
from app.schemas.pricing import QuoteOptions, QuoteRequestBody, QuoteResponse
from app.services.pricing_service import (
    Currency,
    PricingStore,
    QuoteRequest,
    RateResolver,
    calculator_options,
)

router = APIRouter()


def to_quote_request(body) -> QuoteRequest:
    """Build a QuoteRequest from a validated calculator / order body."""
    return QuoteRequest(
        origin=body.ship_from,
        destination=body.ship_to,
        weight_kg=body.weight,
        package_type=body.package_type,
        requested_currency=Currency.from_request(body.currency),
    )


@router.get("/options", response_model=QuoteOptions)
async def get_quote_options(store: PricingStore = Depends(get_pricing_store)):
    """Countries and package types the calculator offers, read from the rate table."""
    with internal_errors("Loading calculator options"):
        options = calculator_options(await store.list_route_keys())
    return QuoteOptions(
        countries=list(options.countries),
        package_types=list(options.package_types),
    )


@router.post("", response_model=QuoteResponse)
async def create_quote(
    payload: QuoteRequestBody,
    resolver: RateResolver = Depends(get_rate_resolver),
):
    """Price a shipment. 404 with the route in the message if no rule exists."""
    with internal_errors("Calculator quote"):
        result = await resolver.resolve(to_quote_request(payload))
    return QuoteResponse.from_result(result, settings.ESTIMATED_DELIVERY)
