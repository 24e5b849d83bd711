"""
Public pricing API.

    GET /pricing?from=<origin>&to=<destination>&weight=<kg>&packageType=<category>[&currency=USD|NGN]
    Authorization: Bearer <api-key>

Stages run in a fixed order and stop at the first failure:

    parameters (400) -> weight (400) -> API key (401) -> pricing rule (404)

Anything unexpected on the lookup path becomes a 500 with a generic error.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, Query, Response, status

from app.api.deps import get_key_validator, get_rate_resolver
from app.config import settings
from app.core.exceptions import internal_errors
from app.schemas.pricing import PricingResponse
from app.services.api_key_service import ApiKeyValidator
from app.services.pricing_service import RateResolver, parse_quote_request

logger = logging.getLogger(__name__)

router = APIRouter()


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/pricing", response_model=PricingResponse)
async def get_pricing(
    origin: str | None = Query(None, alias="from", examples=["Nigeria"]),
    destination: str | None = Query(None, alias="to", examples=["Ghana"]),
    weight: str | None = Query(None, description="Weight in kg", examples=["2"]),
    package_type: str | None = Query(None, alias="packageType", examples=["document"]),
    package_type_snake: str | None = Query(None, alias="package_type", include_in_schema=False),
    currency: str | None = Query(None, description="USD (default) or NGN"),
    authorization: str | None = Header(None, description="Bearer <api_key>"),
    validator: ApiKeyValidator = Depends(get_key_validator),
    resolver: RateResolver = Depends(get_rate_resolver),
):
    """
    Price a shipment for an API consumer.

    Returns the cost in the requested currency when the route has NGN
    pricing, otherwise in USD, together with both breakdowns.
    """
    request = parse_quote_request(
        origin, destination, weight, package_type or package_type_snake, currency,
    )

    with internal_errors("Pricing API request"):
        principal = await validator.validate(authorization)
        result = await resolver.resolve(request)

    logger.info(
        "Pricing API request by %s: %s, %s kg, %s %s",
        principal.user_id, result.route, request.weight_kg, result.cost, result.currency.value,
    )

    return PricingResponse.from_result(
        result,
        settings.ESTIMATED_DELIVERY,
        user=principal.display_name,
        timestamp=_utc_timestamp(),
    )


@router.options("/pricing", include_in_schema=False)
async def pricing_preflight():
    """Bare OPTIONS without CORS request headers; real preflights are answered by CORSMiddleware."""
    return Response(status_code=status.HTTP_200_OK)
