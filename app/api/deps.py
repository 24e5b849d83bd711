"""
Reusable FastAPI dependencies for stores and API-key authentication.

Dependencies:
  - get_pricing_store    — rate table lookup bound to the request session
  - get_principal_store  — credential lookup bound to the request session
  - get_key_validator    — ApiKeyValidator over the principal store
  - get_current_principal — resolves ``Authorization: Bearer <api-key>`` (401)
  - require_admin        — additionally requires an admin principal (403)
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.pricing_repo import PricingRepository
from app.repositories.profile_repo import ProfileRepository
from app.services.api_key_service import ApiKeyValidator, Principal, PrincipalStore
from app.services.pricing_service import PricingStore, RateResolver


def get_pricing_store(db: AsyncSession = Depends(get_db)) -> PricingStore:
    return PricingRepository(db)


def get_principal_store(db: AsyncSession = Depends(get_db)) -> PrincipalStore:
    return ProfileRepository(db)


def get_key_validator(store: PrincipalStore = Depends(get_principal_store)) -> ApiKeyValidator:
    return ApiKeyValidator(store)


def get_rate_resolver(store: PricingStore = Depends(get_pricing_store)) -> RateResolver:
    return RateResolver(store)


async def get_current_principal(
    authorization: str | None = Header(None, description="Bearer <api_key>"),
    validator: ApiKeyValidator = Depends(get_key_validator),
) -> Principal:
    """
    Parse the ``Authorization`` header and look up the API key.

    Raises MissingCredentialError / InvalidCredentialError (401), rendered
    by the ShipQuoteError handler.
    """
    return await validator.validate(authorization)


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
