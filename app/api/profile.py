"""
Profile endpoints — view own profile and rotate the API key.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_principal
from app.database import get_db
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile import ApiKeyResponse, ProfileRead
from app.services import notification_service
from app.services.api_key_service import Principal

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_own_profile(principal: Principal, db: AsyncSession):
    profile = await ProfileRepository(db).get_by_id(principal.profile_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.get("/me", response_model=ProfileRead)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """The caller's profile, including the current API key."""
    return ProfileRead.model_validate(await _load_own_profile(principal, db))


@router.post("/me/api-key", response_model=ApiKeyResponse)
async def regenerate_api_key(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """
    Issue a new API key. The key used for this request stops working
    as soon as the response is returned.
    """
    profile = await _load_own_profile(principal, db)
    new_key = profile.regenerate_api_key()
    await db.flush()
    await db.commit()

    logger.info("API key regenerated by %s", principal.user_id)
    notification_service.notify_api_key_regenerated(principal.display_name)
    return ApiKeyResponse(api_key=new_key)
