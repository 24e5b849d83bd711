from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile
from app.services.api_key_service import Principal


class ProfileRepository:
    """SQL access to profiles. Implements ``PrincipalStore``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_api_key(self, api_key: str) -> Profile | None:
        result = await self.session.execute(select(Profile).where(Profile.api_key == api_key))
        return result.scalar_one_or_none()

    async def find_by_api_key(self, api_key: str) -> Principal | None:
        profile = await self.get_by_api_key(api_key)
        if profile is None:
            return None
        return Principal.from_profile(profile)

    async def get_by_id(self, profile_id: uuid.UUID) -> Profile | None:
        result = await self.session.execute(select(Profile).where(Profile.id == profile_id))
        return result.scalar_one_or_none()

    async def list_profiles(self) -> list[Profile]:
        result = await self.session.execute(select(Profile).order_by(Profile.created_at.desc()))
        return list(result.scalars().all())
