"""
Pydantic schemas for profiles, API keys, and admin notifications.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.notification import NotificationKind


class ProfileRead(BaseModel):
    """Profile as shown to its owner (includes the API key)."""
    model_config = {"from_attributes": True}

    id: UUID
    user_id: str
    full_name: str | None
    company_name: str | None
    phone: str | None
    api_key: str
    is_admin: bool
    created_at: datetime


class ApiKeyResponse(BaseModel):
    api_key: str
    message: str = "API key regenerated. The previous key no longer works."


class AdminFlagUpdate(BaseModel):
    is_admin: bool


class NotificationRead(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    kind: NotificationKind
    title: str
    description: str
    is_read: bool
    created_at: datetime


class NotificationList(BaseModel):
    items: list[NotificationRead]
    unread: int


class ProfileCreate(BaseModel):
    """Admin provisioning of a profile for an existing auth identity."""
    model_config = {"str_strip_whitespace": True}

    user_id: str = Field(..., min_length=1, max_length=64)
    full_name: str | None = Field(None, max_length=150)
    company_name: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, max_length=20)
    is_admin: bool = False
