"""
API key validation — bearer credential to principal.

A single shared secret per profile: the key is compared verbatim
against ``profiles.api_key``. No hashing, expiry or scopes.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

from app.core.exceptions import (
    InvalidCredentialError,
    InvalidRecordError,
    MissingCredentialError,
)

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
UNKNOWN_USER = "Unknown User"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    profile_id: uuid.UUID
    user_id: str
    display_name: str = UNKNOWN_USER
    is_admin: bool = False

    def __post_init__(self):
        if not self.user_id:
            raise InvalidRecordError("Principal has an empty user_id")

    @classmethod
    def from_profile(cls, profile: Any) -> "Principal":
        return cls(
            profile_id=profile.id,
            user_id=profile.user_id,
            display_name=profile.full_name or UNKNOWN_USER,
            is_admin=bool(profile.is_admin),
        )


class PrincipalStore(Protocol):
    async def find_by_api_key(self, api_key: str) -> Principal | None:
        ...


def parse_bearer(authorization: str | None) -> str:
    """
    Extract the key from ``Authorization: Bearer <key>``.

    Raises MissingCredentialError if the header is absent, uses another
    scheme, or carries an empty key.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingCredentialError()
    token = authorization[len(BEARER_PREFIX):]
    if not token.strip():
        raise MissingCredentialError()
    return token


class ApiKeyValidator:
    """Resolves bearer credentials to principals through *store*."""

    def __init__(self, store: PrincipalStore):
        self.store = store

    async def validate(self, authorization: str | None) -> Principal:
        token = parse_bearer(authorization)
        principal = await self.store.find_by_api_key(token)
        if principal is None:
            logger.warning("Rejected unknown API key")
            raise InvalidCredentialError()
        return principal
