"""Tests for API key validation — bearer parsing and principal lookup."""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.api.deps import get_key_validator, get_principal_store
from app.core.exceptions import (
    InvalidCredentialError,
    InvalidRecordError,
    MissingCredentialError,
)
from app.repositories.profile_repo import ProfileRepository
from app.services.api_key_service import (
    UNKNOWN_USER,
    ApiKeyValidator,
    Principal,
    parse_bearer,
)


class TestParseBearer:

    def test_extracts_token(self):
        assert parse_bearer("Bearer abc-123") == "abc-123"

    def test_token_used_verbatim(self):
        assert parse_bearer("Bearer  abc ") == " abc "

    @pytest.mark.parametrize(
        "header",
        [None, "", "abc-123", "Basic abc-123", "bearer abc-123", "Bearer", "Bearer ", "Bearer    "],
    )
    def test_missing_or_malformed(self, header):
        with pytest.raises(MissingCredentialError):
            parse_bearer(header)

    def test_missing_credential_body_has_no_success_flag(self):
        body = MissingCredentialError().to_body()
        assert "success" not in body
        assert body["error"].startswith("Missing or invalid API key")


class TestPrincipal:

    def test_from_profile(self):
        profile = SimpleNamespace(
            id=uuid.uuid4(), user_id="user-1", full_name="Kwame Mensah", is_admin=False,
        )
        principal = Principal.from_profile(profile)
        assert principal.profile_id == profile.id
        assert principal.display_name == "Kwame Mensah"
        assert principal.is_admin is False

    def test_unknown_display_name(self):
        profile = SimpleNamespace(id=uuid.uuid4(), user_id="user-1", full_name=None, is_admin=True)
        principal = Principal.from_profile(profile)
        assert principal.display_name == UNKNOWN_USER
        assert principal.is_admin is True

    def test_rejects_empty_user_id(self):
        with pytest.raises(InvalidRecordError):
            Principal(profile_id=uuid.uuid4(), user_id="")


class TestApiKeyValidator:

    @pytest.mark.asyncio
    async def test_valid_key(self, customer):
        store = AsyncMock()
        store.find_by_api_key = AsyncMock(return_value=customer)

        principal = await ApiKeyValidator(store).validate("Bearer key-1")

        assert principal is customer
        store.find_by_api_key.assert_awaited_once_with("key-1")

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        store = AsyncMock()
        store.find_by_api_key = AsyncMock(return_value=None)

        with pytest.raises(InvalidCredentialError) as exc_info:
            await ApiKeyValidator(store).validate("Bearer nope")

        assert exc_info.value.status_code == 401
        assert exc_info.value.to_body()["success"] is False

    @pytest.mark.asyncio
    async def test_malformed_header_skips_lookup(self):
        store = AsyncMock()
        store.find_by_api_key = AsyncMock()

        with pytest.raises(MissingCredentialError):
            await ApiKeyValidator(store).validate("Token abc")

        store.find_by_api_key.assert_not_awaited()


class TestKeyValidatorWiring:

    def test_principal_store_is_the_profile_repository(self, mock_db):
        store = get_principal_store(mock_db)
        assert isinstance(store, ProfileRepository)
        assert store.session is mock_db

    def test_validator_uses_injected_store(self):
        store = SimpleNamespace(find_by_api_key=AsyncMock(return_value=None))
        assert get_key_validator(store).store is store
