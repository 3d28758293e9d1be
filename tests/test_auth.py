"""Unit tests for admin key authentication."""

from unittest.mock import patch

import pytest
from fastapi import HTTPException

from rate_gate.core.auth import parse_admin_keys, validate_admin_key, verify_admin_key
from rate_gate.core.errors import AuthenticationAppError


class TestParseAdminKeys:
    def test_parse_multiple_keys_with_whitespace(self) -> None:
        assert parse_admin_keys("key1 , key2  ,key3") == {"key1", "key2", "key3"}

    @pytest.mark.parametrize("raw", [None, "", "  ,  , "])
    def test_parse_empty_inputs(self, raw) -> None:
        assert parse_admin_keys(raw) == set()

    def test_parse_deduplicates(self) -> None:
        assert parse_admin_keys("a,b,a") == {"a", "b"}


class TestValidateAdminKey:
    @patch("rate_gate.core.auth.settings")
    def test_bypassed_when_disabled(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = False
        validate_admin_key("anything")

    @patch("rate_gate.core.auth.settings")
    def test_raises_when_no_keys_configured(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = None

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_key("some-key")
        assert exc_info.value.code == "admin_keys_not_configured"

    @patch("rate_gate.core.auth.settings")
    def test_accepts_valid_key(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "k1,k2"

        validate_admin_key("k1")
        validate_admin_key("k2")

    @patch("rate_gate.core.auth.settings")
    def test_rejects_invalid_key(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "k1"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_key("k1-not")
        assert exc_info.value.code == "invalid_admin_key"


class TestVerifyAdminKeyDependency:
    @pytest.mark.asyncio
    @patch("rate_gate.core.auth.settings")
    async def test_missing_header_is_403(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "k1"

        with pytest.raises(HTTPException) as exc_info:
            await verify_admin_key(x_admin_key=None)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    @patch("rate_gate.core.auth.settings")
    async def test_invalid_key_is_403(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "k1"

        with pytest.raises(HTTPException) as exc_info:
            await verify_admin_key(x_admin_key="wrong")
        assert exc_info.value.detail == "Invalid or missing admin key"

    @pytest.mark.asyncio
    @patch("rate_gate.core.auth.settings")
    async def test_valid_key_passes(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "k1"

        await verify_admin_key(x_admin_key="k1")
