"""Tests for discord_oauth.exceptions -- taxonomy, cause chaining, exit codes."""

from __future__ import annotations

import httpx
import pytest

from discord_oauth import exit_codes
from discord_oauth.exceptions import (
    ConfigError,
    DecodeError,
    DiscordOAuthError,
    EncodeError,
    InvalidUsageError,
    RequestError,
    TransportError,
)


class TestHierarchy:
    @pytest.mark.parametrize("cls", [TransportError, DecodeError, EncodeError])
    def test_request_errors(self, cls: type) -> None:
        assert issubclass(cls, RequestError)
        assert issubclass(cls, DiscordOAuthError)

    @pytest.mark.parametrize("cls", [ConfigError, InvalidUsageError])
    def test_cli_errors_outside_request_taxonomy(self, cls: type) -> None:
        assert issubclass(cls, DiscordOAuthError)
        assert not issubclass(cls, RequestError)

    def test_kinds(self) -> None:
        assert TransportError.kind == "transport"
        assert DecodeError.kind == "decode"
        assert EncodeError.kind == "encode"

    def test_exit_codes(self) -> None:
        assert DiscordOAuthError("x").exit_code == exit_codes.EXIT_GENERIC_FAILURE
        assert TransportError("x").exit_code == exit_codes.EXIT_TRANSPORT_ERROR
        assert DecodeError("x").exit_code == exit_codes.EXIT_DECODE_ERROR
        assert EncodeError("x").exit_code == exit_codes.EXIT_ENCODE_ERROR
        assert ConfigError("x").exit_code == exit_codes.EXIT_CONFIG_ERROR
        assert InvalidUsageError("x").exit_code == exit_codes.EXIT_INVALID_USAGE

    def test_exit_code_override(self) -> None:
        assert ConfigError("x", exit_code=42).exit_code == 42


class TestCause:
    def test_cause_is_kept_and_chained(self) -> None:
        cause = ValueError("bad json")
        error = DecodeError("Invalid body", cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_str_includes_cause(self) -> None:
        assert str(DecodeError("Invalid body", ValueError("bad json"))) == "Invalid body: bad json"

    def test_str_without_cause(self) -> None:
        assert str(EncodeError("Cannot encode")) == "Cannot encode"

    def test_status_code_from_http_status_error(self) -> None:
        request = httpx.Request("GET", "https://discord.com/api/users/@me")
        response = httpx.Response(403, request=request)
        cause = httpx.HTTPStatusError("forbidden", request=request, response=response)
        assert TransportError("HTTP 403", cause).status_code == 403

    def test_status_code_none_for_network_error(self) -> None:
        assert TransportError("failed", httpx.ConnectError("refused")).status_code is None

    def test_status_error_message_omits_request_url(self) -> None:
        request = httpx.Request(
            "POST", "https://discord.com/api/oauth2/token", params={"client_secret": "hush"}
        )
        response = httpx.Response(400, request=request)
        cause = httpx.HTTPStatusError(
            f"Client error for url '{request.url}'", request=request, response=response
        )
        error = TransportError("POST https://discord.com/api/oauth2/token returned HTTP 400", cause)
        assert "hush" not in str(error)
        assert str(error) == "POST https://discord.com/api/oauth2/token returned HTTP 400"
