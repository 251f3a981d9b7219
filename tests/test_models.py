"""Tests for discord_oauth.models -- form encoding, decoding, derived properties."""

from __future__ import annotations

import json
from urllib.parse import parse_qs

import pytest
from pydantic import ValidationError

from discord_oauth.models import (
    AccessTokenExchangeRequest,
    AccessTokenResponse,
    AuthDiscordUser,
    ClientConfig,
    RefreshTokenRequest,
    Scope,
)


def _code_request(**kwargs: object) -> AccessTokenExchangeRequest:
    defaults: dict[str, object] = {
        "client_id": 249608697955745802,
        "client_secret": "dd99opUAgs7SQEtk2kdRrTMU5zagR2a4",
        "code": "user code here",
        "redirect_uri": "https://myapplication.website",
    }
    defaults.update(kwargs)
    return AccessTokenExchangeRequest(**defaults)  # type: ignore[arg-type]


def _refresh_request(**kwargs: object) -> RefreshTokenRequest:
    defaults: dict[str, object] = {
        "client_id": 249608697955745802,
        "client_secret": "dd99opUAgs7SQEtk2kdRrTMU5zagR2a4",
        "refresh_token": "refresh-me",
        "redirect_uri": "https://myapplication.website",
    }
    defaults.update(kwargs)
    return RefreshTokenRequest(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Request form encoding
# ---------------------------------------------------------------------------


class TestAccessTokenExchangeRequest:
    def test_form_data_has_exactly_the_declared_fields(self) -> None:
        data = _code_request().to_form_data()
        assert list(data) == ["client_id", "client_secret", "code", "redirect_uri"]
        assert data["client_id"] == "249608697955745802"

    def test_query_is_percent_encoded(self) -> None:
        query = _code_request(
            code="a b&c=d", redirect_uri="https://example.com/cb?x=1"
        ).to_query()
        assert "code=a+b%26c%3Dd" in query
        assert "redirect_uri=https%3A%2F%2Fexample.com%2Fcb%3Fx%3D1" in query
        assert " " not in query

    @pytest.mark.parametrize(
        "secret,code,redirect_uri",
        [
            ("plain", "plain", "https://myapplication.website"),
            ("s/e+c=r&e%t", "code with spaces", "https://example.com/cb?state=1&x=2"),
            ("ünïcødé", "🙂", "http://127.0.0.1:8080/callback"),
        ],
    )
    def test_query_round_trips(self, secret: str, code: str, redirect_uri: str) -> None:
        request = _code_request(client_secret=secret, code=code, redirect_uri=redirect_uri)
        decoded = parse_qs(request.to_query(), keep_blank_values=True)
        assert decoded == {
            "client_id": ["249608697955745802"],
            "client_secret": [secret],
            "code": [code],
            "redirect_uri": [redirect_uri],
        }

    def test_empty_values_are_kept(self) -> None:
        decoded = parse_qs(_code_request(code="").to_query(), keep_blank_values=True)
        assert decoded["code"] == [""]

    def test_numeric_string_client_id_is_coerced(self) -> None:
        assert _code_request(client_id="42").client_id == 42

    def test_non_numeric_client_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _code_request(client_id="not-a-number")

    def test_is_frozen(self) -> None:
        request = _code_request()
        with pytest.raises(ValidationError):
            request.code = "other"  # type: ignore[misc]


class TestRefreshTokenRequest:
    def test_form_data_has_exactly_the_declared_fields(self) -> None:
        data = _refresh_request().to_form_data()
        assert list(data) == ["client_id", "client_secret", "refresh_token", "redirect_uri"]

    def test_query_round_trips(self) -> None:
        request = _refresh_request(refresh_token="tok/en+=", client_secret="x&y")
        decoded = parse_qs(request.to_query(), keep_blank_values=True)
        assert decoded == {
            "client_id": ["249608697955745802"],
            "client_secret": ["x&y"],
            "refresh_token": ["tok/en+="],
            "redirect_uri": ["https://myapplication.website"],
        }


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TestAccessTokenResponse:
    def test_decodes_full_document(self, token_payload: dict) -> None:
        response = AccessTokenResponse.model_validate_json(json.dumps(token_payload))
        assert response.access_token == "abc"
        assert response.expires_in == 604800
        assert response.refresh_token == "def"

    @pytest.mark.parametrize(
        "missing", ["access_token", "token_type", "expires_in", "refresh_token", "scope"]
    )
    def test_missing_field_fails(self, token_payload: dict, missing: str) -> None:
        del token_payload[missing]
        with pytest.raises(ValidationError):
            AccessTokenResponse.model_validate(token_payload)

    def test_scopes_splits_on_whitespace(self, token_payload: dict) -> None:
        token_payload["scope"] = "identify guilds  email"
        response = AccessTokenResponse.model_validate(token_payload)
        assert response.scopes == ["identify", "guilds", "email"]

    @pytest.mark.parametrize("expires_in", ['"604800"', "604800.0", "true"])
    def test_expires_in_must_be_an_integer(self, token_payload: dict, expires_in: str) -> None:
        document = json.dumps(token_payload).replace("604800", "@")
        with pytest.raises(ValidationError):
            AccessTokenResponse.model_validate_json(document.replace("@", expires_in))

    def test_errors_do_not_echo_tokens(self, token_payload: dict) -> None:
        token_payload["access_token"] = "tok-3f9a1c"
        del token_payload["scope"]
        with pytest.raises(ValidationError) as exc_info:
            AccessTokenResponse.model_validate_json(json.dumps(token_payload))
        assert "tok-3f9a1c" not in str(exc_info.value)


class TestAuthDiscordUser:
    def test_minimal_user(self, user_payload: dict) -> None:
        user = AuthDiscordUser.model_validate(user_payload)
        assert user.id == "123"
        assert user.username == "alice"
        assert user.avatar is None
        assert user.email is None

    def test_unknown_fields_preserved(self, user_payload: dict) -> None:
        user_payload["clan"] = {"tag": "ABC"}
        user = AuthDiscordUser.model_validate(user_payload)
        assert user.model_extra == {"clan": {"tag": "ABC"}}

    def test_missing_username_fails(self) -> None:
        with pytest.raises(ValidationError):
            AuthDiscordUser.model_validate({"id": "123"})

    @pytest.mark.parametrize(
        "discriminator,expected",
        [(None, "alice"), ("0", "alice"), ("1234", "alice#1234")],
    )
    def test_tag(self, discriminator: str | None, expected: str) -> None:
        user = AuthDiscordUser(id="123", username="alice", discriminator=discriminator)
        assert user.tag == expected

    def test_avatar_url_static(self) -> None:
        user = AuthDiscordUser(id="123", username="alice", avatar="abcdef")
        assert user.avatar_url == "https://cdn.discordapp.com/avatars/123/abcdef.png"

    def test_avatar_url_animated(self) -> None:
        user = AuthDiscordUser(id="123", username="alice", avatar="a_abcdef")
        assert user.avatar_url == "https://cdn.discordapp.com/avatars/123/a_abcdef.gif"

    def test_avatar_url_none(self) -> None:
        assert AuthDiscordUser(id="123", username="alice").avatar_url is None


# ---------------------------------------------------------------------------
# Scope / ClientConfig
# ---------------------------------------------------------------------------


class TestScope:
    def test_values(self) -> None:
        assert Scope.IDENTIFY.value == "identify"
        assert Scope.GUILDS_JOIN.value == "guilds.join"
        assert Scope("rpc.notifications.read") is Scope.RPC_NOTIFICATIONS_READ


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()
        assert config.timeout == 30.0
        assert config.verify_ssl is True
        assert config.client_id is None
        assert config.client_secret_source == "env:DISCORD_CLIENT_SECRET"
