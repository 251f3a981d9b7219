"""Shared test fixtures for discord_oauth.

Provides canned Discord payloads, a factory for mock httpx transports,
config isolation, and the CLI runner. These fixtures are discovered by
pytest and available to every test module without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from discord_oauth.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr when it is created.
    CliRunner swaps those streams during a test, so a stale manager would
    write to closed files. The CLI also installs a handler on the
    ``discord_oauth`` logger, which is removed here.
    """
    yield
    reset_output()
    logger = logging.getLogger("discord_oauth")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Discord payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def token_payload() -> dict[str, Any]:
    """A successful token endpoint response body."""
    return {
        "access_token": "abc",
        "token_type": "Bearer",
        "expires_in": 604800,
        "refresh_token": "def",
        "scope": "identify",
    }


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """A minimal ``/users/@me`` response body."""
    return {"id": "123", "username": "alice"}


# ---------------------------------------------------------------------------
# Mock transport
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it was asked to send."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Return a factory building a RecordingTransport.

    Call it with a handler, or with ``status`` and ``json``/``content`` to
    answer every request with the same response.
    """

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        *,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
    ) -> RecordingTransport:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, content=content)
                return httpx.Response(status, json=json)

        return RecordingTransport(handler)

    return _factory


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces XDG path resolution, points XDG_CONFIG_HOME at ``tmp_path`` and
    clears every DISCORD_OAUTH_* variable so that tests never touch real
    user config.

    Returns:
        The directory the config file will be written to.
    """
    monkeypatch.setattr("discord_oauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in [
        "DISCORD_OAUTH_CLIENT_ID",
        "DISCORD_OAUTH_CLIENT_SECRET_SOURCE",
        "DISCORD_OAUTH_REDIRECT_URI",
        "DISCORD_OAUTH_TIMEOUT",
        "DISCORD_CLIENT_SECRET",
    ]:
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "config" / "discord-oauth"


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
