"""Blocking requester backed by :class:`httpx.Client`.

This module provides :class:`SyncRequester`, the implementation of
:class:`~discord_oauth.client.base.OAuthRequester` for code that does not
run inside an event loop.

The requester either wraps a caller-supplied :class:`httpx.Client` (which it
never closes) or creates its own from a
:class:`~discord_oauth.models.ClientConfig`. Timeouts, proxies, and
connection pooling are whatever that client is configured with.

See Also:
    :class:`~discord_oauth.client.async_client.AsyncRequester` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from discord_oauth.client.base import (
    OAuthRequester,
    PreparedRequest,
    decode_response,
    prepare_code_exchange,
    prepare_fetch_user,
    prepare_refresh_exchange,
    transport_error,
)
from discord_oauth.models import (
    AccessTokenExchangeRequest,
    AccessTokenResponse,
    AuthDiscordUser,
    ClientConfig,
    RefreshTokenRequest,
)

logger = logging.getLogger(__name__)


class SyncRequester(OAuthRequester):
    """Blocking Discord OAuth2 requester.

    Args:
        client: An existing :class:`httpx.Client` to send requests with.
            When ``None``, one is created from *config* and closed by
            :meth:`close`.
        config: Transport settings used only when *client* is ``None``.

    Example::

        with SyncRequester() as requester:
            tokens = requester.exchange_code(request)
            user = requester.fetch_user(tokens.access_token)
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            config = config or ClientConfig()
            client = httpx.Client(
                timeout=config.timeout,
                verify=config.verify_ssl,
                headers={"User-Agent": config.user_agent},
            )
        self._client = client

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncRequester:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this requester created it."""
        if self._owns_client and not self._client.is_closed:
            self._client.close()

    # ------------------------------------------------------------------ #
    # OAuthRequester
    # ------------------------------------------------------------------ #

    def exchange_code(self, request: AccessTokenExchangeRequest) -> AccessTokenResponse:
        response = self._send(prepare_code_exchange(request))
        return decode_response(response, AccessTokenResponse)

    def exchange_refresh_token(self, request: RefreshTokenRequest) -> AccessTokenResponse:
        response = self._send(prepare_refresh_exchange(request))
        return decode_response(response, AccessTokenResponse)

    def fetch_user(self, token: str) -> AuthDiscordUser:
        response = self._send(prepare_fetch_user(token))
        return decode_response(response, AuthDiscordUser)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _send(self, prepared: PreparedRequest) -> httpx.Response:
        """Send *prepared* once, mapping httpx failures to TransportError."""
        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            return self._client.request(
                prepared.method,
                prepared.url,
                params=prepared.params,
                headers=prepared.headers,
            )
        except httpx.HTTPError as exc:
            raise transport_error(prepared, exc) from exc
