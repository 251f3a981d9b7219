"""Asynchronous requester -- mirrors :class:`~discord_oauth.client.sync_client.SyncRequester`.

This module provides :class:`AsyncRequester`, the implementation of
:class:`~discord_oauth.client.base.AsyncOAuthRequester` backed by
:class:`httpx.AsyncClient`. Request preparation and response decoding are
shared with the blocking binding; only the send step awaits.

Cancellation and timeouts follow httpx semantics: cancelling the awaiting
task aborts the in-flight request, and no partial result is returned.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from discord_oauth.client.base import (
    AsyncOAuthRequester,
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


class AsyncRequester(AsyncOAuthRequester):
    """Non-blocking Discord OAuth2 requester.

    Args:
        client: An existing :class:`httpx.AsyncClient`. When ``None``, one
            is created from *config* and closed by :meth:`aclose`.
        config: Transport settings used only when *client* is ``None``.

    Example::

        async with AsyncRequester() as requester:
            tokens = await requester.exchange_code(request)
            user = await requester.fetch_user(tokens.access_token)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            config = config or ClientConfig()
            client = httpx.AsyncClient(
                timeout=config.timeout,
                verify=config.verify_ssl,
                headers={"User-Agent": config.user_agent},
            )
        self._client = client

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncRequester:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this requester created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # AsyncOAuthRequester
    # ------------------------------------------------------------------ #

    async def exchange_code(self, request: AccessTokenExchangeRequest) -> AccessTokenResponse:
        response = await self._send(prepare_code_exchange(request))
        return decode_response(response, AccessTokenResponse)

    async def exchange_refresh_token(self, request: RefreshTokenRequest) -> AccessTokenResponse:
        response = await self._send(prepare_refresh_exchange(request))
        return decode_response(response, AccessTokenResponse)

    async def fetch_user(self, token: str) -> AuthDiscordUser:
        response = await self._send(prepare_fetch_user(token))
        return decode_response(response, AuthDiscordUser)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(self, prepared: PreparedRequest) -> httpx.Response:
        """Send *prepared* once, mapping httpx failures to TransportError."""
        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            return await self._client.request(
                prepared.method,
                prepared.url,
                params=prepared.params,
                headers=prepared.headers,
            )
        except httpx.HTTPError as exc:
            raise transport_error(prepared, exc) from exc
