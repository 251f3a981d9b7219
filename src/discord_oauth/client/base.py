"""Requester contract and the request/response plumbing shared by all bindings.

This module defines the two abstract base classes that a binding must
implement:

- :class:`OAuthRequester` -- blocking contract.
- :class:`AsyncOAuthRequester` -- the same three operations as coroutines.

Both carry the same operations with the same names and arguments:
``exchange_code``, ``exchange_refresh_token``, and ``fetch_user``.

The module-level helpers turn a request model into a
:class:`PreparedRequest` and turn an :class:`httpx.Response` into a model,
raising the appropriate :class:`~discord_oauth.exceptions.RequestError`.
They perform no I/O, so the sync and async bindings reuse them unchanged and
differ only in how they send the request.

See Also:
    :mod:`discord_oauth.client.sync_client` and
    :mod:`discord_oauth.client.async_client` for the httpx bindings.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from discord_oauth.constants import BASE_TOKEN_URI, CURRENT_USER_URI, FORM_CONTENT_TYPE
from discord_oauth.exceptions import DecodeError, EncodeError, TransportError
from discord_oauth.models import (
    AccessTokenExchangeRequest,
    AccessTokenResponse,
    AuthDiscordUser,
    RefreshTokenRequest,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class PreparedRequest:
    """Everything a binding needs to send one request.

    Args:
        method: HTTP method.
        url: Absolute endpoint URL.
        params: Pre-encoded query string, if any.
        headers: Extra request headers.
    """

    method: str
    url: str
    params: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)


# ------------------------------------------------------------------ #
# Request preparation
# ------------------------------------------------------------------ #


def encode_form(
    request: Union[AccessTokenExchangeRequest, RefreshTokenRequest],
) -> str:
    """URL-encode *request*, wrapping any failure in :class:`EncodeError`."""
    try:
        return request.to_query()
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot encode {type(request).__name__}", exc) from exc


def prepare_code_exchange(request: AccessTokenExchangeRequest) -> PreparedRequest:
    """Build the token-endpoint POST for an authorization code exchange.

    The encoded form is sent as the query payload, with an explicit
    form content type.

    Raises:
        EncodeError: If the request cannot be encoded.
    """
    return PreparedRequest(
        method="POST",
        url=BASE_TOKEN_URI,
        params=encode_form(request),
        headers={"Content-Type": FORM_CONTENT_TYPE},
    )


def prepare_refresh_exchange(request: RefreshTokenRequest) -> PreparedRequest:
    """Build the token-endpoint POST for a refresh token exchange.

    Same endpoint and payload placement as :func:`prepare_code_exchange`,
    but no explicit content type: the transport default applies.

    Raises:
        EncodeError: If the request cannot be encoded.
    """
    return PreparedRequest(
        method="POST",
        url=BASE_TOKEN_URI,
        params=encode_form(request),
    )


def prepare_fetch_user(token: str) -> PreparedRequest:
    """Build the GET for the current user, authenticated with *token*.

    Empty tokens are sent as-is; Discord decides whether to accept them.
    """
    return PreparedRequest(
        method="GET",
        url=CURRENT_USER_URI,
        headers={"Authorization": f"Bearer {token}"},
    )


# ------------------------------------------------------------------ #
# Response handling
# ------------------------------------------------------------------ #


def transport_error(prepared: PreparedRequest, exc: httpx.HTTPError) -> TransportError:
    """Wrap an httpx failure raised while sending *prepared*."""
    logger.warning("%s %s failed: %s", prepared.method, prepared.url, exc)
    return TransportError(f"{prepared.method} {prepared.url} failed", exc)


def decode_response(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Check the status of *response* and decode its JSON body as *model*.

    Args:
        response: A fully read response.
        model: The Pydantic model the body must match.

    Returns:
        The decoded model instance.

    Raises:
        TransportError: If the status code is not 2xx.
        DecodeError: If the body is not valid JSON matching *model*.
    """
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        # The token exchanges carry credentials in the query string.
        url = response.request.url.copy_with(query=None)
        method = response.request.method
        logger.warning("%s %s returned HTTP %d", method, url, response.status_code)
        raise TransportError(
            f"{method} {url} returned HTTP {response.status_code}", exc
        ) from exc

    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(f"Invalid {model.__name__} response body", exc) from exc


# ------------------------------------------------------------------ #
# Contracts
# ------------------------------------------------------------------ #


class OAuthRequester(ABC):
    """Blocking contract for talking to Discord's OAuth2 API.

    Every operation is a single request/response round trip with no
    retries and no local state. Failures are raised as one of
    :class:`~discord_oauth.exceptions.TransportError`,
    :class:`~discord_oauth.exceptions.DecodeError`, or
    :class:`~discord_oauth.exceptions.EncodeError`.
    """

    @abstractmethod
    def exchange_code(self, request: AccessTokenExchangeRequest) -> AccessTokenResponse:
        """Exchange an authorization code for the user's access token.

        Example::

            request = AccessTokenExchangeRequest(
                client_id=249608697955745802,
                client_secret="dd99opUAgs7SQEtk2kdRrTMU5zagR2a4",
                code="user code here",
                redirect_uri="https://myapplication.website",
            )
            response = requester.exchange_code(request)
            print(response.access_token)
        """
        ...

    @abstractmethod
    def exchange_refresh_token(self, request: RefreshTokenRequest) -> AccessTokenResponse:
        """Exchange a refresh token for a fresh access token and refresh token."""
        ...

    @abstractmethod
    def fetch_user(self, token: str) -> AuthDiscordUser:
        """Return the user that owns *token*.

        The decoded user is always returned; a rejected token surfaces as a
        :class:`~discord_oauth.exceptions.TransportError`.
        """
        ...


class AsyncOAuthRequester(ABC):
    """Asynchronous counterpart of :class:`OAuthRequester`.

    Same operations and failure modes; each one suspends only while
    awaiting the network response.
    """

    @abstractmethod
    async def exchange_code(self, request: AccessTokenExchangeRequest) -> AccessTokenResponse:
        """Exchange an authorization code for the user's access token."""
        ...

    @abstractmethod
    async def exchange_refresh_token(self, request: RefreshTokenRequest) -> AccessTokenResponse:
        """Exchange a refresh token for a fresh access token and refresh token."""
        ...

    @abstractmethod
    async def fetch_user(self, token: str) -> AuthDiscordUser:
        """Return the user that owns *token*."""
        ...
