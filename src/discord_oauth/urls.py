"""Builders for the URLs a user visits before any token exchange happens.

:func:`authorization_code_grant_url` produces the consent page URL whose
redirect carries the ``code`` later passed to
:meth:`~discord_oauth.client.base.OAuthRequester.exchange_code`.
:func:`bot_authorization_url` produces a bot invite link.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union
from urllib.parse import quote, urlencode

from discord_oauth.constants import BASE_AUTHORIZE_URI
from discord_oauth.models import Scope

ScopeLike = Union[Scope, str]

_PROMPTS = ("consent", "none")


def _join_scopes(scopes: Iterable[ScopeLike]) -> str:
    """Join scopes with spaces, dropping duplicates but keeping order."""
    seen: dict[str, None] = {}
    for scope in scopes:
        value = scope.value if isinstance(scope, Scope) else str(scope)
        seen.setdefault(value, None)
    return " ".join(seen)


def _build(params: dict[str, str]) -> str:
    # Discord expects %20 between scopes, not "+".
    return f"{BASE_AUTHORIZE_URI}?{urlencode(params, quote_via=quote)}"


def authorization_code_grant_url(
    client_id: int,
    scopes: Iterable[ScopeLike],
    redirect_uri: str,
    *,
    prompt: Optional[str] = None,
) -> str:
    """Return the URL that asks a user to grant *scopes* to the application.

    Args:
        client_id: The application's ID.
        scopes: One or more scopes to request.
        redirect_uri: Where Discord sends the user back with ``?code=``.
        prompt: ``"consent"`` to always show the consent screen, ``"none"``
            to skip it when the user already authorised these scopes.

    Returns:
        The absolute authorization URL.

    Raises:
        ValueError: If *scopes* is empty or *prompt* is not recognised.
    """
    scope = _join_scopes(scopes)
    if not scope:
        raise ValueError("At least one scope is required")
    if prompt is not None and prompt not in _PROMPTS:
        raise ValueError(f"prompt must be one of {', '.join(_PROMPTS)}, got {prompt!r}")

    params = {
        "client_id": str(client_id),
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": scope,
    }
    if prompt is not None:
        params["prompt"] = prompt
    return _build(params)


def bot_authorization_url(
    client_id: int,
    scopes: Iterable[ScopeLike] = (),
    permissions: int = 0,
    *,
    guild_id: Optional[int] = None,
) -> str:
    """Return a bot invite URL.

    The ``bot`` scope is always requested, ahead of any extra *scopes*.

    Args:
        client_id: The application's ID.
        scopes: Additional scopes, e.g. ``Scope.GUILDS``.
        permissions: Permission bitfield the bot is granted on join.
        guild_id: Pre-select this guild in the invite dialog.

    Raises:
        ValueError: If *permissions* is negative.
    """
    if permissions < 0:
        raise ValueError(f"permissions must be non-negative, got {permissions}")

    params = {
        "client_id": str(client_id),
        "scope": _join_scopes([Scope.BOT, *scopes]),
        "permissions": str(permissions),
    }
    if guild_id is not None:
        params["guild_id"] = str(guild_id)
    return _build(params)
