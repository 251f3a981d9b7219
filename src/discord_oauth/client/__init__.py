"""Requester bindings for Discord's OAuth2 API.

Provides one contract per concurrency model and an httpx-backed
implementation of each:

Classes:
    :class:`OAuthRequester` -- blocking contract.
    :class:`AsyncOAuthRequester` -- asynchronous contract.
    :class:`SyncRequester` -- blocking binding backed by :class:`httpx.Client`.
    :class:`AsyncRequester` -- non-blocking binding backed by :class:`httpx.AsyncClient`.

Both bindings share the request models, the error taxonomy, and the request
preparation in :mod:`discord_oauth.client.base`, so they are interchangeable
apart from ``await``.

Example::

    from discord_oauth.client import SyncRequester

    with SyncRequester() as requester:
        user = requester.fetch_user(access_token)
"""

from discord_oauth.client.async_client import AsyncRequester
from discord_oauth.client.base import AsyncOAuthRequester, OAuthRequester
from discord_oauth.client.sync_client import SyncRequester

__all__ = ["OAuthRequester", "AsyncOAuthRequester", "SyncRequester", "AsyncRequester"]
