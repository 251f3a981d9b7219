"""discord_oauth -- Discord OAuth2 code and refresh-token exchange client.

Builds the three requests an application makes against Discord's OAuth2 API
(authorization code exchange, refresh token exchange, and "fetch current
user") and sends them through a blocking or asynchronous httpx binding.

Typical use::

    from discord_oauth import AccessTokenExchangeRequest, SyncRequester

    request = AccessTokenExchangeRequest(
        client_id=249608697955745802,
        client_secret="dd99opUAgs7SQEtk2kdRrTMU5zagR2a4",
        code=code_from_redirect,
        redirect_uri="https://myapplication.website",
    )
    with SyncRequester() as requester:
        tokens = requester.exchange_code(request)
        user = requester.fetch_user(tokens.access_token)

Modules:
    client: Requester contracts and the httpx bindings.
    models: Pydantic request, response, and config models.
    exceptions: Transport / decode / encode error taxonomy.
    urls: Authorization and bot invite URL builders.
    constants: Fixed Discord endpoint URIs.
    config: Config file and credential resolution for the CLI.
    app: ``discord-oauth`` command-line interface.
"""

__version__ = "0.1.0"

from discord_oauth.client import (  # noqa: E402
    AsyncOAuthRequester,
    AsyncRequester,
    OAuthRequester,
    SyncRequester,
)
from discord_oauth.exceptions import (  # noqa: E402
    DecodeError,
    DiscordOAuthError,
    EncodeError,
    RequestError,
    TransportError,
)
from discord_oauth.models import (  # noqa: E402
    AccessTokenExchangeRequest,
    AccessTokenResponse,
    AuthDiscordUser,
    ClientConfig,
    RefreshTokenRequest,
    Scope,
)
from discord_oauth.urls import authorization_code_grant_url, bot_authorization_url  # noqa: E402

__all__ = [
    "AccessTokenExchangeRequest",
    "AccessTokenResponse",
    "AsyncOAuthRequester",
    "AsyncRequester",
    "AuthDiscordUser",
    "ClientConfig",
    "DecodeError",
    "DiscordOAuthError",
    "EncodeError",
    "OAuthRequester",
    "RefreshTokenRequest",
    "RequestError",
    "Scope",
    "SyncRequester",
    "TransportError",
    "authorization_code_grant_url",
    "bot_authorization_url",
]
