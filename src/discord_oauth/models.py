"""Canonical Pydantic models shared across all discord_oauth modules.

The models fall into three groups:

**Request models** -- built by the caller, serialised as
``application/x-www-form-urlencoded`` data:
    :class:`AccessTokenExchangeRequest` and :class:`RefreshTokenRequest`.

**Response models** -- decoded from Discord's JSON responses:
    :class:`AccessTokenResponse` and :class:`AuthDiscordUser`.

**Configuration models** -- :class:`ClientConfig`, serialised as JSON in the
user's config directory, and the :class:`Scope` enumeration.

Request and response models are frozen: once constructed, their fields
cannot be reassigned.
"""

from __future__ import annotations

import enum
from typing import Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from discord_oauth.constants import CDN_URI


class Scope(str, enum.Enum):
    """OAuth2 scopes understood by Discord's authorization endpoint."""

    BOT = "bot"
    CONNECTIONS = "connections"
    EMAIL = "email"
    IDENTIFY = "identify"
    GUILDS = "guilds"
    GUILDS_JOIN = "guilds.join"
    GDM_JOIN = "gdm.join"
    MESSAGES_READ = "messages.read"
    RPC = "rpc"
    RPC_API = "rpc.api"
    RPC_NOTIFICATIONS_READ = "rpc.notifications.read"
    WEBHOOK_INCOMING = "webhook.incoming"


# --- Requests ---


class _FormRequest(BaseModel):
    """Base for requests sent to the token endpoint as form data."""

    model_config = ConfigDict(frozen=True)

    def to_form_data(self) -> dict[str, str]:
        """Return the fields as a ``name -> value`` mapping in declaration order.

        Values are stringified; field names are sent as declared.
        """
        return {name: str(value) for name, value in self.model_dump().items()}

    def to_query(self) -> str:
        """Serialise the request as an ``application/x-www-form-urlencoded`` string.

        Raises:
            UnicodeEncodeError: If a value cannot be encoded as UTF-8.
        """
        return urlencode(self.to_form_data())


class AccessTokenExchangeRequest(_FormRequest):
    """A one-time request to trade an authorization code for tokens.

    Example::

        request = AccessTokenExchangeRequest(
            client_id=249608697955745802,
            client_secret="dd99opUAgs7SQEtk2kdRrTMU5zagR2a4",
            code="user code here",
            redirect_uri="https://myapplication.website",
        )
    """

    client_id: int
    client_secret: str
    code: str
    redirect_uri: str


class RefreshTokenRequest(_FormRequest):
    """A request to mint a fresh access token from a refresh token."""

    client_id: int
    client_secret: str
    refresh_token: str
    redirect_uri: str


# --- Responses ---


class AccessTokenResponse(BaseModel):
    """Token endpoint response.

    All five fields are required so that a response missing any of them
    fails to decode instead of producing a partial object.
    Decoding is strict: ``"expires_in": "604800"`` or ``604800.0`` is a
    shape error, not something to coerce.
    """

    model_config = ConfigDict(frozen=True, strict=True, hide_input_in_errors=True)

    access_token: str
    token_type: str
    expires_in: int = Field(description="Lifetime of the access token in seconds")
    refresh_token: str
    scope: str = Field(description="Space-separated list of granted scopes")

    @property
    def scopes(self) -> list[str]:
        """The granted scopes as a list."""
        return self.scope.split()


class AuthDiscordUser(BaseModel):
    """The user that owns an access token, as returned by ``/users/@me``.

    Only ``id`` and ``username`` are guaranteed by Discord; everything else
    depends on the granted scopes and the account type. Fields Discord adds
    later are preserved and accessible via ``model_extra``.
    """

    model_config = ConfigDict(frozen=True, extra="allow", hide_input_in_errors=True)

    id: str
    username: str
    discriminator: Optional[str] = None
    global_name: Optional[str] = None
    avatar: Optional[str] = None
    bot: Optional[bool] = None
    system: Optional[bool] = None
    mfa_enabled: Optional[bool] = None
    banner: Optional[str] = None
    accent_color: Optional[int] = None
    locale: Optional[str] = None
    verified: Optional[bool] = None
    email: Optional[str] = None
    flags: Optional[int] = None
    premium_type: Optional[int] = None
    public_flags: Optional[int] = None

    @property
    def tag(self) -> str:
        """``username#discriminator``, or just the username for migrated accounts."""
        if not self.discriminator or self.discriminator == "0":
            return self.username
        return f"{self.username}#{self.discriminator}"

    @property
    def avatar_url(self) -> Optional[str]:
        """CDN URL of the user's avatar, or ``None`` when no avatar is set."""
        if not self.avatar:
            return None
        ext = "gif" if self.avatar.startswith("a_") else "png"
        return f"{CDN_URI}/avatars/{self.id}/{self.avatar}.{ext}"


# --- Config ---


class ClientConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/discord-oauth/config.json``.

    The transport fields apply when a requester creates its own httpx
    client. The application fields are CLI defaults; any of them can be
    overridden by environment variables or command-line flags. See
    :func:`~discord_oauth.config.resolve_config`.
    """

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default="discord-oauth2-python",
        description="User-Agent header sent with every request",
    )
    client_id: Optional[int] = Field(default=None, description="Application ID")
    client_secret_source: str = Field(
        default="env:DISCORD_CLIENT_SECRET",
        description="Credential source for the client secret: env:VAR, file:/path, prompt",
    )
    redirect_uri: Optional[str] = Field(
        default=None, description="Redirect URI registered for the application"
    )
