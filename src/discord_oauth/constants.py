"""Fixed Discord endpoint URIs.

These are process-wide constants; the requester bindings read them directly
rather than rebuilding URLs per call.
"""

BASE_API_URI = "https://discord.com/api"
"""Root of Discord's REST API."""

BASE_AUTHORIZE_URI = f"{BASE_API_URI}/oauth2/authorize"
"""Consent page a user is sent to in order to grant scopes."""

BASE_TOKEN_URI = f"{BASE_API_URI}/oauth2/token"
"""Token endpoint for both code and refresh-token exchanges."""

CURRENT_USER_URI = f"{BASE_API_URI}/users/@me"
"""Returns the user that owns the bearer token."""

CDN_URI = "https://cdn.discordapp.com"
"""Discord's CDN, used for avatar URLs."""

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
