"""Numeric process exit codes for the ``discord-oauth`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~discord_oauth.exceptions.DiscordOAuthError` subclass.
Shell scripts can inspect the exit code to tell a rejected token from a
network failure without parsing stderr.

Example::

    $ discord-oauth whoami "$TOKEN"
    $ echo $?
    3   # EXIT_TRANSPORT_ERROR -- Discord rejected the token or was unreachable
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_TRANSPORT_ERROR = 3
"""The HTTP call failed or Discord answered with a non-2xx status."""

EXIT_DECODE_ERROR = 4
"""Discord's response body did not match the expected JSON shape."""

EXIT_ENCODE_ERROR = 5
"""The request could not be URL-encoded."""

EXIT_CONFIG_ERROR = 6
"""Configuration or a credential source could not be resolved."""
