"""Exception hierarchy for discord_oauth.

Every exception inherits from :class:`DiscordOAuthError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`discord_oauth.exit_codes`.

Failures of the three requester operations form a closed set under
:class:`RequestError`. Each variant wraps the underlying exception as
``cause`` (also chained as ``__cause__``) so callers can inspect it::

    DiscordOAuthError (exit 1)
    +-- RequestError
    |   +-- TransportError  (exit 3)  httpx failure or non-2xx status
    |   +-- DecodeError     (exit 4)  body is not the expected JSON shape
    |   +-- EncodeError     (exit 5)  request could not be form-encoded
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 6)
"""

from __future__ import annotations

from typing import Optional

import httpx

from discord_oauth.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_ENCODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TRANSPORT_ERROR,
)


class DiscordOAuthError(Exception):
    """Base exception for all discord_oauth errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class RequestError(DiscordOAuthError):
    """A requester operation failed.

    Only the three subclasses below are ever raised. The wrapped exception
    is available as :attr:`cause`.

    Args:
        message: Human-readable error description.
        cause: The exception raised by httpx, pydantic, or the encoder.
    """

    kind: str = "request"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is None:
            return message
        return f"{message}: {self.cause}"


class TransportError(RequestError):
    """Raised when the HTTP call fails or the response status is not 2xx.

    DNS, connection, timeout, and HTTP status failures are not told apart
    here; inspect :attr:`cause` or :attr:`status_code` for detail.
    """

    kind = "transport"
    exit_code = EXIT_TRANSPORT_ERROR

    def __str__(self) -> str:
        # httpx puts the full request URL, query included, in the status
        # error message; the status is already part of our own message.
        if isinstance(self.cause, httpx.HTTPStatusError):
            return self.args[0] if self.args else ""
        return super().__str__()

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, or ``None`` for network errors."""
        if isinstance(self.cause, httpx.HTTPStatusError):
            return self.cause.response.status_code
        return None


class DecodeError(RequestError):
    """Raised when a response body is not JSON of the expected shape."""

    kind = "decode"
    exit_code = EXIT_DECODE_ERROR


class EncodeError(RequestError):
    """Raised when a request cannot be serialised as form data."""

    kind = "encode"
    exit_code = EXIT_ENCODE_ERROR


class InvalidUsageError(DiscordOAuthError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(DiscordOAuthError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_CONFIG_ERROR
