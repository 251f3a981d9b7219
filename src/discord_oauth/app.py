"""Typer application and CLI entry point for discord-oauth.

The ``discord-oauth`` command wraps the library for manual testing of an
application's OAuth2 setup:

* ``authorize-url`` / ``invite-url`` -- print the consent or bot invite URL.
* ``exchange`` -- trade an authorization code for tokens.
* ``refresh`` -- trade a refresh token for fresh tokens.
* ``whoami`` -- show the user that owns an access token.
* ``config show`` / ``config set`` -- inspect and edit the config file.

Every network command accepts ``--async`` to go through
:class:`~discord_oauth.client.AsyncRequester` instead of the blocking
binding; the output is identical.

:class:`~discord_oauth.exceptions.DiscordOAuthError` raised by a command is
printed to stderr and mapped to the error's ``exit_code``.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, List, Optional, TypeVar

import typer

from discord_oauth import __version__
from discord_oauth.client import AsyncOAuthRequester, AsyncRequester, OAuthRequester, SyncRequester
from discord_oauth.config import (
    config_path,
    resolve_config,
    resolve_credential,
    set_config_value,
)
from discord_oauth.exceptions import DiscordOAuthError, InvalidUsageError
from discord_oauth.exit_codes import EXIT_GENERIC_FAILURE
from discord_oauth.models import (
    AccessTokenExchangeRequest,
    ClientConfig,
    RefreshTokenRequest,
    Scope,
)
from discord_oauth.output import OutputFormat, OutputManager, get_output, set_output
from discord_oauth.urls import authorization_code_grant_url, bot_authorization_url

T = TypeVar("T")

app = typer.Typer(
    name="discord-oauth",
    help="Exchange Discord OAuth2 codes and refresh tokens.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
config_app = typer.Typer(help="Configuration management.", no_args_is_help=True)
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"discord-oauth {__version__}")
        raise typer.Exit()


class _OutputHandler(logging.Handler):
    """Forward library log records to the active :class:`OutputManager`."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        output = get_output()
        if record.levelno >= logging.WARNING:
            output.warning(message)
        else:
            output.debug(message)


def _configure_logging(verbose: bool) -> None:
    """Route ``discord_oauth`` log records to stderr.

    Records at WARNING and above are always shown; ``--verbose`` lowers
    the threshold to DEBUG.
    """
    logger = logging.getLogger("discord_oauth")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, _OutputHandler) for h in logger.handlers):
        handler = _OutputHandler()
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the global output manager from the output flags."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report DiscordOAuthError on stderr and exit with its code."""
    try:
        yield
    except DiscordOAuthError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def _sync_requester(config: ClientConfig) -> SyncRequester:
    return SyncRequester(config=config)


def _async_requester(config: ClientConfig) -> AsyncRequester:
    return AsyncRequester(config=config)


def _call(
    config: ClientConfig,
    use_async: bool,
    sync_op: Callable[[OAuthRequester], T],
    async_op: Callable[[AsyncOAuthRequester], Awaitable[T]],
) -> T:
    """Run one requester operation with the binding selected by ``--async``."""
    get_output().debug(f"Using the {'async' if use_async else 'sync'} binding")
    if use_async:

        async def _run() -> T:
            async with _async_requester(config) as requester:
                return await async_op(requester)

        return asyncio.run(_run())

    with _sync_requester(config) as requester:
        return sync_op(requester)


def _app_credentials(config: ClientConfig) -> tuple[int, str, str]:
    """Return ``(client_id, client_secret, redirect_uri)`` or raise InvalidUsageError."""
    if config.client_id is None:
        raise InvalidUsageError(
            "No client ID configured (use --client-id or DISCORD_OAUTH_CLIENT_ID)"
        )
    if not config.redirect_uri:
        raise InvalidUsageError(
            "No redirect URI configured (use --redirect-uri or DISCORD_OAUTH_REDIRECT_URI)"
        )
    secret = resolve_credential(config.client_secret_source)
    return config.client_id, secret, config.redirect_uri


def _print_model(data: dict[str, Any]) -> None:
    get_output().format_response(data)


# ------------------------------------------------------------------ #
# URL commands
# ------------------------------------------------------------------ #


@app.command("authorize-url")
def authorize_url_command(
    scope: List[Scope] = typer.Option(
        [Scope.IDENTIFY], "--scope", "-s", help="Scope to request (repeatable)."
    ),
    client_id: Optional[int] = typer.Option(None, "--client-id", help="Application ID."),
    redirect_uri: Optional[str] = typer.Option(None, "--redirect-uri", help="Redirect URI."),
    prompt: Optional[str] = typer.Option(None, "--prompt", help="consent or none."),
) -> None:
    """Print the URL that asks a user to authorise the application."""
    with _handle_errors():
        config = resolve_config(client_id=client_id, redirect_uri=redirect_uri)
        if config.client_id is None or not config.redirect_uri:
            raise InvalidUsageError("authorize-url needs a client ID and a redirect URI")
        try:
            url = authorization_code_grant_url(
                config.client_id, scope, config.redirect_uri, prompt=prompt
            )
        except ValueError as exc:
            raise InvalidUsageError(str(exc)) from exc
        get_output().print_data(url)


@app.command("invite-url")
def invite_url_command(
    permissions: int = typer.Option(0, "--permissions", help="Permission bitfield."),
    scope: List[Scope] = typer.Option([], "--scope", "-s", help="Extra scope (repeatable)."),
    guild_id: Optional[int] = typer.Option(None, "--guild-id", help="Pre-selected guild."),
    client_id: Optional[int] = typer.Option(None, "--client-id", help="Application ID."),
) -> None:
    """Print a bot invite URL."""
    with _handle_errors():
        config = resolve_config(client_id=client_id)
        if config.client_id is None:
            raise InvalidUsageError("invite-url needs a client ID")
        try:
            url = bot_authorization_url(
                config.client_id, scope, permissions, guild_id=guild_id
            )
        except ValueError as exc:
            raise InvalidUsageError(str(exc)) from exc
        get_output().print_data(url)


# ------------------------------------------------------------------ #
# Token commands
# ------------------------------------------------------------------ #


@app.command("exchange")
def exchange_command(
    code: str = typer.Argument(..., help="Authorization code from the redirect."),
    client_id: Optional[int] = typer.Option(None, "--client-id", help="Application ID."),
    client_secret_source: Optional[str] = typer.Option(
        None, "--client-secret-source", help="env:VAR, file:/path, or prompt."
    ),
    redirect_uri: Optional[str] = typer.Option(None, "--redirect-uri", help="Redirect URI."),
    use_async: bool = typer.Option(False, "--async", help="Use the async binding."),
) -> None:
    """Exchange an authorization code for an access token."""
    with _handle_errors():
        config = resolve_config(
            client_id=client_id,
            client_secret_source=client_secret_source,
            redirect_uri=redirect_uri,
        )
        cid, secret, uri = _app_credentials(config)
        request = AccessTokenExchangeRequest(
            client_id=cid, client_secret=secret, code=code, redirect_uri=uri
        )
        response = _call(
            config,
            use_async,
            lambda r: r.exchange_code(request),
            lambda r: r.exchange_code(request),
        )
        get_output().success(f"Access token expires in {response.expires_in}s")
        _print_model(response.model_dump())


@app.command("refresh")
def refresh_command(
    refresh_token: str = typer.Argument(..., help="Previously issued refresh token."),
    client_id: Optional[int] = typer.Option(None, "--client-id", help="Application ID."),
    client_secret_source: Optional[str] = typer.Option(
        None, "--client-secret-source", help="env:VAR, file:/path, or prompt."
    ),
    redirect_uri: Optional[str] = typer.Option(None, "--redirect-uri", help="Redirect URI."),
    use_async: bool = typer.Option(False, "--async", help="Use the async binding."),
) -> None:
    """Exchange a refresh token for a fresh access token."""
    with _handle_errors():
        config = resolve_config(
            client_id=client_id,
            client_secret_source=client_secret_source,
            redirect_uri=redirect_uri,
        )
        cid, secret, uri = _app_credentials(config)
        request = RefreshTokenRequest(
            client_id=cid, client_secret=secret, refresh_token=refresh_token, redirect_uri=uri
        )
        response = _call(
            config,
            use_async,
            lambda r: r.exchange_refresh_token(request),
            lambda r: r.exchange_refresh_token(request),
        )
        get_output().success(f"Access token expires in {response.expires_in}s")
        _print_model(response.model_dump())


@app.command("whoami")
def whoami_command(
    token: str = typer.Argument(..., help="Access token."),
    use_async: bool = typer.Option(False, "--async", help="Use the async binding."),
) -> None:
    """Show the user that owns an access token."""
    with _handle_errors():
        config = resolve_config()
        user = _call(
            config,
            use_async,
            lambda r: r.fetch_user(token),
            lambda r: r.fetch_user(token),
        )
        get_output().info(f"Authenticated as {user.tag}")
        _print_model(user.model_dump(exclude_none=True))


# ------------------------------------------------------------------ #
# Config commands
# ------------------------------------------------------------------ #


@config_app.command("show")
def config_show_command() -> None:
    """Show the effective configuration."""
    with _handle_errors():
        config = resolve_config()
        output = get_output()
        output.info(f"Config file: {config_path()}")
        rows = [
            [key, "" if value is None else str(value)]
            for key, value in config.model_dump().items()
        ]
        output.print_table(["key", "value"], rows, title="discord-oauth config")


@config_app.command("set")
def config_set_command(
    key: str = typer.Argument(..., help="Config key."),
    value: str = typer.Argument(..., help="New value."),
) -> None:
    """Set a value in the config file."""
    with _handle_errors():
        set_config_value(key, value)
        get_output().success(f"Set {key}")


def main() -> None:
    """CLI entry point invoked by the ``discord-oauth`` console script.

    Errors that escape a command's own handling are printed to stderr;
    :class:`~discord_oauth.exceptions.DiscordOAuthError` exits with its
    ``exit_code``, anything else with :data:`EXIT_GENERIC_FAILURE`.
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except DiscordOAuthError as exc:
        get_output().error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        get_output().error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
