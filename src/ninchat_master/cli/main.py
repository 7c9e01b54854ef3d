"""CLI entry point for ninchat-master.

Invoked as::

    ninchat-master [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m ninchat_master.cli.main

Commands
--------
version                    Show version information
sign create-session        Signature for create_session
sign join-channel          Signature for join_channel
secure                     Encrypted audience metadata

The master key is read from ``--key-id``/``--key-secret`` or from the
``NINCHAT_MASTER_KEY_ID``/``NINCHAT_MASTER_KEY_SECRET`` environment
variables.
"""
from __future__ import annotations

import functools
import json
import logging
import sys
import time
from collections.abc import Callable
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from ninchat_master.config import ENV_KEY_ID, ENV_KEY_SECRET, ENV_TOKEN_FORMAT
from ninchat_master.encoding.codec import TokenFormat
from ninchat_master.errors import MasterKeyError
from ninchat_master.master import MasterKey

console = Console()

DEFAULT_TTL_SECONDS = 60


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="ninchat-master")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level.",
)
def cli(log_level: str) -> None:
    """Ninchat master key signatures and secure metadata"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from ninchat_master import __version__

    console.print(f"[bold]ninchat-master[/bold] v{__version__}")


# ------------------------------------------------------------------
# Shared options
# ------------------------------------------------------------------


def _master_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach key, format and expiration options to a command."""
    options = [
        click.option("--key-id", envvar=ENV_KEY_ID, required=True, help="Master key id."),
        click.option(
            "--key-secret",
            envvar=ENV_KEY_SECRET,
            required=True,
            help="Base64-encoded master key secret.",
        ),
        click.option(
            "--format",
            "token_format",
            envvar=ENV_TOKEN_FORMAT,
            type=click.Choice([f.value for f in TokenFormat], case_sensitive=False),
            default=TokenFormat.DOTTED.value,
            show_default=True,
            help="Token format expected by the service.",
        ),
        click.option(
            "--expire",
            type=float,
            default=None,
            help="Absolute expiration time (Unix seconds).",
        ),
        click.option(
            "--ttl",
            type=int,
            default=DEFAULT_TTL_SECONDS,
            show_default=True,
            help="Lifetime in seconds when --expire is not given.",
        ),
        click.option("--show-size", is_flag=True, help="Also print the token length."),
    ]
    for option in reversed(options):
        func = option(func)

    @functools.wraps(func)
    def wrapper(
        key_id: str,
        key_secret: str,
        token_format: str,
        expire: float | None,
        ttl: int,
        show_size: bool,
        **kwargs: Any,
    ) -> None:
        master = _build_master(key_id, key_secret, token_format)
        if expire is None:
            expire = time.time() + ttl
        try:
            token = func(master=master, expire=expire, **kwargs)
        except MasterKeyError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            sys.exit(1)
        _emit(token, show_size)

    return wrapper


def _build_master(key_id: str, key_secret: str, token_format: str) -> MasterKey:
    try:
        return MasterKey(key_id, key_secret, token_format=TokenFormat(token_format.lower()))
    except MasterKeyError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _emit(token: str, show_size: bool) -> None:
    if show_size:
        console.print(f"Size: {len(token)}")
    click.echo(token)


def _parse_member_attr(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, Any]]:
    attrs: list[tuple[str, Any]] = []
    for item in values:
        name, sep, raw = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=JSON, got {item!r}", ctx=ctx, param=param)
        try:
            attrs.append((name, json.loads(raw)))
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"{name}: value is not valid JSON: {exc}", ctx=ctx, param=param)
    return attrs


# ------------------------------------------------------------------
# sign command group
# ------------------------------------------------------------------


@cli.group(name="sign")
def sign_group() -> None:
    """Create master signatures."""


@sign_group.command(name="create-session")
@click.option("--user-id", default=None, help="Authenticate this existing puppet user.")
@_master_options
def create_session_command(master: MasterKey, expire: float, user_id: str | None) -> str:
    """Signature for a create_session API call."""
    if user_id is None:
        return master.sign_create_session(expire)
    return master.sign_create_session_for_user(expire, user_id)


@sign_group.command(name="join-channel")
@click.argument("channel_id")
@click.option("--user-id", default=None, help="Only this user may use the signature.")
@click.option(
    "--member-attr",
    "member_attrs",
    multiple=True,
    callback=_parse_member_attr,
    help="Member attribute as NAME=JSON (repeatable, e.g. --member-attr silenced=false).",
)
@_master_options
def join_channel_command(
    master: MasterKey,
    expire: float,
    channel_id: str,
    user_id: str | None,
    member_attrs: list[tuple[str, Any]],
) -> str:
    """Signature for a join_channel API call on CHANNEL_ID."""
    return master.sign_join_channel_for_user(expire, channel_id, user_id, member_attrs or None)


# ------------------------------------------------------------------
# secure command
# ------------------------------------------------------------------


@cli.command(name="secure")
@click.argument("metadata")
@click.option("--user-id", default=None, help="Only this user may use the metadata.")
@_master_options
def secure_command(master: MasterKey, expire: float, metadata: str, user_id: str | None) -> str:
    """Encrypt METADATA (a JSON object) for a request_audience API call."""
    try:
        parsed = json.loads(metadata)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error:[/red] METADATA is not valid JSON: {escape(str(exc))}")
        sys.exit(1)
    return master.secure_metadata_for_user(expire, parsed, user_id)


if __name__ == "__main__":
    cli()
