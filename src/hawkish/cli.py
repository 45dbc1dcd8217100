"""Hawkish CLI - Generate and check bewits for signed links."""

import sys
from datetime import timedelta

import click
from rich.console import Console

from hawkish.bewit.credentials import Algorithm, Credentials
from hawkish.bewit.validator import AuthenticationError, Bad, Expired, Good, HawkBewit
from hawkish.common.errors import BewitError
from hawkish.common.logging import setup_logging
from hawkish.common.settings import Settings

console = Console(stderr=True)


def _credentials(
    settings: Settings,
    key_id: str | None,
    key: str | None,
    algorithm: str | None,
) -> Credentials:
    key = key or settings.key
    if not key:
        console.print("[red]No key given (use --key or set HAWKISH_KEY)[/red]")
        sys.exit(1)
    return Credentials(
        key_id=key_id or settings.key_id,
        key=key,
        algorithm=Algorithm(algorithm or settings.algorithm),
    )


def _drop_empty_query(url: str) -> str:
    # An empty query cannot be told apart from no query once the bewit is stripped
    base, sep, fragment = url.partition("#")
    if base.find("?") == len(base) - 1:
        base = base[:-1]
    return f"{base}{sep}{fragment}"


def _append_bewit(url: str, param: str, token: str) -> str:
    base, sep, fragment = url.partition("#")
    joiner = "&" if "?" in base else "?"
    return f"{base}{joiner}{param}={token}{sep}{fragment}"


@click.group()
@click.option("--log-level", default=None, help="Log level (defaults to HAWKISH_LOG_LEVEL)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Hawkish CLI - Sign and verify links with bewits."""
    settings = Settings()
    setup_logging(log_level or settings.log_level, json_output=settings.log_json)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


def credential_options(f):  # type: ignore[no-untyped-def]
    """Shared credential options."""
    f = click.option(
        "--algorithm",
        type=click.Choice([a.value for a in Algorithm]),
        help="HMAC algorithm",
    )(f)
    f = click.option("--key", help="Shared secret")(f)
    f = click.option("--key-id", help="Key identifier")(f)
    return f


@cli.command("generate")
@click.option("--url", "-u", required=True, help="Encoded URL to sign, without a bewit")
@click.option("--ttl", "-t", type=int, default=None, help="Lifetime in seconds")
@click.option("--append", is_flag=True, help="Print the URL with the bewit appended")
@credential_options
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    url: str,
    ttl: int | None,
    append: bool,
    key_id: str | None,
    key: str | None,
    algorithm: str | None,
) -> None:
    """Generate a bewit for a URL."""
    settings: Settings = ctx.obj["settings"]
    credentials = _credentials(settings, key_id, key, algorithm)
    ttl_seconds = settings.default_ttl_seconds if ttl is None else ttl

    if append:
        url = _drop_empty_query(url)

    hawk = HawkBewit()
    try:
        request = hawk.unsigned_request(url)
        token = hawk.generate(credentials, request, timedelta(seconds=ttl_seconds))
    except (BewitError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if append:
        click.echo(_append_bewit(url, settings.bewit_param, token))
    else:
        click.echo(token)


@cli.command("validate")
@click.option("--url", "-u", required=True, help="Encoded URL, without the bewit")
@click.option("--bewit", "-b", required=True, help="Bewit token")
@credential_options
@click.pass_context
def validate_cmd(
    ctx: click.Context,
    url: str,
    bewit: str,
    key_id: str | None,
    key: str | None,
    algorithm: str | None,
) -> None:
    """Validate a bewit for a URL."""
    settings: Settings = ctx.obj["settings"]
    credentials = _credentials(settings, key_id, key, algorithm)

    hawk = HawkBewit()
    try:
        result = hawk.validate(credentials, hawk.unsigned_request(url), bewit)
    except (BewitError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    match result:
        case Good(expiry=expiry):
            console.print(f"[green]✓ Bewit is valid until {expiry.isoformat()}[/green]")
        case Expired(expiry=expiry):
            console.print(f"[red]✗ Bewit expired at {expiry.isoformat()}[/red]")
            sys.exit(1)
        case Bad(message=message) | AuthenticationError(message=message):
            console.print(f"[red]✗ Bewit is invalid: {message}[/red]")
            sys.exit(1)


if __name__ == "__main__":
    cli()
