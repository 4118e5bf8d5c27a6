"""Command line entry points."""

from __future__ import annotations

import json
import os
from typing import Any

import click
from dotenv import load_dotenv

from .client import FixerClient
from .config import ClientSettings, config_to_dict, environ_overrides, get_config, normalize_symbols
from .errors import FixerClientError
from .logging import setup_logging
from .schemas import RateSnapshot


def _symbols_option(func):
    return click.option(
        "--symbols",
        default="",
        help="Comma-separated target currencies (defaults to FIXER_DEFAULT_SYMBOLS)",
    )(func)


def _base_option(func):
    return click.option("--base", default=None, help="Base currency (defaults to FIXER_DEFAULT_BASE)")(func)


@click.group()
@click.option("--env", "env_name", default=None, help="Config environment (APP_ENV)")
@click.option("--endpoint", default=None, help="Override the API endpoint")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="json",
    show_default=True,
)
@click.pass_context
def cli(ctx: click.Context, env_name: str | None, endpoint: str | None, output_format: str) -> None:
    """Query a Fixer-compatible exchange-rate API."""

    env_file = os.path.join(os.getcwd(), ".env")
    if os.path.exists(env_file):
        load_dotenv(env_file)

    try:
        config = config_to_dict(get_config(env_name))
    except KeyError as exc:
        raise click.BadParameter(str(exc.args[0]), param_hint="--env") from exc
    config.update(environ_overrides())
    if endpoint:
        config["FIXER_ENDPOINT"] = endpoint

    setup_logging(config)
    try:
        settings = ClientSettings.from_mapping(config)
    except FixerClientError as exc:
        raise click.ClickException(str(exc)) from exc

    client = FixerClient(settings)
    ctx.call_on_close(client.close)
    ctx.obj = {"client": client, "format": output_format}


@cli.command("latest")
@_base_option
@_symbols_option
@click.pass_obj
def latest(obj: dict[str, Any], base: str | None, symbols: str) -> None:
    """Print the latest rates."""

    client: FixerClient = obj["client"]
    try:
        payload = client.latest(base, normalize_symbols(symbols))
    except FixerClientError as exc:
        raise click.ClickException(str(exc)) from exc
    _emit(payload, obj["format"])


@cli.command("historical")
@click.argument("date")
@_base_option
@_symbols_option
@click.pass_obj
def historical(obj: dict[str, Any], date: str, base: str | None, symbols: str) -> None:
    """Print the rates for DATE (YYYY-MM-DD, a unix timestamp or e.g. "yesterday")."""

    client: FixerClient = obj["client"]
    # Eight digits read as YYYYMMDD; other all-digit input is a unix timestamp.
    value: Any = int(date) if date.isascii() and date.isdigit() and len(date) != 8 else date
    try:
        payload = client.historical(value, base, normalize_symbols(symbols))
    except FixerClientError as exc:
        raise click.ClickException(str(exc)) from exc
    _emit(payload, obj["format"])


def _emit(payload: dict[str, Any], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    try:
        snapshot = RateSnapshot.from_payload(payload)
    except FixerClientError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{snapshot.base} on {snapshot.date.isoformat()}")
    for code in sorted(snapshot.rates):
        click.echo(f"  {code:<4} {snapshot.rates[code]}")


def main() -> None:
    cli()
