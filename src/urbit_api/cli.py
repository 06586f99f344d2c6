from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import msgspec
import typer

from . import __version__
from .config import ConfigError, get_ship_code, get_ship_url, load_config
from .errors import UrbitAPIError
from .interface import ShipInterface
from .logging import setup_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=1)


def _resolve_credentials(
    url: str | None, code: str | None, config_path: Path | None
) -> tuple[str, str]:
    if url and code:
        return url.rstrip("/"), code
    try:
        config, resolved_path = load_config(config_path)
        ship_url = url.rstrip("/") if url else get_ship_url(config, resolved_path)
        ship_code = code or get_ship_code(config, resolved_path)
    except ConfigError as e:
        _fail(str(e))
    return ship_url, ship_code


def _login(
    url: str | None, code: str | None, config_path: Path | None
) -> ShipInterface:
    ship_url, ship_code = _resolve_credentials(url, code, config_path)
    try:
        return ShipInterface.login(ship_url, ship_code)
    except UrbitAPIError as e:
        _fail(f"could not log into {ship_url}: {e}")


_URL_OPTION = typer.Option(None, "--url", help="Ship URL, e.g. http://0.0.0.0:8080.")
_CODE_OPTION = typer.Option(None, "--code", help="Ship +code.")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to urbit.toml.")
_DEBUG_OPTION = typer.Option(False, "--debug", help="Log debug output.")


def login(
    url: str | None = _URL_OPTION,
    code: str | None = _CODE_OPTION,
    config: Path | None = _CONFIG_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Log into a ship and print its name."""
    setup_logging(debug=debug)
    with _login(url, code, config) as ship:
        typer.echo(ship.identity)


def poke(
    app: str = typer.Argument(..., help="Agent to poke, e.g. hood."),
    mark: str = typer.Argument(..., help="Mark of the poke, e.g. helm-hi."),
    payload: str = typer.Argument(..., help="JSON payload of the poke."),
    url: str | None = _URL_OPTION,
    code: str | None = _CODE_OPTION,
    config: Path | None = _CONFIG_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Open a channel, send one poke, and delete the channel again."""
    setup_logging(debug=debug)
    try:
        json_value = msgspec.json.decode(payload)
    except msgspec.DecodeError as e:
        _fail(f"invalid JSON payload: {e}")

    with _login(url, code, config) as ship:
        try:
            channel = ship.create_channel()
            resp = channel.poke(app, mark, json_value)
            channel.delete_channel()
        except UrbitAPIError as e:
            _fail(str(e))
        typer.echo(f"{app} {mark} -> {resp.status_code}")
        if not resp.is_success:
            raise typer.Exit(code=1)


def create_app() -> typer.Typer:
    app = typer.Typer(
        add_completion=False,
        no_args_is_help=True,
        help="Talk to an Urbit ship over its HTTP API.",
    )

    @app.callback()
    def _main(
        version: bool = typer.Option(
            False,
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ) -> None:
        _ = version

    app.command(name="login")(login)
    app.command(name="poke")(poke)
    return app


def main() -> None:
    app = create_app()
    app()
