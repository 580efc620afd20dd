"""CLI entrypoint for the Kupmios provider."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any, Coroutine, Optional

import typer
from rich.console import Console

from .constants import CONFIG_ENV_VAR
from .domain import Credential, OutRef
from .errors import KupmiosError
from .logger import setup_logging
from .provider.kupmios import KupmiosProvider
from .settings import KupmiosSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Query a Kupo indexer and an Ogmios node bridge.",
)


def _build_logger() -> logging.Logger:
    return logging.getLogger("kupmios")


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _print_json(value: Any) -> None:
    Console().print_json(data=_to_jsonable(value))


def _execute(ctx: typer.Context, call: Coroutine[Any, Any, Any]) -> None:
    state: AppState = ctx.obj
    try:
        result = asyncio.run(call)
    except KupmiosError as exc:
        state.logger.debug("Command failed", exc_info=exc)
        typer.echo(f"Error ({exc.kind.value}): {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    _print_json(result)


def parse_out_ref(value: str) -> OutRef:
    """Parse ``TXHASH#INDEX``."""
    tx_hash, sep, index = value.partition("#")
    if not sep or not tx_hash or not index.isdigit():
        raise typer.BadParameter(f"Expected TXHASH#INDEX, got {value!r}")
    return OutRef(tx_hash=tx_hash, output_index=int(index))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [kupmios] table).",
        ),
    ] = None,
    kupo_url: Annotated[
        Optional[str], typer.Option("--kupo-url", help="Kupo base URL.")
    ] = None,
    ogmios_url: Annotated[
        Optional[str], typer.Option("--ogmios-url", help="Ogmios base URL.")
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option("--show-config", help="Print effective config and exit."),
    ] = False,
):
    """Load configuration and build the provider shared by every command."""
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, str] = {}
    if kupo_url is not None:
        init_kwargs["kupo_url"] = kupo_url
    if ogmios_url is not None:
        init_kwargs["ogmios_url"] = ogmios_url
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = KupmiosSettings(**init_kwargs)
    setup_logging(settings.log_level)

    if show_config:
        typer.echo(json.dumps(settings.as_dict(), indent=2))
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    ctx.obj = AppState(
        settings=settings,
        logger=_build_logger(),
        provider=KupmiosProvider.from_settings(settings),
    )


@app.command("protocol-parameters")
def protocol_parameters(ctx: typer.Context):
    """Print the current protocol parameters."""
    _execute(ctx, ctx.obj.provider.get_protocol_parameters())


@app.command("utxos")
def utxos(
    ctx: typer.Context,
    address: Annotated[
        str, typer.Argument(help="Bech32 address, or a credential hash with --credential.")
    ],
    credential: Annotated[
        Optional[str],
        typer.Option(
            "--credential",
            help="Treat ADDRESS as a payment credential hash of this type (Key or Script).",
        ),
    ] = None,
    unit: Annotated[
        Optional[str], typer.Option("--unit", help="Only UTxOs holding this unit.")
    ] = None,
):
    """List the unspent outputs at an address or payment credential."""
    target: str | Credential = address
    if credential is not None:
        if credential not in ("Key", "Script"):
            raise typer.BadParameter("--credential must be Key or Script")
        target = Credential(type=credential, hash=address)

    provider: KupmiosProvider = ctx.obj.provider
    if unit:
        _execute(ctx, provider.get_utxos_with_unit(target, unit))
    else:
        _execute(ctx, provider.get_utxos(target))


@app.command("utxo-by-unit")
def utxo_by_unit(ctx: typer.Context, unit: str):
    """Print the single UTxO holding UNIT."""
    _execute(ctx, ctx.obj.provider.get_utxo_by_unit(unit))


@app.command("utxos-by-out-ref")
def utxos_by_out_ref(
    ctx: typer.Context,
    out_refs: Annotated[list[str], typer.Argument(help="One or more TXHASH#INDEX.")],
):
    """Look up UTxOs by output reference."""
    refs = [parse_out_ref(value) for value in out_refs]
    _execute(ctx, ctx.obj.provider.get_utxos_by_out_ref(refs))


@app.command("delegation")
def delegation(ctx: typer.Context, reward_address: str):
    """Print the pool and rewards of a reward address."""
    _execute(ctx, ctx.obj.provider.get_delegation(reward_address))


@app.command("datum")
def datum(ctx: typer.Context, datum_hash: str):
    """Print the datum stored for DATUM_HASH."""
    _execute(ctx, ctx.obj.provider.get_datum(datum_hash))


@app.command("await-tx")
def await_tx(
    ctx: typer.Context,
    tx_hash: str,
    check_interval_ms: Annotated[
        Optional[int],
        typer.Option("--check-interval-ms", help="Initial delay between polls."),
    ] = None,
):
    """Block until TX_HASH is visible on the indexer."""
    state: AppState = ctx.obj
    interval = check_interval_ms or state.settings.check_interval_ms
    _execute(ctx, state.provider.await_tx(tx_hash, interval))


@app.command("submit")
def submit(ctx: typer.Context, cbor: str):
    """Submit a signed transaction (CBOR hex) and print its hash."""
    _execute(ctx, ctx.obj.provider.submit_tx(cbor))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
