"""
lea_sdk.cli.main
================

`lea-sdk`: command-line access to the Lea base pod: balances and supply,
plus chained transfer / mint / burn signed with a keyset file.

Examples
--------
    $ lea-sdk --cluster local balance lea1...
    $ lea-sdk supply
    $ lea-sdk --encoder my_codec:Encoder mint --keyset minter.json --to lea1... --amount 23
    $ lea-sdk -v transfer --keyset me.json --to lea1... --amount 1

Configuration
-------------
- Cluster      : `--cluster` or env `LEA_CLUSTER` (default: devnet)
- RPC URL      : `--rpc` or env `LEA_RPC_URL` (overrides the cluster URL)
- HTTP Timeout : `--timeout` or env `LEA_TIMEOUT` seconds (default: 10.0)
- Encoder      : `--encoder` or env `LEA_ENCODER`, a `module:attr` import path
                 of a TransactionEncoder (instance, class or factory)

Keyset files are the JSON written by key tools:
`{"keyset": ..., "address": "lea1...", "addressHex": "..."}`.
"""

from __future__ import annotations

import asyncio
import importlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from ..base_pod import BasePod
from ..config import SDKConfig
from ..errors import LeaSdkError
from ..rpc.http import HttpConnection
from ..tx.build import SystemProgram
from ..tx.encode import TransactionEncoder
from ..types import Account
from ..utils.bytes import to_hex
from ..version import __version__ as SDK_VERSION

T = TypeVar("T")

app = typer.Typer(
    name="lea-sdk",
    help="Lea SDK CLI: base pod balances, supply, transfers, mint and burn.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run", "load_encoder"]


@dataclass
class Ctx:
    config: SDKConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def load_encoder(path: Optional[str]) -> TransactionEncoder:
    """
    Import `module:attr`. An object with build/decode is used as-is; any other
    callable (class or factory) is called without arguments.
    """
    if not path:
        raise typer.BadParameter("no transaction encoder configured (use --encoder or LEA_ENCODER)")
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise typer.BadParameter(f"encoder must look like 'module:attr', got {path!r}")
    try:
        obj = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise typer.BadParameter(f"cannot import encoder {path!r}: {e}") from e
    if hasattr(obj, "build") and hasattr(obj, "decode") and not isinstance(obj, type):
        return obj
    if callable(obj):
        return obj()
    raise typer.BadParameter(f"{path!r} is neither an encoder nor an encoder factory")


def _connection(config: SDKConfig) -> Any:
    return HttpConnection.from_config(config)


def _program(config: SDKConfig) -> SystemProgram:
    return SystemProgram(load_encoder(config.encoder), program_id=config.program_id)


def _load_account(path: Path) -> Account:
    try:
        return Account.from_keyset_file(path)
    except FileNotFoundError as e:
        raise typer.BadParameter(f"File not found: {path}") from e
    except ValueError as e:
        raise typer.BadParameter(f"Invalid keyset file {path}: {e}") from e


def _with_pod(ctx: typer.Context, command: str, fn: Callable[[BasePod], Awaitable[T]]) -> T:
    cfg: SDKConfig = ctx.obj.config
    program = _program(cfg)

    async def _go() -> T:
        conn = _connection(cfg)
        try:
            pod = BasePod(
                conn, program, strict_bootstrap=cfg.strict_bootstrap, strict_tip=cfg.strict_tip
            )
            return await fn(pod)
        finally:
            aclose = getattr(conn, "aclose", None)
            if aclose is not None:
                await aclose()

    try:
        return asyncio.run(_go())
    except LeaSdkError as e:
        typer.echo(f"{command} failed: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.callback()
def _root(
    ctx: typer.Context,
    cluster: Optional[str] = typer.Option(None, "--cluster", help="local | devnet | testnet | mainnet-beta"),
    rpc: Optional[str] = typer.Option(None, "--rpc", help="Node URL (overrides --cluster)."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds."),
    encoder: Optional[str] = typer.Option(None, "--encoder", help="Transaction encoder as module:attr."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """
    Resolve the effective configuration (flags over LEA_* environment).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = SDKConfig.with_overrides(
            SDKConfig.from_env(), cluster=cluster, rpc_url=rpc, request_timeout=timeout, encoder=encoder
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(config=cfg)


# --- informational -----------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"lea-sdk {SDK_VERSION}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    cfg: SDKConfig = ctx.obj.config
    out = cfg.to_dict()
    out["endpoint"] = cfg.rpc_endpoint()
    _print_json(out)


# --- reads -------------------------------------------------------------------


@app.command("balance")
def balance(ctx: typer.Context, address: str = typer.Argument(..., help="Account address (lea1...)")) -> None:
    """Print the token balance of ADDRESS."""
    value = _with_pod(ctx, "balance", lambda pod: pod.get_balance(address))
    typer.echo(str(value))


@app.command("supply")
def supply(ctx: typer.Context) -> None:
    """Print the current token supply."""
    value = _with_pod(ctx, "supply", lambda pod: pod.get_current_supply())
    typer.echo(str(value))


@app.command("allowed-mint")
def allowed_mint(ctx: typer.Context, address: str = typer.Argument(..., help="Whitelisted address")) -> None:
    """Print how much ADDRESS may still mint."""
    value = _with_pod(ctx, "allowed-mint", lambda pod: pod.get_allowed_mint(address))
    typer.echo(str(value))


@app.command("last-tx-hash")
def last_tx_hash(ctx: typer.Context, address: str = typer.Argument(..., help="Account address")) -> None:
    """Print the chain tip of ADDRESS (or 'none')."""
    tip = _with_pod(ctx, "last-tx-hash", lambda pod: pod.get_last_tx_hash(address))
    typer.echo(to_hex(tip) if tip is not None else "none")


# --- writes ------------------------------------------------------------------

_KEYSET = typer.Option(..., "--keyset", help="Keyset JSON file of the signing account.")
_AMOUNT = typer.Option(..., "--amount", min=1, help="Amount (positive integer).")


@app.command("publish-keyset")
def publish_keyset(ctx: typer.Context, keyset: Path = _KEYSET) -> None:
    """Register the account's keyset on the ledger."""
    account = _load_account(keyset)
    outcome = _with_pod(ctx, "publish-keyset", lambda pod: pod.publish_keyset(account))
    _print_json(outcome.to_dict())
    if not outcome.ok:
        raise typer.Exit(code=1)


@app.command("transfer")
def transfer(
    ctx: typer.Context,
    keyset: Path = _KEYSET,
    to: str = typer.Option(..., "--to", help="Receiver address."),
    amount: int = _AMOUNT,
) -> None:
    """Transfer AMOUNT from the keyset account to --to."""
    account = _load_account(keyset)
    tx_id = _with_pod(ctx, "transfer", lambda pod: pod.transfer(account, to, amount))
    typer.echo(f"Transaction Id: {tx_id}")


@app.command("mint")
def mint(
    ctx: typer.Context,
    keyset: Path = _KEYSET,
    to: str = typer.Option(..., "--to", help="Recipient address."),
    amount: int = _AMOUNT,
) -> None:
    """Mint AMOUNT to --to, signed by the keyset account as minter."""
    account = _load_account(keyset)
    tx_id = _with_pod(ctx, "mint", lambda pod: pod.mint(account, to, amount))
    typer.echo(f"Transaction Id: {tx_id}")


@app.command("burn")
def burn(ctx: typer.Context, keyset: Path = _KEYSET, amount: int = _AMOUNT) -> None:
    """Burn AMOUNT from the keyset account."""
    account = _load_account(keyset)
    tx_id = _with_pod(ctx, "burn", lambda pod: pod.burn(account, amount))
    typer.echo(f"Transaction Id: {tx_id}")


def main() -> None:  # pragma: no cover - console entry
    app()


def run() -> None:  # pragma: no cover - alias
    main()


if __name__ == "__main__":  # pragma: no cover
    main()
