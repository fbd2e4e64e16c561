"""
Read-only base pod queries: balance, current supply and allowed mint.

All three run the same pipeline: build the query, submit it, validate the
response through `ensure_ok`, then read one integer field from the base pod
entry of the decoded state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .address import normalize_address
from .errors import BuildError, ChainStateError, InputValidationError, Stage, TransportError, describe_cause
from .rpc import Connection
from .tx.build import SystemProgram
from .tx.encode import BuiltTransaction
from .types import Address
from .validate import ensure_ok

log = logging.getLogger(__name__)

__all__ = ["parse_amount", "get_balance", "get_current_supply", "get_allowed_mint"]


def parse_amount(value: Any, field: str, ctx: str) -> int:
    """
    Ledger integer field -> non-negative Python int.

    Accepts ints (not bools) and decimal-digit strings, which is how wide
    integers travel through JSON codecs.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        out = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        out = int(value.strip())
    else:
        raise ChainStateError(
            f"{field} field missing or invalid", op_name=ctx, stage=Stage.RESULT, details=repr(value)
        )
    if out < 0:
        raise ChainStateError(f"{field} is negative", op_name=ctx, stage=Stage.RESULT, details=out)
    return out


async def _query_field(
    connection: Connection,
    program: SystemProgram,
    ctx: str,
    build: Callable[[], BuiltTransaction],
    field: str,
) -> int:
    if connection is None:
        raise InputValidationError("'connection' is required", op_name=ctx, stage=Stage.INPUT)
    try:
        tx = build()
    except Exception as e:
        raise BuildError("failed to build query", op_name=ctx, stage=Stage.BUILD, cause=describe_cause(e)) from e
    try:
        raw = await connection.submit(tx)
    except Exception as e:
        raise TransportError("submit failed", op_name=ctx, stage=Stage.SUBMIT, cause=describe_cause(e)) from e
    resp = ensure_ok(raw, ctx)
    if resp.decoded is None:
        raise ChainStateError("response carries no decoded state", op_name=ctx, stage=Stage.RESULT)
    entry = resp.decoded.entry(program.program_id, ctx)
    return parse_amount(entry.get(field), field, ctx)


async def get_balance(connection: Connection, program: SystemProgram, address: Any) -> int:
    """Token balance of `address` (a string or anything exposing `.address`)."""
    ctx = "get_balance"
    resolved: Address = normalize_address(address, ctx)
    balance = await _query_field(connection, program, ctx, lambda: program.get_balance(resolved), "balance")
    log.debug("balance of %s: %d", resolved, balance)
    return balance


async def get_current_supply(connection: Connection, program: SystemProgram) -> int:
    return await _query_field(
        connection, program, "get_current_supply", program.get_current_supply, "currentSupply"
    )


async def get_allowed_mint(connection: Connection, program: SystemProgram, address: Any) -> int:
    """Remaining amount `address` is whitelisted to mint."""
    ctx = "get_allowed_mint"
    resolved = normalize_address(address, ctx)
    return await _query_field(
        connection, program, ctx, lambda: program.get_allowed_mint(resolved), "allowedMint"
    )
