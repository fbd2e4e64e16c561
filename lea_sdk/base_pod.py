"""
lea_sdk.base_pod
================

Chained base pod operations: transfer, mint, burn and whitelist mint.

Every state-changing call runs the same pipeline (`run_with_prev_hash`):

    resolve tip -> [publish keyset -> re-resolve tip] -> build -> submit -> validate

The tip is re-read from the ledger on every call; nothing is cached. No
locking happens here either: two concurrent operations from one address may
cite the same tip, and the ledger rejects the loser (`ExecutionRejected`).
Serialize per-address work yourself if ordering matters.

Policy knobs
------------
- strict_tip:       a FAILED tip resolution (transport/decode trouble) raises
                    `ChainStateError` instead of being treated as "no history".
- strict_bootstrap: a publish-keyset outcome other than PUBLISHED raises
                    `BootstrapFailed` instead of carrying on.

Both default to off, which preserves the long-standing behaviour: an
unresolvable tip triggers a bootstrap and the operation is submitted with
`prevTxHash=None`, letting the ledger be the judge.

Example
-------
    pod = BasePod(connection, SystemProgram(encoder))
    tx_id = await pod.transfer(account, "lea1...", 10)
    print(await pod.get_balance("lea1..."))
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from . import balance as _balance
from .address import normalize_address
from .bootstrap import BootstrapOutcome, publish_keyset
from .chain import TipStatus, fetch_prev_tx_hash, resolve_tip
from .errors import (
    BootstrapFailed,
    BuildError,
    ChainStateError,
    InputValidationError,
    Stage,
    TransportError,
    describe_cause,
)
from .rpc import Connection
from .tx.build import SystemProgram
from .tx.encode import BuiltTransaction
from .types import Account, TxId
from .validate import ensure_ok

log = logging.getLogger(__name__)

__all__ = ["require_amount", "run_with_prev_hash", "BasePod"]

BuildFn = Callable[[Optional[bytes]], BuiltTransaction]


def require_amount(amount: Any, ctx: str) -> int:
    """Positive integer amount (int or decimal string) or InputValidationError."""
    if amount is None:
        raise InputValidationError("'amount' is required", op_name=ctx, stage=Stage.INPUT)
    if isinstance(amount, bool):
        value = None
    elif isinstance(amount, int):
        value = amount
    elif isinstance(amount, str) and amount.strip().isascii() and amount.strip().isdigit():
        value = int(amount.strip())
    else:
        value = None
    if value is None:
        raise InputValidationError(
            "'amount' must be an integer", op_name=ctx, stage=Stage.INPUT, details=repr(amount)
        )
    if value <= 0:
        raise InputValidationError(
            "'amount' must be greater than zero", op_name=ctx, stage=Stage.INPUT, details=value
        )
    return value


async def _resolve_prev_hash(
    connection: Connection,
    account: Any,
    address: str,
    program: SystemProgram,
    op_name: str,
    *,
    strict_bootstrap: bool,
    strict_tip: bool,
) -> Optional[bytes]:
    first = await resolve_tip(connection, address, program)
    if first.status is TipStatus.FAILED and strict_tip:
        raise ChainStateError(
            "could not resolve the chain tip", op_name=op_name, stage=Stage.RESOLVE, cause=first.cause
        )
    if not first.absent:
        return first.tip

    outcome: BootstrapOutcome = await publish_keyset(connection, account, program, address=address)
    if strict_bootstrap and not outcome.ok:
        raise BootstrapFailed(
            f"failed to publish keyset for first tx ({outcome.status.value})",
            op_name=op_name,
            stage=Stage.BOOTSTRAP,
            details=outcome.detail,
            outcome=outcome,
        )
    # The first transaction of a brand-new chain has no predecessor, so None is fine here.
    return await fetch_prev_tx_hash(connection, address, program)


async def run_with_prev_hash(
    connection: Connection,
    account: Any,
    op_name: str,
    build: BuildFn,
    *,
    program: SystemProgram,
    strict_bootstrap: bool = False,
    strict_tip: bool = False,
) -> TxId:
    """Run one chained operation end to end and return its transaction id."""
    if connection is None:
        raise InputValidationError("'connection' is required", op_name=op_name, stage=Stage.INPUT)
    if account is None or account == "":
        raise InputValidationError("'account' is required", op_name=op_name, stage=Stage.INPUT)

    address = normalize_address(account, f"{op_name} (account)")
    prev_tx_hash = await _resolve_prev_hash(
        connection,
        account,
        address,
        program,
        op_name,
        strict_bootstrap=strict_bootstrap,
        strict_tip=strict_tip,
    )

    try:
        tx = build(prev_tx_hash)
    except Exception as e:
        raise BuildError("failed to build tx", op_name=op_name, stage=Stage.BUILD, cause=describe_cause(e)) from e

    try:
        raw = await connection.submit(tx)
    except Exception as e:
        raise TransportError("submit failed", op_name=op_name, stage=Stage.SUBMIT, cause=describe_cause(e)) from e

    resp = ensure_ok(raw, op_name)
    if not resp.tx_id:
        raise ChainStateError("missing txId in successful response", op_name=op_name, stage=Stage.RESULT)
    log.info("%s from %s submitted: tx=%s", op_name, address, resp.tx_id)
    return resp.tx_id


class BasePod:
    """
    Facade over one connection and one `SystemProgram`.

    Parameters are validated before any network traffic, so a bad call costs
    zero round trips.
    """

    def __init__(
        self,
        connection: Connection,
        program: SystemProgram,
        *,
        strict_bootstrap: bool = False,
        strict_tip: bool = False,
    ) -> None:
        self.connection = connection
        self.program = program
        self.strict_bootstrap = strict_bootstrap
        self.strict_tip = strict_tip

    async def _run(self, account: Any, op_name: str, build: BuildFn) -> TxId:
        return await run_with_prev_hash(
            self.connection,
            account,
            op_name,
            build,
            program=self.program,
            strict_bootstrap=self.strict_bootstrap,
            strict_tip=self.strict_tip,
        )

    # --- reads -------------------------------------------------------------

    async def get_balance(self, address: Any) -> int:
        return await _balance.get_balance(self.connection, self.program, address)

    async def get_current_supply(self) -> int:
        return await _balance.get_current_supply(self.connection, self.program)

    async def get_allowed_mint(self, address: Any) -> int:
        return await _balance.get_allowed_mint(self.connection, self.program, address)

    async def get_last_tx_hash(self, address: Any) -> Optional[bytes]:
        resolved = normalize_address(address, "get_last_tx_hash")
        return await fetch_prev_tx_hash(self.connection, resolved, self.program)

    # --- writes ------------------------------------------------------------

    async def publish_keyset(self, account: Account) -> BootstrapOutcome:
        address = normalize_address(account, "publish_keyset (account)")
        return await publish_keyset(self.connection, account, self.program, address=address)

    async def transfer(self, account: Account, to_address: Any, amount: Any) -> TxId:
        op = "transfer"
        value = require_amount(amount, op)
        to = normalize_address(to_address, f"{op} (to_address)")
        return await self._run(
            account, op, lambda tip: self.program.transfer(account, to, value, prev_tx_hash=tip)
        )

    async def mint(self, account: Account, to_address: Any, amount: Any) -> TxId:
        op = "mint"
        value = require_amount(amount, op)
        to = normalize_address(to_address, f"{op} (to_address)")
        return await self._run(
            account, op, lambda tip: self.program.mint(account, to, value, prev_tx_hash=tip)
        )

    async def burn(self, account: Account, amount: Any) -> TxId:
        op = "burn"
        value = require_amount(amount, op)
        return await self._run(account, op, lambda tip: self.program.burn(account, value, prev_tx_hash=tip))

    async def mint_whitelist(self, account: Account, to_address: Any, amount: Any) -> TxId:
        op = "mint_whitelist"
        value = require_amount(amount, op)
        to = normalize_address(to_address, f"{op} (to_address)")
        return await self._run(
            account, op, lambda tip: self.program.mint_whitelist(account, to, value, prev_tx_hash=tip)
        )
