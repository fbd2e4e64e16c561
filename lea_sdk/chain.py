"""
Chain tip resolution.

Every state-changing transaction must cite the hash of the previously
accepted transaction of its sender (`prevTxHash`). `resolve_tip` asks the
ledger for it and returns a tagged `TipResolution`:

- RESOLVED    the 32-byte tip
- NO_HISTORY  the ledger has nothing for this address (or answered in a way
              that backends use for "nothing": not ok / non-zero codes /
              no usable hash)
- FAILED      the query could not be built, sent or decoded

It never raises. `fetch_prev_tx_hash` collapses NO_HISTORY and FAILED into
`None`, which is what the orchestrator treats as "bootstrap first".
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .errors import describe_cause
from .rpc import Connection
from .tx.build import SystemProgram
from .types import HASH_LEN, Address, DecodedState, Response
from .utils.bytes import octets_to_bytes, to_hex
from .validate import as_response

log = logging.getLogger(__name__)

__all__ = ["TipStatus", "TipResolution", "coerce_tx_hash", "resolve_tip", "fetch_prev_tx_hash"]


class TipStatus(enum.Enum):
    RESOLVED = "resolved"
    NO_HISTORY = "no_history"
    FAILED = "failed"


@dataclass(frozen=True)
class TipResolution:
    status: TipStatus
    tip: Optional[bytes] = None
    cause: Optional[str] = None

    @property
    def absent(self) -> bool:
        return self.tip is None

    @classmethod
    def no_history(cls) -> "TipResolution":
        return cls(TipStatus.NO_HISTORY)

    @classmethod
    def failed(cls, cause: str) -> "TipResolution":
        return cls(TipStatus.FAILED, cause=cause)


def coerce_tx_hash(value: Any) -> Optional[bytes]:
    """
    Accept raw bytes or a sequence of byte-valued ints; return exactly 32
    bytes or None.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        out: Optional[bytes] = bytes(value)
    elif isinstance(value, Sequence) and not isinstance(value, str):
        out = octets_to_bytes(value)
    else:
        return None
    if out is None or len(out) != HASH_LEN:
        return None
    return out


def _has_nonzero_code(code: Any) -> bool:
    return isinstance(code, int) and not isinstance(code, bool) and code != 0


def _classify(resp: Response, program_id: str) -> TipResolution:
    # Backends answer a fresh address with not-ok or non-zero codes.
    if not resp.ok or _has_nonzero_code(resp.execution_status) or _has_nonzero_code(resp.abort_code):
        return TipResolution.no_history()
    if resp.decode_error is not None:
        return TipResolution.failed(f"decode failed: {resp.decode_error}")
    decoded: Optional[DecodedState] = resp.decoded
    if decoded is None:
        return TipResolution.no_history()
    entry = decoded.get(program_id)
    tip = coerce_tx_hash(entry.last_tx_hash) if entry is not None else None
    if tip is None:
        return TipResolution.no_history()
    return TipResolution(TipStatus.RESOLVED, tip=tip)


async def resolve_tip(connection: Connection, address: Address, program: SystemProgram) -> TipResolution:
    """Ask the ledger for `address`'s last accepted transaction hash."""
    try:
        query = program.get_last_tx_hash(address)
        raw = await connection.submit(query)
        resp = as_response(raw, "get_last_tx_hash")
        res = _classify(resp, program.program_id)
    except Exception as e:  # any failure here means "tip unknown", never an error
        res = TipResolution.failed(describe_cause(e))

    if res.status is TipStatus.FAILED:
        log.warning("tip resolution for %s failed: %s", address, res.cause)
    else:
        log.debug(
            "tip for %s: %s", address, to_hex(res.tip) if res.tip is not None else res.status.value
        )
    return res


async def fetch_prev_tx_hash(connection: Connection, address: Address, program: SystemProgram) -> Optional[bytes]:
    """Tip or None; transport/decode failures are indistinguishable from no history."""
    return (await resolve_tip(connection, address, program)).tip
