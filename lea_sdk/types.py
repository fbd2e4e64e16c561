from __future__ import annotations

"""
Core ledger types for the Python SDK.

This module provides two complementary representations for ledger responses:
- Lightweight `TypedDict` shapes mirroring the wire payloads (camelCase keys).
- Ergonomic `@dataclass` models with bytes-friendly fields and helpers
  (`from_rpc_dict()` / `to_rpc_dict()`).

Nothing here performs network I/O; these are just types and converters.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, TypedDict, Union

from .errors import ChainStateError, Stage
from .utils.bytes import strip_hex_prefix

# --- Common aliases ----------------------------------------------------------

Address = str  # bech32m (lea1...) produced by an external address encoder
TxId = str
ChainTipHash = Optional[bytes]  # 32 bytes, or None when absent

HASH_LEN = 32

# Key of the base pod program entry inside decoded execution results.
BASE_POD_HEX = "11" * 32


class OperationKind(str, Enum):
    TRANSFER = "transfer"
    MINT = "mint"
    BURN = "burn"
    PUBLISH_KEYSET = "publish_keyset"
    MINT_WHITELIST = "mint_whitelist"
    GET_BALANCE = "get_balance"
    GET_LAST_TX_HASH = "get_last_tx_hash"
    GET_CURRENT_SUPPLY = "get_current_supply"
    GET_ALLOWED_MINT = "get_allowed_mint"

    @property
    def read_only(self) -> bool:
        return self.value.startswith("get_")


# --- Wire TypedDict shapes ---------------------------------------------------


class FragmentDict(TypedDict, total=False):
    balance: Union[int, str]
    lastTxHash: Any
    currentSupply: Union[int, str]
    allowedMint: Union[int, str]


class ResponseDict(TypedDict, total=False):
    ok: bool
    status: Any
    decoded: Mapping[str, FragmentDict]
    decodeError: Any
    executionStatus: int
    abortCode: int
    txId: str
    raw: bytes


# --- Accounts ----------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Account:
    """
    Signing credential plus its derived address.

    `keyset` is opaque to the SDK; it is handed to the transaction encoder as a
    signer. Accounts are produced by external key-derivation tooling.
    """

    keyset: Any = field(repr=False)
    address: Address

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Account":
        address = data.get("address")
        if not isinstance(address, str) or not address:
            raise ValueError("account JSON must contain a string 'address'")
        if data.get("keyset") is None:
            raise ValueError("account JSON must contain a 'keyset'")
        return cls(keyset=data["keyset"], address=address)

    @classmethod
    def from_keyset_file(cls, path: Union[str, Path]) -> "Account":
        """Load the `{"keyset": ..., "address": ...}` JSON written by key tools."""
        text = Path(path).read_text(encoding="utf-8")
        return cls.from_dict(json.loads(text))


# --- Decoded ledger state ----------------------------------------------------


def _normalize_program_key(key: str) -> str:
    return strip_hex_prefix(str(key)).lower()


@dataclass(slots=True, frozen=True)
class LedgerStateFragment:
    """The decoded state slice belonging to one on-chain program."""

    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_rpc_dict(cls, data: Mapping[str, Any]) -> "LedgerStateFragment":
        return cls(fields=MappingProxyType(dict(data)))

    @property
    def balance(self) -> Any:
        return self.fields.get("balance")

    @property
    def last_tx_hash(self) -> Any:
        return self.fields.get("lastTxHash")

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def to_rpc_dict(self) -> Dict[str, Any]:
        return dict(self.fields)


class DecodedState(Mapping[str, LedgerStateFragment]):
    """
    Read-only mapping of program id (lowercase hex, no 0x) -> fragment.

    Lookups accept ids with or without a 0x prefix, in any case.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, Any]] = None) -> None:
        normalized: Dict[str, LedgerStateFragment] = {}
        for key, value in (entries or {}).items():
            if isinstance(value, LedgerStateFragment):
                frag = value
            elif isinstance(value, Mapping):
                frag = LedgerStateFragment.from_rpc_dict(value)
            else:
                raise TypeError(
                    f"decoded entry {key!r} must be a mapping, got {type(value).__name__}"
                )
            normalized[_normalize_program_key(key)] = frag
        self._entries = normalized

    @classmethod
    def coerce(cls, value: Any) -> Optional["DecodedState"]:
        if value is None or isinstance(value, DecodedState):
            return value
        if isinstance(value, Mapping):
            return cls(value)
        raise TypeError(f"decoded payload must be a mapping, got {type(value).__name__}")

    def __getitem__(self, key: str) -> LedgerStateFragment:
        return self._entries[_normalize_program_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"DecodedState({list(self._entries)})"

    def get(self, key: str, default: Optional[LedgerStateFragment] = None) -> Optional[LedgerStateFragment]:  # type: ignore[override]
        return self._entries.get(_normalize_program_key(key), default)

    def entry(self, program_id: str, ctx: str) -> LedgerStateFragment:
        frag = self.get(program_id)
        if frag is None:
            raise ChainStateError(
                f"no entry for program {_normalize_program_key(program_id)}", op_name=ctx, stage=Stage.RESULT
            )
        return frag

    def to_rpc_dict(self) -> Dict[str, Any]:
        return {k: v.to_rpc_dict() for k, v in self._entries.items()}


# --- Responses ---------------------------------------------------------------


@dataclass(slots=True)
class Response:
    """
    Outcome of one submission, as reported by the connection.

    `execution_status`/`abort_code` are ledger outcome codes; zero means the
    transaction was included and the embedded program did not abort.
    """

    ok: bool
    status: Any = None
    decoded: Optional[DecodedState] = None
    decode_error: Any = None
    execution_status: Optional[int] = None
    abort_code: Optional[int] = None
    tx_id: Optional[TxId] = None
    raw: Optional[bytes] = None

    def __post_init__(self) -> None:
        self.decoded = DecodedState.coerce(self.decoded)

    @classmethod
    def from_rpc_dict(cls, d: Mapping[str, Any]) -> "Response":
        return cls(
            ok=bool(d.get("ok", False)),
            status=d.get("status"),
            decoded=d.get("decoded"),
            decode_error=d.get("decodeError"),
            execution_status=d.get("executionStatus"),
            abort_code=d.get("abortCode"),
            tx_id=d.get("txId"),
            raw=d.get("raw"),
        )

    def to_rpc_dict(self) -> ResponseDict:
        out: ResponseDict = {"ok": self.ok}
        if self.status is not None:
            out["status"] = self.status
        if self.decoded is not None:
            out["decoded"] = self.decoded.to_rpc_dict()
        if self.decode_error is not None:
            out["decodeError"] = self.decode_error
        if self.execution_status is not None:
            out["executionStatus"] = self.execution_status
        if self.abort_code is not None:
            out["abortCode"] = self.abort_code
        if self.tx_id is not None:
            out["txId"] = self.tx_id
        if self.raw is not None:
            out["raw"] = self.raw
        return out


__all__ = [
    "Address",
    "TxId",
    "ChainTipHash",
    "HASH_LEN",
    "BASE_POD_HEX",
    "OperationKind",
    "FragmentDict",
    "ResponseDict",
    "Account",
    "LedgerStateFragment",
    "DecodedState",
    "Response",
]
