"""
Shared fakes for the SDK tests.

- FakeEncoder: records build() calls and returns a dict "transaction".
- FakeLedger: in-memory base pod implementing `Connection.submit`. It keeps
  balances, published keysets and per-address chain tips, and enforces the
  same rules as a node: chained txs need a published keyset and must cite the
  current tip.
"""

from __future__ import annotations

import hashlib
from typing import Any, Dict, List, Optional, Set

import pytest

from lea_sdk.address import normalize_address
from lea_sdk.tx.build import SIGNER_ROLES, SystemProgram
from lea_sdk.tx.encode import BuiltTransaction
from lea_sdk.types import BASE_POD_HEX, Account, DecodedState, OperationKind, Response

# Abort codes used by the fake program
ABORT_NO_KEYSET = 1
ABORT_STALE_TIP = 2
ABORT_INSUFFICIENT_FUNDS = 3
ABORT_NOT_MINTER = 4


def addr_of(constant: str) -> str:
    assert constant.startswith("$addr(") and constant.endswith(")"), constant
    return constant[len("$addr("):-1]


class FakeEncoder:
    def __init__(self) -> None:
        self.built: List[Dict[str, Any]] = []

    def build(self, kind, signers, constants, options):
        tx = {"kind": kind, "signers": dict(signers), "constants": dict(constants), "options": dict(options)}
        self.built.append(tx)
        return {"tx": repr(tx).encode()}

    def decode(self, raw: bytes, schema: str) -> Any:
        return {BASE_POD_HEX: {"raw": raw.hex(), "schema": schema}}


class FakeLedger:
    """In-memory base pod. `calls` lists every submitted BuiltTransaction."""

    def __init__(self, program_id: str = BASE_POD_HEX) -> None:
        self.program_id = program_id
        self.balances: Dict[str, int] = {}
        self.tips: Dict[str, bytes] = {}
        self.keysets: Set[str] = set()
        self.minters: Optional[Set[str]] = None  # None: anyone may mint
        self.allowed_mint: Dict[str, int] = {}
        self.supply = 0
        self.calls: List[BuiltTransaction] = []
        self._counter = 0

    # --- helpers ---------------------------------------------------------

    @property
    def kinds(self) -> List[OperationKind]:
        return [tx.kind for tx in self.calls]

    def fund(self, address: str, amount: int) -> None:
        self.balances[address] = self.balances.get(address, 0) + amount
        self.supply += amount

    def _state(self, **fields: Any) -> Response:
        return Response(
            ok=True, status=200, decoded=DecodedState({self.program_id: fields}), execution_status=0, abort_code=0
        )

    def _reject(self, abort_code: int) -> Response:
        return Response(ok=True, status=200, execution_status=1, abort_code=abort_code, tx_id=None)

    def _accept(self, sender: str) -> Response:
        self._counter += 1
        tip = hashlib.sha256(f"{sender}:{self._counter}".encode()).digest()
        self.tips[sender] = tip
        return Response(
            ok=True, status=200, decoded=DecodedState({self.program_id: {}}),
            execution_status=0, abort_code=0, tx_id=tip.hex(),
        )

    # --- Connection ------------------------------------------------------

    async def submit(self, tx: BuiltTransaction) -> Response:
        self.calls.append(tx)
        kind = tx.kind
        c = tx.constants

        if kind is OperationKind.GET_LAST_TX_HASH:
            tip = self.tips.get(addr_of(c["address"]))
            if tip is None:
                return Response(ok=False, status=404)
            return self._state(lastTxHash=list(tip))
        if kind is OperationKind.GET_BALANCE:
            return self._state(balance=self.balances.get(addr_of(c["address"]), 0))
        if kind is OperationKind.GET_CURRENT_SUPPLY:
            return self._state(currentSupply=self.supply)
        if kind is OperationKind.GET_ALLOWED_MINT:
            return self._state(allowedMint=self.allowed_mint.get(addr_of(c["address"]), 0))

        sender = normalize_address(tx.signers[SIGNER_ROLES[kind]], "fake ledger")
        if kind is OperationKind.PUBLISH_KEYSET:
            self.keysets.add(sender)
            self._counter += 1
            return Response(ok=True, status=200, execution_status=0, abort_code=0, tx_id=f"keyset-{self._counter}")

        if sender not in self.keysets:
            return self._reject(ABORT_NO_KEYSET)
        if tx.prev_tx_hash != self.tips.get(sender):
            return self._reject(ABORT_STALE_TIP)

        amount = int(c["amount"])
        if kind is OperationKind.TRANSFER:
            to = addr_of(c["receiver"])
            if self.balances.get(sender, 0) < amount:
                return self._reject(ABORT_INSUFFICIENT_FUNDS)
            self.balances[sender] -= amount
            self.balances[to] = self.balances.get(to, 0) + amount
        elif kind is OperationKind.MINT:
            if self.minters is not None and sender not in self.minters:
                return self._reject(ABORT_NOT_MINTER)
            self.fund(addr_of(c["recipient"]), amount)
        elif kind is OperationKind.MINT_WHITELIST:
            to = addr_of(c["whitelistAddress"])
            self.allowed_mint[to] = self.allowed_mint.get(to, 0) + amount
        elif kind is OperationKind.BURN:
            if self.balances.get(sender, 0) < amount:
                return self._reject(ABORT_INSUFFICIENT_FUNDS)
            self.balances[sender] -= amount
            self.supply -= amount
        return self._accept(sender)


class ScriptedConnection:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[BuiltTransaction] = []

    async def submit(self, tx: BuiltTransaction) -> Any:
        self.calls.append(tx)
        nxt = self.responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def program(encoder: FakeEncoder) -> SystemProgram:
    return SystemProgram(encoder)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def alice() -> Account:
    return Account(keyset={"sk": "alice"}, address="lea1alice")


@pytest.fixture
def bob() -> Account:
    return Account(keyset={"sk": "bob"}, address="lea1bob")


@pytest.fixture
def minter() -> Account:
    return Account(keyset={"sk": "minter"}, address="lea1minter")
