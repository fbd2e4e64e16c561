"""
lea_sdk.tx.build
================

Builders for base-pod requests. `SystemProgram` knows, for every operation
kind, which signer role the account plays and which manifest constants to
fill in; the actual encoding is delegated to a `TransactionEncoder`.

Builders return `BuiltTransaction`, ready for `Connection.submit`.

Examples
--------
    from lea_sdk.tx.build import SystemProgram

    program = SystemProgram(encoder)
    tx = program.transfer(account, "lea1...", 10, prev_tx_hash=tip)
    query = program.get_balance("lea1...")
"""

from __future__ import annotations

from functools import partial
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..address import addr_constant
from ..types import BASE_POD_HEX, Account, Address, OperationKind
from .encode import BuiltTransaction, TransactionEncoder, schema_name

__all__ = ["SystemProgram", "SIGNER_ROLES"]

# Signer role the sending account plays, per state-changing operation.
SIGNER_ROLES: Mapping[OperationKind, str] = MappingProxyType(
    {
        OperationKind.TRANSFER: "publisher",
        OperationKind.MINT: "minter",
        OperationKind.BURN: "burner",
        OperationKind.PUBLISH_KEYSET: "publisher",
        OperationKind.MINT_WHITELIST: "authority",
    }
)


def _chain_options(prev_tx_hash: Optional[bytes]) -> Dict[str, Any]:
    return {"prevTxHash": prev_tx_hash}


class SystemProgram:
    """Request builders for the base pod program."""

    def __init__(self, encoder: TransactionEncoder, *, program_id: str = BASE_POD_HEX) -> None:
        self.encoder = encoder
        self.program_id = program_id

    def _build(
        self,
        kind: OperationKind,
        *,
        signer: Optional[Account] = None,
        constants: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> BuiltTransaction:
        signers = {SIGNER_ROLES[kind]: signer} if signer is not None else {}
        consts = dict(constants or {})
        opts = dict(options or {})
        tx = self.encoder.build(kind.value, signers, consts, opts)
        return BuiltTransaction(
            kind=kind,
            tx=tx,
            signers=MappingProxyType(signers),
            constants=MappingProxyType(consts),
            options=MappingProxyType(opts),
            decode=partial(self.encoder.decode, schema=schema_name(kind)),
        )

    # --- chained (state-changing) -----------------------------------------

    def transfer(
        self, sender: Account, to_address: Address, amount: int, *, prev_tx_hash: Optional[bytes] = None
    ) -> BuiltTransaction:
        return self._build(
            OperationKind.TRANSFER,
            signer=sender,
            constants={"receiver": addr_constant(to_address), "amount": str(amount)},
            options=_chain_options(prev_tx_hash),
        )

    def mint(
        self, minter: Account, to_address: Address, amount: int, *, prev_tx_hash: Optional[bytes] = None
    ) -> BuiltTransaction:
        return self._build(
            OperationKind.MINT,
            signer=minter,
            constants={"recipient": addr_constant(to_address), "amount": str(amount)},
            options=_chain_options(prev_tx_hash),
        )

    def burn(self, burner: Account, amount: int, *, prev_tx_hash: Optional[bytes] = None) -> BuiltTransaction:
        return self._build(
            OperationKind.BURN,
            signer=burner,
            constants={"amount": str(amount)},
            options=_chain_options(prev_tx_hash),
        )

    def mint_whitelist(
        self, authority: Account, to_address: Address, amount: int, *, prev_tx_hash: Optional[bytes] = None
    ) -> BuiltTransaction:
        return self._build(
            OperationKind.MINT_WHITELIST,
            signer=authority,
            constants={"whitelistAddress": addr_constant(to_address), "amount": str(amount)},
            options=_chain_options(prev_tx_hash),
        )

    def publish_keyset(self, account: Account) -> BuiltTransaction:
        return self._build(OperationKind.PUBLISH_KEYSET, signer=account)

    # --- read-only queries ------------------------------------------------

    def get_balance(self, address: Address) -> BuiltTransaction:
        return self._build(OperationKind.GET_BALANCE, constants={"address": addr_constant(address)})

    def get_last_tx_hash(self, address: Address) -> BuiltTransaction:
        return self._build(OperationKind.GET_LAST_TX_HASH, constants={"address": addr_constant(address)})

    def get_allowed_mint(self, address: Address) -> BuiltTransaction:
        return self._build(OperationKind.GET_ALLOWED_MINT, constants={"address": addr_constant(address)})

    def get_current_supply(self) -> BuiltTransaction:
        return self._build(OperationKind.GET_CURRENT_SUPPLY)
