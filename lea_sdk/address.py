"""
Address normalization helpers.

Addresses are opaque, pre-encoded strings produced by an external encoder
(bech32m `lea1...`). The SDK never parses them; it only needs to pull the
string out of whatever the caller handed in: a plain string, an `Account`,
or any object/mapping exposing a string `address`.
"""

from __future__ import annotations

from typing import Any, Mapping

from .errors import AddressResolutionError, Stage

__all__ = ["normalize_address", "addr_constant"]


def normalize_address(value: Any, ctx: str) -> str:
    """
    Return the address string for `value` or raise AddressResolutionError.

    `ctx` names the operation/argument for the error message, e.g.
    "transfer (to_address)".
    """
    if isinstance(value, str):
        return value
    addr = None
    if isinstance(value, Mapping):
        addr = value.get("address")
    elif value is not None:
        addr = getattr(value, "address", None)
    if isinstance(addr, str):
        return addr
    raise AddressResolutionError(
        "invalid address input (must be a string or expose a string 'address')",
        op_name=ctx,
        stage=Stage.ADDRESS,
        details=type(value).__name__,
    )


def addr_constant(address: str) -> str:
    """Manifest constant form of an address."""
    return f"$addr({address})"
