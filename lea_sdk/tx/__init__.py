"""
lea_sdk.tx
==========

Transaction helpers for the Lea base pod: build and encode.

Submodules
----------
- encode: `TransactionEncoder` protocol, immutable manifest configuration and
          the `BuiltTransaction` handed to connections.
- build : `SystemProgram`, one builder per operation kind (signer roles and
          manifest constants live here).

Typical usage
-------------
    from lea_sdk.tx import SystemProgram

    program = SystemProgram(encoder)
    tx = program.burn(account, 5, prev_tx_hash=tip)
    response = await connection.submit(tx)
"""

from __future__ import annotations

from . import build as build
from . import encode as encode
from .build import SIGNER_ROLES, SystemProgram
from .encode import BuiltTransaction, ManifestEncoder, ManifestSet, TransactionEncoder

__all__ = [
    "build",
    "encode",
    "SIGNER_ROLES",
    "SystemProgram",
    "BuiltTransaction",
    "ManifestEncoder",
    "ManifestSet",
    "TransactionEncoder",
]
