"""
lea_sdk.rpc
===========

Transport seam. The core only needs `Connection.submit`; `HttpConnection`
is the bundled httpx implementation.

    from lea_sdk.rpc import connect

    async with connect("devnet") as conn:
        response = await conn.submit(tx)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Union

from ..config import CLUSTERS, SDKConfig
from ..tx.encode import BuiltTransaction
from ..types import Response

__all__ = ["Connection", "HttpConnection", "connect"]


class Connection(Protocol):
    """Minimal interface expected from a transport."""

    async def submit(self, tx: BuiltTransaction) -> Union[Response, Mapping[str, Any]]: ...


from .http import HttpConnection  # noqa: E402


def connect(target: Optional[str] = None, config: Optional[SDKConfig] = None) -> HttpConnection:
    """
    Create an `HttpConnection` for a named cluster ("local", "devnet",
    "testnet", "mainnet-beta") or an explicit http(s) URL. Without a target,
    the config (LEA_* environment by default) decides.
    """
    cfg = config or SDKConfig.from_env()
    if target is not None:
        if target in CLUSTERS:
            cfg = SDKConfig.with_overrides(cfg, cluster=target)
            cfg.rpc_url = None
        else:
            cfg = SDKConfig.with_overrides(cfg, rpc_url=target)
    return HttpConnection.from_config(cfg)
