"""
SDK configuration: cluster / RPC endpoint, transport retries and timeouts,
program identifier and chaining policy.

- Loads sane defaults and supports overrides via environment variables (LEA_*).
- Provides helpers for building HTTP headers and resolving the cluster URL.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .types import BASE_POD_HEX
from .version import user_agent as _default_user_agent

DEFAULT_CLUSTER = "devnet"

CLUSTERS: Dict[str, str] = {
    "local": "http://127.0.0.1:60000",
    "devnet": "https://api.devnet.getlea.org",
    "testnet": "https://api.testnet.getlea.org",
    "mainnet-beta": "https://api.mainnet-beta.getlea.org",
}

_PROGRAM_ID_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_TRUTHY = ("1", "true", "yes", "on")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_bool(val: Any, default: bool = False) -> bool:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in _TRUTHY


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _normalize_program_id(val: str) -> str:
    s = str(val).strip()
    if not _PROGRAM_ID_RE.match(s):
        raise ValueError(f"program id must be 32 bytes of hex, got: {val!r}")
    return s[2:].lower() if s.lower().startswith("0x") else s.lower()


def _check_cluster(name: str) -> str:
    if name not in CLUSTERS:
        raise ValueError(f"unknown cluster {name!r} (expected one of {sorted(CLUSTERS)})")
    return name


@dataclass(slots=True)
class SDKConfig:
    # Endpoint
    cluster: str = DEFAULT_CLUSTER
    rpc_url: Optional[str] = None
    # HTTP behavior
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.25
    # Headers / identity
    user_agent: str = field(default_factory=_default_user_agent)
    # Ledger
    program_id: str = BASE_POD_HEX
    strict_bootstrap: bool = False
    strict_tip: bool = False
    # "module:attr" import path of a TransactionEncoder factory (CLI)
    encoder: Optional[str] = None

    @classmethod
    def from_env(cls, prefix: str = "LEA_") -> "SDKConfig":
        """
        Create config from environment variables:

        LEA_CLUSTER            (local|devnet|testnet|mainnet-beta)
        LEA_RPC_URL            (http/https) overrides the cluster URL
        LEA_TIMEOUT            (float seconds, HTTP)
        LEA_MAX_RETRIES        (int)
        LEA_BACKOFF            (float seconds, first retry delay)
        LEA_USER_AGENT         (str)
        LEA_PROGRAM_ID         (64 hex chars, optional 0x)
        LEA_STRICT_BOOTSTRAP   (1/true/yes/on)
        LEA_STRICT_TIP         (1/true/yes/on)
        LEA_ENCODER            (module:attr)
        """
        cluster = _check_cluster(_env(f"{prefix}CLUSTER", DEFAULT_CLUSTER) or DEFAULT_CLUSTER)
        rpc = _env(f"{prefix}RPC_URL", None)
        _ensure_scheme(rpc, ("http", "https"))

        return cls(
            cluster=cluster,
            rpc_url=rpc or None,
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_base=float(_env(f"{prefix}BACKOFF", "0.25")),
            user_agent=_env(f"{prefix}USER_AGENT", None) or _default_user_agent(),
            program_id=_normalize_program_id(_env(f"{prefix}PROGRAM_ID", BASE_POD_HEX) or BASE_POD_HEX),
            strict_bootstrap=_parse_bool(_env(f"{prefix}STRICT_BOOTSTRAP")),
            strict_tip=_parse_bool(_env(f"{prefix}STRICT_TIP")),
            encoder=_env(f"{prefix}ENCODER", None) or None,
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        if "cluster" in overrides and overrides["cluster"] is not None:
            _check_cluster(data["cluster"])
        if "rpc_url" in overrides:
            _ensure_scheme(data["rpc_url"], ("http", "https"))
        if "program_id" in overrides and overrides["program_id"] is not None:
            data["program_id"] = _normalize_program_id(data["program_id"])
        for flag in ("strict_bootstrap", "strict_tip"):
            data[flag] = _parse_bool(data[flag])
        return cls(**data)

    def rpc_endpoint(self) -> str:
        """Explicit rpc_url wins; otherwise the URL of the named cluster."""
        if self.rpc_url:
            return self.rpc_url.rstrip("/")
        return CLUSTERS[_check_cluster(self.cluster)]

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/octet-stream",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster,
            "rpc_url": self.rpc_url,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_base": float(self.backoff_base),
            "user_agent": self.user_agent,
            "program_id": self.program_id,
            "strict_bootstrap": bool(self.strict_bootstrap),
            "strict_tip": bool(self.strict_tip),
            "encoder": self.encoder,
        }


__all__ = ["SDKConfig", "CLUSTERS", "DEFAULT_CLUSTER"]
