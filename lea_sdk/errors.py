"""
Typed error classes for the Lea Python SDK.

Every failure surfaced by the base-pod operations is an `OperationError`
carrying the operation name and the stage that failed (input, address,
resolve, bootstrap, build, submit, validate, result), so callers can catch a
specific failure mode or simply the base `LeaSdkError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "LeaSdkError",
    "OperationError",
    "InputValidationError",
    "AddressResolutionError",
    "BuildError",
    "TransportError",
    "MalformedResponse",
    "TransportRejected",
    "DecodeFailed",
    "ExecutionRejected",
    "ChainStateError",
    "BootstrapFailed",
    "Stage",
    "render_details",
    "describe_cause",
]


class LeaSdkError(Exception):
    """Base class for all SDK errors."""


class Stage:
    INPUT = "input"
    ADDRESS = "address"
    RESOLVE = "resolve"
    BOOTSTRAP = "bootstrap"
    BUILD = "build"
    SUBMIT = "submit"
    VALIDATE = "validate"
    RESULT = "result"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return "0x" + bytes(obj).hex()
    if hasattr(obj, "to_rpc_dict"):
        return obj.to_rpc_dict()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if hasattr(obj, "items"):
        return dict(obj.items())
    return repr(obj)


def render_details(details: Any) -> str:
    """Serialize a ledger diagnostic payload for display."""
    if isinstance(details, str):
        return details
    try:
        return json.dumps(details, default=_json_default, sort_keys=True)
    except (TypeError, ValueError):
        return repr(details)


def describe_cause(exc: BaseException) -> str:
    msg = str(exc)
    return msg if msg else type(exc).__name__


@dataclass(slots=True, eq=False)
class OperationError(LeaSdkError):
    """
    Raised when a base-pod operation fails.

    Fields:
      - message: human-readable description
      - op_name: operation that failed (e.g. "transfer")
      - stage: pipeline stage, one of the `Stage` constants
      - details: optional ledger-provided diagnostic payload
      - cause: rendered message of the underlying exception, if any
    """

    message: str
    op_name: Optional[str] = None
    stage: Optional[str] = None
    details: Optional[Any] = None
    cause: Optional[str] = None

    def __str__(self) -> str:
        where = self.op_name or "lea-sdk"
        if self.stage:
            where = f"{where} [{self.stage}]"
        out = f"{where}: {self.message}"
        if self.details is not None:
            out += f" | details={render_details(self.details)}"
        if self.cause:
            out += f" | cause={self.cause}"
        return out


class InputValidationError(OperationError):
    """A required argument is missing or has an invalid value."""


class AddressResolutionError(OperationError):
    """An address could not be extracted from the supplied account/address."""


class BuildError(OperationError):
    """The transaction encoder failed to build the request."""


class TransportError(OperationError):
    """The connection raised while submitting a request."""


class MalformedResponse(OperationError):
    """The connection returned nothing, or something that is not a response."""


class TransportRejected(OperationError):
    """The ledger answered with `ok == False`."""


class DecodeFailed(OperationError):
    """The execution result could not be decoded."""


@dataclass(slots=True, eq=False)
class ExecutionRejected(OperationError):
    """The transaction was included but rejected by program logic."""

    execution_status: Optional[int] = None
    abort_code: Optional[int] = None


class ChainStateError(OperationError):
    """Ledger state is missing or has an unexpected shape."""


@dataclass(slots=True, eq=False)
class BootstrapFailed(OperationError):
    """Strict mode: publishing the account keyset did not succeed."""

    outcome: Optional[Any] = None
