"""
Uniform pass/fail classification of ledger responses.

`ensure_ok` is the single gate every base-pod read and write goes through, so
failures look identical whichever operation produced them.
"""

from __future__ import annotations

from typing import Any, Mapping

from .errors import DecodeFailed, ExecutionRejected, MalformedResponse, Stage, TransportRejected
from .types import Response

__all__ = ["ensure_ok", "as_response"]


def as_response(resp: Any, ctx: str) -> Response:
    if isinstance(resp, Response):
        return resp
    if isinstance(resp, Mapping):
        try:
            return Response.from_rpc_dict(resp)
        except TypeError as e:
            raise MalformedResponse(
                "response has an unexpected shape", op_name=ctx, stage=Stage.VALIDATE, cause=str(e)
            ) from e
    raise MalformedResponse(
        "missing/invalid response object",
        op_name=ctx,
        stage=Stage.VALIDATE,
        details=None if resp is None else type(resp).__name__,
    )


def ensure_ok(resp: Any, ctx: str) -> Response:
    """
    Raise unless `resp` is a successful, decodable, non-aborted response.

    Checks, in order: shape, `ok`, `decode_error`, execution/abort codes.
    Returns the response as a `Response`.
    """
    r = as_response(resp, ctx)
    if not r.ok:
        status = r.status if r.status is not None else "unknown"
        more = r.decoded if r.decoded is not None else r.raw
        raise TransportRejected(
            f"RPC returned not ok (status={status})", op_name=ctx, stage=Stage.VALIDATE, details=more
        )
    if r.decode_error is not None:
        raise DecodeFailed(
            "failed to decode response", op_name=ctx, stage=Stage.VALIDATE, details=r.decode_error
        )
    if r.execution_status != 0 or r.abort_code != 0:
        raise ExecutionRejected(
            f"on-chain execution failed (executionStatus={r.execution_status}, abortCode={r.abort_code})",
            op_name=ctx,
            stage=Stage.VALIDATE,
            execution_status=r.execution_status,
            abort_code=r.abort_code,
        )
    return r
