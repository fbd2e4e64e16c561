from __future__ import annotations

"""
HTTP transport (async, httpx).

- POSTs the encoded transaction bytes to `{url}/execute`.
- Non-2xx answers become `Response(ok=False, status=<http status>, raw=<body>)`.
- 2xx answers are JSON: {"txId", "executionStatus", "abortCode", "result"},
  where `result` is the base64url execution result, decoded with the
  request's own schema (`BuiltTransaction.decode`). A decode failure is
  reported through `Response.decode_error`, never raised.
- Retries transport failures and 429/502/503/504 with exponential backoff and
  jitter. A transient status that outlives the retries comes back as
  `ok=False`; a transport failure that does raises `TransportError`.

Example:
    from lea_sdk.rpc.http import HttpConnection

    async with HttpConnection("http://127.0.0.1:60000") as conn:
        resp = await conn.submit(program.get_balance("lea1..."))
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from ..config import SDKConfig
from ..errors import Stage, TransportError, describe_cause
from ..tx.encode import BuiltTransaction
from ..types import DecodedState, Response
from ..utils.bytes import from_base64url
from ..version import user_agent

log = logging.getLogger(__name__)

EXECUTE_PATH = "/execute"


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    # Exponential backoff with jitter in [0, jitter]
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


class _RetriableStatus(Exception):
    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


@dataclass
class HttpConnection:
    """Connection to a Lea node over HTTP."""

    url: str
    timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.25
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.AsyncBaseTransport] = None
    _client: Optional[httpx.AsyncClient] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.url = self.url.rstrip("/")
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/octet-stream",
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.AsyncClient(
            timeout=self.timeout, headers=merged_headers, transport=self.transport
        )

    @classmethod
    def from_config(cls, config: SDKConfig, **kwargs: Any) -> "HttpConnection":
        return cls(
            config.rpc_endpoint(),
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            backoff_base=config.backoff_base,
            headers=config.http_headers(),
            **kwargs,
        )

    # --- context manager -------------------------------------------------

    async def __aenter__(self) -> "HttpConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- public API ------------------------------------------------------

    async def submit(self, tx: BuiltTransaction) -> Response:
        """Send one request and translate the node's answer into a `Response`."""
        if self._client is None:
            raise TransportError("connection is closed", op_name=tx.kind.value, stage=Stage.SUBMIT)
        r = await self._post_with_retries(tx.payload, tx.kind.value)
        return self._to_response(r, tx)

    # --- internals -------------------------------------------------------

    async def _post_with_retries(self, body: bytes, ctx: str) -> httpx.Response:
        assert self._client is not None
        last_exc: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                r = await self._client.post(self.url + EXECUTE_PATH, content=body)
                if _is_retriable_http(r.status_code):
                    raise _RetriableStatus(r)
                return r
            except (httpx.TransportError, _RetriableStatus) as e:
                last_exc = e
                if attempt > self.max_retries:
                    break
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.debug("%s: attempt %d failed (%s); retrying in %.2fs", ctx, attempt, e, delay)
                await asyncio.sleep(delay)
        if isinstance(last_exc, _RetriableStatus):
            # Out of retries on a transient status: hand the answer back as not-ok.
            return last_exc.response
        raise TransportError(
            f"RPC transport failed after {self.max_retries + 1} attempts",
            op_name=ctx,
            stage=Stage.SUBMIT,
            cause=describe_cause(last_exc) if last_exc else None,
        ) from last_exc

    @staticmethod
    def _to_response(r: httpx.Response, tx: BuiltTransaction) -> Response:
        if not r.is_success:
            return Response(ok=False, status=r.status_code, raw=r.content)
        try:
            body = r.json()
        except ValueError as e:
            return Response(ok=True, status=r.status_code, decode_error=f"non-JSON response: {e}", raw=r.content)
        if not isinstance(body, Mapping):
            return Response(ok=True, status=r.status_code, decode_error="response body is not an object", raw=r.content)

        resp = Response(
            ok=True,
            status=r.status_code,
            execution_status=body.get("executionStatus"),
            abort_code=body.get("abortCode"),
            tx_id=body.get("txId"),
        )
        result = body.get("result")
        if result is None:
            return resp
        try:
            resp.raw = from_base64url(result)
            resp.decoded = DecodedState.coerce(tx.decode(resp.raw))
        except Exception as e:  # codec failures of any kind are reported, not raised
            resp.decode_error = describe_cause(e)
        return resp


__all__ = ["HttpConnection", "EXECUTE_PATH"]
