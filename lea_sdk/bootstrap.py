"""
Account bootstrap: publishing the keyset of an address that has never
transacted, so the ledger can validate its future chained transactions.

`publish_keyset` never raises for ledger, transport or build failures. It
returns a `BootstrapOutcome` and logs it; whether a failed bootstrap should
abort the caller's operation is the caller's decision.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .errors import describe_cause, render_details
from .rpc import Connection
from .tx.build import SystemProgram
from .types import Account, Address, TxId
from .validate import as_response

log = logging.getLogger(__name__)

__all__ = ["BootstrapStatus", "BootstrapOutcome", "publish_keyset"]


class BootstrapStatus(str, enum.Enum):
    PUBLISHED = "published"
    REJECTED = "rejected"
    DECODE_FAILED = "decode_failed"
    EXECUTION_FAILED = "execution_failed"
    TRANSPORT_FAILED = "transport_failed"
    BUILD_FAILED = "build_failed"


@dataclass(frozen=True)
class BootstrapOutcome:
    status: BootstrapStatus
    address: Address
    tx_id: Optional[TxId] = None
    detail: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.status is BootstrapStatus.PUBLISHED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "address": self.address,
            "txId": self.tx_id,
            "detail": self.detail,
        }


async def publish_keyset(
    connection: Connection,
    account: Account,
    program: SystemProgram,
    *,
    address: Optional[Address] = None,
) -> BootstrapOutcome:
    """Build, submit and classify a publish-keyset transaction for `account`."""
    if address is None:
        address = getattr(account, "address", None) or str(account)
    try:
        tx = program.publish_keyset(account)
    except Exception as e:  # reported through the outcome
        log.error("publishKeyset for %s could not be built: %s", address, describe_cause(e))
        return BootstrapOutcome(BootstrapStatus.BUILD_FAILED, address, detail=describe_cause(e))
    try:
        resp = as_response(await connection.submit(tx), "publish_keyset")
    except Exception as e:  # reported through the outcome
        log.error("publishKeyset for %s failed before a response: %s", address, describe_cause(e))
        return BootstrapOutcome(BootstrapStatus.TRANSPORT_FAILED, address, detail=describe_cause(e))

    if not resp.ok:
        detail = resp.decoded if resp.decoded is not None else resp.raw
        log.error(
            "publishKeyset failed: status=%s tx=%s details=%s",
            resp.status, resp.tx_id, render_details(detail),
        )
        return BootstrapOutcome(BootstrapStatus.REJECTED, address, resp.tx_id, {"status": resp.status})
    if resp.decode_error is not None:
        log.warning("Decoding publishKeyset result failed: %s", resp.decode_error)
        return BootstrapOutcome(BootstrapStatus.DECODE_FAILED, address, resp.tx_id, resp.decode_error)
    if resp.execution_status != 0 or resp.abort_code != 0:
        log.error(
            "publishKeyset rejected on-chain: executionStatus=%s abortCode=%s",
            resp.execution_status, resp.abort_code,
        )
        return BootstrapOutcome(
            BootstrapStatus.EXECUTION_FAILED,
            address,
            resp.tx_id,
            {"executionStatus": resp.execution_status, "abortCode": resp.abort_code},
        )

    log.info("Keyset published for %s (tx=%s)", address, resp.tx_id)
    return BootstrapOutcome(BootstrapStatus.PUBLISHED, address, resp.tx_id)
