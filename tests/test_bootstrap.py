import logging

import pytest

from conftest import ScriptedConnection
from lea_sdk.bootstrap import BootstrapOutcome, BootstrapStatus, publish_keyset
from lea_sdk.types import OperationKind, Response


@pytest.mark.asyncio
async def test_publishes_keyset(ledger, program, alice, caplog):
    caplog.set_level(logging.INFO, logger="lea_sdk.bootstrap")
    outcome = await publish_keyset(ledger, alice, program)

    assert outcome.ok
    assert outcome.status is BootstrapStatus.PUBLISHED
    assert outcome.address == "lea1alice"
    assert outcome.tx_id
    assert alice.address in ledger.keysets
    tx = ledger.calls[0]
    assert tx.kind is OperationKind.PUBLISH_KEYSET
    assert tx.signers == {"publisher": alice}
    assert "Keyset published" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response, status, level",
    [
        (Response(ok=False, status=500, tx_id="t1"), BootstrapStatus.REJECTED, logging.ERROR),
        (Response(ok=True, decode_error="bad", execution_status=0, abort_code=0), BootstrapStatus.DECODE_FAILED, logging.WARNING),
        (Response(ok=True, execution_status=1, abort_code=9), BootstrapStatus.EXECUTION_FAILED, logging.ERROR),
        (RuntimeError("socket closed"), BootstrapStatus.TRANSPORT_FAILED, logging.ERROR),
        (None, BootstrapStatus.TRANSPORT_FAILED, logging.ERROR),
    ],
)
async def test_failures_are_reported_not_raised(program, alice, caplog, response, status, level):
    caplog.set_level(logging.DEBUG, logger="lea_sdk.bootstrap")
    outcome = await publish_keyset(ScriptedConnection(response), alice, program)

    assert outcome.status is status
    assert not outcome.ok
    assert any(r.levelno == level for r in caplog.records)


@pytest.mark.asyncio
async def test_build_failure_never_reaches_connection(program, encoder, alice, monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("no publish_keyset manifest")

    monkeypatch.setattr(encoder, "build", boom)
    conn = ScriptedConnection()
    outcome = await publish_keyset(conn, alice, program)
    assert outcome.status is BootstrapStatus.BUILD_FAILED
    assert "no publish_keyset manifest" in outcome.detail
    assert conn.calls == []


def test_outcome_to_dict():
    d = BootstrapOutcome(BootstrapStatus.PUBLISHED, "lea1a", "tx1").to_dict()
    assert d == {"status": "published", "address": "lea1a", "txId": "tx1", "detail": None}
