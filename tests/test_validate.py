import pytest

from lea_sdk.errors import DecodeFailed, ExecutionRejected, MalformedResponse, TransportRejected
from lea_sdk.types import BASE_POD_HEX, Response
from lea_sdk.validate import ensure_ok


def test_accepts_clean_success():
    resp = ensure_ok({"ok": True, "executionStatus": 0, "abortCode": 0, "decodeError": None}, "op")
    assert isinstance(resp, Response)
    assert resp.ok


def test_rejects_nonzero_execution_status():
    with pytest.raises(ExecutionRejected) as ei:
        ensure_ok({"ok": True, "executionStatus": 7, "abortCode": 0}, "transfer")
    assert ei.value.execution_status == 7
    assert ei.value.abort_code == 0
    assert "transfer" in str(ei.value)
    assert "executionStatus=7" in str(ei.value)


def test_rejects_nonzero_abort_code():
    with pytest.raises(ExecutionRejected):
        ensure_ok(Response(ok=True, execution_status=0, abort_code=3), "burn")


def test_missing_codes_count_as_failure():
    with pytest.raises(ExecutionRejected):
        ensure_ok({"ok": True}, "op")


@pytest.mark.parametrize("value", [None, "nope", 42, ["ok"]])
def test_malformed_response(value):
    with pytest.raises(MalformedResponse):
        ensure_ok(value, "op")


def test_not_ok_includes_status_and_payload():
    with pytest.raises(TransportRejected) as ei:
        ensure_ok({"ok": False, "status": 503, "raw": b"\xde\xad"}, "get_balance")
    msg = str(ei.value)
    assert "status=503" in msg
    assert "0xdead" in msg


def test_not_ok_prefers_decoded_payload():
    with pytest.raises(TransportRejected) as ei:
        ensure_ok({"ok": False, "decoded": {BASE_POD_HEX: {"balance": 1}}, "raw": b"x"}, "op")
    assert '"balance": 1' in str(ei.value)
    assert "status=unknown" in str(ei.value)


def test_decode_error_wins_over_codes():
    with pytest.raises(DecodeFailed) as ei:
        ensure_ok({"ok": True, "decodeError": "bad varint", "executionStatus": 5, "abortCode": 5}, "op")
    assert "bad varint" in str(ei.value)


def test_transport_check_runs_before_decode_check():
    with pytest.raises(TransportRejected):
        ensure_ok({"ok": False, "decodeError": "x"}, "op")


@pytest.mark.parametrize("diagnostic", ["", {}, 0])
def test_falsy_decode_error_still_fails(diagnostic):
    with pytest.raises(DecodeFailed):
        ensure_ok({"ok": True, "decodeError": diagnostic, "executionStatus": 0, "abortCode": 0}, "op")
