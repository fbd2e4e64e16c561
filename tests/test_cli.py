from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import typer
from typer.testing import CliRunner

from conftest import FakeEncoder, FakeLedger
from lea_sdk import __version__
from lea_sdk.cli import main as cli
from lea_sdk.tx.build import SystemProgram

runner = CliRunner()


@pytest.fixture
def node(monkeypatch: Any) -> FakeLedger:
    for key in ("LEA_CLUSTER", "LEA_RPC_URL", "LEA_ENCODER", "LEA_STRICT_TIP", "LEA_STRICT_BOOTSTRAP"):
        monkeypatch.delenv(key, raising=False)
    ledger = FakeLedger()
    monkeypatch.setattr(cli, "_connection", lambda config: ledger)
    monkeypatch.setattr(cli, "_program", lambda config: SystemProgram(FakeEncoder(), program_id=config.program_id))
    return ledger


def _keyset(tmp_path: Path, address: str) -> str:
    path = tmp_path / f"{address}.json"
    path.write_text(json.dumps({"keyset": {"sk": address}, "address": address}), encoding="utf-8")
    return str(path)


def test_version() -> None:
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"lea-sdk {__version__}"


def test_env_shows_effective_config(node: FakeLedger) -> None:
    result = runner.invoke(cli.app, ["--cluster", "local", "--timeout", "3", "env"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["cluster"] == "local"
    assert data["endpoint"] == "http://127.0.0.1:60000"
    assert data["request_timeout"] == 3.0


def test_bad_cluster_is_usage_error(node: FakeLedger) -> None:
    result = runner.invoke(cli.app, ["--cluster", "moonnet", "env"])
    assert result.exit_code == 2


def test_reads(node: FakeLedger) -> None:
    node.fund("lea1alice", 42)
    node.allowed_mint["lea1alice"] = 7

    assert runner.invoke(cli.app, ["balance", "lea1alice"]).output.strip() == "42"
    assert runner.invoke(cli.app, ["supply"]).output.strip() == "42"
    assert runner.invoke(cli.app, ["allowed-mint", "lea1alice"]).output.strip() == "7"
    assert runner.invoke(cli.app, ["last-tx-hash", "lea1alice"]).output.strip() == "none"


def test_transfer_bootstraps_and_moves_funds(node: FakeLedger, tmp_path: Path) -> None:
    node.fund("lea1alice", 5)
    keyset = _keyset(tmp_path, "lea1alice")

    result = runner.invoke(cli.app, ["transfer", "--keyset", keyset, "--to", "lea1bob", "--amount", "2"])
    assert result.exit_code == 0, result.output
    assert result.output.startswith("Transaction Id: ")
    tx_id = result.output.split(":", 1)[1].strip()

    assert "lea1alice" in node.keysets
    assert node.balances["lea1bob"] == 2
    tip = runner.invoke(cli.app, ["last-tx-hash", "lea1alice"]).output.strip()
    assert tip == "0x" + tx_id


def test_mint_then_burn(node: FakeLedger, tmp_path: Path) -> None:
    minter = _keyset(tmp_path, "lea1minter")
    holder = _keyset(tmp_path, "lea1holder")

    assert runner.invoke(cli.app, ["mint", "--keyset", minter, "--to", "lea1holder", "--amount", "23"]).exit_code == 0
    assert runner.invoke(cli.app, ["burn", "--keyset", holder, "--amount", "1"]).exit_code == 0
    assert runner.invoke(cli.app, ["balance", "lea1holder"]).output.strip() == "22"
    assert runner.invoke(cli.app, ["supply"]).output.strip() == "22"


def test_publish_keyset(node: FakeLedger, tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["publish-keyset", "--keyset", _keyset(tmp_path, "lea1alice")])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["status"] == "published"
    assert data["address"] == "lea1alice"


def test_ledger_rejection_exits_one(node: FakeLedger, tmp_path: Path) -> None:
    keyset = _keyset(tmp_path, "lea1alice")
    result = runner.invoke(cli.app, ["transfer", "--keyset", keyset, "--to", "lea1bob", "--amount", "1"])
    assert result.exit_code == 1
    assert "transfer failed:" in result.output
    assert "abortCode=3" in result.output


def test_invalid_arguments(node: FakeLedger, tmp_path: Path) -> None:
    keyset = _keyset(tmp_path, "lea1alice")
    zero = runner.invoke(cli.app, ["burn", "--keyset", keyset, "--amount", "0"])
    assert zero.exit_code == 2

    missing = runner.invoke(cli.app, ["burn", "--keyset", str(tmp_path / "nope.json"), "--amount", "1"])
    assert missing.exit_code == 2
    assert "File not found" in missing.output

    broken = tmp_path / "broken.json"
    broken.write_text('{"keyset": {}}', encoding="utf-8")
    bad = runner.invoke(cli.app, ["burn", "--keyset", str(broken), "--amount", "1"])
    assert bad.exit_code == 2
    assert node.calls == []


def test_load_encoder() -> None:
    assert isinstance(cli.load_encoder("conftest:FakeEncoder"), FakeEncoder)
    for path in (None, "conftest", "conftest:Missing", "no_such_module_xyz:Encoder"):
        with pytest.raises(typer.BadParameter):
            cli.load_encoder(path)


def test_cli_package_keeps_main_submodule() -> None:
    import lea_sdk.cli

    assert cli.__name__ == "lea_sdk.cli.main"
    assert lea_sdk.cli.main is cli
    assert lea_sdk.cli.app is cli.app
