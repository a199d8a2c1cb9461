"""CLI end to end against a temporary DuckDB file."""

import json
import re

import pytest
from typer.testing import CliRunner

from predictsdk.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("predictsdk.cli.app.configure_logging", lambda settings: None)


@pytest.fixture
def invoke(tmp_path):
    (tmp_path / "default.toml").write_text('[sdk]\napp_id = "cli-test"\n', encoding="utf-8")
    db_path = str(tmp_path / "predict.duckdb")

    def _invoke(*args):
        return runner.invoke(app, ["--config-dir", str(tmp_path), "--db-path", db_path, *args])

    return _invoke


def test_market_lifecycle(invoke, tmp_path):
    result = invoke("markets", "create", "-q", "Will it rain?", "-o", "Yes", "-o", "No")
    assert result.exit_code == 0, result.output
    market_id = re.search(r"mkt_[0-9a-f]{16}", result.output).group(0)
    yes_id, no_id = re.findall(r"out_[0-9a-f]{8}", result.output)[:2]

    result = invoke("bets", "place", "-m", market_id, "-u", "alice", "-o", yes_id, "-a", "100")
    assert result.exit_code == 0, result.output
    assert "Odds at bet: 2.00  Potential payout: 1.02" in result.output
    result = invoke("bets", "place", "-m", market_id, "-u", "bob", "-o", no_id, "-a", "50")
    assert result.exit_code == 0, result.output

    result = invoke("bets", "list", "-m", market_id)
    assert "Total: 2 bets" in result.output

    result = invoke("markets", "resolve", market_id, "-w", yes_id)
    assert result.exit_code == 0, result.output
    assert f"winner {yes_id}" in result.output

    result = invoke("users", "show", "alice")
    assert "Balance: 1047.00" in result.output  # 900 + 150 * 0.98
    result = invoke("users", "show", "bob")
    assert "Lost: 50.00" in result.output

    result = invoke("markets", "resolve", market_id, "-w", no_id)
    assert result.exit_code == 1
    assert "CONFLICT" in result.output

    result = invoke("data", "stats")
    assert "Markets: 1  Bets: 2  Users: 2" in result.output

    out = tmp_path / "snap.json"
    result = invoke("data", "export", "-o", str(out))
    assert result.exit_code == 0, result.output
    snapshot = json.loads(out.read_text(encoding="utf-8"))
    assert len(snapshot["bets"]) == 2


def test_cancel_refunds(invoke):
    result = invoke("markets", "create", "-q", "Match on?", "-o", "Yes", "-o", "No")
    market_id = re.search(r"mkt_[0-9a-f]{16}", result.output).group(0)
    yes_id = re.findall(r"out_[0-9a-f]{8}", result.output)[0]
    invoke("bets", "place", "-m", market_id, "-u", "alice", "-o", yes_id, "-a", "40")

    result = invoke("markets", "cancel", market_id, "-r", "rained off")
    assert result.exit_code == 0, result.output
    assert "Balance: 1000.00" in invoke("users", "show", "alice").output
    assert market_id in invoke("markets", "list", "-s", "CANCELLED").output


def test_errors_exit_nonzero(invoke):
    assert invoke("markets", "show", "mkt_missing").exit_code == 1
    assert invoke("users", "show", "nobody").exit_code == 1
    result = invoke("markets", "close", "mkt_missing")
    assert result.exit_code == 1
    assert "MARKET_NOT_FOUND" in result.output
    assert invoke("bets", "list").exit_code == 1


def test_fund_and_clear(invoke):
    result = invoke("users", "fund", "carol", "250")
    assert "Balance: 1250.00" in result.output
    assert invoke("users", "fund", "carol", "0").exit_code == 1

    result = invoke("data", "clear", "--yes")
    assert result.exit_code == 0, result.output
    assert "Markets: 0  Bets: 0  Users: 0" in invoke("data", "stats").output


def test_import_snapshot(invoke, tmp_path):
    invoke("users", "fund", "dave", "10")
    out = tmp_path / "snap.json"
    invoke("data", "export", "-o", str(out))
    invoke("data", "clear", "--yes")
    result = invoke("data", "import", str(out))
    assert result.exit_code == 0, result.output
    assert "Users: 1" in result.output
    assert "Balance: 1010.00" in invoke("users", "show", "dave").output


def test_odds_commands(invoke):
    assert invoke("odds", "format", "2.5", "-f", "american").output.strip() == "+150"
    assert invoke("odds", "format", "2.5", "-f", "fractional").output.strip() == "3/2"
    assert invoke("odds", "format", "0.98", "-f", "american").exit_code == 1
    assert invoke("odds", "format", "2.5", "-f", "roman").exit_code == 1
    assert invoke("odds", "kelly", "-p", "0.6", "--odds", "2", "-b", "1000").output.strip() == "50.00"
