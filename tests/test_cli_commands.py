"""Tests for CLI commands."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from chainstat.cli import app
from chainstat.models import Snapshot
from chainstat.orchestrator import SnapshotPersistError
from chainstat.store import JsonSnapshotStore

from conftest import make_token

runner = CliRunner()


def _write_config(tmp_path):
    config = tmp_path / "config.yml"
    config.write_text(f"data_dir: {tmp_path / 'data'}\n")
    return config


def _write_snapshot(tmp_path, **kwargs):
    snapshot = Snapshot(
        last_update=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        tokens=[
            make_token("BTC", "OKX", chains=("BTC",), name="Bitcoin"),
            make_token("USDT", "Binance", chains=("ETH", "TRX"), name="TetherUS"),
        ],
        **kwargs,
    )
    JsonSnapshotStore(tmp_path / "data" / "exchange_data.json").save(snapshot)
    return snapshot


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Deposit/withdraw status across exchanges" in result.output
    for command in ("collect", "status", "tokens", "last-update", "config-show"):
        assert command in result.output


def test_status_is_case_insensitive(tmp_path):
    config = _write_config(tmp_path)
    _write_snapshot(tmp_path)

    result = runner.invoke(app, ["status", "usdt", "--config", str(config)])

    assert result.exit_code == 0
    assert "USDT" in result.output
    assert "TRX" in result.output
    assert "Binance" in result.output


def test_status_json(tmp_path):
    config = _write_config(tmp_path)
    _write_snapshot(tmp_path)

    result = runner.invoke(app, ["status", "btc", "--json", "--config", str(config)])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["symbol"] == "BTC"
    assert data["exchanges"][0]["name"] == "OKX"
    assert data["exchanges"][0]["chains"][0]["deposit_status"] == "open"
    assert data["last_update"].startswith("2024-05-01T12:00:00")


def test_status_unknown_token(tmp_path):
    config = _write_config(tmp_path)
    _write_snapshot(tmp_path)

    result = runner.invoke(app, ["status", "DOGE", "--config", str(config)])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_status_without_data(tmp_path):
    config = _write_config(tmp_path)

    result = runner.invoke(app, ["status", "BTC", "--config", str(config)])

    assert result.exit_code == 1
    assert "No data collected yet" in result.output


def test_tokens(tmp_path):
    config = _write_config(tmp_path)
    _write_snapshot(tmp_path)

    result = runner.invoke(app, ["tokens", "--config", str(config)])

    assert result.exit_code == 0
    assert "Bitcoin" in result.output
    assert "Total tokens:" in result.output


def test_last_update(tmp_path):
    config = _write_config(tmp_path)
    _write_snapshot(tmp_path)

    result = runner.invoke(app, ["last-update", "--config", str(config)])

    assert result.exit_code == 0
    assert "2024-05-01T12:00:00" in result.output


def test_config_show_redacts(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    monkeypatch.setenv("BINANCE_API_SECRET", "super-secret-value")

    result = runner.invoke(app, ["config-show", "--config", str(config)])

    assert result.exit_code == 0
    assert "super-secret-value" not in result.output


@patch("chainstat.cli._collect_async", new_callable=AsyncMock)
def test_collect_prints_summary(mock_collect, tmp_path):
    config = _write_config(tmp_path)
    mock_collect.return_value = Snapshot(tokens=[make_token("BTC", "OKX"), make_token("ETH", "OKX")])

    result = runner.invoke(app, ["collect", "--config", str(config)])

    assert result.exit_code == 0
    assert "OKX" in result.output
    assert "Tokens:" in result.output


@patch("chainstat.cli._collect_async", new_callable=AsyncMock)
def test_collect_reports_fallback(mock_collect, tmp_path):
    config = _write_config(tmp_path)
    mock_collect.return_value = Snapshot(tokens=[make_token("BTC", "OKX")], error="no exchange returned any token data")

    result = runner.invoke(app, ["collect", "--config", str(config)])

    assert result.exit_code == 0
    assert "Serving previous data" in result.output


@patch("chainstat.cli._collect_async", new_callable=AsyncMock)
def test_collect_persist_failure_exits_1(mock_collect, tmp_path):
    config = _write_config(tmp_path)
    snapshot = Snapshot(tokens=[make_token("BTC", "OKX")])
    mock_collect.side_effect = SnapshotPersistError(snapshot, OSError("disk full"))

    result = runner.invoke(app, ["collect", "--config", str(config)])

    assert result.exit_code == 1
    assert "disk full" in result.output
