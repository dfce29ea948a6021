"""Tests for the ticker CLI."""

import pytest
from typer.testing import CliRunner

from ticker import __version__
from ticker.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TICKER_REFRESH_RATE_HZ", raising=False)
    monkeypatch.setenv("TICKER_LOG_LEVEL", "WARNING")


class TestCli:
    """Test CLI commands."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "refresh_rate_hz" in result.output

    def test_config_json(self):
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        assert '"history_size": 120' in result.output

    def test_config_reports_debug_level(self, monkeypatch):
        monkeypatch.setenv("TICKER_DEBUG", "1")
        result = runner.invoke(app, ["config", "--json"])

        assert result.exit_code == 0
        assert '"log_level": "DEBUG"' in result.output

    @pytest.mark.slow
    def test_run(self):
        result = runner.invoke(app, ["run", "-t", "0.2", "--rate", "100", "--json"])
        assert result.exit_code == 0, result.output
        assert '"loop_calls"' in result.output
        assert '"pacing"' in result.output

    def test_run_invalid_rate(self):
        result = runner.invoke(app, ["run", "--rate", "0"])
        assert result.exit_code == 2
