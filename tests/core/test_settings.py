"""Tests for TickerSettings."""

import pytest
from pydantic import ValidationError

from ticker.core.settings import TickerSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test away from any .env file and TICKER_ variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "TICKER_DEBUG",
        "TICKER_LOG_LEVEL",
        "TICKER_LOG_FORMAT",
        "TICKER_REFRESH_RATE_HZ",
        "TICKER_HISTORY_SIZE",
        "TICKER_ID_SEED",
        "TICKER_ISOLATE_CALLBACK_ERRORS",
        "TICKER_SCORE_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


class TestTickerSettings:
    """Test defaults, environment overrides and validation."""

    def test_defaults(self):
        s = TickerSettings()

        assert s.debug is False
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.refresh_rate_hz == 60
        assert s.history_size == 120
        assert s.id_seed == 10000
        assert s.isolate_callback_errors is True
        assert s.score_threshold == 80

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TICKER_REFRESH_RATE_HZ", "144")
        monkeypatch.setenv("TICKER_LOG_FORMAT", "json")
        monkeypatch.setenv("TICKER_ISOLATE_CALLBACK_ERRORS", "false")

        s = TickerSettings()
        assert s.refresh_rate_hz == 144
        assert s.log_format == "json"
        assert s.isolate_callback_errors is False

    def test_debug_forces_debug_level(self, monkeypatch):
        assert TickerSettings(debug=True, log_level="WARNING").log_level == "DEBUG"

        monkeypatch.setenv("TICKER_DEBUG", "true")
        assert TickerSettings().log_level == "DEBUG"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("TICKER_HISTORY_SIZE=30\n")
        assert TickerSettings().history_size == 30

    @pytest.mark.parametrize(
        "field, value",
        [
            ("refresh_rate_hz", 0),
            ("history_size", 0),
            ("id_seed", -1),
            ("score_threshold", 101),
            ("log_format", "xml"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            TickerSettings(**{field: value})
