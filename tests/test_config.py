"""Settings and logging setup."""
import json
import logging

import pytest
import structlog

from wenfit.config import Settings, get_settings
from wenfit.logging import configure_from_settings, configure_logging, get_logger


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_JSON is False
        assert settings.DEFAULT_UNKNOWN_KEYS == "passthrough"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("WENFIT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("WENFIT_LOG_JSON", "true")
        settings = Settings()
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.LOG_JSON is True

    def test_invalid_mode_rejected(self, monkeypatch):
        monkeypatch.setenv("WENFIT_DEFAULT_UNKNOWN_KEYS", "ignore")
        with pytest.raises(ValueError):
            Settings()

    def test_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers, root.level = handlers, level
        structlog.reset_defaults()

    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_logs=True)
        get_logger("wenfit.test").info("plugin_registered", plugin="p")
        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "plugin_registered"
        assert event["plugin"] == "p"
        assert event["library"] == "wenfit"
        assert event["level"] == "info"

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_logs=True)
        get_logger("wenfit.test").info("hidden")
        assert "hidden" not in capsys.readouterr().out

    def test_configure_from_settings(self, monkeypatch):
        monkeypatch.setenv("WENFIT_LOG_LEVEL", "ERROR")
        get_settings.cache_clear()
        configure_from_settings()
        assert logging.getLogger().level == logging.ERROR
