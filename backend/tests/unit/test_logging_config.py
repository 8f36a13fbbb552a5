"""Tests for centralized logging configuration."""

import logging

import pytest
from pydantic import ValidationError

from logging_config import setup_logging


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_root_logger_level_default_info(self, monkeypatch):
        """Default LOG_LEVEL should set root logger to INFO."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        # Re-import settings so the monkeypatched env is picked up
        from config import Settings
        test_settings = Settings()
        monkeypatch.setattr("logging_config.settings", test_settings)

        setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_root_logger_level_from_settings(self, monkeypatch):
        """LOG_LEVEL setting should control root logger level."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        from config import Settings
        test_settings = Settings()
        monkeypatch.setattr("logging_config.settings", test_settings)

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_loggers_suppressed(self, monkeypatch):
        """Noisy third-party loggers should be set to WARNING."""
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        from config import Settings
        test_settings = Settings()
        monkeypatch.setattr("logging_config.settings", test_settings)

        setup_logging()

        for name in ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore", "uvicorn.access"):
            assert logging.getLogger(name).level == logging.WARNING, (
                f"{name} logger not suppressed"
            )

    def test_preference_logger_level_from_settings(self, monkeypatch):
        """PREFERENCE_LOG_LEVEL controls the preference write log on its own."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PREFERENCE_LOG_LEVEL", "warning")
        from config import Settings
        test_settings = Settings()
        monkeypatch.setattr("logging_config.settings", test_settings)

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("models.has_preferences").level == logging.WARNING

    def test_invalid_preference_log_level_rejected(self, monkeypatch):
        """Invalid PREFERENCE_LOG_LEVEL values should raise a validation error."""
        monkeypatch.setenv("PREFERENCE_LOG_LEVEL", "LOUD")
        from config import Settings
        with pytest.raises(ValidationError, match="PREFERENCE_LOG_LEVEL"):
            Settings()

    def test_invalid_log_level_rejected(self, monkeypatch):
        """Invalid LOG_LEVEL values should raise a validation error."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOS")
        from config import Settings
        with pytest.raises(ValidationError, match="LOG_LEVEL"):
            Settings()

    def test_log_level_case_insensitive(self, monkeypatch):
        """LOG_LEVEL should accept lowercase values."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        from config import Settings
        test_settings = Settings()
        assert test_settings.LOG_LEVEL == "DEBUG"


class TestPreferenceLogging:
    """Preference writes are logged without their values."""

    def test_create_update_and_clear_are_logged(self, member, caplog):
        """Each write emits an INFO record naming the preference and owner."""
        with caplog.at_level(logging.INFO, logger="models.has_preferences"):
            member.set_preference("theme", "secret-dark")
            member.set_preference("theme", "secret-light")
            member.clear_preference("theme")

        messages = [record.getMessage() for record in caplog.records]
        assert "Created preference theme for Member:1" in messages
        assert "Updated preference theme for Member:1" in messages
        assert "Cleared 1 preference(s) for Member:1" in messages
        assert not any("secret" in message for message in messages)
