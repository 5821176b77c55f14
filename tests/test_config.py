import logging

import pytest

from tracker_config import load_settings, resolve_log_level


class TestLogLevel:
    @pytest.mark.parametrize("name, expected", [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("INFO", logging.INFO)])
    def test_known_levels(self, name, expected):
        assert resolve_log_level(name) == expected

    @pytest.mark.parametrize("name", ["BASIC_FORMAT", "LOUD", ""])
    def test_unknown_names_fall_back_to_info(self, name):
        assert resolve_log_level(name) == logging.INFO


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SUPABASE_URL", "SUPABASE_KEY", "DATABASE_URL", "STORE_TIMEOUT_SECONDS", "PORT", "FLASK_DEBUG", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.backend == ""
        assert settings.port == 5001
        assert settings.log_level == "INFO"
