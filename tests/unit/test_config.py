"""
Unit tests for shared/config.py
"""

import pytest

from shared.config import SAFE_ISOLATION_LEVELS, Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "DB_ISOLATION_LEVEL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.DATABASE_URL.startswith("postgresql+asyncpg://")
        assert settings.DB_ISOLATION_LEVEL in SAFE_ISOLATION_LEVELS
        assert settings.DB_POOL_SIZE == 5
        assert settings.LOG_LEVEL == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DB_ISOLATION_LEVEL", "READ COMMITTED")
        monkeypatch.setenv("DB_POOL_SIZE", "20")

        settings = Settings(_env_file=None)

        assert settings.DB_ISOLATION_LEVEL == "READ COMMITTED"
        assert settings.DB_POOL_SIZE == 20

    def test_only_engine_settings_exposed(self):
        assert set(Settings.model_fields) == {
            "DATABASE_URL",
            "DB_ISOLATION_LEVEL",
            "DB_POOL_SIZE",
            "DB_MAX_OVERFLOW",
            "DB_ECHO",
            "LOG_LEVEL",
        }

    def test_settings_cached(self):
        assert get_settings() is get_settings()

    @pytest.mark.parametrize("level", ["READ COMMITTED", "REPEATABLE READ"])
    def test_weaker_levels_not_safe(self, level):
        assert level not in SAFE_ISOLATION_LEVELS
