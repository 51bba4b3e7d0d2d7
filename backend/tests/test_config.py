"""
Tests for settings parsing and database URL handling.
"""

from datetime import timedelta

from survey_api.config import Settings
from survey_api.db.session import _get_async_url


class TestSettings:
    """Tests for Settings validators."""

    def test_postgres_scheme_rewritten(self):
        settings = Settings(database_url="postgres://u:p@host:5432/survey")
        assert settings.database_url == "postgresql://u:p@host:5432/survey"

    def test_cors_from_comma_separated(self):
        settings = Settings(cors_origins="https://a.example, https://b.example")
        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_inactivity_threshold(self):
        settings = Settings(auto_pause_threshold_hours=1.5)
        assert settings.inactivity_threshold == timedelta(minutes=90)


class TestAsyncUrl:
    """Tests for _get_async_url."""

    def test_sqlite(self):
        assert _get_async_url("sqlite:///./survey.db") == "sqlite+aiosqlite:///./survey.db"

    def test_postgres(self):
        assert _get_async_url("postgresql://h/db") == "postgresql+asyncpg://h/db"

    def test_already_async(self):
        assert _get_async_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"
