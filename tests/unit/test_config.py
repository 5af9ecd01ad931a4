"""
Unit tests for settings and database URL handling
"""

import pytest

from teamtasks.core.config import Settings
from teamtasks.db.session import build_async_database_url


class TestSettings:

    def test_sslmode_is_appended(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db:5432/app")

        assert settings.DATABASE_URL == "postgres://u:p@db:5432/app?sslmode=prefer"

    def test_sslmode_joins_existing_query(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db/app?application_name=api")

        assert settings.DATABASE_URL.endswith("?application_name=api&sslmode=prefer")

    def test_explicit_sslmode_is_kept(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db/app?sslmode=require")

        assert settings.DATABASE_URL == "postgres://u:p@db/app?sslmode=require"

    def test_cors_origins(self):
        settings = Settings(DATABASE_URL="postgres://db/app", CORS_ORIGINS="https://a.test, https://b.test,")

        assert settings.cors_origins == ["https://a.test", "https://b.test"]

    def test_sample_rate_bounds(self):
        with pytest.raises(ValueError):
            Settings(DATABASE_URL="postgres://db/app", SENTRY_TRACES_SAMPLE_RATE=2.0)


class TestAsyncDatabaseUrl:

    def test_driver_and_ssl(self):
        url = build_async_database_url("postgres://u:p@db:5432/app?sslmode=prefer")

        assert url == "postgresql+asyncpg://u:p@db:5432/app?ssl=prefer"

    def test_without_sslmode(self):
        assert build_async_database_url("postgresql://u:p@db/app") == "postgresql+asyncpg://u:p@db/app"
