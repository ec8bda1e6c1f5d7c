"""Tests for environment-driven settings."""

from pydantic import SecretStr

from vita_config import Settings, get_settings


class TestSettings:
    def test_database_url_from_components(self):
        settings = Settings(
            database_url_override=None,
            postgres_host="db",
            postgres_port=5433,
            postgres_user="vita",
            postgres_password=SecretStr("secret"),
            postgres_db="vita_prod",
        )

        assert settings.database_url == (
            "postgresql+asyncpg://vita:secret@db:5433/vita_prod"
        )

    def test_database_url_override(self):
        settings = Settings(database_url_override="sqlite+aiosqlite:///./vita.db")

        assert settings.database_url == "sqlite+aiosqlite:///./vita.db"

    def test_provider_codes(self):
        settings = Settings(saltedge_provider_codes=" nordea_dk, ,lunar_dk ")

        assert settings.provider_codes == ["nordea_dk", "lunar_dk"]

    def test_provider_codes_from_list(self):
        settings = Settings(saltedge_provider_codes=["nordea_dk", "lunar_dk"])

        assert settings.saltedge_provider_codes == "nordea_dk,lunar_dk"

    def test_saltedge_configured(self):
        unconfigured = Settings(saltedge_app_id=None, saltedge_secret=None)

        assert not unconfigured.saltedge_configured
        assert Settings(
            saltedge_app_id=SecretStr("app"),
            saltedge_secret=SecretStr("secret"),
        ).saltedge_configured

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("SALTEDGE_COUNTRY_CODE", "SE")
        monkeypatch.setenv("SYNC_OVERLAP_DAYS", "3")
        monkeypatch.setenv("DEFAULT_CURRENCY", "SEK")

        settings = get_settings()

        assert settings.saltedge_country_code == "SE"
        assert settings.sync_overlap_days == 3
        assert settings.default_currency == "SEK"
