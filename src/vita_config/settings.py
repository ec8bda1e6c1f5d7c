"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. VITA_ENV_FILE environment variable (absolute path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. VITA_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("VITA_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Vita"
    debug: bool = False

    # Database (POSTGRES_ prefix). DATABASE_URL_OVERRIDE wins when set,
    # e.g. sqlite+aiosqlite:///./vita.db for local use.
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr = SecretStr("")
    postgres_db: str = "vita"

    # Salt Edge aggregator (SALTEDGE_ prefix)
    saltedge_app_id: SecretStr | None = None
    saltedge_secret: SecretStr | None = None
    saltedge_base_url: str = "https://www.saltedge.com/api/v5"
    saltedge_timeout: float = 30.0
    saltedge_country_code: str = "DK"
    saltedge_provider_codes: str = "nordea_dk,lunar_dk,danske_bank_dk,jyske_bank_dk"

    @field_validator("saltedge_provider_codes", mode="before")
    @classmethod
    def _validate_provider_codes(cls, v: Any) -> str:
        """Ensure provider codes are stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # Banking sync
    default_currency: str = "DKK"
    sync_default_window_days: int = 30
    sync_overlap_days: int = 1
    sync_max_concurrency: int = 4

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Construct the database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password.get_secret_value()}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def provider_codes(self) -> list[str]:
        """Parse provider codes from comma-separated string."""
        return [
            code.strip()
            for code in self.saltedge_provider_codes.split(",")
            if code.strip()
        ]

    @property
    def saltedge_configured(self) -> bool:
        return bool(
            self.saltedge_app_id
            and self.saltedge_app_id.get_secret_value()
            and self.saltedge_secret
            and self.saltedge_secret.get_secret_value()
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
