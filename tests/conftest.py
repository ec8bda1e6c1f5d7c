"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/
    │   ├── domain/            # Entities and value objects, no I/O
    │   ├── application/       # Commands, queries and the banking service
    │   ├── infrastructure/    # Salt Edge client and SQLAlchemy repositories
    │   └── presentation/      # Typer CLI
    ├── integration/           # Tests with Testcontainers PostgreSQL
    └── shared/                # Shared fixtures and fakes

Environment Variables:
    TEST_DATABASE_URL    Run persistence tests against this database instead
                         of in-memory SQLite (e.g. a PostgreSQL asyncpg URL)
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests

Pytest Options:
    --run-integration    Run integration tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from tests.shared.fixtures.database import (  # noqa: F401
    async_engine,
    async_session,
    postgres_container,
    postgres_engine,
    postgres_session,
    scope,
    session_maker,
)
from vita_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

CONFIG_DIR = PROJECT_ROOT / "config"
# Load .env.dev for tests (same as local development)
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: Tests against a PostgreSQL container (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    run_integration = config.getoption("--run-integration") or os.environ.get(
        "RUN_INTEGRATION",
        "",
    ).lower() in ("1", "true", "yes")
    if run_integration:
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        if "integration" in {mark.name for mark in item.iter_markers()}:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached process-wide; give every test a fresh view."""
    clear_settings_cache()
    yield
    clear_settings_cache()
