from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the recovery_api package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recovery_api.core import config as core_config  # noqa: E402
from recovery_api.repositories.factory import create_storage  # noqa: E402
from recovery_api.repositories.memory_storage import MemoryStorage  # noqa: E402


@pytest.fixture()
def fresh_settings(monkeypatch):
    for name in (
        "APP_ENV",
        "STORAGE_BACKEND",
        "DATABASE_URL",
        "LOG_LEVEL",
        "DEMO_USER_ID",
        "MOOD_LOG_DEFAULT_LIMIT",
        "PUBLIC_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_defaults(fresh_settings):
    settings = core_config.get_settings()
    assert settings.app_env == "dev"
    assert settings.storage_backend == "memory"
    assert settings.database_url == ""
    assert settings.demo_user_id == 1
    assert settings.mood_log_default_limit == 10
    assert settings.log_level == "INFO"


def test_env_overrides_and_bad_ints(fresh_settings):
    fresh_settings.setenv("APP_ENV", "PROD")
    fresh_settings.setenv("STORAGE_BACKEND", " SQL ")
    fresh_settings.setenv("DEMO_USER_ID", "abc")
    fresh_settings.setenv("MOOD_LOG_DEFAULT_LIMIT", "25")
    fresh_settings.setenv("PUBLIC_BASE_URL", "https://recovery.example/")
    settings = core_config.get_settings()
    assert settings.app_env == "prod"
    assert settings.storage_backend == "sql"
    assert settings.demo_user_id == 1
    assert settings.mood_log_default_limit == 25
    assert settings.public_base_url == "https://recovery.example"


def test_factory_picks_backend(fresh_settings):
    assert isinstance(create_storage(core_config.get_settings()), MemoryStorage)

    fresh_settings.setenv("STORAGE_BACKEND", "redis")
    core_config.get_settings.cache_clear()
    with pytest.raises(ValueError):
        create_storage(core_config.get_settings())
