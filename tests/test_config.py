from __future__ import annotations

import pytest

from todo_rpc_api.app.core.config import Settings


def test_defaults_without_environment() -> None:
    settings = Settings.from_env({})

    assert settings.port == 4000
    assert settings.rpc_prefix == "/trpc"
    assert settings.identity_header == "authorization"
    assert settings.storage_backend == "memory"
    assert settings.seed_demo_data is True
    assert settings.is_development is False


def test_values_are_read_from_environment() -> None:
    settings = Settings.from_env(
        {
            "PORT": "8080",
            "ENVIRONMENT": "development",
            "RPC_PREFIX": "api/rpc/",
            "IDENTITY_HEADER": "X-Identity",
            "CORS_ORIGINS": "http://a.test, http://b.test",
            "STORAGE_BACKEND": "SQLite",
            "SEED_DEMO_DATA": "no",
        }
    )

    assert settings.port == 8080
    assert settings.is_development is True
    assert settings.rpc_prefix == "/api/rpc"
    assert settings.identity_header == "x-identity"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.storage_backend == "sqlite"
    assert settings.seed_demo_data is False


def test_debug_flag_enables_development_mode() -> None:
    assert Settings.from_env({"DEBUG": "1"}).is_development is True


@pytest.mark.parametrize(
    "environ",
    [
        {"PORT": "abc"},
        {"PORT": "70000"},
        {"STORAGE_BACKEND": "redis"},
        {"DEBUG": "maybe"},
    ],
)
def test_invalid_values_are_rejected(environ) -> None:
    with pytest.raises(ValueError):
        Settings.from_env(environ)
