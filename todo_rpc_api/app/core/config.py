"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started without any configuration at all.  Values are read
once at process start; ``run.py`` loads a ``.env`` file beforehand so
that local overrides do not have to be exported manually.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

BOOL_TRUE = {"1", "true", "yes", "on"}
BOOL_FALSE = {"0", "false", "no", "off"}

STORAGE_BACKENDS = {"memory", "sqlite"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in BOOL_TRUE:
        return True
    if value in BOOL_FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = "Todo RPC API"
    api_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 4000

    # URL prefix the procedure router is mounted under.  Every procedure
    # is reachable at ``<rpc_prefix>/<fully.qualified.name>``.
    rpc_prefix: str = "/trpc"

    # Header the caller identity is read from.  The value is passed to
    # handlers untouched; nothing in the router verifies it.
    identity_header: str = "authorization"

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # ``memory`` keeps entities in process; ``sqlite`` stores them in the
    # file pointed to by ``database_url``.
    storage_backend: str = "memory"
    database_url: str = "todo_rpc.db"

    # Insert the three demo users (Alice, Bob, Charlie) on start-up.
    seed_demo_data: bool = True

    @property
    def is_development(self) -> bool:
        """Whether internal error messages may be shown to callers."""
        return self.debug or self.environment.lower() == "development"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (``os.environ`` by default).

        Raises ``ValueError`` for values that cannot be parsed so a
        misconfigured process fails at start-up rather than on the
        first request.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        port_raw = env.get("PORT", str(defaults.port))
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port_raw!r}") from None
        if not 0 <= port <= 65535:
            raise ValueError(f"PORT out of range: {port}")

        storage_backend = env.get("STORAGE_BACKEND", defaults.storage_backend).strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {sorted(STORAGE_BACKENDS)}, got {storage_backend!r}"
            )

        rpc_prefix = env.get("RPC_PREFIX", defaults.rpc_prefix).strip() or defaults.rpc_prefix
        if not rpc_prefix.startswith("/"):
            rpc_prefix = "/" + rpc_prefix
        rpc_prefix = rpc_prefix.rstrip("/") or defaults.rpc_prefix

        cors_raw = env.get("CORS_ORIGINS")
        cors_origins = _parse_list(cors_raw) if cors_raw is not None else list(defaults.cors_origins)

        return cls(
            project_name=env.get("PROJECT_NAME", defaults.project_name),
            api_version=env.get("API_VERSION", defaults.api_version),
            environment=env.get("ENVIRONMENT", defaults.environment),
            debug=_parse_bool("DEBUG", env.get("DEBUG", "false")),
            log_level=env.get("LOG_LEVEL", defaults.log_level),
            log_file=env.get("LOG_FILE") or None,
            host=env.get("HOST", defaults.host),
            port=port,
            rpc_prefix=rpc_prefix,
            identity_header=env.get("IDENTITY_HEADER", defaults.identity_header).strip().lower(),
            cors_origins=cors_origins,
            storage_backend=storage_backend,
            database_url=env.get("DATABASE_URL", defaults.database_url),
            seed_demo_data=_parse_bool("SEED_DEMO_DATA", env.get("SEED_DEMO_DATA", "true")),
        )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should therefore be set before importing this module.
settings = Settings.from_env()
