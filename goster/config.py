"""Settings loaded from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field


class ConfigError(RuntimeError):
    """Raised when a required setting is missing."""


@dataclass(frozen=True)
class Settings:
    jwt_secret: str = field(repr=False)
    db_uri: str = field(repr=False)
    log_level: str = "info"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read JWT and DB_URI (required) and LOG_LEVEL (default info)."""
    env = os.environ if environ is None else environ
    if not env.get("JWT"):
        raise ConfigError("JWTsecret variable is required")
    if not env.get("DB_URI"):
        raise ConfigError("DBuri variable is required")
    return Settings(env["JWT"], env["DB_URI"], env.get("LOG_LEVEL") or "info")