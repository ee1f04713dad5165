import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

from src.teams_api.errors import ConfigError


def _required_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigError(
            f"Missing required environment variable '{name}'. "
            "Set it in the service .env before starting the API."
        )
    return value


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _build_dsn(environ: Mapping[str, str]) -> str:
    """
    Build DSN from the database env vars.

    Uses:
      - DATABASE_URL (optional full DSN; if provided, it wins)
      - DB_HOST, DB_PORT, DB_USER, DB_PASS, DB_NAME
    """
    url = environ.get("DATABASE_URL")
    if url:
        return url

    user = _required_env(environ, "DB_USER")
    password = _required_env(environ, "DB_PASS")
    name = _required_env(environ, "DB_NAME")
    host = environ.get("DB_HOST", "localhost")
    port = environ.get("DB_PORT", "5432")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    database_dsn: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60
    pool_min: int = 1
    pool_max: int = 10
    init_schema: bool = True
    expose_error_details: bool = False


# PUBLIC_INTERFACE
def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment. Raises ConfigError for anything required that is missing."""
    env = os.environ if environ is None else environ

    return Settings(
        database_dsn=_build_dsn(env),
        # No fallback signing secret.
        jwt_secret=_required_env(env, "JWT_SECRET_KEY"),
        jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
        jwt_expires_minutes=int(env.get("JWT_EXPIRES_MINUTES", "60")),
        pool_min=int(env.get("DB_POOL_MIN", "1")),
        pool_max=int(env.get("DB_POOL_MAX", "10")),
        init_schema=_flag(env, "DB_INIT_SCHEMA", True),
        expose_error_details=_flag(env, "EXPOSE_ERROR_DETAILS", False),
    )


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()
