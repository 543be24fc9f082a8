"""
Configuration loaded from LP_* environment variables.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

from launchpad.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_LLM_PROVIDERS = {"gemini", "anthropic", "openai"}

INSECURE_DEV_SECRET = "change-this-secret-in-production"


class LauncherConfig(BaseModel):
    """Runtime configuration for the API, CLI and chat relay."""

    db_path: Path = Path("var/launchpad.db")
    require_admin: bool = True
    jwt_secret: str = INSECURE_DEV_SECRET
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"
    seed_file: Path | None = None
    host: str = "127.0.0.1"
    port: int = 3105
    llm_provider: str = "gemini"
    llm_model: str | None = None
    llm_base_url: str | None = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{raw}'", env_var=name)


def load_config() -> LauncherConfig:
    """
    Build configuration from the environment.

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    port_raw = os.getenv("LP_PORT", "3105")
    try:
        port = int(port_raw)
    except ValueError:
        raise ConfigurationError(f"LP_PORT must be an integer, got '{port_raw}'", env_var="LP_PORT")
    if not 0 < port < 65536:
        raise ConfigurationError(f"LP_PORT out of range: {port}", env_var="LP_PORT")

    log_level = os.getenv("LP_LOG_LEVEL", "INFO").upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(f"Unknown LP_LOG_LEVEL: {log_level}", env_var="LP_LOG_LEVEL")

    provider = os.getenv("LP_LLM_PROVIDER", "gemini").lower()
    if provider not in _LLM_PROVIDERS:
        raise ConfigurationError(f"Unknown LP_LLM_PROVIDER: {provider}", env_var="LP_LLM_PROVIDER")

    jwt_secret = os.getenv("LP_JWT_SECRET", "")
    if not jwt_secret:
        logger.warning(
            "LP_JWT_SECRET environment variable not set. "
            "Using default secret key (INSECURE - set LP_JWT_SECRET in production!)"
        )
        jwt_secret = INSECURE_DEV_SECRET

    origins_raw = os.getenv("LP_CORS_ORIGINS")
    cors_origins = (
        [o.strip() for o in origins_raw.split(",") if o.strip()]
        if origins_raw
        else list(DEFAULT_CORS_ORIGINS)
    )

    seed_file = os.getenv("LP_SEED_FILE")

    return LauncherConfig(
        db_path=Path(os.getenv("LP_DB_PATH", "var/launchpad.db")),
        require_admin=_env_bool("LP_REQUIRE_ADMIN", True),
        jwt_secret=jwt_secret,
        cors_origins=cors_origins,
        log_level=log_level,
        seed_file=Path(seed_file) if seed_file else None,
        host=os.getenv("LP_HOST", "127.0.0.1"),
        port=port,
        llm_provider=provider,
        llm_model=os.getenv("LP_LLM_MODEL") or None,
        llm_base_url=os.getenv("LP_LLM_BASE_URL") or None,
    )


@lru_cache(maxsize=1)
def get_config() -> LauncherConfig:
    """Get the process configuration (cached)."""
    return load_config()
