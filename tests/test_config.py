"""Tests for environment configuration."""

from pathlib import Path

import pytest

from launchpad.config import DEFAULT_CORS_ORIGINS, INSECURE_DEV_SECRET, load_config
from launchpad.core.exceptions import ConfigurationError

LP_VARS = (
    "LP_DB_PATH",
    "LP_REQUIRE_ADMIN",
    "LP_JWT_SECRET",
    "LP_CORS_ORIGINS",
    "LP_LOG_LEVEL",
    "LP_SEED_FILE",
    "LP_HOST",
    "LP_PORT",
    "LP_LLM_PROVIDER",
    "LP_LLM_MODEL",
    "LP_LLM_BASE_URL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with no LP_* variables set."""
    for name in LP_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        """Unset variables fall back to defaults."""
        config = load_config()
        assert config.db_path == Path("var/launchpad.db")
        assert config.require_admin is True
        assert config.jwt_secret == INSECURE_DEV_SECRET
        assert config.cors_origins == DEFAULT_CORS_ORIGINS
        assert config.port == 3105
        assert config.seed_file is None
        assert config.llm_provider == "gemini"

    def test_overrides(self, clean_env: pytest.MonkeyPatch) -> None:
        """Variables override the defaults."""
        clean_env.setenv("LP_DB_PATH", "/data/lp.db")
        clean_env.setenv("LP_REQUIRE_ADMIN", "off")
        clean_env.setenv("LP_CORS_ORIGINS", "https://a.example, https://b.example")
        clean_env.setenv("LP_LOG_LEVEL", "warning")
        clean_env.setenv("LP_PORT", "8080")
        clean_env.setenv("LP_SEED_FILE", "seed.yaml")
        config = load_config()
        assert config.db_path == Path("/data/lp.db")
        assert config.require_admin is False
        assert config.cors_origins == ["https://a.example", "https://b.example"]
        assert config.log_level == "WARNING"
        assert config.port == 8080
        assert config.seed_file == Path("seed.yaml")

    @pytest.mark.parametrize(
        "name, value",
        [
            ("LP_PORT", "eighty"),
            ("LP_PORT", "70000"),
            ("LP_LOG_LEVEL", "LOUD"),
            ("LP_LLM_PROVIDER", "palm"),
            ("LP_REQUIRE_ADMIN", "maybe"),
        ],
    )
    def test_invalid_values(self, clean_env: pytest.MonkeyPatch, name: str, value: str) -> None:
        """Invalid values name the offending variable."""
        clean_env.setenv(name, value)
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert exc_info.value.env_var == name
