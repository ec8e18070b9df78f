from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from pathlib import Path
from typing import Any, Literal
from functools import lru_cache
from ..validators.config_validators import to_lowercase, parse_threshold


def _default_handlers() -> dict[str, dict[str, Any]]:
    return {"console": {"handles": ["emergency", "alert", "critical", "error", "warning", "notice", "info", "debug"]}}


class Settings(BaseSettings):
    """
    Logger settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Threshold: a single maximum rank ("4") or a JSON list of ranks/names ('["error", 8]')
    LOG_THRESHOLD: int | list[int | str] = 4
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # Ordered handler id -> handler config, as a JSON object. Key order is chain order.
    LOG_HANDLERS: dict[str, dict[str, Any]] = Field(default_factory=_default_handlers)

    # Keep dispatched records in memory (debug aid)
    LOG_CACHE: bool = False

    # File handler defaults
    LOG_DIR: Path = Path("logs")
    LOG_FILE_EXTENSION: str = "log"
    LOG_FILE_PERMISSIONS: int = 0o644
    LOG_FORMAT: Literal["text", "color", "json"] = "text"
    LOG_SERVICE_NAME: str = "logdispatch"

    # Roots replaced by APPPATH/, SYSTEMPATH/, FCPATH/ in logged file paths
    APP_PATH: Path | None = None
    SYSTEM_PATH: Path | None = None
    PUBLIC_PATH: Path | None = None

    # Sentry
    SENTRY_DSN: str | None = None

    # --- Validators ---
    @field_validator("ENV", "LOG_FORMAT", mode="before")
    def normalize_lowercase(cls, v: str | None) -> str | None:
        """
        Normalize ENV and LOG_FORMAT to lowercase before Literal validation, so
        "Production" or "JSON" in a .env file are accepted.
        """
        return to_lowercase(v)

    @field_validator("LOG_THRESHOLD", mode="before")
    def normalize_threshold(cls, v: Any) -> Any:
        """
        Accept comma separated thresholds ("error,critical") besides a rank or a JSON list.
        """
        return parse_threshold(v)

    # --- ConfigDict settings ---
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() is good for performance.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
