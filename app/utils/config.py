"""
Configuration management for Screen Scribe.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from pathlib import Path
from typing import Literal, get_args

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domains.screen_ingest.errors import StartupConfigError


DEFAULT_PROMPT_TEMPLATE = "Очень кратко объясни суть решения задачи и напиши код на GO:\n"
LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS = get_args(LogLevel)


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Directories
    input_dir: Path
    output_dir: Path

    # Credentials
    ocr_api_key: str
    gemini_api_key: str

    # OCR Configuration
    ocr_url: str = "https://api.ocr.space/parse/image"
    ocr_language: str = "rus"
    ocr_timeout_seconds: float = 30.0

    # Gemini Configuration
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash"
    generation_timeout_seconds: float = 60.0
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE

    # Watcher Configuration
    poll_interval: float = 0.1  # seconds
    watch_mode: Literal["poll", "events"] = "poll"
    events_fallback_interval: float = 5.0  # seconds, rescan interval in events mode
    suffix_case_sensitive: bool = True

    # Artifact Configuration
    artifact_naming: Literal["constant", "source"] = "constant"
    artifact_name: str = "result"

    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("input_dir", "output_dir")
    @classmethod
    def _expand_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("ocr_api_key", "gemini_api_key", "artifact_name")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("poll_interval", "events_fallback_interval", "ocr_timeout_seconds", "generation_timeout_seconds")
    @classmethod
    def _require_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    def gemini_endpoint(self) -> str:
        """Full generateContent URL for the configured model."""
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"


def load_settings(**overrides) -> Settings:
    """
    Build a fresh Settings instance.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Validated settings

    Raises:
        StartupConfigError: If required values are missing or malformed
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise StartupConfigError(f"Invalid configuration: {problems}") from e
