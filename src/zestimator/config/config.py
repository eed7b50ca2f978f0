"""
Configuration management for Zestimator using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class HttpConfig(BaseModel):
    """HTTP transport configuration."""

    timeout: float = Field(default=20.0, gt=0, description="Per-request timeout in seconds.")
    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent override. Falls back to the UA environment variable, then to the rotation.",
    )
    accept: str = Field(
        default="text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
        description="Accept header sent with every request.",
    )
    accept_language: str = Field(default="en-US,en;q=0.9", description="Accept-Language header.")
    base_url: str = Field(default="https://www.zillow.com", description="Origin of the listing site.")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ExtractionSettings(BaseModel):
    """Configuration for the extraction engine."""

    bot_signatures: List[str] = Field(
        default=["captcha", "verify you are a human", "Please verify"],
        description="Case-sensitive substrings that identify a bot-check page.",
    )

    @field_validator("bot_signatures")
    @classmethod
    def validate_signatures(cls, v: List[str]) -> List[str]:
        if any(not signature for signature in v):
            raise ValueError("bot_signatures must not contain empty strings")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging output."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "Zestimator"
    http: HttpConfig = Field(default_factory=HttpConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="ZESTIMATOR_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "zestimator.yaml", current_dir / "zestimator.yml"):
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from an explicit path, a file in the cwd, or defaults."""
    if path is not None:
        return Config.from_yaml(path)
    found = find_config_file()
    if found is not None:
        return Config.from_yaml(found)
    return Config()
