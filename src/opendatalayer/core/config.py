"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

_LOG_FORMATS = ("json", "console")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class SourceConfig(BaseModel):
    name: str
    version: str = "0.0.0"


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level data layer settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    source: SourceConfig | None = None
    context: dict[str, Any] = Field(default_factory=dict)  # Initial ambient context
    debug: bool = False  # Register the debug plugin
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "ODL_", "env_nested_delimiter": "__"}

    def validate_logging(self) -> None:
        """Reject log formats and levels that ``setup_logging`` cannot honour."""
        from .errors import ConfigError

        fmt = self.observability.log_format
        if fmt not in _LOG_FORMATS:
            raise ConfigError(
                f"Unknown log format {fmt!r}; expected one of {', '.join(_LOG_FORMATS)}."
            )
        level = self.observability.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(
                f"Unknown log level {self.observability.log_level!r}."
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    settings = Settings(**data)
    settings.validate_logging()
    return settings
