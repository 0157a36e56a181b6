"""
Burnwatch - Configuration Schemas

Defines typed runtime settings using Pydantic for validation and type safety.
All settings are validated at startup; the budget configuration produced by
the setup flow lives separately in budget.config.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..budget.store import DEFAULT_CONFIG_PATH


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MonitorSettings(BaseModel):
    """Usage monitor settings."""

    refresh_interval: float = Field(default=300.0, gt=0.0, description="Seconds between fetch cycles")
    package_spec: str = Field(default="ccusage@latest", min_length=1, description="Package passed to npx")
    offline: bool = Field(default=True, description="Pass --offline to the report tool")
    npx_path: str | None = Field(default=None, description="Explicit npx path, checked before the search")
    daily_window_days: int = Field(default=30, ge=1, le=30, description="Trailing days in the daily series")
    weekly_window_days: int = Field(default=364, ge=1, le=364, description="Trailing days in the weekly report")

    @field_validator("npx_path")
    @classmethod
    def expand_npx_path(cls, v: str | None) -> str | None:
        """Expand ~ in an explicit npx path."""
        if v:
            return str(Path(v).expanduser())
        return None


class BurnwatchConfig(BaseModel):
    """Root configuration for Burnwatch."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    config_path: str = Field(default=str(DEFAULT_CONFIG_PATH), description="Budget config JSON path")

    monitor: MonitorSettings = Field(default_factory=MonitorSettings)

    @field_validator("config_path")
    @classmethod
    def expand_config_path(cls, v: str) -> str:
        return str(Path(v).expanduser())

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
