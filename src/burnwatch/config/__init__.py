"""
Burnwatch - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    BurnwatchConfig,
    Environment,
    LogLevel,
    MonitorSettings,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "BurnwatchConfig",
    # Enums
    "Environment",
    "LogLevel",
    # Config sections
    "MonitorSettings",
]
