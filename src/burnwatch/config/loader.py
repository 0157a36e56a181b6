"""
Burnwatch - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a shared configuration instance for the server entrypoint; the
monitor itself receives its settings explicitly.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..budget.store import DEFAULT_CONFIG_PATH
from ..errors import ConfigurationError
from .schemas import BurnwatchConfig

logger = logging.getLogger(__name__)

_config_instance: BurnwatchConfig | None = None


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> BurnwatchConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated BurnwatchConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "config_path": os.getenv("BURNWATCH_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)),
            "monitor": {
                "refresh_interval": float(os.getenv("BURNWATCH_REFRESH_INTERVAL", "300")),
                "package_spec": os.getenv("BURNWATCH_PACKAGE", "ccusage@latest"),
                "offline": _env_bool("BURNWATCH_OFFLINE", "true"),
                "npx_path": os.getenv("BURNWATCH_NPX_PATH") or None,
                "daily_window_days": int(os.getenv("BURNWATCH_DAILY_DAYS", "30")),
                "weekly_window_days": int(os.getenv("BURNWATCH_WEEKLY_DAYS", "364")),
            },
        }
    except ValueError as e:
        logger.error(f"Invalid numeric environment value: {e}", exc_info=True)
        raise ConfigurationError(
            f"Invalid numeric environment value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = BurnwatchConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={
                "environment": _config_instance.environment,
                "refresh_interval": _config_instance.monitor.refresh_interval,
            },
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> BurnwatchConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current BurnwatchConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> BurnwatchConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded BurnwatchConfig instance
    """
    return load_config(env_file=env_file, reload=True)
