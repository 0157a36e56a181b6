"""
Budget Config Store

Loads and saves the persisted budget configuration as JSON.
Failures never raise: they flag that setup is needed and keep whatever
configuration was already in memory.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from .config import BudgetConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "burnwatch" / "config.json"


class ConfigStore:
    """
    Holder for the active budget configuration.

    The configuration is replaced wholesale on save; callers read
    `config` and `needs_setup` after each operation.
    """

    def __init__(self, path: str | Path | None = None):
        """
        Initialize config store.

        Args:
            path: JSON file location (default: ~/.config/burnwatch/config.json)
        """
        self.path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH
        self.config: BudgetConfig | None = None
        self.needs_setup: bool = True

    def load(self) -> BudgetConfig | None:
        """
        Load configuration from disk.

        Returns:
            Loaded configuration, or None if setup is needed
        """
        if not self.path.exists():
            logger.info(f"No budget config at {self.path}, setup required")
            self.needs_setup = True
            return None

        try:
            decoded = BudgetConfig.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(
                f"Failed to read budget config from {self.path}: {e}",
                extra={"path": str(self.path)},
            )
            self.needs_setup = True
            return None

        self.config = decoded
        self.needs_setup = False
        logger.debug(f"Budget config loaded: plan={decoded.plan.value}")
        return decoded

    def save(self, new_config: BudgetConfig) -> bool:
        """
        Persist a new configuration and make it active.

        Args:
            new_config: Configuration to store

        Returns:
            True if written, False if the write failed (prior config kept)
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(new_config.to_json(), encoding="utf-8")
        except OSError as e:
            logger.error(
                f"Failed to write budget config to {self.path}: {e}",
                extra={"path": str(self.path), "error": str(e)},
            )
            self.needs_setup = True
            return False

        self.config = new_config
        self.needs_setup = False
        logger.info(f"Budget config saved: plan={new_config.plan.value}")
        return True

    def show_setup(self) -> None:
        self.needs_setup = True
