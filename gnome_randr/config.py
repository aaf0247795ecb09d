"""
Configuration Management
========================
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass

import yaml

from .transport import DEFAULT_TIMEOUT_MS

logger = logging.getLogger(__name__)


@dataclass
class DBusSettings:
    """Connection settings for the compositor."""
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass
class ApplySettings:
    """Defaults for `modify`."""
    persistent: bool = False
    strict: bool = False


@dataclass
class LoggingSettings:
    """Optional log file, in addition to stderr."""
    file: Optional[Path] = None


class Config:
    """
    Tool settings for gnome-randr.

    Only defaults for the command line live here; display layouts themselves
    are never stored.
    """

    DEFAULT_CONFIG_PATH = Path.home() / ".config" / "gnome-randr" / "config.yaml"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to configuration file, or None for default
        """
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self._data: Dict[str, Any] = {}

        self.dbus = DBusSettings()
        self.apply = ApplySettings()
        self.logging = LoggingSettings()

    def load(self) -> bool:
        """
        Load configuration from file.

        Settings keep their defaults when the file is missing or unreadable.

        Returns:
            True if configuration was loaded successfully
        """
        if not self.config_path.exists():
            logger.debug(f"Configuration file not found: {self.config_path}")
            return False

        try:
            with open(self.config_path, 'r') as f:
                self._data = yaml.safe_load(f) or {}
            self._parse_config()
            logger.info(f"Loaded configuration from {self.config_path}")
            return True

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse configuration: {e}")
            return False
        except (OSError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def _parse_config(self):
        """Parse loaded configuration data into typed objects."""
        dbus = self._data.get('dbus') or {}
        self.dbus = DBusSettings(
            timeout_ms=int(dbus.get('timeout_ms', DEFAULT_TIMEOUT_MS)),
        )

        apply = self._data.get('apply') or {}
        self.apply = ApplySettings(
            persistent=bool(apply.get('persistent', False)),
            strict=bool(apply.get('strict', False)),
        )

        log = self._data.get('logging') or {}
        log_file = log.get('file')
        self.logging = LoggingSettings(
            file=Path(log_file).expanduser() if log_file else None,
        )
