"""
Configuration manager for the Background Remover GUI.

Provides QSettings-backed configuration management with default fallbacks
and type safety.
"""

import logging
from typing import Any

from PySide6.QtCore import QSettings

from .config import DEFAULT_CONFIG, setup_qsettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    QSettings-backed configuration manager with robust defaults.

    Provides type-safe access to configuration values with automatic
    fallback to defaults when keys are missing or have invalid types.
    """

    def __init__(self) -> None:
        """Initialize the ConfigManager with QSettings."""
        setup_qsettings()
        self._settings = QSettings()
        self._defaults = DEFAULT_CONFIG.copy()

    def get(self, key: str, default: Any | None = None) -> Any:
        """
        Get a configuration value with fallback to defaults.

        Args:
            key: Configuration key
            default: Override default value (if None, uses DEFAULT_CONFIG)

        Returns:
            Configuration value with type coercion and default fallback
        """
        fallback = default if default is not None else self._defaults.get(key)
        value = self._settings.value(key, fallback)

        if fallback is not None:
            try:
                expected_type = type(fallback)
                if expected_type is bool:
                    # QSettings returns strings for booleans on some backends
                    value = value.lower() in ("true", "1", "yes", "on") if isinstance(value, str) else bool(value)
                elif expected_type in (int, float, str):
                    value = expected_type(value)
                elif not isinstance(value, expected_type):
                    logger.warning(f"Config key '{key}' has unexpected type, using default")
                    value = fallback
            except (ValueError, TypeError) as e:
                logger.warning(f"Failed to coerce config key '{key}': {e}, using default")
                value = fallback

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value and persist it immediately."""
        self._settings.setValue(key, value)
        self._settings.sync()

    def load_all(self) -> dict[str, Any]:
        """
        Load all configuration values merged with defaults.

        Returns:
            Dictionary with all configuration keys, using stored values
            where available and defaults for missing keys
        """
        config = self._defaults.copy()
        for key in config:
            stored_value = self.get(key)
            if stored_value is not None:
                config[key] = stored_value
        return config

    def reset_to_defaults(self) -> None:
        """Clear all stored settings and revert to defaults."""
        self._settings.clear()
        self._settings.sync()
        logger.info("Configuration reset to defaults")

    def has_key(self, key: str) -> bool:
        """Check if a configuration key exists in storage."""
        return self._settings.contains(key)

    def remove_key(self, key: str) -> None:
        """Remove a configuration key from storage."""
        self._settings.remove(key)
        self._settings.sync()
