"""
Configuration management for the Background Remover GUI.

This module provides the settings schema and defaults, application
directories, and the assembly of the remote service configuration that is
injected into the conversion client.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QCoreApplication, QStandardPaths

if TYPE_CHECKING:
    from .config_manager import ConfigManager

# Application identifiers for QSettings
APP_ORGANIZATION = "BackgroundRemover"
APP_NAME = "GUI"

# Environment variable holding the image service credential
API_KEY_ENV_VAR = "API_KEY"

DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_INSTRUCTION = "Remove the background and make it transparent. Output the image only."

# Default configuration with all supported keys and JSON-serializable types
DEFAULT_CONFIG: dict[str, Any] = {
    # Service settings
    "model": DEFAULT_MODEL,
    "api_base_url": DEFAULT_API_BASE_URL,
    "instruction": DEFAULT_INSTRUCTION,
    # Debug settings
    "log_level": "INFO",  # Options: "DEBUG", "INFO", "WARNING", "ERROR"
    # UI state
    "last_open_dir": "",
    "last_save_dir": "",
}


@dataclass(frozen=True)
class ServiceConfig:
    """
    Settings for the remote image service.

    The credential may be missing; that is only an error when a conversion is
    attempted.
    """

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_API_BASE_URL
    instruction: str = DEFAULT_INSTRUCTION

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def __repr__(self) -> str:
        key = "set" if self.api_key else "missing"
        return f"ServiceConfig(model={self.model!r}, base_url={self.base_url!r}, api_key={key})"

    @classmethod
    def from_sources(
        cls,
        config_manager: ConfigManager | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ServiceConfig:
        """
        Build the service configuration from persisted settings and the environment.

        Args:
            config_manager: Source of model, base URL and instruction (defaults used if None)
            environ: Environment mapping to read the credential from (os.environ if None)

        Returns:
            ServiceConfig ready to inject into a RemoteConversionClient
        """
        environ = os.environ if environ is None else environ
        api_key = (environ.get(API_KEY_ENV_VAR) or "").strip() or None

        if config_manager is None:
            return cls(api_key=api_key)

        return cls(
            api_key=api_key,
            model=config_manager.get("model") or DEFAULT_MODEL,
            base_url=config_manager.get("api_base_url") or DEFAULT_API_BASE_URL,
            instruction=config_manager.get("instruction") or DEFAULT_INSTRUCTION,
        )


def get_app_config_dir() -> Path:
    """
    Get the application configuration directory using QStandardPaths.

    Returns:
        Path to the writable configuration directory for this application
    """
    config_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.ConfigLocation)
    return Path(config_location) / APP_ORGANIZATION / APP_NAME


def get_default_documents_dir() -> str:
    """
    Get the default directory for file dialogs.

    Returns:
        Path to the user's Pictures directory, then Documents, or the current working directory
    """
    for location in (
        QStandardPaths.StandardLocation.PicturesLocation,
        QStandardPaths.StandardLocation.DocumentsLocation,
    ):
        candidate = QStandardPaths.writableLocation(location)
        if candidate and Path(candidate).exists():
            return candidate
    return str(Path.cwd())


def setup_qsettings() -> None:
    """
    Configure QSettings with application identifiers.

    This should be called early in application startup to ensure
    QSettings uses the correct organization and application names.
    """
    QCoreApplication.setOrganizationName(APP_ORGANIZATION)
    QCoreApplication.setApplicationName(APP_NAME)
