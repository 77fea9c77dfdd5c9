"""
File handling functionality for the main window.

This module contains methods for handling image selection from the file
browser and from drag and drop.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog

from core.config import get_default_documents_dir
from core.errors import BaseAppError, PreconditionError
from core.image_utils import read_source_image

if TYPE_CHECKING:
    from gui.main_window import MainWindow

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.webp);;All Files (*)"


class FileHandler:
    """Handles file-related operations for the main window."""

    def __init__(self, main_window: "MainWindow") -> None:
        """Initialize the file handler."""
        self.main_window = main_window
        self._logger = logging.getLogger(__name__)

    def on_browse_clicked(self) -> None:
        """Open the file browser and load the chosen image."""
        last_dir = self.main_window.config_manager.get("last_open_dir") or get_default_documents_dir()

        file_path, _ = QFileDialog.getOpenFileName(self.main_window, "Select Image", last_dir, IMAGE_FILE_FILTER)
        if file_path:
            self.main_window.config_manager.set("last_open_dir", str(Path(file_path).parent))
            self.load_file(file_path)

    def on_file_accepted(self, file_path: str) -> None:
        """Handle accepted file from drag and drop."""
        self.load_file(file_path)

    def on_file_rejected(self, error_message: str) -> None:
        """Handle rejected drop from drag and drop."""
        self._logger.warning(f"File rejected: {error_message}")

    def load_file(self, file_path: str) -> bool:
        """
        Read a file and hand it to the session.

        A rejected file leaves the currently loaded image untouched and shows
        the reason in the error banner.

        Returns:
            True if the file was loaded
        """
        try:
            source = read_source_image(file_path)
        except OSError as e:
            app_error = self.main_window.error_handler.handle(e, {"file": file_path})
            self.main_window.show_notice(self.main_window.error_handler.to_user_message(app_error))
            return False

        try:
            self.main_window.session.select_file(source.data, source.mime_type, source.filename)
        except BaseAppError as e:
            self._logger.info(f"Image not loaded: {e.technical_message or e.user_message}")
            status = "warning" if isinstance(e, PreconditionError) else "error"
            self.main_window.show_notice(e.user_message, status)
            return False

        self._logger.info(f"Image selected: {file_path}")
        return True
