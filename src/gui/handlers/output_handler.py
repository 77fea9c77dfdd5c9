"""
Output handling functionality for the main window.

This module contains the download flow: packaging the processed image and
saving it where the user chooses.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog

from core.config import get_default_documents_dir
from core.errors import PreconditionError
from core.images import DownloadArtifact

if TYPE_CHECKING:
    from gui.main_window import MainWindow

PNG_FILE_FILTER = "PNG Image (*.png);;All Files (*)"


class OutputHandler:
    """Handles saving processed images for the main window."""

    def __init__(self, main_window: "MainWindow") -> None:
        """Initialize the output handler."""
        self.main_window = main_window
        self._logger = logging.getLogger(__name__)

    def on_download_clicked(self) -> None:
        """Ask where to save the processed image and write it."""
        try:
            artifact = self.main_window.session.download()
        except PreconditionError as e:
            self.main_window.show_notice(e.user_message, "warning")
            return

        last_dir = self.main_window.config_manager.get("last_save_dir") or get_default_documents_dir()
        suggested = str(Path(last_dir) / artifact.filename)

        file_path, _ = QFileDialog.getSaveFileName(self.main_window, "Save Image", suggested, PNG_FILE_FILTER)
        if file_path:
            self.save_artifact(artifact, file_path)

    def save_artifact(self, artifact: DownloadArtifact, file_path: str) -> Path | None:
        """
        Write the artifact and remember the folder for next time.

        Returns:
            The written path, or None if writing failed
        """
        try:
            written = artifact.save(file_path)
        except OSError as e:
            app_error = self.main_window.error_handler.handle(e, {"file": file_path})
            self.main_window.show_notice(self.main_window.error_handler.to_user_message(app_error))
            return None

        self.main_window.config_manager.set("last_save_dir", str(written.parent))
        self.main_window.statusBar().showMessage(f"Saved {written.name}", 5000)
        self._logger.info(f"Saved processed image to {written}")
        return written
