"""
UI state management functionality for the main window.

This module renders a SessionState snapshot onto the main window widgets.
Widgets are never updated from anywhere else.
"""

import logging
from typing import TYPE_CHECKING

from core.conversion_state import ConversionState
from core.images import SourceImage
from core.session import SessionState
from gui.utils.styling import apply_banner_style

if TYPE_CHECKING:
    from gui.main_window import MainWindow

UPLOAD_PAGE = 0
PREVIEW_PAGE = 1

RESULT_PLACEHOLDER = "The processed image will appear here"
CONVERT_LABEL = "Remove background"
CONVERTING_LABEL = "Processing..."


class UIStateHandler:
    """Handles UI state rendering for the main window."""

    def __init__(self, main_window: "MainWindow") -> None:
        """Initialize the UI state handler."""
        self.main_window = main_window
        self._logger = logging.getLogger(__name__)
        self._shown_source: SourceImage | None = None

    def apply_state(self, state: SessionState) -> None:
        """Update every widget from a session snapshot."""
        window = self.main_window
        phase = state.phase
        self._logger.debug(f"Rendering phase {phase.name}")

        window.page_stack.setCurrentIndex(UPLOAD_PAGE if state.source is None else PREVIEW_PAGE)
        self._apply_previews(state)

        window.progress_bar.setVisible(state.in_flight)
        window.progress_label.setVisible(state.in_flight)

        if state.error:
            self.apply_banner(state.error, "error")
        else:
            self.apply_banner(window.notice, window.notice_status)

        window.footer.setVisible(state.source is not None)
        window.convert_button.setVisible(state.result is None)
        window.convert_button.setEnabled(state.source is not None and not state.in_flight)
        window.convert_button.setText(CONVERTING_LABEL if state.in_flight else CONVERT_LABEL)
        window.download_button.setVisible(phase is ConversionState.SUCCEEDED)
        window.download_button.setEnabled(phase is ConversionState.SUCCEEDED)

    def _apply_previews(self, state: SessionState) -> None:
        window = self.main_window

        if state.source is None:
            window.original_preview.clear_image()
        elif state.source is not self._shown_source:
            window.original_preview.set_image_data(state.source.data)
        self._shown_source = state.source

        if state.result is not None:
            window.result_preview.set_image_data(state.result.data)
        else:
            window.result_preview.clear_image()
        window.result_preview.set_placeholder("" if state.in_flight else RESULT_PLACEHOLDER)

    def apply_banner(self, message: str | None, status: str = "error") -> None:
        """Show or hide the inline banner. ``status`` is "error" or "warning"."""
        banner = self.main_window.error_banner
        if banner.property("status") != status:
            banner.setProperty("status", status)
            apply_banner_style(banner, status)
        banner.setText(message or "")
        banner.setVisible(bool(message))
