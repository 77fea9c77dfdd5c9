"""
Main window for the Background Remover GUI application.

This module contains the MainWindow class which provides the main
user interface for the application.
"""

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from core.config import ServiceConfig
from core.config_manager import ConfigManager
from core.error_handler import get_error_handler
from core.errors import PreconditionError
from core.remote_client import RemoteConversionClient
from core.session import ConversionClient, SessionController, SessionState
from core.threading import ConversionController
from gui.handlers.file_handler import FileHandler
from gui.handlers.output_handler import OutputHandler
from gui.handlers.ui_state_handler import UIStateHandler
from gui.utils.styling import apply_banner_style, apply_button_style
from gui.widgets.drag_drop import DragDropLabel
from gui.widgets.image_preview import ImagePreview

WINDOW_TITLE = "AI Background Remover"

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window.

    Shows the drop zone until an image is loaded, then the original and
    processed previews with the Start over / Remove background / Download
    actions.
    """

    def __init__(
        self,
        client: ConversionClient | None = None,
        config_manager: ConfigManager | None = None,
    ) -> None:
        """Initialize the main window."""
        super().__init__()

        self.config_manager = config_manager or ConfigManager()
        self.error_handler = get_error_handler()
        if client is None:
            client = RemoteConversionClient(ServiceConfig.from_sources(self.config_manager))

        self.session = SessionController(client)
        self.conversion_controller = ConversionController(client, self.session, parent=self)
        self.notice: str | None = None
        self.notice_status = "error"

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(720, 760)
        self._setup_ui()

        self.file_handler = FileHandler(self)
        self.output_handler = OutputHandler(self)
        self.ui_state_handler = UIStateHandler(self)

        self._connect_signals()
        self.ui_state_handler.apply_state(self.session.state)

    def _setup_ui(self) -> None:
        """Build the widget tree."""
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self.title_label = QLabel(WINDOW_TITLE)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setStyleSheet("font-size: 22px; font-weight: bold;")
        layout.addWidget(self.title_label)

        self.page_stack = QStackedWidget()
        self.page_stack.addWidget(self._build_upload_page())
        self.page_stack.addWidget(self._build_preview_page())
        layout.addWidget(self.page_stack, 1)

        self.error_banner = QLabel()
        self.error_banner.setObjectName("errorBanner")
        self.error_banner.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_banner.setWordWrap(True)
        self.error_banner.setAccessibleName("Error message")
        apply_banner_style(self.error_banner)
        layout.addWidget(self.error_banner)

        self.footer = QWidget()
        footer_layout = QHBoxLayout(self.footer)
        footer_layout.setContentsMargins(0, 0, 0, 0)
        footer_layout.setSpacing(12)

        self.reset_button = QPushButton("Start over")
        self.reset_button.setAccessibleName("Start over")
        apply_button_style(self.reset_button, "secondary")
        footer_layout.addWidget(self.reset_button)

        self.convert_button = QPushButton()
        apply_button_style(self.convert_button, "primary")
        footer_layout.addWidget(self.convert_button, 1)

        self.download_button = QPushButton("Download")
        apply_button_style(self.download_button, "success")
        footer_layout.addWidget(self.download_button, 1)

        layout.addWidget(self.footer)
        self.setCentralWidget(central)

    def _build_upload_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)

        self.drag_drop_label = DragDropLabel()
        layout.addWidget(self.drag_drop_label, 1)

        self.browse_button = QPushButton("Browse...")
        apply_button_style(self.browse_button, "primary")
        layout.addWidget(self.browse_button, 0, Qt.AlignmentFlag.AlignHCenter)
        return page

    def _build_preview_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)

        layout.addWidget(QLabel("Original"))
        self.original_preview = ImagePreview()
        layout.addWidget(self.original_preview, 1)

        layout.addWidget(QLabel("Result"))
        self.result_preview = ImagePreview(checkerboard=True)
        layout.addWidget(self.result_preview, 1)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 0)  # Indeterminate
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.progress_label = QLabel("Processing...")
        self.progress_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.progress_label)
        return page

    def _connect_signals(self) -> None:
        """Connect UI signals to their handlers."""
        self.browse_button.clicked.connect(self.file_handler.on_browse_clicked)
        self.drag_drop_label.browseRequested.connect(self.file_handler.on_browse_clicked)
        self.drag_drop_label.fileAccepted.connect(self.file_handler.on_file_accepted)
        self.drag_drop_label.fileRejected.connect(self.file_handler.on_file_rejected)

        self.convert_button.clicked.connect(self.on_convert_clicked)
        self.reset_button.clicked.connect(self.on_reset_clicked)
        self.download_button.clicked.connect(self.output_handler.on_download_clicked)

        self.conversion_controller.stateChanged.connect(self._on_state_changed)
        self.conversion_controller.conversionFailed.connect(self._on_conversion_failed)

    def _on_state_changed(self, state: SessionState) -> None:
        self.notice = None
        self.ui_state_handler.apply_state(state)

    def _on_conversion_failed(self, error: Exception) -> None:
        self.error_handler.handle(error, {"source": "conversion"})

    def show_notice(self, message: str, status: str = "error") -> None:
        """
        Show a message in the banner until the next state change.

        Refused actions use the "warning" status; failures use "error".
        """
        self.notice = message
        self.notice_status = status
        self.ui_state_handler.apply_banner(message, status)

    def on_convert_clicked(self) -> None:
        """Handle Remove background button click."""
        try:
            self.conversion_controller.start_conversion()
        except PreconditionError as e:
            self.show_notice(e.user_message, "warning")

    def on_reset_clicked(self) -> None:
        """Handle Start over button click."""
        self.session.reset()
        self.drag_drop_label.reset()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Wait for an in-flight conversion before closing."""
        self.conversion_controller.shutdown()
        super().closeEvent(event)
