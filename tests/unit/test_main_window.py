"""
Tests for the MainWindow class.
"""

import threading
from unittest.mock import Mock, patch

import pytest
from PySide6.QtCore import Qt

from core.conversion_state import ConversionState
from core.errors import ConfigurationError
from core.images import ConversionResult, SourceImage
from gui.handlers.ui_state_handler import PREVIEW_PAGE, RESULT_PLACEHOLDER, UPLOAD_PAGE
from gui.main_window import WINDOW_TITLE, MainWindow
from gui.utils.styling import AccessiblePalette
from gui.widgets.drag_drop import DragDropLabel


class EchoClient:
    def convert(self, source: SourceImage) -> ConversionResult:
        return ConversionResult(data=source.data, mime_type="image/png")


class FailingClient:
    def __init__(self, error: Exception):
        self.error = error

    def convert(self, source: SourceImage) -> ConversionResult:
        raise self.error


class BlockingClient:
    def __init__(self):
        self.release = threading.Event()

    def convert(self, source: SourceImage) -> ConversionResult:
        self.release.wait(timeout=5)
        return ConversionResult(data=source.data, mime_type="image/png")


@pytest.fixture
def config_manager():
    manager = Mock()
    manager.get.return_value = ""
    return manager


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


def make_window(qtbot, config_manager, client=None) -> MainWindow:
    window = MainWindow(client=client or EchoClient(), config_manager=config_manager)
    qtbot.addWidget(window)
    return window


def convert(qtbot, window: MainWindow) -> None:
    with qtbot.waitSignal(window.conversion_controller.conversionFinished, timeout=5000):
        window.convert_button.click()


class TestMainWindowInitialization:
    """Test MainWindow initialization and setup."""

    def test_window_properties(self, qtbot, config_manager):
        """Test that window properties are set correctly."""
        window = make_window(qtbot, config_manager)

        assert window.windowTitle() == WINDOW_TITLE
        assert window.size().width() == 720
        assert window.size().height() == 760
        assert isinstance(window.drag_drop_label, DragDropLabel)

    def test_initial_state(self, qtbot, config_manager):
        """Test that the window starts on the upload page."""
        window = make_window(qtbot, config_manager)

        assert window.page_stack.currentIndex() == UPLOAD_PAGE
        assert window.footer.isHidden()
        assert window.error_banner.isHidden()
        assert window.session.phase == ConversionState.IDLE

    def test_default_client_uses_environment(self, qtbot, config_manager, monkeypatch):
        """Test that the remote client is built when none is given."""
        monkeypatch.setenv("API_KEY", "from-env")

        window = MainWindow(config_manager=config_manager)
        qtbot.addWidget(window)

        assert window.session.client.config.api_key == "from-env"


class TestImageSelection:
    """Test loading images into the window."""

    def test_load_image(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager)

        assert window.file_handler.load_file(str(image_file))

        assert window.page_stack.currentIndex() == PREVIEW_PAGE
        assert window.original_preview.has_image()
        assert not window.result_preview.has_image()
        assert window.result_preview.text() == RESULT_PLACEHOLDER
        assert not window.footer.isHidden()
        assert window.convert_button.isEnabled()
        assert window.download_button.isHidden()

    def test_drop_image(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager)

        window.drag_drop_label.fileAccepted.emit(str(image_file))

        assert window.session.state.source.filename == "photo.png"

    def test_non_image_shows_banner(self, qtbot, config_manager, tmp_path):
        window = make_window(qtbot, config_manager)
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")

        assert not window.file_handler.load_file(str(notes))

        assert window.session.phase == ConversionState.IDLE
        assert not window.error_banner.isHidden()
        assert window.error_banner.text() == "Please choose a valid image file."
        assert AccessiblePalette.ERROR_BG in window.error_banner.styleSheet()

    def test_non_image_keeps_loaded_image(self, qtbot, config_manager, image_file, tmp_path):
        window = make_window(qtbot, config_manager)
        window.file_handler.load_file(str(image_file))
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")

        window.file_handler.load_file(str(notes))

        assert window.session.state.source.filename == "photo.png"
        assert window.page_stack.currentIndex() == PREVIEW_PAGE

    def test_missing_file_shows_banner(self, qtbot, config_manager, tmp_path):
        window = make_window(qtbot, config_manager)

        assert not window.file_handler.load_file(str(tmp_path / "gone.png"))

        assert not window.error_banner.isHidden()

    def test_browse(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager)

        with patch("gui.handlers.file_handler.QFileDialog.getOpenFileName", return_value=(str(image_file), "")):
            window.browse_button.click()

        assert window.session.phase == ConversionState.READY
        config_manager.set.assert_called_with("last_open_dir", str(image_file.parent))

    def test_browse_cancelled(self, qtbot, config_manager):
        window = make_window(qtbot, config_manager)

        with patch("gui.handlers.file_handler.QFileDialog.getOpenFileName", return_value=("", "")):
            window.file_handler.on_browse_clicked()

        assert window.session.phase == ConversionState.IDLE
        config_manager.set.assert_not_called()


class TestConversionFlow:
    """Test the convert, download and reset actions."""

    def test_successful_conversion(self, qtbot, config_manager, image_file, png_bytes):
        window = make_window(qtbot, config_manager)
        window.file_handler.load_file(str(image_file))

        convert(qtbot, window)

        assert window.session.phase == ConversionState.SUCCEEDED
        assert window.session.state.result.data == png_bytes
        assert window.result_preview.has_image()
        assert window.convert_button.isHidden()
        assert not window.download_button.isHidden()
        assert window.error_banner.isHidden()

    def test_controls_while_processing(self, qtbot, config_manager, image_file):
        client = BlockingClient()
        window = make_window(qtbot, config_manager, client)
        window.file_handler.load_file(str(image_file))

        with qtbot.waitSignal(window.conversion_controller.conversionFinished, timeout=5000):
            window.convert_button.click()

            assert not window.convert_button.isEnabled()
            assert window.convert_button.text() == "Processing..."
            assert not window.progress_bar.isHidden()
            assert window.reset_button.isEnabled()
            client.release.set()

        assert window.progress_bar.isHidden()

    def test_failed_conversion_shows_banner(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager, FailingClient(ConfigurationError("API_KEY")))
        window.file_handler.load_file(str(image_file))

        with qtbot.waitSignal(window.error_handler.errorOccurred, timeout=5000):
            convert(qtbot, window)

        assert window.session.phase == ConversionState.FAILED
        assert "API_KEY" in window.error_banner.text()
        assert not window.error_banner.isHidden()
        assert window.original_preview.has_image()
        assert window.convert_button.isEnabled()

    def test_convert_without_image(self, qtbot, config_manager):
        window = make_window(qtbot, config_manager)

        window.on_convert_clicked()

        assert window.error_banner.text() == "Please choose an image first."
        assert AccessiblePalette.WARNING_BG in window.error_banner.styleSheet()

    def test_failure_after_warning_uses_error_style(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager, FailingClient(ConfigurationError("API_KEY")))
        window.on_convert_clicked()
        assert AccessiblePalette.WARNING_BG in window.error_banner.styleSheet()
        window.file_handler.load_file(str(image_file))

        convert(qtbot, window)

        assert "API_KEY" in window.error_banner.text()
        assert AccessiblePalette.ERROR_BG in window.error_banner.styleSheet()

    def test_reset(self, qtbot, config_manager, image_file):
        window = make_window(qtbot, config_manager)
        window.file_handler.load_file(str(image_file))
        convert(qtbot, window)

        window.reset_button.click()

        assert window.session.phase == ConversionState.IDLE
        assert window.page_stack.currentIndex() == UPLOAD_PAGE
        assert window.footer.isHidden()
        assert not window.original_preview.has_image()

    def test_download(self, qtbot, config_manager, image_file, png_bytes, tmp_path):
        window = make_window(qtbot, config_manager)
        window.file_handler.load_file(str(image_file))
        convert(qtbot, window)
        target = tmp_path / "out" / "saved.png"
        target.parent.mkdir()

        with patch(
            "gui.handlers.output_handler.QFileDialog.getSaveFileName", return_value=(str(target), "")
        ) as mock_dialog:
            window.download_button.click()

        assert mock_dialog.call_args[0][2].endswith("photo-no-bg.png")
        assert target.read_bytes() == png_bytes
        config_manager.set.assert_called_with("last_save_dir", str(target.parent))

    def test_close_waits_for_conversion(self, qtbot, config_manager, image_file):
        client = BlockingClient()
        window = make_window(qtbot, config_manager, client)
        window.file_handler.load_file(str(image_file))
        window.convert_button.click()
        worker = window.conversion_controller.current_worker

        client.release.set()
        window.close()

        assert worker.isFinished()


def test_browse_requested_from_keyboard(qtbot, config_manager):
    """Test that activating the drop zone opens the file browser."""
    window = make_window(qtbot, config_manager)

    with patch("gui.handlers.file_handler.QFileDialog.getOpenFileName", return_value=("", "")) as mock_dialog:
        qtbot.keyClick(window.drag_drop_label, Qt.Key.Key_Space)

    mock_dialog.assert_called_once()
