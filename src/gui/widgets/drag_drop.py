"""
Drag-and-drop widget for image file selection.
"""

from PySide6.QtCore import QSize, Qt, QTimer, Signal
from PySide6.QtGui import QDragEnterEvent, QDragLeaveEvent, QDragMoveEvent, QDropEvent, QKeyEvent, QMouseEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

from core.image_utils import extract_local_paths_from_mimedata, validate_single_source
from gui.utils.styling import create_drag_zone_stylesheet

NORMAL_TEXT = "🖼 Upload an image\n\nor drag and drop it here"
HOVER_TEXT = "🖼 Drop your image here"


class DragDropLabel(QLabel):
    """
    Custom QLabel widget for drag-and-drop image selection.

    Accepts exactly one local file. Whether the file is an image is decided by
    the session from its declared MIME type, not here. Clicking the zone or
    pressing Enter/Space asks for the file browser.
    """

    fileAccepted = Signal(str)  # Emitted with file path when a single file is dropped
    fileRejected = Signal(str)  # Emitted with error message when the drop is unusable
    browseRequested = Signal()  # Emitted when the zone is clicked or activated from the keyboard

    STATE_NORMAL = "normal"
    STATE_HOVER = "hover"
    STATE_REJECT = "reject"

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        self.setAcceptDrops(True)
        self.setObjectName("dragZone")

        self._current_state = self.STATE_NORMAL
        self._reset_timer = QTimer(self)
        self._reset_timer.setSingleShot(True)
        self._reset_timer.timeout.connect(lambda: self._set_state(self.STATE_NORMAL))

        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(300, 200)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._update_appearance()

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAccessibleName("Image drop zone")
        self.setAccessibleDescription("Drop an image here or press Enter to browse for one.")
        self.setToolTip("Drop a PNG, JPEG or WebP image here, or click to browse")

    @property
    def state(self) -> str:
        return self._current_state

    def _update_appearance(self) -> None:
        """Update appearance based on current state."""
        self.setProperty("drag-hover", self._current_state == self.STATE_HOVER)
        self.setProperty("drag-reject", self._current_state == self.STATE_REJECT)
        self.setStyleSheet(create_drag_zone_stylesheet(self._current_state))

        if self._current_state == self.STATE_NORMAL:
            self.setText(NORMAL_TEXT)
        elif self._current_state == self.STATE_HOVER:
            self.setText(HOVER_TEXT)
        # Reject text is set by the rejection handler

        self.style().unpolish(self)
        self.style().polish(self)

    def _set_state(self, state: str) -> None:
        if self._current_state != state:
            self._current_state = state
            self._update_appearance()

    # Drag and drop event handlers

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        """Accept the drag only if it carries exactly one local file."""
        if event.mimeData().hasUrls():
            paths = extract_local_paths_from_mimedata(event.mimeData())
            path, _ = validate_single_source(paths)
            if path is not None:
                event.acceptProposedAction()
                self._set_state(self.STATE_HOVER)
                return

        event.ignore()

    def dragMoveEvent(self, event: QDragMoveEvent) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event: QDragLeaveEvent) -> None:
        self._set_state(self.STATE_NORMAL)
        event.accept()

    def dropEvent(self, event: QDropEvent) -> None:
        """Emit the dropped file path, or reject the drop with a reason."""
        try:
            paths = extract_local_paths_from_mimedata(event.mimeData())
        except ValueError:
            paths = []

        path, error_message = validate_single_source(paths)
        if path is None:
            self._handle_rejection(error_message or "Invalid file")
            event.ignore()
            return

        self._set_state(self.STATE_NORMAL)
        event.acceptProposedAction()
        self.fileAccepted.emit(str(path))

    def _handle_rejection(self, error_message: str) -> None:
        """Handle file rejection with visual feedback."""
        self._set_state(self.STATE_REJECT)
        self.setText(f"❌ {error_message}")
        self.fileRejected.emit(error_message)
        self._reset_timer.start(3000)

    def set_error(self, error_message: str) -> None:
        """Show an error state with custom message."""
        self._handle_rejection(error_message)

    def reset(self) -> None:
        """Reset the widget to its initial state."""
        self._reset_timer.stop()
        self._set_state(self.STATE_NORMAL)

    # Click and keyboard activation

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.browseRequested.emit()
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space):
            self.browseRequested.emit()
        else:
            super().keyPressEvent(event)

    def sizeHint(self) -> QSize:
        return QSize(400, 260)

    def minimumSizeHint(self) -> QSize:
        return QSize(300, 200)
