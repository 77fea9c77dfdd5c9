"""
Image preview widget with a transparency checkerboard.
"""

from PySide6.QtCore import QRect, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPaintEvent, QPixmap, QResizeEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

from gui.utils.styling import AccessiblePalette

CHECKER_SIZE = 10


def make_checker_pixmap(size: int = CHECKER_SIZE) -> QPixmap:
    """Build a 2x2 checker tile used to show transparent areas."""
    tile = QPixmap(size * 2, size * 2)
    tile.fill(QColor(AccessiblePalette.CHECKER_LIGHT))
    painter = QPainter(tile)
    dark = QColor(AccessiblePalette.CHECKER_DARK)
    painter.fillRect(0, 0, size, size, dark)
    painter.fillRect(size, size, size, size, dark)
    painter.end()
    return tile


class ImagePreview(QLabel):
    """
    Label that shows an image scaled to fit, keeping its aspect ratio.

    With ``checkerboard`` enabled, transparent regions are drawn over a
    checker pattern. When empty, the placeholder text is shown instead.
    """

    def __init__(self, placeholder: str = "", checkerboard: bool = False, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._pixmap = QPixmap()
        self._placeholder = placeholder
        self._checkerboard = checkerboard
        self._checker_tile = make_checker_pixmap() if checkerboard else None

        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(200, 160)
        self.setWordWrap(True)
        self.setStyleSheet(f"color: {AccessiblePalette.TEXT_SECONDARY};")
        self.clear_image()

    def has_image(self) -> bool:
        return not self._pixmap.isNull()

    def set_image_data(self, data: bytes) -> bool:
        """
        Show an image from encoded bytes.

        Returns:
            False if Qt could not decode the bytes (the placeholder is shown)
        """
        pixmap = QPixmap()
        if not data or not pixmap.loadFromData(data):
            self.clear_image()
            return False

        self._pixmap = pixmap
        self.setText("")
        self._update_scaled()
        return True

    def clear_image(self) -> None:
        self._pixmap = QPixmap()
        self.setPixmap(QPixmap())
        self.setText(self._placeholder)

    def set_placeholder(self, text: str) -> None:
        self._placeholder = text
        if not self.has_image():
            self.setText(text)

    def _update_scaled(self) -> None:
        if self._pixmap.isNull():
            return
        scaled = self._pixmap.scaled(
            self.contentsRect().size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.setPixmap(scaled)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._update_scaled()

    def paintEvent(self, event: QPaintEvent) -> None:
        if self._checker_tile is not None and self.has_image():
            shown = self.pixmap().size()
            area = QRect(0, 0, shown.width(), shown.height())
            area.moveCenter(self.contentsRect().center())
            painter = QPainter(self)
            painter.drawTiledPixmap(area, self._checker_tile)
            painter.end()
        super().paintEvent(event)

    def sizeHint(self) -> QSize:
        return QSize(320, 240)
