"""
Shared test configuration.
"""

import os

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QStandardPaths, Qt
from PySide6.QtGui import QColor, QImage

# Keep QSettings and log files out of the real user profile
QStandardPaths.setTestModeEnabled(True)


def make_png(width: int = 10, height: int = 10, color: QColor | None = None) -> bytes:
    """Encode a small PNG with an alpha channel."""
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(color if color is not None else QColor(Qt.GlobalColor.transparent))
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, "PNG")
    buffer.close()
    return bytes(data.data())


@pytest.fixture
def png_bytes(qapp) -> bytes:
    return make_png(10, 10, QColor(200, 30, 30))


@pytest.fixture
def transparent_png(qapp) -> bytes:
    return make_png(10, 10)
