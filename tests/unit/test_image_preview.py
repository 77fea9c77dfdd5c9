"""
Tests for the ImagePreview widget and styling helpers.
"""

from PySide6.QtWidgets import QLabel, QPushButton

from gui.utils.styling import AccessiblePalette, apply_banner_style, apply_button_style, create_drag_zone_stylesheet
from gui.widgets.image_preview import CHECKER_SIZE, ImagePreview, make_checker_pixmap


class TestImagePreview:
    """Test showing and clearing images."""

    def test_placeholder_when_empty(self, qtbot):
        preview = ImagePreview(placeholder="Nothing yet")
        qtbot.addWidget(preview)

        assert not preview.has_image()
        assert preview.text() == "Nothing yet"

    def test_set_image(self, qtbot, transparent_png):
        preview = ImagePreview(checkerboard=True)
        qtbot.addWidget(preview)

        assert preview.set_image_data(transparent_png)
        assert preview.has_image()
        assert preview.text() == ""

    def test_undecodable_bytes(self, qtbot):
        preview = ImagePreview(placeholder="Nothing yet")
        qtbot.addWidget(preview)

        assert not preview.set_image_data(b"not an image")
        assert not preview.has_image()
        assert preview.text() == "Nothing yet"

    def test_clear_image(self, qtbot, png_bytes):
        preview = ImagePreview(placeholder="Nothing yet")
        qtbot.addWidget(preview)
        preview.set_image_data(png_bytes)

        preview.clear_image()

        assert not preview.has_image()
        assert preview.text() == "Nothing yet"

    def test_placeholder_change_keeps_image(self, qtbot, png_bytes):
        preview = ImagePreview()
        qtbot.addWidget(preview)
        preview.set_image_data(png_bytes)

        preview.set_placeholder("Other")

        assert preview.text() == ""

    def test_paints_when_shown(self, qtbot, transparent_png):
        preview = ImagePreview(checkerboard=True)
        qtbot.addWidget(preview)
        preview.set_image_data(transparent_png)
        preview.show()
        qtbot.waitExposed(preview)

        preview.repaint()

        assert preview.has_image()

    def test_checker_tile(self, qtbot):
        tile = make_checker_pixmap()

        assert tile.width() == CHECKER_SIZE * 2
        assert tile.height() == CHECKER_SIZE * 2


class TestStyling:
    """Test stylesheet helpers."""

    def test_drag_zone_states_differ(self):
        normal = create_drag_zone_stylesheet("normal")
        hover = create_drag_zone_stylesheet("hover")
        reject = create_drag_zone_stylesheet("reject")

        assert len({normal, hover, reject}) == 3
        assert AccessiblePalette.DRAG_REJECT_BORDER in reject

    def test_banner_style(self, qtbot):
        banner = QLabel()
        banner.setObjectName("errorBanner")
        qtbot.addWidget(banner)

        apply_banner_style(banner)

        assert "QLabel#errorBanner" in banner.styleSheet()

    def test_button_style(self, qtbot):
        button = QPushButton("Go")
        qtbot.addWidget(button)

        apply_button_style(button, "primary")

        assert "QPushButton" in button.styleSheet()

    def test_warning_banner_style(self, qtbot):
        banner = QLabel()
        qtbot.addWidget(banner)

        apply_banner_style(banner, "warning")

        assert AccessiblePalette.WARNING_BG in banner.styleSheet()
        assert AccessiblePalette.ERROR_BG not in banner.styleSheet()
