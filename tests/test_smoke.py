"""
Smoke tests for the PySide6 GUI application.
These tests verify basic functionality and environment setup.
"""

import os

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def test_pyside6_imports():
    """Test that PySide6 can be imported successfully."""
    import PySide6  # noqa: F401
    from PySide6.QtWidgets import QApplication  # noqa: F401


def test_main_module_components():
    """Test that the entry point and its collaborators import."""
    from gui import main

    assert hasattr(main, "main")
    assert callable(main.main)
    assert callable(main.load_dotenv)


def test_main_window_constructs(qtbot):
    """Test that the main window can be constructed without a network client."""
    from unittest.mock import Mock

    from gui.main_window import MainWindow

    config_manager = Mock()
    config_manager.get.return_value = ""

    window = MainWindow(config_manager=config_manager)
    qtbot.addWidget(window)
    window.show()
    qtbot.waitExposed(window)

    assert window.isVisible()
    assert window.drag_drop_label.isVisible()
    assert not window.footer.isVisible()

    window.close()
