"""
Main entry point for the Background Remover GUI application.
"""

import sys

from dotenv import load_dotenv
from PySide6.QtWidgets import QApplication

from core.config_manager import ConfigManager
from core.error_handler import init_logging, setup_error_handling
from gui.main_window import MainWindow


def main() -> int:
    """Main application entry point."""
    # The API key may live in a .env file next to the app
    load_dotenv()

    app = QApplication(sys.argv)

    config_manager = ConfigManager()
    init_logging(config_manager.get("log_level"))
    error_handler = setup_error_handling()

    window = MainWindow(config_manager=config_manager)
    window.show()

    try:
        return app.exec()
    finally:
        error_handler.restore_hooks()


if __name__ == "__main__":
    raise SystemExit(main())
