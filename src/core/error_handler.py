"""
Error reporting for the Background Remover GUI.

Every failure the window shows (a rejected file, a failed save, a
conversion the image service could not complete) goes through
ErrorHandler.handle. The handler turns it into a BaseAppError, writes
one line to ``logs/app.log`` under the per-user data directory and
emits ``errorOccurred`` so the window can react. Uncaught exceptions
on the GUI thread or a conversion worker reach the same path once
install_hooks has run.

Image bytes and API keys never reach the log: context values are
passed through redact_context first.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import threading
import traceback
from pathlib import Path
from typing import Any, ClassVar

from PySide6.QtCore import QObject, QStandardPaths, Signal

from .config import APP_NAME, APP_ORGANIZATION
from .errors import BaseAppError, ErrorSeverity, from_exception, user_message_for

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ERROR_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | code=%(app_code)s | %(message)s"
ERROR_LOGGER_NAME = "bgremover_gui.errors"
LOG_FILE_NAME = "app.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

MAX_CONTEXT_ITEMS = 20
MAX_CONTEXT_CHARS = 200
REDACTED = "[REDACTED]"

# Matched as substrings, so "api_key" and "x-goog-api-key" are both caught.
_SENSITIVE_KEYS = ("password", "token", "key", "secret")

# Warnings in the log for problems the user can fix by picking another file.
_LOG_LEVELS = {
    ErrorSeverity.LOW: logging.WARNING,
    ErrorSeverity.MEDIUM: logging.ERROR,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}

logger = logging.getLogger(__name__)


def resolve_logs_dir() -> Path:
    """Return the directory app.log is written to, without creating it."""
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if location:
        return Path(location) / "logs"

    # No application name registered yet (tests, early startup).
    config_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.ConfigLocation)
    return Path(config_location) / APP_ORGANIZATION / APP_NAME / "logs"


def redact_context(context: dict[str, Any]) -> dict[str, Any]:
    """
    Make an error context safe to log.

    Keys that look like credentials are replaced by ``[REDACTED]``,
    byte payloads by their length, and everything else by a short repr.
    Only the first MAX_CONTEXT_ITEMS entries are kept.
    """
    safe: dict[str, Any] = {}

    for index, (key, value) in enumerate(context.items()):
        if index >= MAX_CONTEXT_ITEMS:
            safe["..."] = f"({len(context) - MAX_CONTEXT_ITEMS} more items truncated)"
            break

        if any(marker in str(key).lower() for marker in _SENSITIVE_KEYS):
            safe[key] = REDACTED
        elif isinstance(value, bytes | bytearray):
            safe[key] = f"<{len(value)} bytes>"
        elif isinstance(value, str) and len(value) > MAX_CONTEXT_CHARS:
            safe[key] = value[:MAX_CONTEXT_CHARS] + "..."
        else:
            safe[key] = repr(value)[:MAX_CONTEXT_CHARS]

    return safe


def describe_traceback(exception: BaseException) -> str:
    """Format the exception's own traceback, or just its summary line if it was never raised."""
    if exception.__traceback__ is None:
        return f"{type(exception).__name__}: {exception}\n"
    return "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))


class ErrorCodeFilter(logging.Filter):
    """Give records logged without ``extra`` an app_code so ERROR_LOG_FORMAT always renders."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "app_code"):
            record.app_code = "-"
        return True


class ErrorHandler(QObject):
    """
    Process-wide sink for application errors.

    There is one instance per process: the window, the file and output
    handlers and the exception hooks all report to it.
    """

    errorOccurred = Signal(object)  # BaseAppError

    _instance: ClassVar[ErrorHandler | None] = None
    _logger: ClassVar[logging.Logger | None] = None

    def __new__(cls) -> ErrorHandler:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return

        super().__init__()
        self._initialized = True
        self._previous_excepthook = sys.excepthook
        self._previous_threading_excepthook = threading.excepthook

        self._setup_logging()

    def capture(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Convert an exception into a BaseAppError without logging it.

        Args:
            exception: Anything raised while loading, converting or saving
            context: Extra details such as the file path; redacted before use

        Returns:
            The exception itself when it already is a BaseAppError,
            otherwise a mapped error carrying the redacted context
        """
        app_error = from_exception(exception, redact_context(context or {}))

        if not app_error.technical_message:
            app_error.technical_message = f"{type(exception).__name__}: {exception}"
        app_error.context.setdefault("traceback", describe_traceback(exception))

        return app_error

    def handle(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Capture, log and announce an error.

        SystemExit and KeyboardInterrupt are re-raised untouched.
        """
        if isinstance(exception, SystemExit | KeyboardInterrupt):
            raise exception

        app_error = self.capture(exception, context)
        self._write_log(app_error, exception)

        self.errorOccurred.emit(app_error)
        return app_error

    def to_user_message(self, app_error: BaseAppError) -> str:
        """Text for the window's banner."""
        return user_message_for(app_error)

    def _write_log(self, app_error: BaseAppError, exception: Exception) -> None:
        if self._logger is None:
            return

        self._logger.log(
            _LOG_LEVELS.get(app_error.severity, logging.ERROR),
            "[%s] %s",
            app_error.code.value,
            app_error.technical_message or app_error.user_message,
            extra={
                "app_code": app_error.code.value,
                "error_type": app_error.type.value,
                "severity": app_error.severity.value,
                "retriable": app_error.retriable,
            },
            exc_info=exception,
        )

    def _setup_logging(self) -> None:
        """Attach a rotating app.log (and a console echo in debug runs) to the error logger."""
        error_logger = logging.getLogger(ERROR_LOGGER_NAME)
        error_logger.setLevel(logging.DEBUG)
        error_logger.propagate = False
        ErrorHandler._logger = error_logger

        try:
            logs_dir = resolve_logs_dir()
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logging.basicConfig(level=logging.ERROR)
            logger.error("Error log unavailable, falling back to stderr: %s", e)
            error_logger.propagate = True
            return

        # The logger outlives the singleton, which tests reset.
        if error_logger.handlers:
            return

        file_handler = logging.handlers.RotatingFileHandler(
            logs_dir / LOG_FILE_NAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
            delay=True,
        )
        formatter = logging.Formatter(ERROR_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        code_filter = ErrorCodeFilter()

        file_handler.setFormatter(formatter)
        file_handler.addFilter(code_filter)
        error_logger.addHandler(file_handler)

        if __debug__:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.WARNING)
            console_handler.setFormatter(formatter)
            console_handler.addFilter(code_filter)
            error_logger.addHandler(console_handler)

    def _excepthook(self, exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
        if not isinstance(exc_value, Exception):
            self._previous_excepthook(exc_type, exc_value, exc_traceback)
            return
        self.handle(exc_value, {"source": "sys.excepthook"})

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        if not isinstance(args.exc_value, Exception):
            self._previous_threading_excepthook(args)
            return
        thread_name = args.thread.name if args.thread else "unknown"
        self.handle(args.exc_value, {"source": "threading.excepthook", "thread": thread_name})

    def install_hooks(self) -> None:
        """Route uncaught exceptions from the GUI thread and Python threads to handle()."""
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook

    def restore_hooks(self) -> None:
        """Put back the hooks that were active when the handler was created."""
        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_excepthook


def get_error_handler() -> ErrorHandler:
    """Return the process-wide ErrorHandler."""
    return ErrorHandler()


def setup_error_handling() -> ErrorHandler:
    """Create the ErrorHandler and install its exception hooks; call once at startup."""
    handler = get_error_handler()
    handler.install_hooks()
    return handler


def init_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for the rest of the application.

    Args:
        level: A logging level name such as "debug" or "WARNING";
            unknown names fall back to INFO
    """
    get_error_handler()

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
