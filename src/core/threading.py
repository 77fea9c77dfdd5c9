"""
Threading system for non-blocking background removal.

The remote call is the only blocking step of a session. It runs in a
QThread-based worker while every session transition stays on the UI thread.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from .errors import PreconditionError
from .images import SourceImage
from .session import ConversionClient, SessionController, SessionState, Submission

logger = logging.getLogger(__name__)


class ConversionWorker(QThread):
    """
    QThread-based worker that performs exactly one remote conversion.

    Signals:
        conversionCompleted(object): The ConversionResult returned by the client
        conversionError(object): The exception raised by the client
    """

    conversionCompleted = Signal(object)  # ConversionResult
    conversionError = Signal(object)  # Exception

    def __init__(self, client: ConversionClient, source: SourceImage, *, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.client = client
        self.source = source
        self.setObjectName("ConversionWorker")

    def run(self) -> None:
        """
        Main worker thread execution.

        Handles all exceptions and ensures exactly one terminal signal is emitted.
        """
        try:
            logger.info(f"Starting conversion of {self.source.filename or 'unnamed image'}")
            result = self.client.convert(self.source)
        except Exception as e:
            # Use thread-safe logging without traceback formatting
            logger.error(f"Conversion failed: {e.__class__.__name__}")
            self.conversionError.emit(e)
        else:
            self.conversionCompleted.emit(result)


class ConversionController(QObject):
    """
    Owns the session and the single in-flight conversion task.

    ``start_conversion`` marks the session as submitting on the calling (UI)
    thread, then hands the remote call to a ConversionWorker. The worker's
    terminal signal settles the session back on the UI thread.
    """

    conversionStarted = Signal()
    conversionFinished = Signal()  # Emitted after cleanup
    stateChanged = Signal(object)  # SessionState
    conversionFailed = Signal(object)  # Exception raised by the client

    def __init__(
        self,
        client: ConversionClient,
        session: SessionController | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.client = client
        self.session = session or SessionController(client)
        self._forwarded_listener = self.session.on_change
        self.session.on_change = self._publish_state
        self.current_worker: ConversionWorker | None = None
        self._submission: Submission | None = None
        self._settled = False
        self.setObjectName("ConversionController")
        logger.debug("ConversionController initialized.")

    def _publish_state(self, state: SessionState) -> None:
        """Emit stateChanged, then call any listener the session already had."""
        self.stateChanged.emit(state)
        if self._forwarded_listener is not None:
            self._forwarded_listener(state)

    def is_running(self) -> bool:
        """Check if a conversion worker is currently alive."""
        return self.current_worker is not None

    @Slot()
    def start_conversion(self) -> None:
        """
        Start converting the loaded image in a worker thread.

        Raises:
            PreconditionError: If no image is loaded or a conversion is already running
        """
        if self.is_running():
            logger.warning("Cannot start conversion: another conversion is already running")
            raise PreconditionError(
                "Please wait for the current image to finish processing.",
                technical_message="Worker still running",
            )

        submission = self.session.begin_submit()
        self._submission = submission
        self._settled = False

        worker = ConversionWorker(self.client, submission.source, parent=self)
        worker.setObjectName(f"ConversionWorker-{submission.generation}")
        worker.conversionCompleted.connect(self._on_completed, Qt.ConnectionType.QueuedConnection)
        worker.conversionError.connect(self._on_error, Qt.ConnectionType.QueuedConnection)
        worker.finished.connect(self._cleanup_worker, Qt.ConnectionType.QueuedConnection)
        self.current_worker = worker

        logger.info("Started new conversion worker")
        self.conversionStarted.emit()
        worker.start()

    @Slot(object)
    def _on_completed(self, result: object) -> None:
        if self._submission is None:
            return
        self._settled = True
        self.session.complete_submit(self._submission, result)

    @Slot(object)
    def _on_error(self, error: object) -> None:
        if self._submission is None:
            return
        self._settled = True
        if not isinstance(error, Exception):
            error = RuntimeError(str(error))
        self.session.fail_submit(self._submission, error)
        self.conversionFailed.emit(error)

    @Slot()
    def _cleanup_worker(self) -> None:
        """
        Clean up the worker thread after it has finished.

        If the worker ended without a terminal signal the session is failed so
        the in-flight flag never outlives the worker.
        """
        worker = self.current_worker
        self.current_worker = None

        try:
            if self._submission is not None and not self._settled:
                logger.warning("Conversion worker finished without a result")
                self.session.fail_submit(self._submission, RuntimeError("Conversion ended without a result"))

            if worker is not None:
                try:
                    worker.conversionCompleted.disconnect(self._on_completed)
                    worker.conversionError.disconnect(self._on_error)
                    worker.finished.disconnect(self._cleanup_worker)
                except (TypeError, RuntimeError):
                    logger.debug("Signals already disconnected or worker deleted.")
                worker.deleteLater()
        finally:
            self._submission = None
            self.conversionFinished.emit()
            logger.debug("Conversion cleanup finished.")

    def wait_for_completion(self, timeout_ms: int = 0) -> bool:
        """
        Wait for the current worker to finish.

        This should generally only be called during application shutdown.
        """
        if self.current_worker:
            return self.current_worker.wait(timeout_ms) if timeout_ms else self.current_worker.wait()
        return True

    @Slot()
    def shutdown(self, timeout_ms: int = 3000) -> None:
        """
        Wait for an active conversion before the application quits.

        Requests cannot be cancelled, so this only waits.
        """
        if self.is_running():
            logger.info("Application shutting down, waiting for active conversion.")
            if not self.wait_for_completion(timeout_ms):
                logger.warning(f"Worker did not finish within {timeout_ms}ms during shutdown.")
        else:
            logger.debug("No active conversion during shutdown.")
