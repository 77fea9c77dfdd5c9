"""
Session state controller for one upload/convert/download cycle.

The controller is the single owner of the session fields. The UI layer reads
immutable ``SessionState`` snapshots and changes them only through the
transition methods below; the remote client never touches them.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .conversion_state import ConversionState
from .errors import InvalidInputError, PreconditionError, user_message_for
from .images import ConversionResult, DownloadArtifact, SourceImage, download_filename, is_image_mime_type

logger = logging.getLogger(__name__)

StateListener = Callable[["SessionState"], None]


class ConversionClient(Protocol):
    """Anything that can turn a source image into a conversion result."""

    def convert(self, source: SourceImage) -> ConversionResult: ...


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session fields."""

    source: SourceImage | None = None
    preview: str | None = None
    result: ConversionResult | None = None
    in_flight: bool = False
    error: str | None = None

    @property
    def phase(self) -> ConversionState:
        if self.in_flight:
            return ConversionState.SUBMITTING
        if self.result is not None:
            return ConversionState.SUCCEEDED
        if self.error is not None:
            return ConversionState.FAILED
        if self.source is not None:
            return ConversionState.READY
        return ConversionState.IDLE


@dataclass(frozen=True)
class Submission:
    """Ticket for one in-flight conversion."""

    generation: int
    source: SourceImage


class SessionController:
    """
    State machine for the upload/convert/download cycle.

    ``submit()`` runs a whole conversion synchronously. Callers that run the
    remote call elsewhere (see ``core.threading``) use ``begin_submit()`` and
    then settle the returned ticket with ``complete_submit()`` or
    ``fail_submit()``.
    """

    def __init__(self, client: ConversionClient | None = None, on_change: StateListener | None = None) -> None:
        self.client = client
        self.on_change = on_change
        self._state = SessionState()
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> ConversionState:
        return self._state.phase

    @property
    def in_flight(self) -> bool:
        return self._state.in_flight

    def select_file(self, data: bytes, mime_type: str, filename: str | None = None) -> SessionState:
        """
        Load a new source image, replacing whatever was loaded before.

        Raises:
            InvalidInputError: If the declared MIME type is not ``image/*``
            PreconditionError: If a submission is in flight
        """
        if not is_image_mime_type(mime_type):
            logger.warning(f"Rejected non-image file {filename!r} ({mime_type!r})")
            raise InvalidInputError(mime_type)

        with self._lock:
            if self._state.in_flight:
                raise PreconditionError("Please wait for the current image to finish processing.")
            source = SourceImage(data=bytes(data), mime_type=mime_type, filename=filename)
            self._generation += 1
            selected = SessionState(source=source, preview=source.to_data_url())
            self._state = selected

        logger.info(f"Selected {filename or 'unnamed image'} ({mime_type}, {len(source.data)} bytes)")
        if self.on_change is not None:
            self.on_change(selected)
        return selected

    def begin_submit(self) -> Submission:
        """
        Mark a submission as in flight and return its ticket.

        Raises:
            PreconditionError: If no image is loaded or a submission is already in flight
        """
        with self._lock:
            current = self._state
            if current.source is None:
                raise PreconditionError("Please choose an image first.")
            if current.in_flight:
                raise PreconditionError(
                    "Please wait for the current image to finish processing.",
                    technical_message="Rejected concurrent submit",
                )
            self._generation += 1
            submission = Submission(generation=self._generation, source=current.source)
            started = SessionState(source=current.source, preview=current.preview, in_flight=True)
            self._state = started

        logger.info(f"Submitting {current.source.filename or 'unnamed image'} for background removal")
        if self.on_change is not None:
            self.on_change(started)
        return submission

    def _is_current(self, submission: Submission) -> bool:
        if submission.generation != self._generation or not self._state.in_flight:
            logger.debug(f"Discarding settlement of stale submission {submission.generation}")
            return False
        return True

    def complete_submit(self, submission: Submission, result: ConversionResult) -> SessionState:
        """Settle a submission with its result."""
        with self._lock:
            if not self._is_current(submission):
                return self._state
            current = self._state
            settled = SessionState(source=current.source, preview=current.preview, result=result)
            self._state = settled

        logger.info(f"Background removal succeeded ({result.mime_type}, {len(result.data)} bytes)")
        if self.on_change is not None:
            self.on_change(settled)
        return settled

    def fail_submit(self, submission: Submission, error: Exception) -> SessionState:
        """Settle a submission with an error, keeping the source image loaded."""
        message = user_message_for(error)
        with self._lock:
            if not self._is_current(submission):
                return self._state
            current = self._state
            settled = SessionState(source=current.source, preview=current.preview, error=message)
            self._state = settled

        logger.error(f"Background removal failed: {error!r}")
        if self.on_change is not None:
            self.on_change(settled)
        return settled

    def submit(self) -> ConversionState:
        """
        Run one conversion of the loaded image synchronously.

        Client failures never propagate; they end in the FAILED phase.

        Raises:
            PreconditionError: If no image is loaded or a submission is already in flight
        """
        if self.client is None:
            raise PreconditionError("No conversion client configured.")

        submission = self.begin_submit()
        result: ConversionResult | None = None
        error: Exception | None = None
        try:
            result = self.client.convert(submission.source)
        except Exception as e:
            error = e
        finally:
            if result is not None:
                self.complete_submit(submission, result)
            else:
                self.fail_submit(submission, error or RuntimeError("Conversion ended without a result"))
        return self.phase

    def reset(self) -> SessionState:
        """Clear every field and return to IDLE. Safe to call in any phase."""
        with self._lock:
            self._generation += 1
            was_in_flight = self._state.in_flight
            self._state = SessionState()

        if was_in_flight:
            logger.info("Session reset while a conversion was in flight; its result will be discarded")
        else:
            logger.debug("Session reset")
        if self.on_change is not None:
            self.on_change(self._state)
        return self._state

    def download(self) -> DownloadArtifact:
        """
        Package the conversion result for saving.

        Raises:
            PreconditionError: If there is no conversion result
        """
        current = self._state
        if current.phase is not ConversionState.SUCCEEDED or current.result is None:
            raise PreconditionError("There is no processed image to download yet.")

        filename = download_filename(current.source.filename if current.source else None)
        return DownloadArtifact(filename=filename, data=current.result.data, mime_type=current.result.mime_type)
