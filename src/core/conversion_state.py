"""
Session state definitions for the Background Remover GUI.

This module defines the phases of one upload/convert/download cycle used
throughout the application to keep the UI and the conversion pipeline in sync.
"""

from enum import Enum, auto


class ConversionState(Enum):
    """
    Enumeration of session phases.

    The phase is derived from the session fields and drives which widgets the
    main window shows and enables.
    """

    IDLE = auto()  # No file loaded
    READY = auto()  # File loaded, preview available, no result
    SUBMITTING = auto()  # Remote conversion in flight
    SUCCEEDED = auto()  # Result available
    FAILED = auto()  # Error available, no result
