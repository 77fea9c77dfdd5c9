"""
Image file loading and QMimeData parsing utilities.

This module provides reusable functions for reading a selected or dropped
file into a SourceImage and for extracting file paths from QMimeData objects
in drag-and-drop operations.
"""

from pathlib import Path
from urllib.parse import unquote

from PySide6.QtCore import QMimeData, QMimeDatabase

from .images import SourceImage

DEFAULT_MIME_TYPE = "application/octet-stream"


def extract_local_paths_from_mimedata(mime: QMimeData) -> list[Path]:
    """
    Extract local file paths from QMimeData object.

    Handles URL decoding, deduplication, and filters out non-local URLs and directories.

    Args:
        mime: QMimeData object from drag-and-drop operation

    Returns:
        List of unique local file paths

    Raises:
        ValueError: If mime data doesn't contain URLs
    """
    if not mime.hasUrls():
        raise ValueError("QMimeData does not contain URLs")

    paths = []
    seen_paths = set()

    for url in mime.urls():
        if not url.isLocalFile():
            continue

        try:
            path = Path(unquote(url.toLocalFile())).resolve()

            if path.is_dir() or not path.exists():
                continue

            path_str = str(path)
            if path_str not in seen_paths:
                seen_paths.add(path_str)
                paths.append(path)

        except (OSError, ValueError):
            # Skip paths that can't be resolved or are invalid
            continue

    return paths


def validate_single_source(paths: list[Path]) -> tuple[Path | None, str | None]:
    """
    Validate that exactly one file is provided.

    The file type is not checked here; the session decides that from the
    declared MIME type.

    Returns:
        Tuple of (path, error_message). Exactly one of the two is None.
    """
    if not paths:
        return None, "No files provided"

    if len(paths) > 1:
        return None, f"Multiple files provided ({len(paths)}). Please drop a single image."

    return paths[0], None


def detect_mime_type(path: Path) -> str:
    """
    Get the declared MIME type of a file from its name.

    Only the extension is consulted, matching how a browser labels a
    picked file. Content is never sniffed.
    """
    mime_type = QMimeDatabase().mimeTypeForFile(str(path), QMimeDatabase.MatchMode.MatchExtension)
    if not mime_type.isValid() or mime_type.isDefault():
        return DEFAULT_MIME_TYPE
    return mime_type.name()


def read_source_image(path: Path | str) -> SourceImage:
    """
    Read a file from disk as a SourceImage.

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    return SourceImage(data=path.read_bytes(), mime_type=detect_mime_type(path), filename=path.name)
