"""
Image data model and data-URL helpers.

Source images, conversion results and download artifacts are immutable
values; they are replaced wholesale, never edited in place.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path

IMAGE_MIME_PREFIX = "image/"
DEFAULT_DOWNLOAD_STEM = "image"
DOWNLOAD_SUFFIX = "-no-bg.png"


def is_image_mime_type(mime_type: str | None) -> bool:
    """Return True if the declared MIME type indicates an image."""
    return bool(mime_type) and mime_type.startswith(IMAGE_MIME_PREFIX)


def to_data_url(data: bytes, mime_type: str) -> str:
    """Encode bytes as a self-contained ``data:`` URL."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def parse_data_url(url: str) -> tuple[str, bytes]:
    """
    Decode a base64 ``data:`` URL.

    Args:
        url: A string of the form ``data:<mime>;base64,<payload>``

    Returns:
        Tuple of (mime_type, decoded bytes)

    Raises:
        ValueError: If the URL is not a base64 data URL
    """
    if not url.startswith("data:"):
        raise ValueError("Invalid data URL format")

    header, sep, payload = url[len("data:") :].partition(";base64,")
    if not sep:
        raise ValueError("Invalid data URL format")
    if not header:
        raise ValueError("Could not extract MIME type")

    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e

    return header, data


def download_filename(original_filename: str | None) -> str:
    """
    Derive the download name for a processed image.

    The last extension of the original name is dropped and ``-no-bg.png`` is
    appended. ``"photo.png"`` becomes ``"photo-no-bg.png"``; a missing name, or
    one with nothing before its extension, falls back to ``"image"``.
    """
    stem = ""
    if original_filename:
        stem = ".".join(original_filename.split(".")[:-1])
    return f"{stem or DEFAULT_DOWNLOAD_STEM}{DOWNLOAD_SUFFIX}"


@dataclass(frozen=True)
class SourceImage:
    """The user-provided original image."""

    data: bytes
    mime_type: str
    filename: str | None = None

    def to_data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


@dataclass(frozen=True)
class ConversionResult:
    """An image returned by the remote conversion service."""

    data: bytes
    mime_type: str

    @property
    def data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)

    @classmethod
    def from_data_url(cls, url: str) -> ConversionResult:
        mime_type, data = parse_data_url(url)
        return cls(data=data, mime_type=mime_type)


@dataclass(frozen=True)
class DownloadArtifact:
    """A named, savable copy of a conversion result."""

    filename: str
    data: bytes
    mime_type: str

    def save(self, target: Path | str) -> Path:
        """
        Write the artifact to disk.

        Args:
            target: A directory (the artifact's filename is used) or a full file path

        Returns:
            The path that was written
        """
        path = Path(target)
        if path.is_dir():
            path = path / self.filename
        path.write_bytes(self.data)
        return path
