"""
Remote conversion client for the background removal service.

This module wraps the one-shot ``generateContent`` call to the Gemini image
model: it encodes the source image, sends it together with the removal
instruction, and decodes the first inline image from the response.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import requests

from .config import API_KEY_ENV_VAR, ServiceConfig
from .errors import ConfigurationError, EmptyResponseError, ErrorCode, TransportError
from .images import ConversionResult, SourceImage

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-goog-api-key"
RESPONSE_MODALITIES = ["IMAGE"]


def build_request_body(data: bytes, mime_type: str, instruction: str) -> dict[str, Any]:
    """Build the JSON payload for a background removal request."""
    return {
        "contents": [
            {
                "parts": [
                    {
                        "inline_data": {
                            "mime_type": mime_type,
                            "data": base64.b64encode(data).decode("ascii"),
                        }
                    },
                    {"text": instruction},
                ]
            }
        ],
        "generationConfig": {"responseModalities": RESPONSE_MODALITIES},
    }


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def extract_image(payload: dict[str, Any]) -> ConversionResult:
    """
    Find the first inline image in a ``generateContent`` response.

    Both the camelCase and snake_case spellings of the inline data fields
    are accepted. Entries of the wrong JSON type are skipped as if absent.

    Raises:
        EmptyResponseError: If no part carries inline image data
    """
    candidates = _as_list(payload.get("candidates"))
    if not candidates:
        raise EmptyResponseError("Response contained no candidates")

    candidate = _as_dict(candidates[0])
    content = _as_dict(candidate.get("content"))
    for part in _as_list(content.get("parts")):
        part = _as_dict(part)
        inline = _as_dict(part.get("inlineData") or part.get("inline_data"))
        encoded = inline.get("data")
        if not encoded:
            continue

        mime_type = inline.get("mimeType") or inline.get("mime_type")
        if not isinstance(mime_type, str) or not mime_type:
            mime_type = "image/png"
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise EmptyResponseError(f"Inline image data is not valid base64: {e}") from e
        return ConversionResult(data=data, mime_type=mime_type)

    finish_reason = candidate.get("finishReason")
    raise EmptyResponseError(f"No image was returned from the API (finishReason={finish_reason})")


class RemoteConversionClient:
    """
    Client for the remote background removal model.

    Each ``convert`` call issues exactly one request; there is no retry and
    no timeout beyond what the transport applies on its own.
    """

    def __init__(self, config: ServiceConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session or requests.Session()

    def convert(self, source: SourceImage) -> ConversionResult:
        """Remove the background of a source image."""
        return self.convert_bytes(source.data, source.mime_type)

    def convert_bytes(self, data: bytes, mime_type: str) -> ConversionResult:
        """
        Send image bytes to the service and decode the returned image.

        Args:
            data: Raw image bytes
            mime_type: Declared MIME type of the image

        Returns:
            ConversionResult with the processed image

        Raises:
            ConfigurationError: If no API key is configured
            TransportError: If the service is unreachable or answers with a failure
            EmptyResponseError: If the service returns no image
        """
        if not self.config.api_key:
            raise ConfigurationError(API_KEY_ENV_VAR)

        body = build_request_body(data, mime_type, self.config.instruction)
        headers = {API_KEY_HEADER: self.config.api_key, "Content-Type": "application/json"}

        logger.info(f"Requesting background removal from {self.config.model} ({mime_type}, {len(data)} bytes)")
        try:
            response = self._session.post(self.config.endpoint, json=body, headers=headers)
        except requests.RequestException as e:
            logger.error(f"Image service request failed: {e.__class__.__name__}")
            raise TransportError(f"{e.__class__.__name__}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Image service returned HTTP {response.status_code}: {self._error_detail(response)}",
                code=ErrorCode.SERVICE_ERROR,
                status_code=response.status_code,
                user_message="The image service rejected the request.",
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(
                f"Image service returned a non-JSON body: {e}",
                code=ErrorCode.INVALID_RESPONSE,
                status_code=response.status_code,
                user_message="The image service sent an unreadable response.",
            ) from e

        if not isinstance(payload, dict):
            raise TransportError(
                f"Image service returned unexpected JSON: {type(payload).__name__}",
                code=ErrorCode.INVALID_RESPONSE,
                status_code=response.status_code,
                user_message="The image service sent an unreadable response.",
            )

        result = extract_image(payload)
        logger.info(f"Received {result.mime_type} image ({len(result.data)} bytes)")
        return result

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            error = response.json().get("error") or {}
            message = error.get("message")
        except (ValueError, AttributeError):
            message = None
        return message or response.reason or "no details"
