"""Cloud vision client that turns a slip photo into OCR text."""

from __future__ import annotations

import base64
import re
import time

import httpx

from keibaslip.runtime.logging import get_logger
from keibaslip.runtime.settings import Settings

logger = get_logger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/[a-zA-Z]+;base64,")


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def encode_image_content(image: bytes | str) -> str:
    """Base64 payload for the annotate request (data URLs are stripped to their body)."""
    if isinstance(image, bytes):
        return base64.b64encode(image).decode("ascii")
    return _DATA_URL_PREFIX.sub("", image.strip())


def build_annotate_request(content: str) -> dict:
    return {
        "requests": [
            {
                "image": {"content": content},
                "features": [{"type": "DOCUMENT_TEXT_DETECTION"}],
                "imageContext": {"languageHints": ["ja"]},
            }
        ]
    }


def extract_annotation_text(payload: dict) -> str:
    """
    Pull the recognized text out of an annotate response.

    Raises:
        OCRServiceUnavailable: The response is empty or carries an in-band error.
    """
    responses = payload.get("responses") if isinstance(payload, dict) else None
    if not responses:
        raise OCRServiceUnavailable("OCR service returned no responses")

    vision_response = responses[0] or {}
    error = vision_response.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise OCRServiceUnavailable(f"OCR service error: {message or 'unknown error'}")

    full_text = (vision_response.get("fullTextAnnotation") or {}).get("text")
    if full_text:
        return full_text

    annotations = vision_response.get("textAnnotations")
    if isinstance(annotations, list) and annotations:
        return annotations[0].get("description") or ""
    return ""


async def request_document_text(
    image: bytes | str,
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Call the document text detection endpoint and return the recognized text.

    Args:
        image: Raw image bytes, a base64 string, or a data URL.
        settings: Endpoint, key and timeout.
        client: Optional shared client (tests pass one with a mock transport).
    """
    if not settings.vision_api_key:
        raise OCRServiceUnavailable("GCV_API_KEY is not configured")

    content = encode_image_content(image)
    if not content:
        raise OCRServiceUnavailable("No image content to send")

    logger.info("Sending slip image to OCR service (%.1fKB)...", len(content) / 1024)

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.vision_timeout)

    try:
        start_time = time.time()
        response = await client.post(
            settings.vision_endpoint,
            params={"key": settings.vision_api_key},
            json=build_annotate_request(content),
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        logger.error("OCR service error: %s - %s", response.status_code, response.text[:500])
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned a non-JSON body") from e
    return extract_annotation_text(payload)
