"""Chat-completion client for structured slip extraction."""

from __future__ import annotations

import time
from typing import Any

import httpx

from keibaslip.domain.slip import ExtractionResult
from keibaslip.runtime.logging import get_logger
from keibaslip.runtime.settings import Settings
from keibaslip.slip.ai_response import build_extraction_messages, parse_structured_response

logger = get_logger(__name__)


class AIServiceUnavailable(RuntimeError):
    """Raised when the completion API cannot be reached or returns an error."""


def _completion_content(payload: Any) -> str:
    """Pull choices[0].message.content out of a completion response."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise AIServiceUnavailable("Completion response is missing choices[0].message.content") from e
    if not isinstance(content, str):
        raise AIServiceUnavailable("Completion content is not a string")
    return content


async def request_completion(
    messages: list[dict[str, str]],
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Send a temperature-0 chat completion request and return the message content.

    Raises:
        AIServiceUnavailable: No API key, transport failure, non-200 status,
            or a response without message content.
    """
    if not settings.ai_api_key:
        raise AIServiceUnavailable("PERPLEXITY_API_KEY is not configured")

    body = {
        "model": settings.ai_model,
        "temperature": 0,
        "messages": messages,
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.ai_api_key}",
    }

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.ai_timeout)

    try:
        start_time = time.time()
        response = await client.post(settings.ai_endpoint, json=body, headers=headers)
        logger.info("Completion API returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to completion API: %s", e)
        raise AIServiceUnavailable(f"Failed to connect to completion API: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        # TODO(security): Response bodies may echo slip text; redact before shipping logs off-host.
        logger.error("Completion API error: %s - %s", response.status_code, response.text[:500])
        raise AIServiceUnavailable(f"Completion API error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise AIServiceUnavailable("Completion API returned a non-JSON body") from e
    return _completion_content(payload)


async def extract_via_ai(
    text: str,
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> ExtractionResult | None:
    """
    Run structured extraction through the completion API.

    Never raises: transport errors and malformed responses are logged and
    reported as None so the caller can continue with local results.
    """
    if not text:
        return None

    try:
        content = await request_completion(build_extraction_messages(text), settings, client=client)
    except AIServiceUnavailable as e:
        logger.warning("AI extraction unavailable: %s", e)
        return None

    result = parse_structured_response(content)
    if result is None:
        logger.warning("AI extraction returned no usable result")
    else:
        logger.debug("AI extraction produced %d bets", len(result.bets))
    return result
