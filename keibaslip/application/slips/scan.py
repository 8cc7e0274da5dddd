"""Slip scan workflow: image -> OCR text -> extraction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from keibaslip.application.slips.extract import SlipExtraction, SlipExtractionRequest, run_slip_extraction
from keibaslip.runtime import Settings, get_settings
from keibaslip.runtime.vision_client import OCRServiceUnavailable, request_document_text

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "empty_text",
    "extracted",
]


@dataclass(frozen=True)
class SlipScanRequest:
    """Inputs for running the slip scan workflow."""

    image_path: Path
    settings: Settings | None = None
    use_ai: bool = True


@dataclass(frozen=True)
class SlipScanResult:
    """Outcome from the slip scan workflow."""

    status: ScanStatus
    extraction: SlipExtraction | None = None
    ocr_text: str | None = None
    error: str | None = None


async def run_slip_scan(request: SlipScanRequest) -> SlipScanResult:
    """Run scan flow: OCR the image, then extract tickets from its text."""
    if not request.image_path.exists():
        return SlipScanResult(
            status="file_not_found",
            error=f"Slip image not found: {request.image_path}",
        )

    settings = request.settings or get_settings()
    try:
        text = await request_document_text(request.image_path.read_bytes(), settings)
    except OCRServiceUnavailable as exc:
        return SlipScanResult(
            status="ocr_unavailable",
            error=str(exc),
        )

    if not text.strip():
        return SlipScanResult(
            status="empty_text",
            ocr_text=text,
            error="No text was recognized in the image",
        )

    extraction = await run_slip_extraction(
        SlipExtractionRequest(raw_text=text, settings=settings, use_ai=request.use_ai)
    )
    return SlipScanResult(
        status="extracted",
        extraction=extraction,
        ocr_text=text,
    )
