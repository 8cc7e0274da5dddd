"""FastAPI server exposing OCR and slip extraction to the betting form."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keibaslip.application.slips.extract import SlipExtractionRequest, run_slip_extraction
from keibaslip.domain.slip import ExtractionResult
from keibaslip.runtime import get_logger, get_settings
from keibaslip.runtime.ai_client import extract_via_ai
from keibaslip.runtime.vision_client import OCRServiceUnavailable, request_document_text
from keibaslip.slip.formatter import extraction_to_dict, to_storage_bets

logger = get_logger(__name__)

app = FastAPI(title="Betting Slip OCR")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


async def _read_json_object(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


async def _ai_extractor(text: str) -> ExtractionResult | None:
    return await extract_via_ai(text, get_settings())


async def _run_pipeline(text: str, use_ai: bool) -> dict[str, Any]:
    extraction = await run_slip_extraction(
        SlipExtractionRequest(
            raw_text=text,
            settings=get_settings(),
            use_ai=use_ai and get_settings().ai_enabled,
            ai_extractor=_ai_extractor,
        )
    )
    payload = extraction_to_dict(extraction.result)
    payload["storageBets"] = to_storage_bets(extraction.result.bets)
    payload["usedFallback"] = extraction.used_fallback
    payload["aiStatus"] = extraction.ai_status
    return payload


@app.post("/vision")
async def vision(request: Request) -> JSONResponse:
    """Recognize text in a base64 (or data URL) image."""
    body = await _read_json_object(request)
    image_data = body.get("imageData") if body else None
    if not image_data or not isinstance(image_data, str):
        return _error("imageData must be a base64 string", 400)

    try:
        text = await request_document_text(image_data, get_settings())
    except OCRServiceUnavailable as e:
        logger.error("OCR failed: %s", e)
        return _error("OCR failed", 502)
    return JSONResponse({"text": text})


@app.post("/ocr/structure")
async def ocr_structure(request: Request) -> JSONResponse:
    """Structured extraction of OCR text through the completion API only."""
    body = await _read_json_object(request)
    text = body.get("text") if body else None
    if not text or not isinstance(text, str):
        return _error("text must be a non-empty string", 400)

    if not get_settings().ai_enabled:
        return _error("AI extraction is not configured", 503)

    result = await extract_via_ai(text, get_settings())
    if result is None:
        return _error("AI extraction failed", 502)
    return JSONResponse(extraction_to_dict(result))


@app.post("/ocr/extract")
async def ocr_extract(request: Request) -> JSONResponse:
    """Full pipeline over OCR text: local parsing, optional AI, reconciliation."""
    body = await _read_json_object(request)
    text = body.get("text") if body else None
    if not text or not isinstance(text, str):
        return _error("text must be a non-empty string", 400)

    use_ai = body.get("useAi", True) is not False
    return JSONResponse(await _run_pipeline(text, use_ai))


@app.post("/scan")
async def scan(request: Request) -> JSONResponse:
    """Receive a slip photo, OCR it, and return the extracted tickets."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return _error("No file found in request", 400)

    contents = await file.read()
    if not contents:
        return _error("Uploaded file is empty", 400)

    try:
        text = await request_document_text(contents, get_settings())
    except OCRServiceUnavailable as e:
        logger.error("OCR failed: %s", e)
        return _error("OCR failed", 502)

    payload = await _run_pipeline(text, use_ai=True)
    payload["text"] = text
    return JSONResponse(payload)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
