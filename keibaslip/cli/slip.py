"""Slip-related CLI commands."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from keibaslip.runtime import get_logger
from keibaslip.slip.formatter import extraction_to_dict, format_extraction

if TYPE_CHECKING:
    from keibaslip.application.slips.extract import SlipExtraction

logger = get_logger(__name__)


def _read_text_source(source: str | None) -> str:
    if source is None or source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_extraction(extraction: "SlipExtraction", as_json: bool) -> None:
    if as_json:
        payload = extraction_to_dict(extraction.result)
        payload["usedFallback"] = extraction.used_fallback
        payload["aiStatus"] = extraction.ai_status
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    print(format_extraction(extraction.result))
    if extraction.used_fallback:
        print("(行単位で解析できなかったため、簡易抽出の結果です)")
    if extraction.ai_status == "failed":
        print("(AI抽出に失敗したため、ローカル解析の結果のみです)")


def cmd_parse(args: argparse.Namespace) -> int:
    """Extract tickets from OCR text read from a file or stdin."""
    from keibaslip.application.slips.extract import SlipExtractionRequest, run_slip_extraction

    try:
        raw_text = _read_text_source(args.file)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.file, e)
        print(f"Error: cannot read {args.file}: {e}")
        return 1

    extraction = asyncio.run(run_slip_extraction(SlipExtractionRequest(raw_text=raw_text, use_ai=not args.no_ai)))
    _print_extraction(extraction, args.json)
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """OCR a slip photo and extract its tickets."""
    from keibaslip.application.slips.scan import SlipScanRequest, run_slip_scan

    result = asyncio.run(run_slip_scan(SlipScanRequest(image_path=Path(args.image), use_ai=not args.no_ai)))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        return 1

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Set GCV_API_KEY before scanning slips.")
        return 1

    if result.status == "empty_text" or result.extraction is None:
        print(f"Scan failed: {result.error or 'no extraction output'}")
        return 1

    _print_extraction(result.extraction, args.json)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server."""
    import uvicorn

    from keibaslip.runtime import slip_server as server

    print(f"Starting slip server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/ocr/extract | /ocr/structure | /vision | /scan")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
