"""Slip workflows: text extraction and image scanning."""

from keibaslip.application.slips.extract import SlipExtraction, SlipExtractionRequest, run_slip_extraction
from keibaslip.application.slips.scan import SlipScanRequest, SlipScanResult, run_slip_scan

__all__ = [
    "SlipExtraction",
    "SlipExtractionRequest",
    "SlipScanRequest",
    "SlipScanResult",
    "run_slip_extraction",
    "run_slip_scan",
]
