"""Betting-slip text extraction: normalization, parsing and reconciliation.

Usage:
    from keibaslip.slip import extract_deterministic, normalize_slip_text, reconcile
"""

from keibaslip.slip.ai_response import build_extraction_messages, parse_structured_response, strip_code_fence
from keibaslip.slip.parser import extract_fallback
from keibaslip.slip.reconciler import reconcile, reconcile_header
from keibaslip.slip.slip_parser import extract_deterministic
from keibaslip.slip.text_normalization import normalize_slip_text

__all__ = [
    "build_extraction_messages",
    "extract_deterministic",
    "extract_fallback",
    "normalize_slip_text",
    "parse_structured_response",
    "reconcile",
    "reconcile_header",
    "strip_code_fence",
]
