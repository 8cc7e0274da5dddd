"""Composable betting-slip parser components."""

from .common import canonical_bet_type, canonical_bet_type_or_unknown
from .fallback_parser import extract_fallback
from .fields_parser import (
    _extract_aggregate_payout,
    _extract_date,
    _extract_document_bet_type,
    _extract_source,
    _extract_track_and_race,
)
from .rows_parser import _extract_row_tickets

__all__ = [
    "_extract_aggregate_payout",
    "_extract_date",
    "_extract_document_bet_type",
    "_extract_row_tickets",
    "_extract_source",
    "_extract_track_and_race",
    "canonical_bet_type",
    "canonical_bet_type_or_unknown",
    "extract_fallback",
]
