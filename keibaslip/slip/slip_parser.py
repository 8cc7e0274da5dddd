"""Parse normalized slip text into a structured ExtractionResult."""

from keibaslip.domain.slip import ExtractionResult

from .parser import (
    _extract_aggregate_payout,
    _extract_date,
    _extract_document_bet_type,
    _extract_row_tickets,
    _extract_source,
    _extract_track_and_race,
)


def extract_deterministic(normalized_text: str) -> ExtractionResult:
    """
    Rule-based extraction of header fields and per-row tickets.

    Never raises. An empty ``bets`` list means no purchase row could be
    parsed and the caller should try the fallback extractor.

    Args:
        normalized_text: Output of normalize_slip_text().

    Returns:
        ExtractionResult with ``payout`` set from the slip's 払戻 total when
        one is printed.
    """
    if not normalized_text:
        return ExtractionResult()

    track, race_name = _extract_track_and_race(normalized_text)

    return ExtractionResult(
        date=_extract_date(normalized_text),
        source=_extract_source(normalized_text),
        track=track,
        race_name=race_name,
        payout=_extract_aggregate_payout(normalized_text),
        bets=_extract_row_tickets(normalized_text),
        bet_type_hint=_extract_document_bet_type(normalized_text),
    )
