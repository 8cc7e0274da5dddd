"""Date/track/source/summary amount extraction helpers."""

import re
from datetime import date

from keibaslip.domain.slip import SlipSource

from .common import AMOUNT, BET_TYPE_KEYWORDS, DOCUMENT_BET_TYPE_PRIORITY, TRACK_RACE_PATTERN, parse_amount

DATE_PATTERNS = (
    re.compile(r"(\d{4})年(\d{1,2})月(\d{1,2})日"),
    re.compile(r"(\d{4})/(\d{1,2})/(\d{1,2})"),
    re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})"),
)

AGGREGATE_PAYOUT_PATTERN = re.compile(rf"払戻.*?({AMOUNT})円")


def _extract_date(text: str) -> date | None:
    """
    Extract the slip date.

    Patterns are tried in order (kanji, slash, hyphen) and the first valid
    calendar date wins. A match such as 2025年13月40日 is skipped rather than
    returned.
    """
    for pattern in DATE_PATTERNS:
        for match in pattern.finditer(text):
            year, month, day = (int(group) for group in match.groups())
            try:
                return date(year, month, day)
            except ValueError:
                continue
    return None


def _extract_track_and_race(text: str) -> tuple[str | None, str | None]:
    """Return (track, race_name) such as ("東京", "東京 11R")."""
    match = TRACK_RACE_PATTERN.search(text)
    if not match:
        return None, None
    track, race_number = match.group(1), match.group(2)
    return track, f"{track} {race_number}R"


def _extract_source(text: str) -> SlipSource:
    """Purchase channel by keyword priority, independent of position in the text."""
    if "紙馬券" in text:
        return "紙馬券"
    if "SPAT4" in text or "Spat4" in text:
        return "Spat4"
    if "即pat" in text or "即PAT" in text or "iPAT" in text:
        return "即pat"
    return "unknown"


def _extract_document_bet_type(text: str) -> str | None:
    """First bet type keyword present anywhere in the text, canonicalized."""
    for keyword in DOCUMENT_BET_TYPE_PRIORITY:
        if keyword in text:
            return BET_TYPE_KEYWORDS[keyword]
    return None


def _extract_aggregate_payout(text: str) -> int | None:
    match = AGGREGATE_PAYOUT_PATTERN.search(text)
    if not match:
        return None
    return parse_amount(match.group(1))
