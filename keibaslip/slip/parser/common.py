"""Shared constants and helpers for betting-slip text parsing."""

import re

from keibaslip.domain.slip import BET_TYPES, UNKNOWN_BET_TYPE

# JRA tracks first, then regional (NAR) tracks.
CENTRAL_TRACKS: tuple[str, ...] = (
    "札幌",
    "函館",
    "福島",
    "新潟",
    "東京",
    "中山",
    "中京",
    "京都",
    "阪神",
    "小倉",
)
LOCAL_TRACKS: tuple[str, ...] = (
    "門別",
    "盛岡",
    "水沢",
    "浦和",
    "船橋",
    "大井",
    "川崎",
    "金沢",
    "笠松",
    "名古屋",
    "園田",
    "姫路",
    "高知",
    "佐賀",
    "帯広",
)
KNOWN_TRACKS: tuple[str, ...] = CENTRAL_TRACKS + LOCAL_TRACKS

TRACK_RACE_PATTERN = re.compile(r"(" + "|".join(map(re.escape, KNOWN_TRACKS)) + r")\s*(\d{1,2})R")

# Keyword as printed on the slip -> canonical bet type.
BET_TYPE_KEYWORDS: dict[str, str] = {
    "三連単": "3連単",
    "三連複": "3連複",
    "3連単": "3連単",
    "3連複": "3連複",
    "馬連": "馬連",
    "馬単": "馬単",
    "ワイド": "ワイド",
    "単勝": "単勝",
    "複勝": "複勝",
    "枠連": "枠連",
    "枠単": "枠単",
    "枠複": "枠複",
}

# Priority used for the document-level guess (first keyword present wins).
DOCUMENT_BET_TYPE_PRIORITY: tuple[str, ...] = (
    "三連単",
    "三連複",
    "3連単",
    "3連複",
    "馬連",
    "馬単",
    "ワイド",
    "単勝",
    "複勝",
    "枠連",
    "枠単",
    "枠複",
)

# Alternatives sorted longest first so the earliest match is also the longest.
ROW_BET_TYPE_PATTERN = re.compile(
    "(" + "|".join(sorted(map(re.escape, BET_TYPE_KEYWORDS), key=len, reverse=True)) + ")"
)

# Yen amount, with or without thousands separators.
AMOUNT = r"\d{1,3}(?:,\d{3})+|\d+"
MONEY_TOKEN_PATTERN = re.compile(rf"^({AMOUNT})円$")
MONEY_PATTERN = re.compile(rf"({AMOUNT})円")

# Context words marking a money value as a payout rather than a stake.
PAYOUT_MARKERS = re.compile(r"的中|払戻")


def parse_amount(text: str) -> int | None:
    """Parse '1,200' / '1200' into an integer yen amount."""
    cleaned = text.replace(",", "").strip()
    if not cleaned.isdigit():
        return None
    return int(cleaned)


def parse_money_token(token: str) -> int | None:
    """Return the yen value of a whitespace token like '1,000円' or '(100円)'."""
    sanitized = re.sub(r"[^0-9,円]", "", token)
    if not sanitized:
        return None
    match = MONEY_TOKEN_PATTERN.match(sanitized)
    if not match:
        return None
    return parse_amount(match.group(1))


def canonical_bet_type(raw_type: str | None) -> str | None:
    """
    Map a free-form bet type label onto the canonical vocabulary.

    Uses keyword containment, checked most-specific first, so labels such as
    "３連単 フォーメーション" or "馬連(ボックス)" still resolve. Returns None for
    empty input and the input unchanged when nothing matches.
    """
    if not raw_type:
        return None
    label = re.sub(r"\s+", "", raw_type).replace("３", "3")
    if "枠単" in label:
        return "枠単"
    if "枠複" in label:
        return "枠複"
    if "枠連" in label:
        return "枠連"
    if "三連単" in label or "3連単" in label:
        return "3連単"
    if "三連複" in label or "3連複" in label:
        return "3連複"
    if "馬連" in label:
        return "馬連"
    if "馬単" in label:
        return "馬単"
    if "ワイド" in label:
        return "ワイド"
    if "単勝" in label:
        return "単勝"
    if "複勝" in label:
        return "複勝"
    return raw_type


def canonical_bet_type_or_unknown(raw_type: str | None) -> str:
    """Like canonical_bet_type but anything outside the vocabulary becomes 不明."""
    canonical = canonical_bet_type(raw_type)
    if canonical in BET_TYPES:
        return canonical
    return UNKNOWN_BET_TYPE
