"""Per-row ticket extraction for online purchase history slips.

Online slips (即PAT, SPAT4) list one purchase per row:

    1 2025年10月20日 東京11R 3連単 通常 2→5→7 100円 的中 12,340円

Each row yields zero or more tickets; formation rows expand into every
concrete combination.
"""

import itertools
import re

from keibaslip.domain.slip import (
    BRACKET_TYPES,
    ORDERED_TYPES,
    FormationGroup,
    Ticket,
    bet_type_arity,
    join_selections,
)

from .common import BET_TYPE_KEYWORDS, PAYOUT_MARKERS, ROW_BET_TYPE_PATTERN, TRACK_RACE_PATTERN, parse_money_token

# A row starts with its index followed by the purchase date.
ROW_START_PATTERN = re.compile(r"\d+\s+\d{4}年\d{1,2}月\d{1,2}日")
ROW_DATE_PREFIX = re.compile(r"^\d{4}年\d{1,2}月\d{1,2}日")
ROW_INDEX_PREFIX = re.compile(r"^\s*\d+\s*")

FORMATION_PATTERN = re.compile(r"馬([1-3])[:：]([^馬]+)")
FORMATION_NOISE = re.compile(r"[()（）\[\]［］各計]")
# Comma-joined horse numbers; a bare whitespace gap (e.g. before "8 点") ends the list.
FORMATION_CANDIDATES = re.compile(r"\s*(\d{1,2}(?:\s*[、,]\s*\d{1,2})*)(?!\d)")
FORMATION_SPLIT = re.compile(r"[、,\s]+")
HORSE_NUMBER = re.compile(r"\d{1,2}")

COMBINATION_TOKEN_PATTERN = re.compile(r"\d+(?:[→\-]\d+){1,2}")
SELECTION_SEPARATOR = re.compile(r"[→\-]")


def _segment_rows(text: str) -> list[str]:
    """Split text into row candidates at each '<index> <YYYY>年<M>月<D>日'."""
    starts = [match.start() for match in ROW_START_PATTERN.finditer(text)]
    rows: list[str] = []
    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(text)
        row = text[start:end].strip()
        if row:
            rows.append(row)
    return rows


def _collect_amounts(tokens: list[str]) -> tuple[int | None, int | None]:
    """
    Pick (stake, payout) from a row's tokens.

    The first money token not preceded by 的中/払戻 is the stake; the next
    money token seen is the payout. Any further money tokens are ignored.
    """
    amount: int | None = None
    payout: int | None = None
    for idx, token in enumerate(tokens):
        value = parse_money_token(token)
        if value is None:
            continue
        prev_token = tokens[idx - 1] if idx > 0 else ""
        if amount is None and not PAYOUT_MARKERS.search(prev_token):
            amount = value
        elif payout is None:
            payout = value
    return amount, payout


def _parse_formation_groups(row_text: str) -> list[FormationGroup]:
    """Parse '馬1:1,3 馬2:2,4 ...' into per-position candidate lists."""
    groups: dict[int, FormationGroup] = {}
    for match in FORMATION_PATTERN.finditer(row_text):
        position = int(match.group(1))
        cleaned = FORMATION_NOISE.sub(" ", match.group(2))
        list_match = FORMATION_CANDIDATES.match(cleaned)
        if not list_match:
            continue
        candidates = [value for value in FORMATION_SPLIT.split(list_match.group(1)) if value]
        if candidates:
            groups[position] = FormationGroup(position=position, candidates=candidates)
    return [groups[position] for position in sorted(groups)]


def _combination_key(bet_type: str, combo: tuple[str, ...]) -> tuple[str, ...]:
    if bet_type in ORDERED_TYPES:
        return combo
    return tuple(sorted(combo, key=int))


def _expand_formation(groups: list[FormationGroup], bet_type: str) -> list[list[str]]:
    """Cartesian product of candidates over positions 1..arity, deduplicated."""
    arity = bet_type_arity(bet_type)
    if arity is None or arity < 2:
        return []

    by_position = {group.position: group.candidates for group in groups}
    lists = [by_position.get(position, []) for position in range(1, arity + 1)]
    if not all(lists):
        return []

    allow_repeats = bet_type in BRACKET_TYPES and arity == 2
    seen: set[tuple[str, ...]] = set()
    combinations: list[list[str]] = []
    for combo in itertools.product(*lists):
        if not allow_repeats and len(set(combo)) < len(combo):
            continue
        key = _combination_key(bet_type, combo)
        if key in seen:
            continue
        seen.add(key)
        combinations.append(list(combo))
    return combinations


def _find_single_combination(tokens: list[str], bet_type: str) -> list[str] | None:
    """Find the explicit combination token (e.g. '2→5→7', '3-8', or '5' for win/place)."""
    arity = bet_type_arity(bet_type)
    if arity is None:
        return None

    if arity == 1:
        for token in tokens:
            if HORSE_NUMBER.fullmatch(token):
                return [token]
        return None

    for token in tokens:
        match = COMBINATION_TOKEN_PATTERN.search(token)
        if not match:
            continue
        parts = [part for part in SELECTION_SEPARATOR.split(match.group()) if part]
        if len(parts) == arity:
            return parts
    return None


def _parse_row(row: str) -> list[Ticket]:
    """Parse a single purchase row into tickets (empty if the row is unusable)."""
    row_text = ROW_INDEX_PREFIX.sub("", row, count=1)
    date_match = ROW_DATE_PREFIX.match(row_text)
    if not date_match:
        return []
    row_text = row_text[date_match.end() :].strip()

    track_match = TRACK_RACE_PATTERN.search(row_text)
    if track_match:
        row_text = row_text.replace(track_match.group(0), "", 1).strip()

    type_match = ROW_BET_TYPE_PATTERN.search(row_text)
    if not type_match:
        return []
    bet_type = BET_TYPE_KEYWORDS[type_match.group(1)]

    row_text = row_text.replace(type_match.group(1), "", 1)
    row_text = row_text.replace("通常", " ")
    row_text = re.sub(r"\|+", " ", row_text).strip()
    tokens = row_text.split()

    amount, payout = _collect_amounts(tokens)
    if not amount:
        return []

    def make_ticket(selections: list[str]) -> Ticket:
        return Ticket(
            type=bet_type,
            numbers=join_selections(bet_type, selections),
            amount=amount,
            payout=payout or 0,
            provenance="local",
        )

    groups = _parse_formation_groups(row_text)
    if len(groups) >= 2:
        combinations = _expand_formation(groups, bet_type)
        if combinations:
            return [make_ticket(combo) for combo in combinations]

    selections = _find_single_combination(tokens, bet_type)
    if selections is None:
        return []
    return [make_ticket(selections)]


def _extract_row_tickets(text: str) -> list[Ticket]:
    """Extract tickets from every purchase row in the text."""
    tickets: list[Ticket] = []
    for row in _segment_rows(text):
        tickets.extend(_parse_row(row))
    return tickets
