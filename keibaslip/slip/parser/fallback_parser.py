"""Best-effort combination/amount recovery when no purchase rows parse.

This path is lower-confidence than the row parser: it ignores layout and
pairs the n-th combination found anywhere in the text with the n-th plausible
stake amount.
"""

import re

from keibaslip.domain.slip import Ticket, bet_type_arity, join_selections

from .common import MONEY_PATTERN, PAYOUT_MARKERS, canonical_bet_type_or_unknown, parse_amount

# Arrows, long-vowel mark, hyphen/minus/dash variants, and the kana glyphs OCR
# produces for the arrow on printed slips.
SEPARATOR_CLASS = "[→ー\\-－−—–っつづッﾂ]"
_SEP = rf"\s*{SEPARATOR_CLASS}\s*"
_NUM = r"(?<!\d)\d{1,2}(?!\d)"

# Horse numbers joined by separators; the run length is checked afterwards so
# "1-2-3" never yields the pair "1-2".
RUN_PATTERN = re.compile(rf"{_NUM}(?:{_SEP}{_NUM})+")
SINGLE_PATTERN = re.compile(r"(?<!\S)(\d{1,2})(?!\S)")
DATE_PATTERN = re.compile(r"\d{4}\s*[-/年]\s*\d{1,2}\s*[-/月]\s*\d{1,2}日?")

MIN_HORSE_NUMBER = 1
MAX_HORSE_NUMBER = 18
MIN_STAKE = 100
MAX_STAKE = 100_000
PAYOUT_CONTEXT_CHARS = 5


def _mask_dates(text: str) -> str:
    return DATE_PATTERN.sub(lambda m: " " * len(m.group()), text)


def _is_horse_number(value: str) -> bool:
    return MIN_HORSE_NUMBER <= int(value) <= MAX_HORSE_NUMBER


def _find_runs(text: str, length: int) -> list[list[str]]:
    runs = []
    for match in RUN_PATTERN.finditer(text):
        numbers = re.findall(r"\d+", match.group())
        if len(numbers) == length and all(_is_horse_number(n) for n in numbers):
            runs.append(numbers)
    return runs


def _find_combinations(text: str, bet_type: str) -> list[list[str]]:
    """
    Selections shaped for the bet type's arity.

    Known types only accept runs of their own length (isolated numbers for
    win/place). For 不明, triples are tried before pairs. Dates are masked
    out first.
    """
    text = _mask_dates(text)
    arity = bet_type_arity(bet_type)

    if arity == 1:
        return [[match.group(1)] for match in SINGLE_PATTERN.finditer(text) if _is_horse_number(match.group(1))]
    if arity is not None:
        return _find_runs(text, arity)
    return _find_runs(text, 3) or _find_runs(text, 2)


def _find_stake_amounts(text: str) -> list[int]:
    """Yen amounts that look like stakes: not next to 的中/払戻 and in a plausible range."""
    amounts: list[int] = []
    for match in MONEY_PATTERN.finditer(text):
        context = text[max(0, match.start() - PAYOUT_CONTEXT_CHARS) : match.end() + PAYOUT_CONTEXT_CHARS]
        if PAYOUT_MARKERS.search(context):
            continue
        value = parse_amount(match.group(1))
        if value is not None and MIN_STAKE <= value <= MAX_STAKE:
            amounts.append(value)
    return amounts


def extract_fallback(normalized_text: str, prior_type_guess: str | None) -> list[Ticket]:
    """
    Recover tickets from loosely patterned text.

    Args:
        normalized_text: Output of normalize_slip_text().
        prior_type_guess: Document-level bet type guess (may be a raw keyword).

    Returns:
        One ticket per combination/amount pair; surplus combinations or
        amounts are dropped rather than cross-matched.
    """
    if not normalized_text:
        return []

    bet_type = canonical_bet_type_or_unknown(prior_type_guess)
    combos = _find_combinations(normalized_text, bet_type)
    amounts = _find_stake_amounts(normalized_text)

    return [
        Ticket(
            type=bet_type,
            numbers=join_selections(bet_type, selections),
            amount=amount,
            payout=0,
            provenance="local",
        )
        for selections, amount in zip(combos, amounts)
    ]
