"""Canonicalize noisy OCR text from betting slips.

The steps run in a fixed order; later steps rely on the output of earlier
ones (e.g. separator repair only sees half-width digits after folding).
"""

import re

# Known OCR misreads, applied before any folding.
OCR_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("三較", "三連"),
    ("三練", "三連"),
    ("三鎌", "三連"),
    ("三絵", "三連"),
    ("馬ノ", "馬の"),
    ("￥", "円"),
)

_FULLWIDTH_DIGIT = re.compile(r"[０-９]")
_FULLWIDTH_UPPER = re.compile(r"[Ａ-Ｚ]")
_FULLWIDTH_LOWER = re.compile(r"[ａ-ｚ]")
_SLASH_VARIANTS = re.compile(r"[／⁄]")

# "2っ56" -> "2っ5っ6": a separator glyph was dropped between the last two digits.
_DROPPED_SEPARATOR = re.compile(r"(\d)[っつづッﾂ](\d)(?=\d)")

_PIPE_BEFORE_DIGIT = re.compile(r"\|(?=\d)")
_BARE_PIPE = re.compile(r"\|(?!\s)")


def _fold_fullwidth(text: str) -> str:
    text = _FULLWIDTH_DIGIT.sub(lambda m: chr(ord(m.group()) - 0xFF10 + 0x30), text)
    text = _FULLWIDTH_UPPER.sub(lambda m: chr(ord(m.group()) - 0xFF21 + 0x41), text)
    return _FULLWIDTH_LOWER.sub(lambda m: chr(ord(m.group()) - 0xFF41 + 0x61), text)


def _repair_dropped_separators(text: str) -> str:
    # Repeat until stable so long digit runs are fully split and the
    # function stays idempotent.
    while True:
        repaired = _DROPPED_SEPARATOR.sub(r"\1っ\2っ", text)
        if repaired == text:
            return repaired
        text = repaired


def normalize_slip_text(raw_text: str | None) -> str:
    """Return a canonical working string for the slip parsers.

    Never raises; empty or missing input yields an empty string.
    """
    if not raw_text:
        return ""

    normalized = raw_text
    for pattern, replacement in OCR_SUBSTITUTIONS:
        normalized = normalized.replace(pattern, replacement)

    normalized = _fold_fullwidth(normalized)
    normalized = _SLASH_VARIANTS.sub("/", normalized)
    normalized = _repair_dropped_separators(normalized)

    # A pipe glued to a digit is table-border noise; any other pipe is a field separator.
    normalized = _PIPE_BEFORE_DIGIT.sub(" ", normalized)
    normalized = _BARE_PIPE.sub(" | ", normalized)

    normalized = normalized.replace("ＳＰＡＴ", "SPAT")
    normalized = normalized.replace("ｓｐａｔ", "spat")
    return normalized
