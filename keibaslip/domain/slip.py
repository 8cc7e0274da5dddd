"""Data models for betting-slip extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

Provenance = Literal["local", "ai", "local+ai"]
SlipSource = Literal["即pat", "Spat4", "紙馬券", "unknown"]

UNKNOWN_BET_TYPE = "不明"

# Canonical bet type vocabulary, in the order the betting form lists them.
BET_TYPES: tuple[str, ...] = (
    "単勝",
    "複勝",
    "枠連",
    "枠単",
    "枠複",
    "馬連",
    "馬単",
    "ワイド",
    "3連複",
    "3連単",
)

SINGLE_SELECTION_TYPES = frozenset({"単勝", "複勝"})
THREE_SELECTION_TYPES = frozenset({"3連複", "3連単"})
# Order of selections matters for these; everything else is a set.
ORDERED_TYPES = frozenset({"3連単", "馬単", "枠単"})
# Two selections may share a bracket number (e.g. 枠連 7-7).
BRACKET_TYPES = frozenset({"枠連", "枠単", "枠複"})

SOURCES: tuple[SlipSource, ...] = ("即pat", "Spat4", "紙馬券", "unknown")


def bet_type_arity(bet_type: str) -> int | None:
    """Number of selections a ticket of this type carries (None if unknown)."""
    if bet_type in SINGLE_SELECTION_TYPES:
        return 1
    if bet_type in THREE_SELECTION_TYPES:
        return 3
    if bet_type in BET_TYPES:
        return 2
    return None


def numbers_delimiter(bet_type: str) -> str:
    """Delimiter used to join selections: arrow for 3-connected types, hyphen otherwise."""
    return "→" if bet_type in THREE_SELECTION_TYPES else "-"


def join_selections(bet_type: str, selections: list[str]) -> str:
    if len(selections) == 1:
        return selections[0]
    return numbers_delimiter(bet_type).join(selections)


@dataclass
class Ticket:
    """One concrete bet combination with its stake and (if known) payout."""

    type: str
    numbers: str
    amount: int = 0
    payout: int = 0
    provenance: Provenance = "local"

    @property
    def selections(self) -> list[str]:
        parts = self.numbers.replace("→", "-").split("-")
        return [part.strip() for part in parts if part.strip()]

    @property
    def key(self) -> str:
        """Identity used when merging tickets from different extractors."""
        return f"{self.type}|{''.join(self.numbers.split())}"


@dataclass
class FormationGroup:
    """Candidate horse numbers for one finishing position of a formation bet."""

    position: int
    candidates: list[str] = field(default_factory=list)


@dataclass
class ExtractionResult:
    """Structured data extracted from one slip's OCR text."""

    date: date | None = None
    source: SlipSource = "unknown"
    track: str | None = None
    race_name: str | None = None
    payout: int | None = None  # Aggregate payout for the whole slip
    memo: str | None = None
    bets: list[Ticket] = field(default_factory=list)
    bet_type_hint: str | None = None  # Document-level type guess

    @property
    def total_amount(self) -> int:
        return sum(ticket.amount for ticket in self.bets)

    @property
    def ticket_payout_total(self) -> int:
        return sum(ticket.payout for ticket in self.bets)

    @property
    def recovery_rate(self) -> float | None:
        """Payout as a percentage of total stake."""
        total = self.total_amount
        if total <= 0:
            return None
        return round((self.payout or 0) / total * 100, 1)
