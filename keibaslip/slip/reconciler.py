"""Merge locally parsed tickets with AI-extracted tickets."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import replace

from keibaslip.domain.slip import ExtractionResult, Ticket, join_selections

from .parser.common import canonical_bet_type_or_unknown


def _normalized_ai_ticket(ticket: Ticket) -> Ticket:
    """Canonicalize an AI ticket's type and re-join its numbers for that type."""
    bet_type = canonical_bet_type_or_unknown(ticket.type)
    selections = ticket.selections or [ticket.numbers]
    return Ticket(
        type=bet_type,
        numbers=join_selections(bet_type, selections),
        amount=ticket.amount or 0,
        payout=ticket.payout or 0,
        provenance="ai",
    )


def reconcile(local_tickets: Iterable[Ticket], ai_tickets: Iterable[Ticket]) -> list[Ticket]:
    """
    Union two ticket lists keyed by (type, numbers).

    Local tickets are authoritative: when both sources produce the same key,
    the AI ticket only fills an amount or payout that is zero locally.
    Tickets only the AI found are appended with provenance "ai".

    Inputs are not modified; the result holds new Ticket objects in
    first-seen order.
    """
    merged: dict[str, Ticket] = {}
    for ticket in local_tickets:
        merged[ticket.key] = replace(ticket)

    for raw in ai_tickets:
        ticket = _normalized_ai_ticket(raw)
        existing = merged.get(ticket.key)
        if existing is None:
            merged[ticket.key] = ticket
            continue

        if not existing.amount and ticket.amount:
            existing.amount = ticket.amount
        if not existing.payout and ticket.payout:
            existing.payout = ticket.payout
        if existing.provenance == "local":
            existing.provenance = "local+ai"

    return list(merged.values())


def reconcile_header(local: ExtractionResult, ai: ExtractionResult | None) -> ExtractionResult:
    """
    Combine header fields: local values win, AI fills the gaps.

    Returns a new ExtractionResult carrying the local bets list and payout;
    the caller sets the reconciled tickets and decides the payout.
    """
    merged = replace(local, bets=list(local.bets))
    if ai is not None:
        if merged.date is None:
            merged.date = ai.date
        if merged.source == "unknown":
            merged.source = ai.source
        if merged.track is None:
            merged.track = ai.track
        if merged.race_name is None:
            merged.race_name = ai.race_name
        if merged.memo is None:
            merged.memo = ai.memo

    if merged.track is None and merged.race_name:
        match = re.match(r"^(\S+)", merged.race_name)
        if match:
            merged.track = match.group(1)
    return merged
