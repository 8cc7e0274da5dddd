"""Format extraction results for storage, JSON responses and the terminal."""

from typing import Any

from keibaslip.domain.slip import ExtractionResult, Ticket


def to_storage_bets(tickets: list[Ticket]) -> list[dict[str, Any]]:
    """Ticket list in the persisted bet-row shape: [{type, numbers, amount}]."""
    return [{"type": ticket.type, "numbers": ticket.numbers, "amount": ticket.amount} for ticket in tickets]


def ticket_to_dict(ticket: Ticket) -> dict[str, Any]:
    return {
        "type": ticket.type,
        "numbers": ticket.numbers,
        "amount": ticket.amount,
        "payout": ticket.payout,
        "provenance": ticket.provenance,
    }


def extraction_to_dict(result: ExtractionResult) -> dict[str, Any]:
    """JSON-ready representation used by the HTTP service and `--json` output."""
    return {
        "date": result.date.isoformat() if result.date else None,
        "source": result.source,
        "track": result.track,
        "raceName": result.race_name,
        "payout": result.payout,
        "memo": result.memo,
        "bets": [ticket_to_dict(ticket) for ticket in result.bets],
        "totalAmount": result.total_amount,
        "recoveryRate": result.recovery_rate,
    }


def _format_yen(value: int) -> str:
    return f"{value:,}円"


def _format_ticket_rows(tickets: list[Ticket], indent: str = "  ") -> list[str]:
    """
    Format ticket lines with aligned columns.

    Args:
        tickets: Tickets to render
        indent: Indentation prefix for each line

    Returns:
        One line per ticket: type, numbers, stake, payout and provenance
    """
    if not tickets:
        return []

    max_type_len = max(len(ticket.type) for ticket in tickets)
    max_numbers_len = max(len(ticket.numbers) for ticket in tickets)
    amounts = [_format_yen(ticket.amount) for ticket in tickets]
    max_amount_len = max(len(amount) for amount in amounts)

    lines = []
    for ticket, amount in zip(tickets, amounts):
        base = (
            f"{indent}{ticket.type.ljust(max_type_len)}  "
            f"{ticket.numbers.ljust(max_numbers_len)}  {amount.rjust(max_amount_len)}"
        )
        if ticket.payout:
            base += f"  払戻 {_format_yen(ticket.payout)}"
        lines.append(f"{base}  [{ticket.provenance}]")
    return lines


def format_extraction(result: ExtractionResult) -> str:
    """Human-readable summary of an extraction result."""
    lines = [
        f"日付: {result.date.isoformat() if result.date else '-'}",
        f"購入元: {result.source}",
        f"レース: {result.race_name or result.track or '-'}",
    ]
    if result.memo:
        lines.append(f"メモ: {result.memo}")

    if result.bets:
        lines.append(f"買い目 ({len(result.bets)}点):")
        lines.extend(_format_ticket_rows(result.bets))
    else:
        lines.append("買い目: なし")

    lines.append(f"購入金額: {_format_yen(result.total_amount)}")
    lines.append(f"払戻金: {_format_yen(result.payout) if result.payout is not None else '-'}")
    rate = result.recovery_rate
    lines.append(f"回収率: {f'{rate:.1f}%' if rate is not None else '-'}")
    return "\n".join(lines)
