from datetime import date

from keibaslip.domain.slip import ExtractionResult, Ticket
from keibaslip.slip.reconciler import reconcile, reconcile_header


def test_local_nonzero_amount_is_never_overwritten() -> None:
    local = [Ticket(type="馬連", numbers="3-8", amount=500)]
    ai = [Ticket(type="馬連", numbers="3-8", amount=300, payout=2400, provenance="ai")]

    merged = reconcile(local, ai)

    assert merged == [Ticket(type="馬連", numbers="3-8", amount=500, payout=2400, provenance="local+ai")]


def test_ai_fills_missing_local_amount() -> None:
    local = [Ticket(type="ワイド", numbers="1-2", amount=0)]
    ai = [Ticket(type="ワイド", numbers="1-2", amount=200, provenance="ai")]

    assert reconcile(local, ai) == [Ticket(type="ワイド", numbers="1-2", amount=200, provenance="local+ai")]


def test_ai_only_tickets_are_appended_after_local() -> None:
    local = [Ticket(type="単勝", numbers="5", amount=1000)]
    ai = [
        Ticket(type="単勝", numbers="5", amount=1000, provenance="ai"),
        Ticket(type="複勝", numbers="7", amount=200, provenance="ai"),
    ]

    merged = reconcile(local, ai)

    assert [(t.type, t.numbers, t.provenance) for t in merged] == [
        ("単勝", "5", "local+ai"),
        ("複勝", "7", "ai"),
    ]


def test_ai_ticket_is_canonicalized_before_matching() -> None:
    local = [Ticket(type="3連単", numbers="2→5→7", amount=100)]
    ai = [Ticket(type="三連単", numbers="2-5-7", amount=100, payout=12340, provenance="ai")]

    merged = reconcile(local, ai)

    assert merged == [Ticket(type="3連単", numbers="2→5→7", amount=100, payout=12340, provenance="local+ai")]


def test_unrecognized_ai_type_becomes_fumei() -> None:
    merged = reconcile([], [Ticket(type="WIN5", numbers="1-2", amount=100, provenance="ai")])

    assert merged == [Ticket(type="不明", numbers="1-2", amount=100, provenance="ai")]


def test_reconcile_does_not_mutate_inputs() -> None:
    local = [Ticket(type="馬単", numbers="3-8", amount=0)]
    ai = [Ticket(type="馬単", numbers="3-8", amount=400, provenance="ai")]

    merged = reconcile(local, ai)

    assert merged[0].amount == 400
    assert local == [Ticket(type="馬単", numbers="3-8", amount=0)]
    assert ai == [Ticket(type="馬単", numbers="3-8", amount=400, provenance="ai")]


def test_reconcile_without_ai_keeps_local_order() -> None:
    local = [
        Ticket(type="馬連", numbers="3-8", amount=500),
        Ticket(type="単勝", numbers="5", amount=1000),
    ]

    assert reconcile(local, []) == local


def test_reconcile_header_local_wins_and_ai_fills_gaps() -> None:
    local = ExtractionResult(source="即pat", race_name=None, payout=12340)
    ai = ExtractionResult(
        date=date(2025, 10, 20),
        source="紙馬券",
        track=None,
        race_name="東京 11R",
        payout=999,
        memo="WIN5以外",
    )

    merged = reconcile_header(local, ai)

    assert merged.date == date(2025, 10, 20)
    assert merged.source == "即pat"
    assert merged.race_name == "東京 11R"
    assert merged.track == "東京"
    assert merged.memo == "WIN5以外"
    assert merged.payout == 12340
    assert local.date is None


def test_reconcile_header_without_ai_returns_copy() -> None:
    local = ExtractionResult(track="中山", race_name="中山 1R", bets=[Ticket(type="単勝", numbers="1", amount=100)])

    merged = reconcile_header(local, None)

    assert merged == local
    assert merged is not local
    assert merged.bets is not local.bets
