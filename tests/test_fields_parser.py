from datetime import date

import pytest

from keibaslip.slip.parser.common import canonical_bet_type, canonical_bet_type_or_unknown, parse_money_token
from keibaslip.slip.parser.fields_parser import (
    _extract_aggregate_payout,
    _extract_date,
    _extract_document_bet_type,
    _extract_source,
    _extract_track_and_race,
)
from keibaslip.slip.text_normalization import normalize_slip_text


@pytest.mark.parametrize("text", ["2025年10月20日", "2025/10/20", "2025-10-20", "購入日 2025年10月20日 (月)"])
def test_extract_date_supports_kanji_slash_and_hyphen_forms(text: str) -> None:
    assert _extract_date(text) == date(2025, 10, 20)


def test_extract_date_zero_pads_single_digit_month_and_day() -> None:
    assert _extract_date("2025年1月5日").isoformat() == "2025-01-05"


def test_extract_date_skips_impossible_calendar_dates() -> None:
    assert _extract_date("2025年13月40日 発売 2025/10/20") == date(2025, 10, 20)


def test_extract_date_returns_none_without_date() -> None:
    assert _extract_date("単勝 5 100円") is None


def test_extract_track_and_race_formats_race_name() -> None:
    assert _extract_track_and_race("大井 3R 馬単") == ("大井", "大井 3R")
    assert _extract_track_and_race("名古屋12R") == ("名古屋", "名古屋 12R")
    assert _extract_track_and_race("どこか 12R") == (None, None)


def test_extract_source_uses_fixed_priority() -> None:
    assert _extract_source("SPAT4 ... 紙馬券") == "紙馬券"
    assert _extract_source("iPAT と SPAT4") == "Spat4"
    assert _extract_source("即PAT 投票履歴") == "即pat"
    assert _extract_source("投票履歴") == "unknown"


def test_extract_source_after_fullwidth_folding() -> None:
    assert _extract_source(normalize_slip_text("ＳＰＡＴ４ 投票内容")) == "Spat4"


def test_extract_document_bet_type_prefers_trifecta_keywords() -> None:
    assert _extract_document_bet_type("単勝 ... 三連複") == "3連複"
    assert _extract_document_bet_type("ワイド 1-2") == "ワイド"
    assert _extract_document_bet_type("no bet here") is None


def test_extract_aggregate_payout_reads_first_payout_amount() -> None:
    assert _extract_aggregate_payout("払戻金額 12,340円") == 12340
    assert _extract_aggregate_payout("払戻金 1200円") == 1200
    assert _extract_aggregate_payout("購入金額 100円") is None


def test_parse_money_token_handles_commas_and_decorations() -> None:
    assert parse_money_token("1,000円") == 1000
    assert parse_money_token("各100円") == 100
    assert parse_money_token("(2,500円)") == 2500
    assert parse_money_token("2→5→7") is None
    assert parse_money_token("円") is None


def test_canonical_bet_type_uses_keyword_containment() -> None:
    assert canonical_bet_type("３連単フォーメーション") == "3連単"
    assert canonical_bet_type("三連複") == "3連複"
    assert canonical_bet_type("馬連(ボックス)") == "馬連"
    assert canonical_bet_type("枠複") == "枠複"
    assert canonical_bet_type("exotic") == "exotic"
    assert canonical_bet_type(None) is None


def test_canonical_bet_type_or_unknown_falls_back_to_fumei() -> None:
    assert canonical_bet_type_or_unknown("exotic") == "不明"
    assert canonical_bet_type_or_unknown("") == "不明"
    assert canonical_bet_type_or_unknown("単勝") == "単勝"
