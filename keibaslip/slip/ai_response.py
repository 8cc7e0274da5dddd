"""Prompt construction and response parsing for structured (AI) slip extraction.

Nothing here talks to the network; the HTTP call lives in
``keibaslip.runtime.ai_client``. Model output is untrusted, so every field is
checked before it reaches an ExtractionResult.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any

from keibaslip.domain.slip import SOURCES, ExtractionResult, SlipSource, Ticket, join_selections
from keibaslip.runtime.logging import get_logger

from .parser.common import canonical_bet_type_or_unknown, parse_amount

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a precise data extraction assistant that only returns valid JSON."

EXTRACTION_PROMPT = (
    "以下の馬券明細テキストから、券種ごとの買い目一覧、レース情報、払戻金などを抽出してください。\n"
    "JSON でのみ回答し、以下の形式を厳守してください:\n"
    '{"date":"YYYY-MM-DD or null","source":"即pat|Spat4|紙馬券|unknown",'
    '"track":"競馬場名 or null","raceName":"レース名 or null","payout":number or null,'
    '"bets":[{"type":"券種","numbers":["1","2"],"amount":number,"payout":number}],"memo":null}\n'
    "券種は「単勝」「複勝」「枠連」「枠単」「枠複」「馬連」「馬単」「ワイド」「3連複」「3連単」のいずれかに正規化してください。\n"
    "numbers は着順どおりの馬番（文字列）の配列、金額は円単位の整数にしてください。\n"
    "フォーメーションや流し（例: 馬1:1,3 馬2:2,4 馬3:5,6）は、着順ごとの候補からすべての組み合わせを"
    "1 点ずつ bets に展開してください。同じ馬番を重複して含む組み合わせは除外してください。\n"
    "合計金額しか記載がなく各組み合わせが均等買いの場合は、合計金額を組み合わせ数で割った金額を各 amount にしてください。\n"
    "推測はしないでください。読み取れない項目は null、金額が不明な場合は 0 を設定してください。"
)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)```")
_DATE_VALUE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_NUMBER_SPLIT = re.compile(r"[,、\s→\-]+")


def build_extraction_messages(text: str) -> list[dict[str, str]]:
    """Chat messages asking the model for strict-JSON slip extraction."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{EXTRACTION_PROMPT}\n\nテキスト:\n{text}"},
    ]


def strip_code_fence(content: str) -> str:
    """Return the body of a ```json ...``` (or bare ```...```) block, else the trimmed content."""
    match = _FENCED_JSON.search(content) or _FENCED_ANY.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def _coerce_int(value: Any) -> int | None:
    """Accept ints, integral floats and numeric strings ('1,200', '1200円')."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        return parse_amount(value.replace("円", ""))
    return None


def _coerce_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped or stripped.lower() in {"null", "none"}:
        return None
    return stripped


def _coerce_date(value: Any) -> date | None:
    text = _coerce_str(value)
    if text is None:
        return None
    match = _DATE_VALUE.match(text)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def _coerce_source(value: Any) -> SlipSource:
    text = _coerce_str(value)
    if text is None:
        return "unknown"
    lowered = text.lower()
    if "紙" in text:
        return "紙馬券"
    if "spat" in lowered:
        return "Spat4"
    if "即pat" in lowered or "ipat" in lowered:
        return "即pat"
    return text if text in SOURCES else "unknown"


def _coerce_selections(value: Any) -> list[str]:
    if isinstance(value, list):
        raw_parts = [str(part).strip() for part in value if isinstance(part, (str, int)) and not isinstance(part, bool)]
    elif isinstance(value, (str, int)) and not isinstance(value, bool):
        raw_parts = _NUMBER_SPLIT.split(str(value))
    else:
        return []
    return [part for part in raw_parts if part]


def _parse_ticket(raw: Any) -> Ticket | None:
    """Validate one AI bet entry; None if it has no usable selections."""
    if not isinstance(raw, dict):
        return None
    bet_type = canonical_bet_type_or_unknown(_coerce_str(raw.get("type")))
    selections = _coerce_selections(raw.get("numbers"))
    if not selections:
        return None
    amount = _coerce_int(raw.get("amount"))
    payout = _coerce_int(raw.get("payout"))
    return Ticket(
        type=bet_type,
        numbers=join_selections(bet_type, selections),
        amount=max(amount or 0, 0),
        payout=max(payout or 0, 0),
        provenance="ai",
    )


def _parse_tickets(raw_bets: Any) -> list[Ticket]:
    if not isinstance(raw_bets, list):
        return []
    tickets: list[Ticket] = []
    for raw in raw_bets:
        ticket = _parse_ticket(raw)
        if ticket is None:
            logger.debug("Dropping unusable AI bet entry: %r", raw)
            continue
        tickets.append(ticket)
    return tickets


def parse_structured_response(content: str | None) -> ExtractionResult | None:
    """
    Parse model output into an ExtractionResult.

    Accepts a JSON object in the documented shape, an object with a
    ``tickets`` list instead of ``bets``, or a bare list of bets. Returns None
    when the content is empty, is not valid JSON, or is not one of those
    shapes.
    """
    if not content:
        return None

    json_text = strip_code_fence(content)
    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning("AI response is not valid JSON: %s", e)
        logger.debug("Unparsable AI response body: %s", json_text[:500])
        return None

    if isinstance(payload, list):
        return ExtractionResult(bets=_parse_tickets(payload))

    if not isinstance(payload, dict):
        logger.warning("AI response JSON has unexpected type: %s", type(payload).__name__)
        return None

    raw_bets = payload.get("bets")
    if raw_bets is None:
        raw_bets = payload.get("tickets")

    payout = _coerce_int(payload.get("payout"))
    return ExtractionResult(
        date=_coerce_date(payload.get("date")),
        source=_coerce_source(payload.get("source")),
        track=_coerce_str(payload.get("track")),
        race_name=_coerce_str(payload.get("raceName")),
        payout=payout if payout is not None and payout >= 0 else None,
        memo=_coerce_str(payload.get("memo")),
        bets=_parse_tickets(raw_bets),
    )
