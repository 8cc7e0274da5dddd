"""Slip extraction workflow orchestration."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Literal

from keibaslip.domain.slip import ExtractionResult, Ticket
from keibaslip.runtime import Settings, get_logger, get_settings
from keibaslip.runtime.ai_client import extract_via_ai
from keibaslip.slip import extract_deterministic, extract_fallback, normalize_slip_text, reconcile, reconcile_header

logger = get_logger(__name__)

AIStatus = Literal["disabled", "ok", "failed"]

FallbackExtractor = Callable[[str, str | None], list[Ticket]]
AIExtractor = Callable[[str], Awaitable[ExtractionResult | None]]


@dataclass(frozen=True)
class SlipExtractionRequest:
    """Inputs for one extraction run."""

    raw_text: str
    settings: Settings | None = None
    use_ai: bool = True
    fallback_extractor: FallbackExtractor = extract_fallback
    # Overrides the configured completion API (tests, alternative backends).
    ai_extractor: AIExtractor | None = None


@dataclass(frozen=True)
class SlipExtraction:
    """Outcome of one extraction run."""

    result: ExtractionResult
    normalized_text: str
    used_fallback: bool
    ai_status: AIStatus


def _resolve_ai_extractor(request: SlipExtractionRequest) -> AIExtractor | None:
    if not request.use_ai:
        return None
    if request.ai_extractor is not None:
        return request.ai_extractor

    settings = request.settings or get_settings()
    if not settings.ai_enabled:
        logger.debug("AI extraction skipped: no API key configured")
        return None

    async def _configured(text: str) -> ExtractionResult | None:
        return await extract_via_ai(text, settings)

    return _configured


def _decide_payout(aggregate: int | None, merged: ExtractionResult, ai_result: ExtractionResult | None) -> int | None:
    """Printed 払戻 total, else the sum of ticket payouts, else the AI's figure."""
    if aggregate is not None:
        return aggregate
    if merged.ticket_payout_total > 0:
        return merged.ticket_payout_total
    if ai_result is not None:
        return ai_result.payout
    return None


async def run_slip_extraction(request: SlipExtractionRequest) -> SlipExtraction:
    """Run extraction: normalize -> rows (-> fallback) -> AI -> reconcile."""
    normalized = normalize_slip_text(request.raw_text)
    logger.debug("Normalized slip text (%d chars)", len(normalized))

    local = extract_deterministic(normalized)
    local_tickets = list(local.bets)
    used_fallback = False
    if not local_tickets:
        used_fallback = True
        local_tickets = request.fallback_extractor(normalized, local.bet_type_hint)
        logger.debug("No purchase rows parsed; fallback found %d tickets", len(local_tickets))
    else:
        logger.debug("Parsed %d tickets from purchase rows", len(local_tickets))

    ai_result: ExtractionResult | None = None
    ai_status: AIStatus = "disabled"
    ai_extractor = _resolve_ai_extractor(request)
    if ai_extractor is not None:
        try:
            ai_result = await ai_extractor(normalized)
        except Exception as e:
            # AI is best-effort; local results still go out.
            logger.warning("AI extraction failed: %s", e)
            ai_result = None
        ai_status = "ok" if ai_result is not None else "failed"

    tickets = reconcile(local_tickets, ai_result.bets if ai_result else [])
    merged = reconcile_header(local, ai_result)
    merged = replace(merged, bets=tickets)
    merged.payout = _decide_payout(local.payout, merged, ai_result)

    logger.info(
        "Extracted %d tickets (fallback=%s, ai=%s)",
        len(tickets),
        used_fallback,
        ai_status,
    )
    return SlipExtraction(
        result=merged,
        normalized_text=normalized,
        used_fallback=used_fallback,
        ai_status=ai_status,
    )
