"""Shared pytest fixtures for keibaslip tests."""

from __future__ import annotations

import pytest

from keibaslip.runtime.settings import reset_settings

# Online purchase history as OCR'd from a 即PAT screen.
IPAT_HISTORY_TEXT = """即PAT 投票履歴
払戻金額 12,340円
1 2025年10月20日 東京11R 3連単 通常 2→5→7 100円 的中 12,340円
2 2025年10月20日 東京11R 馬連 通常 3-8 500円 0円
3 2025年10月20日 東京11R 単勝 通常 5 1,000円
"""


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Keep real API keys in the environment away from tests."""
    for name in ("PERPLEXITY_API_KEY", "GCV_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def ipat_history_text() -> str:
    return IPAT_HISTORY_TEXT
