"""Core domain models for keibaslip.

This module provides the data models shared by every extraction stage:
- Ticket: one concrete bet combination
- ExtractionResult: header fields plus tickets for one slip
- FormationGroup: per-position candidates of a formation bet

Usage:
    from keibaslip.domain import ExtractionResult, Ticket
"""

from keibaslip.domain.slip import (
    BET_TYPES,
    UNKNOWN_BET_TYPE,
    ExtractionResult,
    FormationGroup,
    Provenance,
    SlipSource,
    Ticket,
    bet_type_arity,
    join_selections,
    numbers_delimiter,
)

__all__ = [
    "BET_TYPES",
    "UNKNOWN_BET_TYPE",
    "ExtractionResult",
    "FormationGroup",
    "Provenance",
    "SlipSource",
    "Ticket",
    "bet_type_arity",
    "join_selections",
    "numbers_delimiter",
]
