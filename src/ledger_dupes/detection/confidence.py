"""
Confidence scoring for duplicate candidate groups.

confidence = min(100, round(similarity * 0.2 + days_score + category_bonus
+ counterparty_bonus)), where similarity compares the first two members
only, days_score = max(0, 40 - days_apart) and each bonus is 20 when every
member shares the same non-null id.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence

from ledger_dupes.config import (
    CATEGORY_BONUS,
    COUNTERPARTY_BONUS,
    DATE_SCORE_CEILING,
    DESCRIPTION_WEIGHT,
    HIGH_CONFIDENCE_THRESHOLD,
    MAX_CONFIDENCE,
    MEDIUM_CONFIDENCE_THRESHOLD,
)
from ledger_dupes.detection.similarity import description_similarity, round_half_up
from ledger_dupes.model.transaction import Transaction


class ConfidenceLevel(StrEnum):
    """Display band for a confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def for_score(cls, confidence: int) -> "ConfidenceLevel":
        if confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return cls.HIGH
        if confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class ConfidenceBreakdown:
    """Every term of a confidence computation."""

    description_similarity: int
    category_bonus: int
    counterparty_bonus: int
    days_apart: int
    days_score: int
    confidence: int

    @property
    def level(self) -> ConfidenceLevel:
        return ConfidenceLevel.for_score(self.confidence)


def _all_share(values: Sequence[Optional[str]]) -> bool:
    first = values[0]
    return first is not None and all(v == first for v in values)


def days_apart(members: Sequence[Transaction]) -> int:
    """Span in whole days between the earliest and latest member."""
    dates = [m.event_date for m in members]
    return (max(dates) - min(dates)).days


def calculate_confidence(members: Sequence[Transaction]) -> ConfidenceBreakdown:
    """Score a cluster of two or more transactions.

    Raises:
        ValueError: if fewer than two members are given
    """
    if len(members) < 2:
        raise ValueError("A duplicate group needs at least two transactions")

    similarity = description_similarity(members[0].description, members[1].description)
    category_bonus = CATEGORY_BONUS if _all_share([m.category_id for m in members]) else 0
    counterparty_bonus = (
        COUNTERPARTY_BONUS if _all_share([m.counterparty_id for m in members]) else 0
    )
    span = days_apart(members)
    days_score = max(0, DATE_SCORE_CEILING - span)

    raw = similarity * DESCRIPTION_WEIGHT + days_score + category_bonus + counterparty_bonus
    confidence = max(0, min(MAX_CONFIDENCE, round_half_up(raw)))

    return ConfidenceBreakdown(
        description_similarity=similarity,
        category_bonus=category_bonus,
        counterparty_bonus=counterparty_bonus,
        days_apart=span,
        days_score=days_score,
        confidence=confidence,
    )


__all__ = [
    "ConfidenceBreakdown",
    "ConfidenceLevel",
    "calculate_confidence",
    "days_apart",
]
