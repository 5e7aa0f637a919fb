"""Compliance indicators shown next to the suggestion list."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Literal

from lei_auditor.models.suggestion import Suggestion

CHARACTER_LIMIT = 4000
CHAPTER_TARGET_LENGTH = 500
WARNING_RATIO = 0.875

LimitStatus = Literal["ok", "warning", "over"]


def compliance_score(suggestions: Iterable[Suggestion]) -> int:
    """Heuristic 85-100 score: 100 with nothing flagged, else 85 + 15 * resolved share.

    It is a display aid, not a measure of regulatory conformity.
    """
    items = list(suggestions)
    if not items:
        return 100
    resolved = sum(1 for s in items if s.status != "pending")
    return math.floor(85 + resolved / len(items) * 15 + 0.5)


def character_limit_status(count: int, limit: int = CHARACTER_LIMIT) -> LimitStatus:
    ratio = count / limit
    if ratio > 1:
        return "over"
    if ratio > WARNING_RATIO:
        return "warning"
    return "ok"


def chapter_progress(count: int, target: int = CHAPTER_TARGET_LENGTH) -> float:
    """Percentage of the target length already written, capped at 100."""
    if count <= 0:
        return 0.0
    return min(count / target * 100, 100.0)
