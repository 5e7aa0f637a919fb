"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from lei_auditor.logging.cost_calculator import calculate_cost
from lei_auditor.pipeline.analysis_coordinator import AnalysisOutcome


class AnalysisLog(BaseModel):
    """Single log entry for one AI review of a chapter."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    project_title: str | None = None
    chapter_label: str
    content_length: int = 0
    term_alert_count: int = 0
    improvement_count: int = 0
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None


def build_analysis_log(
    outcome: AnalysisOutcome,
    *,
    chapter_label: str,
    content_length: int,
    term_alert_count: int = 0,
    token_summary: dict | None = None,
    project_title: str | None = None,
    session_id: str = "anonymous",
) -> AnalysisLog:
    """Build the log entry of one review run from its outcome and token usage."""
    tokens = token_summary or {"input": 0, "output": 0, "calls": []}
    return AnalysisLog(
        session_id=session_id,
        project_title=project_title,
        chapter_label=chapter_label,
        content_length=content_length,
        term_alert_count=term_alert_count,
        improvement_count=len(outcome.suggestions),
        elapsed_seconds=outcome.elapsed_seconds,
        total_input_tokens=tokens["input"],
        total_output_tokens=tokens["output"],
        estimated_cost_usd=calculate_cost(tokens["calls"]),
        success=outcome.ok,
        error_message=str(outcome.error) if outcome.error is not None else None,
    )
