"""Pydantic models for audit suggestions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, model_validator

SuggestionKind = Literal["term_alert", "improvement", "length_violation"]
SuggestionStatus = Literal["pending", "accepted", "rejected"]


class TextRange(BaseModel):
    """Character offsets into the plain-text projection of a chapter."""

    start: int
    end: int

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> TextRange:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid range: start={self.start}, end={self.end}")
        return self


class Suggestion(BaseModel):
    id: str
    kind: SuggestionKind
    original_span: str
    replacement_text: str
    range: TextRange
    status: SuggestionStatus = "pending"
    rationale: str
    citation: str | None = None  # regulatory reference, term alerts only

    model_config = {"frozen": True}

    @property
    def identity(self) -> tuple[str, str, int, int]:
        return (self.kind, self.original_span, self.range.start, self.range.end)

    def with_status(self, status: SuggestionStatus) -> Suggestion:
        return self.model_copy(update={"status": status})
