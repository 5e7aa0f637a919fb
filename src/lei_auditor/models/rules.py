"""Pydantic model for forbidden-term rules."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ForbiddenTermRule(BaseModel):
    """A term that should not appear in a report, with its preferred wording.

    YAML files use the field names ``term``, ``suggestion``, ``reason`` and
    ``reference``; the Python names are accepted as well.
    """

    term: str = Field(min_length=1)
    replacement: str = Field(alias="suggestion")
    rationale: str = Field(alias="reason")
    citation: str | None = Field(default=None, alias="reference")

    model_config = {"frozen": True, "populate_by_name": True}
