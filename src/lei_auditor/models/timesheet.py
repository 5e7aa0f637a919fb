"""Pydantic models for R&D project time tracking."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, model_validator


class Project(BaseModel):
    id: str
    name: str
    code: str = ""
    start_date: date
    end_date: date
    status: str = "active"
    hard_lock_vigency: bool = False  # block entries outside the vigency window

    @model_validator(mode="after")
    def _check_window(self) -> Project:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class TimeEntry(BaseModel):
    project_id: str
    work_date: date
    hours: float = Field(gt=0, le=24)
    description: str = ""
    activity_type: str = "development"  # research | development | testing | documentation | analysis | prototype


class EntryValidation(BaseModel):
    valid: bool
    warning: str | None = None
