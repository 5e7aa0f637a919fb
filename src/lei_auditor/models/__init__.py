"""Data models for the report auditor."""

from lei_auditor.models.chapter import AuditProject, Chapter, default_chapters
from lei_auditor.models.rules import ForbiddenTermRule
from lei_auditor.models.suggestion import Suggestion, TextRange
from lei_auditor.models.timesheet import EntryValidation, Project, TimeEntry

__all__ = [
    "AuditProject",
    "Chapter",
    "EntryValidation",
    "ForbiddenTermRule",
    "Project",
    "Suggestion",
    "TextRange",
    "TimeEntry",
    "default_chapters",
]
