"""Pydantic models for report chapters and projects."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

ProjectStatus = Literal["editing", "review", "approved"]


class Chapter(BaseModel):
    id: str
    title: str
    content: str = ""  # markup, as produced by the editor
    order: int


class AuditProject(BaseModel):
    id: str = "local"
    title: str
    status: ProjectStatus = "editing"
    chapters: list[Chapter]


DEFAULT_CHAPTERS: tuple[tuple[str, str, int], ...] = (
    ("1", "Objetivos do Projeto", 1),
    ("2", "Metodologia", 2),
    ("3", "Resultados Esperados", 3),
    ("4", "Indicadores de Inovação", 4),
    ("5", "Conclusão", 5),
)


def default_chapters() -> list[Chapter]:
    """Return a fresh, empty copy of the standard report chapters."""
    return [Chapter(id=cid, title=title, order=order) for cid, title, order in DEFAULT_CHAPTERS]
