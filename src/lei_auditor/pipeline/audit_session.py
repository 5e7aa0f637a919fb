"""Editing session over one report: chapters, live term scan and AI review."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from html.entities import codepoint2name

from lei_auditor.models.chapter import AuditProject, Chapter, ProjectStatus, default_chapters
from lei_auditor.models.rules import ForbiddenTermRule
from lei_auditor.models.suggestion import Suggestion
from lei_auditor.parsers.markup import strip_markup
from lei_auditor.pipeline.analysis_coordinator import (
    AnalysisCoordinator,
    AnalysisOutcome,
    Notice,
    ReviewService,
)
from lei_auditor.pipeline.compliance import (
    CHAPTER_TARGET_LENGTH,
    CHARACTER_LIMIT,
    LimitStatus,
    chapter_progress,
    character_limit_status,
    compliance_score,
)
from lei_auditor.pipeline.suggestion_store import SuggestionStore
from lei_auditor.pipeline.term_scanner import scan_forbidden_terms
from lei_auditor.rules.loader import DEFAULT_RULES

logger = logging.getLogger(__name__)

STATUS_MESSAGES: dict[str, str] = {
    "editing": "Projeto em edição",
    "review": "Projeto enviado para revisão",
    "approved": "Projeto aprovado!",
}


def _markup_term_pattern(term: str) -> re.Pattern[str]:
    """Match ``term`` in markup, where any character may be written as an entity."""
    parts = []
    for ch in term:
        forms = [re.escape(ch), f"&#{ord(ch)};", f"&#x{ord(ch):x};"]
        name = codepoint2name.get(ord(ch))
        if name:
            forms.append(f"&{name};")
        parts.append(f"(?:{'|'.join(forms)})")
    return re.compile("".join(parts), re.IGNORECASE)


def apply_replacement(content: str, suggestion: Suggestion) -> str:
    """Return ``content`` with an accepted suggestion written into it.

    A term alert replaces every case-insensitive occurrence of the term,
    including occurrences spelled with HTML entities (``b&aacute;sica``).
    A term split by a tag is not rewritten. An improvement replaces the
    first exact occurrence of its original text; content is returned
    untouched when that text is empty or absent.
    """
    if suggestion.kind == "term_alert":
        pattern = _markup_term_pattern(suggestion.original_span)
        return pattern.sub(lambda _m: suggestion.replacement_text, content)
    if suggestion.original_span and suggestion.original_span in content:
        return content.replace(suggestion.original_span, suggestion.replacement_text, 1)
    return content


class AuditSession:
    """Wires the chapters of a project to the scanner, the store and the reviewer.

    The session owns the only :class:`SuggestionStore`; it holds the
    suggestions of the active chapter and is cleared on every chapter switch.
    """

    def __init__(
        self,
        reviewer: ReviewService,
        *,
        title: str = "Projeto de P&D",
        chapters: Sequence[Chapter] | None = None,
        rules: Sequence[ForbiddenTermRule] = DEFAULT_RULES,
        min_content_length: int = 50,
        character_limit: int = CHARACTER_LIMIT,
        chapter_target_length: int = CHAPTER_TARGET_LENGTH,
        on_notice: Callable[[Notice], None] | None = None,
    ):
        chapters = list(chapters) if chapters else default_chapters()
        self.project = AuditProject(title=title, chapters=sorted(chapters, key=lambda c: c.order))
        self.rules = tuple(rules)
        self.character_limit = character_limit
        self.chapter_target_length = chapter_target_length
        self.on_notice = on_notice
        self.store = SuggestionStore()
        self.coordinator = AnalysisCoordinator(
            reviewer,
            self.store,
            min_content_length=min_content_length,
            on_notice=on_notice,
        )
        self.active_chapter_id = self.project.chapters[0].id
        self.active_suggestion_id: str | None = None

    # -- chapters -----------------------------------------------------------

    @property
    def chapters(self) -> list[Chapter]:
        return self.project.chapters

    @property
    def active_chapter(self) -> Chapter:
        return self._chapter(self.active_chapter_id)

    def _chapter(self, chapter_id: str) -> Chapter:
        for chapter in self.project.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise KeyError(f"Unknown chapter: {chapter_id}")

    def plain_text(self, chapter_id: str | None = None) -> str:
        chapter = self._chapter(chapter_id) if chapter_id else self.active_chapter
        return strip_markup(chapter.content)

    def select_chapter(self, chapter_id: str) -> None:
        """Switch chapters; suggestions of the previous one are discarded."""
        self._chapter(chapter_id)
        self.active_chapter_id = chapter_id
        self.store.clear()
        self.coordinator.invalidate()
        self.active_suggestion_id = None

    def update_content(self, content: str) -> list[Suggestion]:
        """Store new markup for the active chapter and rescan it for terms."""
        self.active_chapter.content = content
        return self.rescan()

    def rescan(self) -> list[Suggestion]:
        self.store.reconcile_term_alerts(scan_forbidden_terms(self.plain_text(), self.rules))
        return self.store.by_kind("term_alert")

    # -- suggestions --------------------------------------------------------

    def focus(self, suggestion_id: str) -> Suggestion | None:
        """Mark a suggestion as the one the editor should jump to."""
        suggestion = self.store.get(suggestion_id)
        if suggestion is not None:
            self.active_suggestion_id = suggestion_id
        return suggestion

    def accept(self, suggestion_id: str) -> bool:
        """Write the suggestion into the chapter and mark it accepted.

        When the content changed, term alerts are rescanned so matches the
        replacement removed (other occurrences of the same term) disappear.
        """
        suggestion = self.store.get(suggestion_id)
        if suggestion is None or not self.store.set_status(suggestion_id, "accepted"):
            return False
        chapter = self.active_chapter
        updated = apply_replacement(chapter.content, suggestion)
        if updated != chapter.content:
            chapter.content = updated
            self.rescan()
        self._notify(Notice("success", "Sugestão aplicada!"))
        return True

    def reject(self, suggestion_id: str) -> bool:
        if not self.store.set_status(suggestion_id, "rejected"):
            return False
        self._notify(Notice("info", "Sugestão ignorada"))
        return True

    async def analyze(self) -> AnalysisOutcome:
        chapter = self.active_chapter
        return await self.coordinator.request_analysis(
            self.plain_text(), chapter.title, chapter_id=chapter.id
        )

    @property
    def is_analyzing(self) -> bool:
        return self.coordinator.is_analyzing

    # -- indicators ---------------------------------------------------------

    def score(self) -> int:
        return compliance_score(self.store.all())

    def character_count(self, chapter_id: str | None = None) -> int:
        return len(self.plain_text(chapter_id))

    def limit_status(self) -> LimitStatus:
        return character_limit_status(self.character_count(), self.character_limit)

    def progress(self, chapter_id: str) -> float:
        return chapter_progress(self.character_count(chapter_id), self.chapter_target_length)

    def set_status(self, status: ProjectStatus) -> None:
        self.project.status = status
        self._notify(Notice("success", STATUS_MESSAGES[status]))

    def _notify(self, notice: Notice) -> None:
        if self.on_notice:
            self.on_notice(notice)
