"""AI review of a chapter: request, lenient parsing and merge into the store."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from lei_auditor.models.suggestion import Suggestion, TextRange
from lei_auditor.pipeline.suggestion_store import SuggestionStore
from lei_auditor.utils.json_parser import extract_suggestions_object

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 50
DEFAULT_REASON = "Melhoria sugerida pela IA"

MSG_INSUFFICIENT = "Adicione mais conteúdo para análise."
MSG_NO_SUGGESTIONS = "Nenhuma sugestão adicional encontrada."
MSG_FOUND = "{count} sugestão(ões) encontrada(s)"
MSG_FAILED = "Erro ao analisar conteúdo. Tente novamente."

REVIEW_PROMPT = """\
Analise o seguinte texto de um relatório de projeto de inovação (Lei do Bem) \
para o capítulo "{chapter}".

Identifique:
1. Melhorias de redação técnica
2. Clareza e objetividade
3. Adequação à linguagem de P&D

Para cada sugestão, retorne um JSON com o formato:
{{
  "suggestions": [
    {{
      "originalText": "texto original problemático",
      "suggestedText": "texto sugerido melhorado",
      "reason": "motivo da sugestão"
    }}
  ]
}}

Texto para análise:
{content}"""


class AnalysisError(Exception):
    """Base class for failures reported by the analysis coordinator."""


class InsufficientContent(AnalysisError):
    """Chapter text is too short to be worth a review call."""


class TransportFailure(AnalysisError):
    """The review service call raised or returned an error."""


class MalformedResponse(AnalysisError):
    """The review answer carried no parseable suggestions object."""


class ReviewService(Protocol):
    async def invoke(self, messages: list[dict], document_content: str = "") -> dict: ...


@dataclass(frozen=True)
class Notice:
    """A single user-facing message; presentation is left to the caller."""

    level: Literal["info", "success", "error"]
    message: str


@dataclass
class ParsedReview:
    suggestions: list[Suggestion] = field(default_factory=list)
    error: MalformedResponse | None = None


@dataclass
class AnalysisOutcome:
    """Result of one ``request_analysis`` call."""

    suggestions: list[Suggestion] = field(default_factory=list)
    notice: Notice | None = None
    error: AnalysisError | None = None
    stale: bool = False
    chapter_id: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        # A malformed answer degrades to zero suggestions, it is not a failure
        return self.error is None or isinstance(self.error, MalformedResponse)


def build_review_prompt(content: str, chapter_label: str) -> str:
    return REVIEW_PROMPT.format(chapter=chapter_label, content=content)


def response_text(data: Any) -> str:
    """Pull the free-form answer out of a ``{response | message}`` payload."""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in ("response", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return ""


def parse_review_response(text: str, *, timestamp_ms: int) -> ParsedReview:
    """Turn reviewer prose into ``improvement`` suggestions.

    Never raises: a missing or broken JSON object yields no suggestions and a
    ``MalformedResponse`` describing why. Offsets are not resolved against the
    chapter text, every improvement gets the placeholder range ``(0, 0)``.
    """
    try:
        data = extract_suggestions_object(text)
    except ValueError as e:
        return ParsedReview(error=MalformedResponse(str(e)))

    items = data.get("suggestions") or []
    if not isinstance(items, list):
        return ParsedReview(error=MalformedResponse('"suggestions" is not a list'))

    suggestions = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        suggestions.append(
            Suggestion(
                id=f"ai-{timestamp_ms}-{index}",
                kind="improvement",
                original_span=str(item.get("originalText") or ""),
                replacement_text=str(item.get("suggestedText") or ""),
                range=TextRange(start=0, end=0),
                rationale=str(item.get("reason") or DEFAULT_REASON),
            )
        )
    return ParsedReview(suggestions=suggestions)


class AnalysisCoordinator:
    """Drives the external review of the active chapter.

    Each request takes a ticket from a monotonically increasing sequence.
    Only the newest ticket may merge its answer into the store; an answer
    that resolves after a newer request, or after :meth:`invalidate`, is
    discarded. Failures never propagate past :meth:`request_analysis`.
    """

    def __init__(
        self,
        reviewer: ReviewService,
        store: SuggestionStore,
        *,
        min_content_length: int = MIN_CONTENT_LENGTH,
        on_notice: Callable[[Notice], None] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.reviewer = reviewer
        self.store = store
        self.min_content_length = min_content_length
        self.on_notice = on_notice
        self._clock = clock
        self._latest_ticket = 0
        self._in_flight = 0

    @property
    def is_analyzing(self) -> bool:
        return self._in_flight > 0

    def invalidate(self) -> None:
        """Make every outstanding request stale (e.g. on chapter switch)."""
        self._latest_ticket += 1

    def _notify(self, notice: Notice) -> Notice:
        if self.on_notice:
            self.on_notice(notice)
        return notice

    async def request_analysis(
        self,
        plain_text: str,
        chapter_label: str,
        chapter_id: str | None = None,
    ) -> AnalysisOutcome:
        """Ask the reviewer for improvements and replace the improvement set."""
        if not plain_text or len(plain_text.strip()) < self.min_content_length:
            notice = self._notify(Notice("info", MSG_INSUFFICIENT))
            return AnalysisOutcome(
                notice=notice,
                error=InsufficientContent(
                    f"{len((plain_text or '').strip())} characters, "
                    f"at least {self.min_content_length} required"
                ),
                chapter_id=chapter_id,
            )

        self._latest_ticket += 1
        ticket = self._latest_ticket
        self._in_flight += 1
        start = time.monotonic()
        logger.info("Analyzing chapter %r (%d chars)", chapter_label, len(plain_text))
        try:
            try:
                data = await self.reviewer.invoke(
                    messages=[
                        {"role": "user", "content": build_review_prompt(plain_text, chapter_label)}
                    ],
                    document_content=plain_text,
                )
            except Exception as e:
                logger.exception("Review call failed for chapter %r", chapter_label)
                stale = ticket != self._latest_ticket
                notice = None if stale else self._notify(Notice("error", MSG_FAILED))
                return AnalysisOutcome(
                    notice=notice,
                    error=TransportFailure(str(e) or type(e).__name__),
                    stale=stale,
                    chapter_id=chapter_id,
                    elapsed_seconds=time.monotonic() - start,
                )

            parsed = parse_review_response(
                response_text(data), timestamp_ms=int(self._clock() * 1000)
            )
            if parsed.error is not None:
                logger.warning("Malformed review response for %r: %s", chapter_label, parsed.error)

            elapsed = time.monotonic() - start
            if ticket != self._latest_ticket:
                logger.info("Discarding stale analysis of chapter %r", chapter_label)
                return AnalysisOutcome(
                    suggestions=parsed.suggestions,
                    error=parsed.error,
                    stale=True,
                    chapter_id=chapter_id,
                    elapsed_seconds=elapsed,
                )

            self.store.replace_improvements(parsed.suggestions)
            merged = self.store.by_kind("improvement")
            if merged:
                notice = self._notify(Notice("success", MSG_FOUND.format(count=len(merged))))
            else:
                notice = self._notify(Notice("info", MSG_NO_SUGGESTIONS))
            return AnalysisOutcome(
                suggestions=merged,
                notice=notice,
                error=parsed.error,
                chapter_id=chapter_id,
                elapsed_seconds=elapsed,
            )
        finally:
            self._in_flight -= 1
