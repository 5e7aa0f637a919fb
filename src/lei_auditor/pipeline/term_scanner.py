"""Forbidden-term scanner over the plain text of a chapter."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from lei_auditor.models.rules import ForbiddenTermRule
from lei_auditor.models.suggestion import Suggestion, TextRange


def term_alert_id(term: str, start: int) -> str:
    """Stable id of a term match; unchanged text always yields the same id."""
    return f"term-{term}-{start}"


def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(re.escape(term), re.IGNORECASE)


def scan_forbidden_terms(
    text: str,
    rules: Iterable[ForbiddenTermRule],
) -> Iterator[Suggestion]:
    """Yield a pending ``term_alert`` for every occurrence of a rule's term.

    Matching is case-insensitive. Occurrences of one term never overlap
    (the search resumes at the end of each match), while different terms
    are matched independently and may overlap. Alerts come out in rule
    order, then by offset.
    """
    if not text:
        return
    for rule in rules:
        for match in _term_pattern(rule.term).finditer(text):
            start, end = match.span()
            yield Suggestion(
                id=term_alert_id(rule.term, start),
                kind="term_alert",
                original_span=rule.term,
                replacement_text=rule.replacement,
                range=TextRange(start=start, end=end),
                rationale=rule.rationale,
                citation=rule.citation,
            )
