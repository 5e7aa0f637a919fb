"""Authoritative suggestion list for the active chapter."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from lei_auditor.models.suggestion import Suggestion, SuggestionKind, SuggestionStatus

logger = logging.getLogger(__name__)

# Iteration order of "all": term alerts first, then improvements.
_KIND_ORDER: tuple[SuggestionKind, ...] = ("term_alert", "improvement", "length_violation")


class SuggestionStore:
    """Owns the suggestions of one chapter and every mutation applied to them.

    Entries are kept per kind in insertion order. Nothing outside the store
    holds a reference to the internal lists; queries return fresh lists.
    """

    def __init__(self, suggestions: Iterable[Suggestion] = ()):
        self._entries: dict[SuggestionKind, list[Suggestion]] = {k: [] for k in _KIND_ORDER}
        for s in suggestions:
            self._entries[s.kind].append(s)

    def reconcile_term_alerts(self, new_alerts: Iterable[Suggestion]) -> None:
        """Replace all term alerts, carrying the status of ids seen before.

        Alerts whose match disappeared from the text are dropped whatever
        their status. Improvements are left alone.
        """
        previous = {s.id: s.status for s in self._entries["term_alert"]}
        reconciled: list[Suggestion] = []
        seen: set[str] = set()
        for alert in new_alerts:
            if alert.kind != "term_alert":
                raise ValueError(f"expected a term_alert, got {alert.kind!r}")
            if alert.id in seen:
                continue
            seen.add(alert.id)
            status = previous.get(alert.id)
            if status is not None and status != alert.status:
                alert = alert.with_status(status)
            reconciled.append(alert)
        dropped = len(previous.keys() - seen)
        if dropped:
            logger.debug("Dropped %d term alerts no longer in the text", dropped)
        self._entries["term_alert"] = reconciled

    def replace_improvements(self, new_improvements: Iterable[Suggestion]) -> None:
        """Replace all improvements wholesale; term alerts are left alone.

        A repeated ``(kind, original_span, range)`` is kept only once.
        """
        replaced: list[Suggestion] = []
        identities: set[tuple[str, str, int, int]] = set()
        ids: set[str] = set()
        for s in new_improvements:
            if s.kind != "improvement":
                raise ValueError(f"expected an improvement, got {s.kind!r}")
            if s.identity in identities or s.id in ids:
                continue
            identities.add(s.identity)
            ids.add(s.id)
            replaced.append(s)
        self._entries["improvement"] = replaced

    def set_status(self, suggestion_id: str, status: SuggestionStatus) -> bool:
        """Move a pending suggestion to ``accepted`` or ``rejected``.

        Unknown ids, non-pending entries and any other target status are
        ignored. Returns True when the transition happened.
        """
        if status not in ("accepted", "rejected"):
            return False
        for entries in self._entries.values():
            for i, s in enumerate(entries):
                if s.id != suggestion_id:
                    continue
                if s.status != "pending":
                    return False
                entries[i] = s.with_status(status)
                return True
        return False

    def clear(self) -> None:
        for entries in self._entries.values():
            entries.clear()

    def all(self) -> list[Suggestion]:
        return [s for kind in _KIND_ORDER for s in self._entries[kind]]

    def pending(self) -> list[Suggestion]:
        return [s for s in self.all() if s.status == "pending"]

    def by_kind(self, kind: SuggestionKind) -> list[Suggestion]:
        return list(self._entries[kind])

    def get(self, suggestion_id: str) -> Suggestion | None:
        for s in self.all():
            if s.id == suggestion_id:
                return s
        return None

    def __iter__(self) -> Iterator[Suggestion]:
        return iter(self.all())

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())
