"""Business rules for logging R&D hours against a project."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from lei_auditor.models.timesheet import EntryValidation, Project, TimeEntry

logger = logging.getLogger(__name__)

DAILY_HOUR_LIMIT = 8.0


def _fmt(d: date) -> str:
    return d.strftime("%d/%m/%Y")


def validate_entry(
    project: Project | None,
    work_date: date,
    hours: float,
    existing_entries: Iterable[TimeEntry] = (),
    *,
    daily_limit: float = DAILY_HOUR_LIMIT,
) -> EntryValidation:
    """Check a new time entry before it is stored.

    Outside the vigency window the entry is blocked when the project has a
    hard lock, otherwise it goes through with a warning. Within the window,
    exceeding ``daily_limit`` for the day (all projects) only warns.
    """
    if project is None:
        return EntryValidation(valid=False, warning="Projeto não encontrado")

    if work_date < project.start_date or work_date > project.end_date:
        window = f"{_fmt(project.start_date)} - {_fmt(project.end_date)}"
        if project.hard_lock_vigency:
            logger.info("Blocked entry on %s for project %s", work_date, project.id)
            return EntryValidation(
                valid=False,
                warning=f"Projeto fora da vigência ({window}). Lançamentos bloqueados.",
            )
        return EntryValidation(
            valid=True,
            warning=f"Atenção: Data fora da vigência do projeto ({window})",
        )

    day_total = sum(e.hours for e in existing_entries if e.work_date == work_date)
    new_total = day_total + hours
    if new_total > daily_limit:
        return EntryValidation(
            valid=True,
            warning=(
                f"Atenção: Total de horas no dia será {new_total:.1f}h "
                f"(acima de {daily_limit:g}h)"
            ),
        )

    return EntryValidation(valid=True)
