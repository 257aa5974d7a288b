import csv
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar

from loguru import logger

from .models import Absence, Assignment, Consultant, Project, Record, new_record_id

R = TypeVar("R", bound=Record)

CSV_HEADERS = ["Consultant", "Project", "Hours", "Status", "Description"]


# --- SINGLE RECORD EDITS ---

def add_record(records: Sequence[R], record: R) -> List[R]:
    return [*records, record]


def update_record(records: Sequence[R], record: R) -> List[R]:
    """Replaces the record carrying the same id; unknown ids leave the list as is."""
    return [record if r.id == record.id else r for r in records]


def remove_record(records: Sequence[R], record_id: str) -> List[R]:
    return [r for r in records if r.id != record_id]


# --- PERIOD-WIDE EDITS ---

def _in_period(record, period: str, is_weekly: bool) -> bool:
    # Exact (period, is_weekly) match; no month/week roll-up here
    return record.period == period and record.is_weekly == is_weekly


def select_period_records(records: Iterable[R], period: str, is_weekly: bool) -> List[R]:
    return [r for r in records if _in_period(r, period, is_weekly)]


def reset_period(
    assignments: Sequence[Assignment],
    absences: Sequence[Absence],
    period: str,
    is_weekly: bool,
) -> Tuple[List[Assignment], List[Absence]]:
    """
    Drops every assignment and absence filed exactly under (period, is_weekly).
    Resetting a month leaves the records of its weeks in place.
    """
    kept_assignments = [a for a in assignments if not _in_period(a, period, is_weekly)]
    kept_absences = [a for a in absences if not _in_period(a, period, is_weekly)]
    logger.debug(
        f"Reset {period} (weekly={is_weekly}): removed "
        f"{len(assignments) - len(kept_assignments)} assignments, "
        f"{len(absences) - len(kept_absences)} absences"
    )
    return kept_assignments, kept_absences


def copy_period(
    assignments: Sequence[Assignment],
    absences: Sequence[Absence],
    from_period: str,
    to_period: str,
    is_weekly: bool,
    id_factory: Callable[[], str] = new_record_id,
) -> Tuple[List[Assignment], List[Absence]]:
    """
    Appends a duplicate of every record filed under (from_period, is_weekly),
    re-keyed to `to_period` with a fresh id. Nothing already present in the
    target period is merged or skipped, so copying twice books twice.
    """
    new_assignments = [
        a.model_copy(update={"id": id_factory(), "period": to_period})
        for a in select_period_records(assignments, from_period, is_weekly)
    ]
    new_absences = [
        a.model_copy(update={"id": id_factory(), "period": to_period})
        for a in select_period_records(absences, from_period, is_weekly)
    ]
    logger.debug(
        f"Copied {from_period} -> {to_period} (weekly={is_weekly}): "
        f"{len(new_assignments)} assignments, {len(new_absences)} absences"
    )
    return [*assignments, *new_assignments], [*absences, *new_absences]


# --- EXPORT ---

def export_period_csv(
    path: Path,
    period: str,
    consultants: Iterable[Consultant],
    projects: Iterable[Project],
    assignments: Iterable[Assignment],
) -> int:
    """Writes the assignments filed exactly under `period` and returns the row count."""
    names = {c.id: c.name for c in consultants}
    project_names = {p.id: p.name for p in projects}
    rows = [
        [names.get(a.consultant_id, ""), project_names.get(a.project_id, ""),
         f"{a.hours:g}", a.status.value, a.description or ""]
        for a in assignments if a.period == period
    ]
    with Path(path).open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        writer.writerows(rows)
    logger.info(f"Exported {len(rows)} assignments for {period} to {path}")
    return len(rows)
