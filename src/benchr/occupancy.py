import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import AppSettings
from .models import Absence, Assignment, AssignmentStatus, Consultant
from .periods import Period, format_period, period_in_scope, shift_period_date, weeks_in_month


class OccupancyStatus(str, Enum):
    OVERLOADED = "Overloaded"
    AVAILABLE = "Available"
    NOMINAL = "Nominal"


@dataclass(frozen=True)
class Occupancy:
    confirmed_hours: float = 0.0
    tentative_hours: float = 0.0
    absence_hours: float = 0.0
    total_hours: float = 0.0


@dataclass(frozen=True)
class ConsultantOccupancy:
    consultant: Consultant
    occupancy: Occupancy
    fte: float
    status: OccupancyStatus


@dataclass(frozen=True)
class TeamStats:
    committed_hours: float
    tentative_hours: float
    overloaded_count: int
    available_count: int
    total_fte: float
    occupancy_pct: float


def get_period_occupancy(
    consultant_id: str,
    assignments: Iterable[Assignment],
    absences: Iterable[Absence],
    period_id: str,
    is_weekly: bool,
    include_tentative: bool,
) -> Occupancy:
    """
    Sums the hours booked for one consultant in one period.

    In the monthly view a month key also collects every record filed
    under one of its weeks ('2026-01' picks up '2026-01-W3'). Weekly
    views match their key exactly. Unknown consultants or periods simply
    produce a zero snapshot.
    """
    confirmed = tentative = absence = 0.0

    for a in assignments:
        if a.consultant_id != consultant_id or not period_in_scope(a.period, period_id, is_weekly):
            continue
        if a.status == AssignmentStatus.CONFIRMED:
            confirmed += a.hours
        elif a.status == AssignmentStatus.TENTATIVE:
            tentative += a.hours

    for ab in absences:
        if ab.consultant_id == consultant_id and period_in_scope(ab.period, period_id, is_weekly):
            absence += ab.hours

    total = confirmed + (tentative if include_tentative else 0.0) + absence
    return Occupancy(confirmed, tentative, absence, total)


def get_fte(hours: float, capacity: float) -> float:
    if capacity == 0:
        # Same outcome as IEEE division: signed infinity, or nan for 0/0
        if hours == 0 or math.isnan(hours):
            return math.nan
        return math.copysign(math.inf, hours)
    return hours / capacity


def capacity_for(settings: AppSettings, is_weekly: bool) -> float:
    return settings.standard_weekly_capacity if is_weekly else settings.standard_monthly_capacity


def threshold_for(settings: AppSettings, is_weekly: bool) -> float:
    return settings.available_weekly_threshold if is_weekly else settings.available_monthly_threshold


def get_occupancy_status(total_hours: float, settings: AppSettings, is_weekly: bool) -> OccupancyStatus:
    # Both comparisons are strict: hitting capacity or threshold exactly is Nominal
    if total_hours > capacity_for(settings, is_weekly):
        return OccupancyStatus.OVERLOADED
    if total_hours < threshold_for(settings, is_weekly):
        return OccupancyStatus.AVAILABLE
    return OccupancyStatus.NOMINAL


def build_occupancy_rows(
    consultants: Iterable[Consultant],
    assignments: Sequence[Assignment],
    absences: Sequence[Absence],
    period_id: str,
    is_weekly: bool,
    include_tentative: bool,
    settings: AppSettings,
) -> List[ConsultantOccupancy]:
    capacity = capacity_for(settings, is_weekly)
    rows = []
    for c in consultants:
        occ = get_period_occupancy(c.id, assignments, absences, period_id, is_weekly, include_tentative)
        rows.append(ConsultantOccupancy(
            consultant=c,
            occupancy=occ,
            fte=get_fte(occ.total_hours, capacity),
            status=get_occupancy_status(occ.total_hours, settings, is_weekly),
        ))
    return rows


def filter_rows(
    rows: Iterable[ConsultantOccupancy],
    search: str = "",
    only_overloaded: bool = False,
    only_available: bool = False,
) -> List[ConsultantOccupancy]:
    needle = search.lower()
    result = []
    for r in rows:
        if needle and needle not in r.consultant.name.lower() and needle not in r.consultant.role.lower():
            continue
        if only_overloaded and r.status != OccupancyStatus.OVERLOADED:
            continue
        if only_available and r.status != OccupancyStatus.AVAILABLE:
            continue
        result.append(r)
    return result


def _nan_to_zero(value: float) -> float:
    return 0.0 if math.isnan(value) else value


def summarize_team(
    rows: Sequence[ConsultantOccupancy],
    settings: AppSettings,
    is_weekly: bool,
    include_tentative: bool,
) -> TeamStats:
    """Headline figures for a set of consultants in the selected period."""
    capacity = capacity_for(settings, is_weekly)
    committed = sum(r.occupancy.confirmed_hours + r.occupancy.absence_hours for r in rows)
    tentative = sum(r.occupancy.tentative_hours for r in rows)

    total_fte = get_fte(committed + (tentative if include_tentative else 0.0), capacity)
    team_capacity = len(rows) * capacity
    occupancy_pct = get_fte(committed, team_capacity) * 100

    return TeamStats(
        committed_hours=committed,
        tentative_hours=tentative,
        overloaded_count=sum(1 for r in rows if r.status == OccupancyStatus.OVERLOADED),
        available_count=sum(1 for r in rows if r.status == OccupancyStatus.AVAILABLE),
        total_fte=_nan_to_zero(total_fte),
        occupancy_pct=_nan_to_zero(occupancy_pct),
    )


def timeline_periods(anchor: date, is_weekly: bool) -> List[Period]:
    if is_weekly:
        return [format_period(anchor, True, week) for week in range(1, weeks_in_month(anchor.year, anchor.month) + 1)]
    return [format_period(shift_period_date(anchor, delta, False), False) for delta in range(-2, 4)]


def occupancy_timeline(
    anchor: date,
    consultants: Sequence[Consultant],
    assignments: Sequence[Assignment],
    absences: Sequence[Absence],
    is_weekly: bool,
    include_tentative: bool,
    selected: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    One point per period around `anchor`: total hours for each selected
    consultant plus the team average over all consultants.
    """
    chosen = [c for c in consultants if c.id in selected] if selected else []
    points = []
    for period in timeline_periods(anchor, is_weekly):
        totals = {
            c.id: get_period_occupancy(c.id, assignments, absences, period.key, is_weekly, include_tentative).total_hours
            for c in consultants
        }
        team_average = sum(totals.values()) / len(consultants) if consultants else 0.0
        points.append({
            "period": period,
            "consultants": {c.id: totals[c.id] for c in chosen},
            "team_average": team_average,
        })
    return points


def build_insight_summary(state, period_id: str, is_weekly: bool) -> Dict[str, Any]:
    """The compact summary handed to the recommendation service."""
    return {
        "total_consultants": len(state.consultants),
        "active_projects": sum(1 for p in state.projects if p.active),
        "assignments_count": len(state.assignments),
        "period": period_id,
        "view": "weekly" if is_weekly else "monthly",
    }
