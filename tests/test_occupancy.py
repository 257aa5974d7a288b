from __future__ import annotations

import math
from datetime import date
from types import SimpleNamespace

import pytest

from benchr.config import AppSettings
from benchr.models import Consultant, Project
from benchr.occupancy import (
    OccupancyStatus,
    build_insight_summary,
    build_occupancy_rows,
    filter_rows,
    get_fte,
    get_occupancy_status,
    get_period_occupancy,
    occupancy_timeline,
    summarize_team,
    timeline_periods,
)
from benchr.periods import format_period
from factories import make_absence, make_assignment


# Scenarios -------------------------------------------------------------------


@pytest.fixture()
def scenario_a():
    return [
        make_assignment("X", 140, "2026-01", status="Confirmed"),
        make_assignment("X", 40, "2026-01", status="Tentative"),
    ]


def test_scenario_a_tentative_pushes_into_overload(scenario_a, settings: AppSettings) -> None:
    occ = get_period_occupancy("X", scenario_a, [], "2026-01", False, True)
    assert (occ.confirmed_hours, occ.tentative_hours, occ.absence_hours, occ.total_hours) == (140, 40, 0, 180)
    assert get_fte(occ.total_hours, 160) == 1.125
    assert get_occupancy_status(occ.total_hours, settings, False) == OccupancyStatus.OVERLOADED


def test_scenario_b_without_tentative_is_nominal(scenario_a, settings: AppSettings) -> None:
    occ = get_period_occupancy("X", scenario_a, [], "2026-01", False, False)
    assert occ.total_hours == 140
    assert get_occupancy_status(occ.total_hours, settings, False) == OccupancyStatus.NOMINAL


def test_scenario_c_absence_only_is_available(settings: AppSettings) -> None:
    absences = [make_absence("Y", 80, "2026-01")]
    occ = get_period_occupancy("Y", [], absences, "2026-01", False, True)
    assert occ.absence_hours == 80
    assert occ.total_hours == 80
    assert get_occupancy_status(occ.total_hours, settings, False) == OccupancyStatus.AVAILABLE


def test_scenario_d_weeks_roll_into_month() -> None:
    assignments = [
        make_assignment("Z", 20, "2026-01-W1"),
        make_assignment("Z", 30, "2026-01-W2"),
    ]
    assert get_period_occupancy("Z", assignments, [], "2026-01", False, True).total_hours == 50
    assert get_period_occupancy("Z", assignments, [], "2026-01-W1", True, True).total_hours == 20


# Aggregation rules -----------------------------------------------------------


def test_monthly_total_is_direct_month_plus_all_its_weeks() -> None:
    assignments = [
        make_assignment("X", 60, "2026-01"),
        make_assignment("X", 10, "2026-01-W1"),
        make_assignment("X", 15, "2026-01-W4", status="Tentative"),
        make_assignment("X", 99, "2026-02-W1"),
        make_assignment("Other", 99, "2026-01"),
    ]
    absences = [make_absence("X", 8, "2026-01-W2"), make_absence("X", 8, "2025-12")]

    month = get_period_occupancy("X", assignments, absences, "2026-01", False, True)
    weeks = [
        get_period_occupancy("X", assignments, absences, f"2026-01-W{w}", True, True)
        for w in range(1, 7)
    ]
    direct = get_period_occupancy("X", [a for a in assignments if a.period == "2026-01"],
                                  [a for a in absences if a.period == "2026-01"], "2026-01", True, True)

    assert month.total_hours == direct.total_hours + sum(w.total_hours for w in weeks)
    assert month.total_hours == 93


def test_weekly_query_ignores_month_coded_records() -> None:
    assignments = [make_assignment("X", 160, "2026-01"), make_assignment("X", 8, "2026-01-W1")]
    occ = get_period_occupancy("X", assignments, [], "2026-01-W1", True, True)
    assert occ.total_hours == 8


@pytest.mark.parametrize("include", [True, False])
def test_tentative_toggle_only_affects_total(include: bool) -> None:
    assignments = [
        make_assignment("X", 100, "2026-01"),
        make_assignment("X", 25, "2026-01", status="Tentative"),
        make_assignment("X", 5, "2026-01-W3", status="Tentative"),
    ]
    absences = [make_absence("X", 16, "2026-01")]
    with_t = get_period_occupancy("X", assignments, absences, "2026-01", False, True)
    occ = get_period_occupancy("X", assignments, absences, "2026-01", False, include)

    assert occ.tentative_hours == 30
    assert occ.confirmed_hours == 100
    expected = with_t.total_hours if include else with_t.total_hours - with_t.tentative_hours
    assert occ.total_hours == expected


def test_unknown_consultant_or_period_gives_zero_snapshot() -> None:
    assignments = [make_assignment("X", 40, "2026-01")]
    for occ in (
        get_period_occupancy("nobody", assignments, [], "2026-01", False, True),
        get_period_occupancy("X", assignments, [], "2030-05", False, True),
        get_period_occupancy("X", [], [], "2026-01", False, True),
    ):
        assert (occ.confirmed_hours, occ.tentative_hours, occ.absence_hours, occ.total_hours) == (0, 0, 0, 0)


def test_non_numeric_hours_count_as_zero() -> None:
    assignments = [
        make_assignment("X", "forty", "2026-01"),
        make_assignment("X", None, "2026-01"),
        make_assignment("X", "12.5", "2026-01"),
    ]
    assert get_period_occupancy("X", assignments, [], "2026-01", False, True).total_hours == 12.5


def test_inputs_are_not_mutated() -> None:
    assignments = [make_assignment("X", 40, "2026-01-W1")]
    before = [a.model_dump() for a in assignments]
    get_period_occupancy("X", assignments, [], "2026-01", False, True)
    assert [a.model_dump() for a in assignments] == before


def test_engine_accepts_plain_record_like_objects() -> None:
    record = SimpleNamespace(consultant_id="X", period="2026-01", hours=7.5, status="Confirmed")
    assert get_period_occupancy("X", [record], [], "2026-01", False, True).confirmed_hours == 7.5


# FTE & status ----------------------------------------------------------------


def test_fte_is_plain_ratio() -> None:
    assert get_fte(20, 40) == 0.5
    assert get_fte(0, 160) == 0


def test_fte_with_zero_capacity_is_not_an_exception() -> None:
    assert get_fte(10, 0) == math.inf
    assert get_fte(-10, 0) == -math.inf
    assert math.isnan(get_fte(0, 0))


@pytest.mark.parametrize("hours,expected", [
    (160, OccupancyStatus.NOMINAL),
    (161, OccupancyStatus.OVERLOADED),
    (30, OccupancyStatus.NOMINAL),
    (29, OccupancyStatus.AVAILABLE),
])
def test_status_boundaries_are_strict(hours: float, expected: OccupancyStatus) -> None:
    settings = AppSettings(standard_monthly_capacity=160, available_monthly_threshold=30)
    assert get_occupancy_status(hours, settings, False) == expected


def test_status_uses_weekly_settings_in_weekly_view(settings: AppSettings) -> None:
    assert get_occupancy_status(41, settings, True) == OccupancyStatus.OVERLOADED
    assert get_occupancy_status(29, settings, True) == OccupancyStatus.AVAILABLE
    assert get_occupancy_status(35, settings, True) == OccupancyStatus.NOMINAL
    assert get_occupancy_status(41, settings, False) == OccupancyStatus.AVAILABLE


def test_nan_hours_collapse_to_nominal(settings: AppSettings) -> None:
    assert get_occupancy_status(math.nan, settings, False) == OccupancyStatus.NOMINAL


# Dashboard helpers -----------------------------------------------------------


@pytest.fixture()
def team():
    consultants = [
        Consultant(id="AlejG", name="Alejandro Garcia", role="Senior Architect"),
        Consultant(id="RafaM", name="Rafael Moreno", role="Junior Consultant"),
        Consultant(id="MariR", name="Maria Rodriguez", role="Project Manager"),
    ]
    assignments = [
        make_assignment("AlejG", 140, "2026-01"),
        make_assignment("AlejG", 40, "2026-01", status="Tentative"),
        make_assignment("RafaM", 80, "2026-01"),
        make_assignment("MariR", 120, "2026-01"),
        make_assignment("MariR", 40, "2026-01-W2"),
    ]
    absences = [make_absence("RafaM", 16, "2026-01-W1")]
    return consultants, assignments, absences


def test_build_occupancy_rows_classifies_everyone(team, settings: AppSettings) -> None:
    consultants, assignments, absences = team
    rows = build_occupancy_rows(consultants, assignments, absences, "2026-01", False, True, settings)
    by_id = {r.consultant.id: r for r in rows}

    assert by_id["AlejG"].status == OccupancyStatus.OVERLOADED
    assert by_id["AlejG"].fte == 1.125
    assert by_id["RafaM"].status == OccupancyStatus.AVAILABLE
    assert by_id["RafaM"].occupancy.total_hours == 96
    assert by_id["MariR"].status == OccupancyStatus.NOMINAL


def test_filter_rows_by_search_and_status(team, settings: AppSettings) -> None:
    consultants, assignments, absences = team
    rows = build_occupancy_rows(consultants, assignments, absences, "2026-01", False, True, settings)

    assert [r.consultant.id for r in filter_rows(rows, search="architect")] == ["AlejG"]
    assert [r.consultant.id for r in filter_rows(rows, only_overloaded=True)] == ["AlejG"]
    assert [r.consultant.id for r in filter_rows(rows, only_available=True)] == ["RafaM"]
    assert filter_rows(rows, search="maria", only_available=True) == []


def test_summarize_team(team, settings: AppSettings) -> None:
    consultants, assignments, absences = team
    rows = build_occupancy_rows(consultants, assignments, absences, "2026-01", False, True, settings)
    stats = summarize_team(rows, settings, False, True)

    assert stats.committed_hours == 140 + 96 + 160
    assert stats.tentative_hours == 40
    assert stats.overloaded_count == 1
    assert stats.available_count == 1
    assert stats.total_fte == pytest.approx((396 + 40) / 160)
    assert stats.occupancy_pct == pytest.approx(396 / 480 * 100)


def test_summarize_empty_team_reports_zero(settings: AppSettings) -> None:
    stats = summarize_team([], settings, False, True)
    assert stats.total_fte == 0
    assert stats.occupancy_pct == 0


def test_timeline_periods_monthly_and_weekly() -> None:
    monthly = [p.key for p in timeline_periods(date(2026, 1, 15), False)]
    assert monthly == ["2025-11", "2025-12", "2026-01", "2026-02", "2026-03", "2026-04"]
    weekly = [p.key for p in timeline_periods(date(2026, 1, 15), True)]
    assert weekly == [f"2026-01-W{w}" for w in range(1, 6)]
    march = [p.key for p in timeline_periods(date(2026, 3, 31), True)]
    assert march[-1] == "2026-03-W6"
    assert format_period(date(2026, 3, 31), True) in timeline_periods(date(2026, 3, 31), True)


def test_occupancy_timeline_series_and_team_average(team) -> None:
    consultants, assignments, absences = team
    points = occupancy_timeline(date(2026, 1, 1), consultants, assignments, absences, False, True, ["MariR"])

    jan = next(pt for pt in points if pt["period"].key == "2026-01")
    assert jan["consultants"] == {"MariR": 160}
    assert jan["team_average"] == pytest.approx((180 + 96 + 160) / 3)
    assert all(pt["team_average"] == 0 for pt in points if pt["period"].key != "2026-01")


def test_build_insight_summary(team) -> None:
    consultants, assignments, absences = team
    state = SimpleNamespace(
        consultants=consultants,
        projects=[Project(id="p1", name="Bank"), Project(id="p2", name="Old", active=False)],
        assignments=assignments,
        absences=absences,
    )
    summary = build_insight_summary(state, "2026-01-W2", True)
    assert summary == {
        "total_consultants": 3,
        "active_projects": 1,
        "assignments_count": 5,
        "period": "2026-01-W2",
        "view": "weekly",
    }
