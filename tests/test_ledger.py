from __future__ import annotations

import json

import pytest

from benchr import ledger
from benchr.ledger import (
    ASSIGNMENTS_FILE,
    JOURNAL_FILE,
    LedgerError,
    append_event,
    load_roster,
    load_state,
    rebuild_state,
)
from benchr.models import AssignmentStatus, ProjectType


def _seed() -> None:
    append_event("CONSULTANT_ADDED", {"id": "MariR", "name": "Maria Rodriguez", "role": "Project Manager"})
    append_event("PROJECT_ADDED", {"id": "bank", "name": "Bank Migration", "type": "Client", "client": "Banco"})
    append_event("ASSIGNMENT_ADDED", {
        "id": "a1", "consultant_id": "MariR", "project_id": "bank", "hours": 120,
        "status": "Confirmed", "period": "2026-01", "is_weekly": False,
    })
    append_event("ASSIGNMENT_ADDED", {
        "id": "a2", "consultant_id": "MariR", "project_id": "bank", "hours": 10,
        "status": "Tentative", "period": "2026-01-W2", "is_weekly": True,
    })
    append_event("ABSENCE_ADDED", {
        "id": "ab1", "consultant_id": "MariR", "category": "Vacation", "hours": 16,
        "period": "2026-01", "is_weekly": False,
    })


def test_empty_data_dir_loads_empty_roster() -> None:
    roster = load_roster()
    assert roster.consultants == [] and roster.assignments == []
    assert load_state(ASSIGNMENTS_FILE) == []


def test_events_build_typed_snapshots(benchr_home) -> None:
    _seed()
    roster = load_roster()

    assert roster.consultant("MariR").name == "Maria Rodriguez"
    assert roster.project("bank").type == ProjectType.CLIENT
    assert [a.id for a in roster.assignments] == ["a1", "a2"]
    assert roster.assignments[1].status == AssignmentStatus.TENTATIVE
    assert roster.absences[0].hours == 16
    assert (benchr_home / JOURNAL_FILE).exists()


def test_edits_merge_into_existing_records() -> None:
    _seed()
    append_event("CONSULTANT_EDITED", {"id": "MariR", "role": "Delivery Lead"})
    append_event("ASSIGNMENT_EDITED", {"id": "a1", "hours": 90, "status": "Tentative"})
    append_event("ABSENCE_EDITED", {"id": "ab1", "category": "Medical leave"})
    append_event("ASSIGNMENT_EDITED", {"id": "ghost", "hours": 1})

    roster = load_roster()
    assert roster.consultant("MariR").role == "Delivery Lead"
    assert roster.consultant("MariR").name == "Maria Rodriguez"
    a1 = roster.assignments[0]
    assert (a1.hours, a1.status, a1.period) == (90, AssignmentStatus.TENTATIVE, "2026-01")
    assert roster.absences[0].category.value == "Medical leave"
    assert len(roster.assignments) == 2


def test_deletes_deactivate_people_and_projects() -> None:
    _seed()
    append_event("CONSULTANT_DELETED", {"id": "MariR"})
    append_event("PROJECT_DELETED", {"id": "bank"})
    roster = load_roster()
    assert roster.consultant("MariR").active is False
    assert roster.project("bank").active is False


def test_period_events_replay_through_planning_functions() -> None:
    _seed()
    append_event("PERIOD_COPIED", {
        "from_period": "2026-01", "to_period": "2026-02", "is_weekly": False,
        "assignment_ids": ["c1"], "absence_ids": ["c2"],
    })
    roster = load_roster()
    assert [a.id for a in roster.assignments] == ["a1", "a2", "c1"]
    assert roster.assignments[-1].period == "2026-02"
    assert roster.absences[-1].id == "c2"

    append_event("PERIOD_RESET", {"period": "2026-01", "is_weekly": False})
    roster = load_roster()
    assert [a.id for a in roster.assignments] == ["a2", "c1"]
    assert [a.id for a in roster.absences] == ["c2"]


def test_rebuild_is_deterministic() -> None:
    _seed()
    append_event("PERIOD_COPIED", {
        "from_period": "2026-01", "to_period": "2026-02", "is_weekly": False,
        "assignment_ids": ["c1"], "absence_ids": ["c2"],
    })
    first = load_state(ASSIGNMENTS_FILE)
    rebuild_state()
    assert load_state(ASSIGNMENTS_FILE) == first


def test_boundary_coerces_bad_hours_from_journal(benchr_home) -> None:
    append_event("ASSIGNMENT_ADDED", {
        "id": "bad", "consultant_id": "X", "project_id": "p", "hours": "n/a",
        "status": "Confirmed", "period": "2026-01", "is_weekly": False,
    })
    assert load_roster().assignments[0].hours == 0.0


def test_unknown_events_are_skipped() -> None:
    _seed()
    append_event("SOMETHING_NEW", {"id": "x"})
    assert len(load_roster().assignments) == 2


def test_corrupt_journal_line_raises_ledger_error(benchr_home) -> None:
    _seed()
    with (benchr_home / JOURNAL_FILE).open("a") as f:
        f.write("{not json\n")
    with pytest.raises(LedgerError, match="line 6"):
        rebuild_state()


def test_snapshot_files_are_plain_json(benchr_home) -> None:
    _seed()
    raw = json.loads((benchr_home / ledger.ASSIGNMENTS_FILE).read_text())
    assert raw[0]["status"] == "Confirmed"
    assert raw[1]["period"] == "2026-01-W2"
