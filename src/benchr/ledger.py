import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from loguru import logger
from pydantic import ValidationError

from .config import get_data_dir
from .models import Absence, Assignment, Consultant, Project
from .planning import add_record, copy_period, remove_record, reset_period, update_record

# --- FILE SETUP ---
JOURNAL_FILE = "benchr_journal.jsonl"
CONSULTANTS_FILE = "benchr_consultants.json"
PROJECTS_FILE = "benchr_projects.json"
ASSIGNMENTS_FILE = "benchr_assignments.json"
ABSENCES_FILE = "benchr_absences.json"


class LedgerError(RuntimeError):
    pass


@dataclass
class RosterState:
    """In-memory view of everything the occupancy engine works on."""
    consultants: List[Consultant] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    absences: List[Absence] = field(default_factory=list)

    def consultant(self, consultant_id: str):
        return next((c for c in self.consultants if c.id == consultant_id), None)

    def project(self, project_id: str):
        return next((p for p in self.projects if p.id == project_id), None)


def data_file(name: str) -> Path:
    return get_data_dir() / name


# --- THE WRITER (Append-Only) ---
def append_event(event_type: str, payload: dict):
    """
    Appends a new event to the journal and immediately rebuilds the snapshots.
    """
    event = {
        "event_id": str(uuid.uuid4()),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "payload": payload,
    }

    journal = data_file(JOURNAL_FILE)
    journal.parent.mkdir(parents=True, exist_ok=True)
    with journal.open("a") as f:
        f.write(json.dumps(event) + "\n")
    logger.info(f"{event_type} appended to {journal.name}")

    rebuild_state()


# --- THE REDUCER ---
def apply_event(state: RosterState, e_type: str, data: dict) -> None:
    consultants = {c.id: c for c in state.consultants}
    projects = {p.id: p for p in state.projects}

    # --- CONSULTANTS ---
    if e_type == "CONSULTANT_ADDED":
        consultants[data["id"]] = Consultant(**data)
    elif e_type == "CONSULTANT_EDITED":
        if data["id"] in consultants:
            consultants[data["id"]] = Consultant(**{**consultants[data["id"]].model_dump(), **data})
    elif e_type == "CONSULTANT_DELETED":
        if data["id"] in consultants:
            consultants[data["id"]] = consultants[data["id"]].model_copy(update={"active": False})

    # --- PROJECTS ---
    elif e_type == "PROJECT_ADDED":
        projects[data["id"]] = Project(**data)
    elif e_type == "PROJECT_EDITED":
        if data["id"] in projects:
            projects[data["id"]] = Project(**{**projects[data["id"]].model_dump(), **data})
    elif e_type == "PROJECT_DELETED":
        if data["id"] in projects:
            projects[data["id"]] = projects[data["id"]].model_copy(update={"active": False})

    # --- ASSIGNMENTS & ABSENCES ---
    elif e_type == "ASSIGNMENT_ADDED":
        state.assignments = add_record(state.assignments, Assignment(**data))
    elif e_type == "ASSIGNMENT_EDITED":
        current = next((a for a in state.assignments if a.id == data["id"]), None)
        if current:
            merged = Assignment(**{**current.model_dump(), **data})
            state.assignments = update_record(state.assignments, merged)
    elif e_type == "ASSIGNMENT_REMOVED":
        state.assignments = remove_record(state.assignments, data["id"])
    elif e_type == "ABSENCE_ADDED":
        state.absences = add_record(state.absences, Absence(**data))
    elif e_type == "ABSENCE_EDITED":
        current = next((a for a in state.absences if a.id == data["id"]), None)
        if current:
            merged = Absence(**{**current.model_dump(), **data})
            state.absences = update_record(state.absences, merged)
    elif e_type == "ABSENCE_REMOVED":
        state.absences = remove_record(state.absences, data["id"])

    # --- PERIOD OPERATIONS ---
    elif e_type == "PERIOD_RESET":
        state.assignments, state.absences = reset_period(
            state.assignments, state.absences, data["period"], data["is_weekly"]
        )
    elif e_type == "PERIOD_COPIED":
        # Ids are generated when the event is recorded so replays stay identical
        ids = iter(data["assignment_ids"] + data["absence_ids"])
        state.assignments, state.absences = copy_period(
            state.assignments, state.absences,
            data["from_period"], data["to_period"], data["is_weekly"],
            id_factory=lambda: next(ids),
        )
    else:
        logger.warning(f"Skipping unknown event type {e_type!r}")

    state.consultants = list(consultants.values())
    state.projects = list(projects.values())


def replay_journal() -> RosterState:
    """Reads the journal top to bottom and folds every event into a fresh state."""
    state = RosterState()
    journal = data_file(JOURNAL_FILE)
    if not journal.exists():
        return state

    with journal.open("r") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                event = json.loads(line)
                apply_event(state, event["event_type"], event["payload"])
            except (json.JSONDecodeError, KeyError, ValidationError, StopIteration) as exc:
                raise LedgerError(f"Corrupt journal entry at line {line_no}: {exc}") from exc
    return state


def rebuild_state() -> RosterState:
    """
    Replays the journal and saves the compiled state to fast-read JSON files.
    """
    state = replay_journal()
    _save_state(data_file(CONSULTANTS_FILE), [c.model_dump(mode="json") for c in state.consultants])
    _save_state(data_file(PROJECTS_FILE), [p.model_dump(mode="json") for p in state.projects])
    _save_state(data_file(ASSIGNMENTS_FILE), [a.model_dump(mode="json") for a in state.assignments])
    _save_state(data_file(ABSENCES_FILE), [a.model_dump(mode="json") for a in state.absences])
    logger.debug(
        f"State rebuilt: {len(state.consultants)} consultants, {len(state.projects)} projects, "
        f"{len(state.assignments)} assignments, {len(state.absences)} absences"
    )
    return state


# --- HELPER FUNCTIONS ---
def _save_state(filepath: Path, data: list):
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("w") as f:
        json.dump(data, f, indent=2)


def load_state(name: str) -> list:
    """Reads one compiled snapshot file; missing or broken files read as empty."""
    try:
        with data_file(name).open("r") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return []


def load_roster() -> RosterState:
    return RosterState(
        consultants=[Consultant(**d) for d in load_state(CONSULTANTS_FILE)],
        projects=[Project(**d) for d in load_state(PROJECTS_FILE)],
        assignments=[Assignment(**d) for d in load_state(ASSIGNMENTS_FILE)],
        absences=[Absence(**d) for d in load_state(ABSENCES_FILE)],
    )
