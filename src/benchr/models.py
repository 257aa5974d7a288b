import math
import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ProjectType(str, Enum):
    CLIENT = "Client"
    INTERNAL = "Internal"
    ABSENCE = "Absence"
    TENTATIVE = "Tentative"


class AssignmentStatus(str, Enum):
    CONFIRMED = "Confirmed"
    TENTATIVE = "Tentative"


class AbsenceCategory(str, Enum):
    VACATION = "Vacation"
    PUBLIC_HOLIDAY = "Public holiday"
    MEDICAL_LEAVE = "Medical leave"
    PERSONAL_LEAVE = "Personal leave"


def new_record_id() -> str:
    return uuid.uuid4().hex[:8]


def coerce_hours(value: Any) -> float:
    """
    Normalizes an hours value coming from storage or user input.
    Missing, non-numeric and NaN values count as zero hours.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(hours) else hours


class Record(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str


class Consultant(Record):
    name: str
    role: str = ""
    email: str = ""
    active: bool = True
    notes: Optional[str] = None


class Project(Record):
    name: str
    type: ProjectType = ProjectType.CLIENT
    client: Optional[str] = None
    description: Optional[str] = None
    active: bool = True


class PeriodRecord(Record):
    """Common shape of anything booked against a period key."""

    consultant_id: str
    hours: float = 0.0
    period: str
    is_weekly: bool = False

    @field_validator("hours", mode="before")
    @classmethod
    def _hours_as_number(cls, v: Any) -> float:
        return coerce_hours(v)


class Assignment(PeriodRecord):
    project_id: str
    status: AssignmentStatus = AssignmentStatus.CONFIRMED
    description: Optional[str] = None


class Absence(PeriodRecord):
    category: AbsenceCategory = AbsenceCategory.VACATION
    notes: Optional[str] = None
