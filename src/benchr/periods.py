import calendar
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

PERIOD_KEY_RE = re.compile(r"^(\d{4})-(\d{2})(?:-W(\d+))?$")


@dataclass(frozen=True)
class Period:
    """
    A planning bucket: a whole month, or the n-th week of a month.
    Weeks are counted inside their month starting at 1, so a month can
    have a W5 or even a W6. The string key is only used at the storage
    boundary: 'YYYY-MM' or 'YYYY-MM-W<n>'.
    """
    year: int
    month: int
    week: Optional[int] = None

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if self.week is not None and self.week < 1:
            raise ValueError(f"Week numbers start at 1, got {self.week}")

    @property
    def is_weekly(self) -> bool:
        return self.week is not None

    @property
    def month_key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def key(self) -> str:
        if self.week is None:
            return self.month_key
        return f"{self.month_key}-W{self.week}"

    @property
    def label(self) -> str:
        month_name = calendar.month_name[self.month]
        if self.week is None:
            return f"{month_name} {self.year}"
        return f"{month_name} - Week {self.week}"

    def containing_month(self) -> "Period":
        return Period(self.year, self.month)

    def contains(self, other: "Period") -> bool:
        """A month contains itself and every week filed under it; a week only itself."""
        if self == other:
            return True
        return not self.is_weekly and other.is_weekly and other.containing_month() == self

    @classmethod
    def from_key(cls, key: str) -> "Period":
        match = PERIOD_KEY_RE.match(key.strip()) if isinstance(key, str) else None
        if not match:
            raise ValueError(f"Not a period key: {key!r} (expected YYYY-MM or YYYY-MM-W<n>)")
        year, month, week = match.groups()
        return cls(int(year), int(month), int(week) if week is not None else None)

    @classmethod
    def parse(cls, key: str) -> Optional["Period"]:
        try:
            return cls.from_key(key)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.key


def week_of_month(day: date) -> int:
    # Monday-based weeks anchored on the weekday the month starts on
    first_weekday_offset = day.replace(day=1).isoweekday()
    return math.ceil((day.day + first_weekday_offset - 1) / 7)


def format_period(day: date, is_weekly: bool, week: Optional[int] = None) -> Period:
    if not is_weekly:
        return Period(day.year, day.month)
    if week is None:
        week = week_of_month(day)
    return Period(day.year, day.month, week)


def shift_period_date(day: date, delta: int, is_weekly: bool) -> date:
    """Moves the navigation date by `delta` weeks or calendar months."""
    if is_weekly:
        return day + timedelta(days=7 * delta)
    month_index = day.year * 12 + (day.month - 1) + delta
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_in_scope(record_period: str, query_key: str, is_weekly: bool) -> bool:
    """
    Roll-up rule used when summing hours for a period.
    Weekly queries only match their own key. Monthly queries also
    pick up every week filed under that month.
    """
    if record_period == query_key:
        return True
    if is_weekly:
        return False
    record, query = Period.parse(record_period), Period.parse(query_key)
    if record is None or query is None:
        return False
    return query.contains(record)


def weeks_in_month(year: int, month: int) -> int:
    last_day = calendar.monthrange(year, month)[1]
    return week_of_month(date(year, month, last_day))


def month_subperiods(month: Period) -> List[Period]:
    base = month.containing_month()
    weeks = range(1, weeks_in_month(base.year, base.month) + 1)
    return [base] + [Period(base.year, base.month, w) for w in weeks]
