"""Codec for the ``day-month[-year]`` text format used for reminder dates.

An omitted year, or year 0, means the reminder repeats every year. That
sentinel only exists in text: parsed dates carry an explicit ``OneTime`` or
``Yearly`` recurrence instead.

Feb 29 is checked against the literal year for one-time dates (29-2-2023 is
rejected) and against a leap placeholder for yearly dates (29-2 is accepted
and comes due in leap years only).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import MAXYEAR, date, datetime

from datekeeper.errors import InvalidFormat

DELIM = "-"
YEARLY_SENTINEL = 0
PLACEHOLDER_YEAR = 2000  # leap year; only used to build concrete dates
MAX_FIELD_DIGITS = 4


@dataclass(frozen=True, slots=True)
class OneTime:
    year: int


@dataclass(frozen=True, slots=True)
class Yearly:
    pass


YEARLY = Yearly()
Recurrence = OneTime | Yearly


def date_key(day: int, month: int) -> str:
    """Storage grouping key: day and month only."""
    return f"{day}{DELIM}{month}"


@dataclass(frozen=True, slots=True)
class TaskDate:
    day: int
    month: int
    recurrence: Recurrence = YEARLY

    @property
    def recurring(self) -> bool:
        return isinstance(self.recurrence, Yearly)

    @property
    def year(self) -> int:
        """Year as written in text; 0 for yearly dates."""
        if isinstance(self.recurrence, OneTime):
            return self.recurrence.year
        return YEARLY_SENTINEL

    @property
    def key(self) -> str:
        return date_key(self.day, self.month)

    def to_date(self) -> date:
        return to_date(str(self))

    def __str__(self) -> str:
        return f"{self.day}{DELIM}{self.month}{DELIM}{self.year}"


def _split(text: str) -> tuple[int, int, int]:
    """Validate ``D-M[-Y]`` and return (day, month, year) with year 0 for yearly."""
    stripped = text.strip()
    fields = [f.strip() for f in stripped.split(DELIM)]
    if len(fields) not in (2, 3):
        raise InvalidFormat(f"wrong date format {stripped!r}, use day-month-year")
    if not all(f.isdecimal() for f in fields):
        raise InvalidFormat(f"wrong date format {stripped[:20]!r}, use numbers only")
    if any(len(f) > MAX_FIELD_DIGITS for f in fields):
        raise InvalidFormat(f"wrong date format, fields have at most {MAX_FIELD_DIGITS} digits")

    day, month = int(fields[0]), int(fields[1])
    year = int(fields[2]) if len(fields) == 3 else YEARLY_SENTINEL

    if not 1 <= month <= 12:
        raise InvalidFormat(f"month must be between 1 and 12, got {month}")
    if year > MAXYEAR:
        raise InvalidFormat(f"year {year} is out of range")
    last_day = calendar.monthrange(year or PLACEHOLDER_YEAR, month)[1]
    if not 1 <= day <= last_day:
        suffix = f" {year}" if year else ""
        raise InvalidFormat(
            f"day must be between 1 and {last_day} for {calendar.month_name[month]}{suffix}"
        )
    return day, month, year


def normalize(text: str) -> str:
    """Canonical ``D-M-Y`` without leading zeros; year 0 for yearly dates."""
    day, month, year = _split(text)
    return f"{day}{DELIM}{month}{DELIM}{year}"


def parse_date(text: str) -> TaskDate:
    day, month, year = _split(text)
    recurrence: Recurrence = OneTime(year) if year else YEARLY
    return TaskDate(day=day, month=month, recurrence=recurrence)


def swap_order(text: str) -> str:
    """Swap the first two fields: ``D-M-Y`` <-> ``M-D-Y``. Its own inverse."""
    fields = text.split(DELIM)
    if len(fields) < 2:
        return text
    fields[0], fields[1] = fields[1], fields[0]
    return DELIM.join(fields)


def to_date(normalized: str) -> date:
    """Concrete date for a normalized string; yearly dates land in PLACEHOLDER_YEAR."""
    day, month, year = _split(normalized)
    padded = f"{day:02d}{DELIM}{month:02d}{DELIM}{year or PLACEHOLDER_YEAR:04d}"
    return datetime.strptime(swap_order(padded), "%m-%d-%Y").date()
