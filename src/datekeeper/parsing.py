"""Extract tasks and task selectors from free-form message text.

Add payload::

    10-5            <- date (year optional, 0 = every year)
    Mom's birthday  <- subject
    buy flowers     <- description, any number of lines

Update payload: a ``date:number`` selector line, then the same three lines
where any blank or missing line keeps the current value.
"""

from dataclasses import dataclass

from datekeeper.dates import TaskDate, parse_date
from datekeeper.errors import InvalidFormat
from datekeeper.models import Task, TaskPatch

SELECTOR_DELIM = ":"
MAX_INDEX_DIGITS = 6


@dataclass(frozen=True, slots=True)
class Selector:
    date: TaskDate
    index: int  # 1-based, as shown to the user

    @property
    def position(self) -> int:
        return self.index - 1


def _line(lines: list[str], idx: int) -> str:
    return lines[idx].strip() if idx < len(lines) else ""


def parse_task(text: str) -> Task:
    lines = text.strip().splitlines()
    if not lines:
        raise InvalidFormat("empty reminder, send date, name and description on separate lines")
    date = parse_date(lines[0])
    subject = _line(lines, 1)
    if not subject:
        raise InvalidFormat("reminder name is missing")
    description = "\n".join(lines[2:]).strip()
    return Task.new(date, subject, description)


def parse_task_patch(text: str) -> TaskPatch:
    """Positional like parse_task, but blank or missing lines stay None."""
    lines = text.splitlines()
    date_line = _line(lines, 0)
    patch = TaskPatch(
        date=parse_date(date_line) if date_line else None,
        subject=_line(lines, 1) or None,
        description="\n".join(lines[2:]).strip() or None,
    )
    if patch.is_empty():
        raise InvalidFormat("nothing to update")
    return patch


def parse_selector(text: str) -> Selector:
    """Parse ``D-M[-Y]:N`` where N is the 1-based reminder number."""
    date_part, sep, index_part = text.strip().partition(SELECTOR_DELIM)
    if not sep:
        raise InvalidFormat("reminder number is missing, use date-month-year:ReminderNumber")
    index_part = index_part.strip()
    if not index_part.isdecimal() or len(index_part) > MAX_INDEX_DIGITS or int(index_part) < 1:
        raise InvalidFormat(f"reminder number must be a positive integer, got {index_part[:10]!r}")
    return Selector(date=parse_date(date_part), index=int(index_part))


def split_update(text: str) -> tuple[Selector, TaskPatch]:
    head, _, rest = text.lstrip().partition("\n")
    return parse_selector(head), parse_task_patch(rest)
