"""Discord-markdown rendering of reminders and listings."""

import calendar

from datekeeper.dates import DELIM, TaskDate
from datekeeper.models import Task

MAX_MESSAGE_LEN = 2000  # Discord's per-message limit


def _escape_md(s: str) -> str:
    """Escape characters that break Discord bold/underline markdown."""
    return s.replace("*", "\\*").replace("_", "\\_")


def _key_order(key: str) -> tuple[int, int]:
    day, _, month = key.partition(DELIM)
    return int(month), int(day)


def format_key(key: str) -> str:
    """``10-5`` -> ``10 May``."""
    day, month = _key_order(key)[::-1]
    return f"{day} {calendar.month_abbr[month]}"


def format_when(date: TaskDate) -> str:
    return "every year" if date.recurring else str(date.year)


def format_task(task: Task, number: int | None = None) -> str:
    head = f"{number}. {task.subject}" if number is not None else task.subject
    lines = [f"**{_escape_md(head)}** ({format_when(task.date)})"]
    if task.description:
        lines.append(task.description)
    return "\n".join(lines)


def format_numbered(numbered: list[tuple[int, Task]]) -> str:
    return "\n".join(format_task(task, number) for number, task in numbered)


def format_listing(tasks: dict[str, list[Task]] | None, header: str) -> str:
    """Header, then each day-month in calendar order with tasks numbered from 1."""
    if not tasks:
        return f"{header}\nno reminders yet"
    sections = [header]
    for key in sorted(tasks, key=_key_order):
        numbered = list(enumerate(tasks[key], start=1))
        sections.append(f"__{format_key(key)}__ ({key})\n{format_numbered(numbered)}")
    return "\n\n".join(sections)


def format_reminder(task: Task) -> str:
    """Body of the DM sent when a task comes due."""
    text = f"\N{ALARM CLOCK} **{_escape_md(task.subject)}**"
    if task.description:
        text += f"\n{task.description}"
    return text


def chunk_message(text: str, limit: int = MAX_MESSAGE_LEN) -> list[str]:
    """Split on line boundaries so each chunk fits in one message."""
    chunks: list[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line
    if current:
        chunks.append(current)
    return [stripped for chunk in chunks if (stripped := chunk.rstrip("\n"))]
