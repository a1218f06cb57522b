"""Task data model.

Each task carries a synthetic id assigned at creation. Users never see it:
they address tasks by (date, ordinal) and the store resolves that pair to an
id once, under the user's lock.
"""

from dataclasses import dataclass, replace
from typing import Any
from uuid import uuid4

from datekeeper.dates import TaskDate, parse_date


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    date: TaskDate
    subject: str
    description: str = ""

    @staticmethod
    def new(date: TaskDate, subject: str, description: str = "") -> "Task":
        return Task(id=uuid4().hex[:8], date=date, subject=subject, description=description)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "date": str(self.date), "subject": self.subject}
        if self.description:
            data["description"] = self.description
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Task":
        return Task(
            id=str(data["id"]),
            date=parse_date(str(data["date"])),
            subject=str(data["subject"]),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """Partial task for updates; None fields are left unchanged."""

    date: TaskDate | None = None
    subject: str | None = None
    description: str | None = None

    def is_empty(self) -> bool:
        return self.date is None and self.subject is None and self.description is None

    def apply(self, task: Task) -> Task:
        changes = {
            name: value
            for name, value in (
                ("date", self.date),
                ("subject", self.subject),
                ("description", self.description),
            )
            if value is not None
        }
        return replace(task, **changes)
