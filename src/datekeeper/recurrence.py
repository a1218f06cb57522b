"""Decide whether a stored task comes due on a concrete date."""

from collections.abc import Iterable
from datetime import date

from datekeeper.dates import OneTime, Yearly
from datekeeper.models import Task


def is_due(task: Task, target: date) -> bool:
    """Same day and month, and either yearly or a one-time task for target's year."""
    if (task.date.day, task.date.month) != (target.day, target.month):
        return False
    recurrence = task.date.recurrence
    if isinstance(recurrence, Yearly):
        return True
    assert isinstance(recurrence, OneTime)
    return recurrence.year == target.year


def due_tasks(tasks: Iterable[Task], target: date) -> list[Task]:
    return [task for task in tasks if is_due(task, target)]
