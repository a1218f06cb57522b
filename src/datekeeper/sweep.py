"""Daily sweep: notify every user of the tasks due today.

Stateless and run-to-completion. Nothing records that a day was already
swept, so a second invocation on the same day notifies again (at-least-once).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime

from datekeeper.models import Task
from datekeeper.recurrence import due_tasks
from datekeeper.storage import TZ
from datekeeper.store import ReminderStore

log = logging.getLogger(__name__)

Notifier = Callable[[str, Task], Awaitable[None]]


async def _sweep_user(
    store: ReminderStore, notify: Notifier, user_id: str, today: date
) -> list[Task]:
    """Failures are logged and end this user's sweep only."""
    delivered: list[Task] = []
    try:
        for task in due_tasks(store.get_tasks_of_date(user_id, today) or [], today):
            await notify(user_id, task)
            delivered.append(task)
    except Exception:
        log.exception("Daily sweep failed for user %s", user_id)
    return delivered


async def run_daily_match(
    store: ReminderStore, notify: Notifier, *, today: date | None = None
) -> dict[str, list[Task]]:
    """Returns the delivered tasks per user; users with nothing due are omitted."""
    today = today or datetime.now(TZ).date()
    users = store.list_users()
    results = await asyncio.gather(
        *(_sweep_user(store, notify, user_id, today) for user_id in users)
    )
    delivered = {user_id: tasks for user_id, tasks in zip(users, results) if tasks}
    log.info(
        "daily sweep %s: %d reminder(s) for %d of %d user(s)",
        today.isoformat(),
        sum(len(tasks) for tasks in delivered.values()),
        len(delivered),
        len(users),
    )
    return delivered
