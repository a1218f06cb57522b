"""Daily trigger via APScheduler.

One cron job, ``daily_match``, fires once per day at SWEEP_HOUR:SWEEP_MINUTE
in the configured timezone and runs the daily sweep.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from datekeeper.config import SWEEP_HOUR, SWEEP_MINUTE
from datekeeper.storage import TZ
from datekeeper.store import ReminderStore
from datekeeper.sweep import Notifier, run_daily_match

log = logging.getLogger(__name__)

DAILY_JOB_ID = "daily_match"


def setup_scheduler(store: ReminderStore, notify: Notifier) -> AsyncIOScheduler:
    """Binds the sweep to store and notifier; the job itself takes no arguments."""
    scheduler = AsyncIOScheduler(timezone=TZ)

    # coalesce: a bot that was down over midnight sweeps once, not once per missed day
    @scheduler.scheduled_job(
        CronTrigger(hour=SWEEP_HOUR, minute=SWEEP_MINUTE, timezone=TZ),
        id=DAILY_JOB_ID,
        coalesce=True,
        misfire_grace_time=3600,
    )
    async def daily_match() -> None:
        log.info("daily sweep triggered")
        await run_daily_match(store, notify)

    return scheduler
