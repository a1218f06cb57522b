"""Tests for sweep.py: daily matching across users with per-user isolation."""

from datetime import date

import pytest

from datekeeper.dates import parse_date
from datekeeper.models import Task
from datekeeper.sweep import run_daily_match


class _RecordingNotifier:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_for = fail_for or set()

    async def __call__(self, user_id: str, task: Task) -> None:
        if user_id in self.fail_for:
            raise RuntimeError(f"cannot DM {user_id}")
        self.sent.append((user_id, task.subject))


def _add(store, user_id: str, date_text: str, subject: str) -> Task:
    store.add_user(user_id)
    task = Task.new(parse_date(date_text), subject, "buy flowers")
    store.add_task(user_id, task)
    return task


@pytest.mark.asyncio
async def test_yearly_task_delivered_every_year(store):
    task = _add(store, "1", "10-5-0", "Mom's birthday")
    notify = _RecordingNotifier()

    first = await run_daily_match(store, notify, today=date(2025, 5, 10))
    second = await run_daily_match(store, notify, today=date(2026, 5, 10))

    assert first == {"1": [task]}
    assert second == {"1": [task]}
    assert notify.sent == [("1", "Mom's birthday"), ("1", "Mom's birthday")]


@pytest.mark.asyncio
async def test_nothing_due_on_other_day(store):
    _add(store, "1", "10-5-0", "Mom's birthday")
    notify = _RecordingNotifier()

    result = await run_daily_match(store, notify, today=date(2025, 5, 11))

    assert result == {}
    assert notify.sent == []


@pytest.mark.asyncio
async def test_one_time_task_only_in_its_year(store):
    _add(store, "1", "10-5-2025", "Exam")
    notify = _RecordingNotifier()

    await run_daily_match(store, notify, today=date(2026, 5, 10))
    assert notify.sent == []

    await run_daily_match(store, notify, today=date(2025, 5, 10))
    assert notify.sent == [("1", "Exam")]


@pytest.mark.asyncio
async def test_failure_for_one_user_does_not_stop_others(store):
    _add(store, "1", "10-5", "first")
    _add(store, "2", "10-5", "second")
    notify = _RecordingNotifier(fail_for={"1"})

    result = await run_daily_match(store, notify, today=date(2025, 5, 10))

    assert notify.sent == [("2", "second")]
    assert list(result) == ["2"]


@pytest.mark.asyncio
async def test_users_without_tasks_are_skipped(store):
    store.add_user("1")
    notify = _RecordingNotifier()

    assert await run_daily_match(store, notify, today=date(2025, 5, 10)) == {}


@pytest.mark.asyncio
async def test_defaults_to_today(store, monkeypatch):
    import datekeeper.sweep as sweep_mod

    class _FixedDatetime:
        @staticmethod
        def now(tz):
            from datetime import datetime

            return datetime(2025, 5, 10, 0, 0, tzinfo=tz)

    monkeypatch.setattr(sweep_mod, "datetime", _FixedDatetime)
    _add(store, "1", "10-5", "today")
    notify = _RecordingNotifier()

    await run_daily_match(store, notify)

    assert notify.sent == [("1", "today")]
