"""CLI handler for `datekeeper reminder` subcommand."""

import argparse
import asyncio
import sys
from datetime import datetime

from datekeeper.dates import parse_date
from datekeeper.errors import DatekeeperError
from datekeeper.formatting import format_key
from datekeeper.models import Task
from datekeeper.parsing import parse_selector
from datekeeper.storage import DATA_DIR, TZ
from datekeeper.store import ReminderStore
from datekeeper.sweep import run_daily_match


def _store() -> ReminderStore:
    return ReminderStore(DATA_DIR)


def _fmt_task(number: int, task: Task) -> str:
    when = "yearly" if task.date.recurring else str(task.date.year)
    line = f"  {number}. [{task.id}] {task.subject}  ({when})"
    if task.description:
        line += f" -- {task.description.splitlines()[0]}"
    return line


def run_reminder_command(argv: list[str]) -> None:
    parser = argparse.ArgumentParser(prog="datekeeper reminder")
    sub = parser.add_subparsers(dest="action")

    list_p = sub.add_parser("list", help="Show a user's reminders")
    list_p.add_argument("--user", "-u", required=True, help="User ID")

    add_p = sub.add_parser("add", help="Add a reminder")
    add_p.add_argument("--user", "-u", required=True, help="User ID")
    add_p.add_argument("--date", required=True, help="day-month[-year], year 0 = yearly")
    add_p.add_argument("--subject", "-s", required=True, help="Reminder name")
    add_p.add_argument("--description", "-d", default="", help="Longer text")

    delete_p = sub.add_parser("delete", help="Delete a reminder by date:number")
    delete_p.add_argument("--user", "-u", required=True, help="User ID")
    delete_p.add_argument("selector", help="day-month[-year]:number")

    due_p = sub.add_parser("due", help="Print what the daily sweep would send")
    due_p.add_argument("--date", default=None, help="day-month-year (default: today)")

    args = parser.parse_args(argv)

    try:
        if args.action == "list":
            _handle_list(args.user)
        elif args.action == "add":
            _handle_add(args)
        elif args.action == "delete":
            _handle_delete(args.user, args.selector)
        elif args.action == "due":
            _handle_due(args.date)
        else:
            parser.print_help()
            sys.exit(1)
    except DatekeeperError as exc:
        print(f"{args.action}: {exc.message}")
        sys.exit(1)


def _handle_list(user_id: str) -> None:
    tasks = _store().get_tasks(user_id)
    if not tasks:
        print("no reminders")
        return
    for key, items in tasks.items():
        print(f"{format_key(key)} ({key})")
        for number, task in enumerate(items, start=1):
            print(_fmt_task(number, task))


def _handle_add(args: argparse.Namespace) -> None:
    store = _store()
    task = Task.new(parse_date(args.date), args.subject, args.description)
    store.add_user(args.user)
    store.add_task(args.user, task)
    print(f"added {task.id}: {task.subject} on {task.date}")


def _handle_delete(user_id: str, selector_text: str) -> None:
    selector = parse_selector(selector_text)
    if _store().delete_task(user_id, selector.position, selector.date):
        print(f"deleted {selector_text}")
    else:
        print(f"reminder {selector_text} not found")
        sys.exit(1)


def _handle_due(date_text: str | None) -> None:
    if date_text:
        parsed = parse_date(date_text)
        if parsed.recurring:
            print("due: give a full day-month-year date")
            sys.exit(1)
        today = parsed.to_date()
    else:
        today = datetime.now(TZ).date()

    async def _print(user_id: str, task: Task) -> None:
        print(f"  {user_id}: {task.subject}")

    print(f"due on {today.isoformat()}:")
    delivered = asyncio.run(run_daily_match(_store(), _print, today=today))
    if not delivered:
        print("  nothing due")

