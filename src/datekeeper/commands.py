"""Command table: transport-neutral handlers for every bot command.

``build_commands`` constructs the table once at startup; the transport looks
commands up by name or alias and relays the returned ``Reply``. A command with
an ``answer`` handler sends a prompt first, and the transport routes the
user's next message to that handler.

Errors never escape a handler: they come back as ``"<operation>: <message>"``.
Store failures are additionally logged as operator alarms; format and
not-found errors are expected user outcomes and only logged at debug.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from datekeeper.dates import parse_date
from datekeeper.errors import DatekeeperError, NotFound, StoreFailure
from datekeeper.formatting import format_listing, format_numbered
from datekeeper.parsing import parse_selector, parse_task, split_update
from datekeeper.recurrence import is_due
from datekeeper.store import ReminderStore

log = logging.getLogger(__name__)

START_FIRST = "please /start the bot"


@dataclass(frozen=True, slots=True)
class Request:
    user_id: str
    text: str = ""
    name: str = ""


@dataclass(frozen=True, slots=True)
class Reply:
    text: str
    awaiting: str | None = None  # command whose answer handles the next message


Handler = Callable[[ReminderStore, Request], str]


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    description: str
    run: Handler
    answer: Handler | None = None
    aliases: tuple[str, ...] = ()
    requires_user: bool = True


# --- handlers ---


def _start(store: ReminderStore, req: Request) -> str:
    if store.add_user(req.user_id, req.name):
        return f"Welcome! {req.name}".rstrip()
    return "you have already started the bot, send /help to see the commands"


def _list(store: ReminderStore, req: Request) -> str:
    return format_listing(store.get_tasks(req.user_id), "Your reminders are as follows")


def _list_of_prompt(store: ReminderStore, req: Request) -> str:
    return "Send a date in the format\ndate-month-year"


def _list_of(store: ReminderStore, req: Request) -> str:
    """Yearly dates list the whole day-month; a concrete year lists what is due that year."""
    date = parse_date(req.text)
    tasks = store.get_tasks_of_date(req.user_id, date) or []
    numbered = [
        (number, task)
        for number, task in enumerate(tasks, start=1)
        if date.recurring or is_due(task, date.to_date())
    ]
    if not numbered:
        raise NotFound("No reminders found")
    return format_numbered(numbered)


_ADD_PROMPT = (
    "Enter your task in the format:\n"
    "date-month-year\nReminder Name\nDescription\n\n"
    "skip -year if its a yearly recurring or use 0 for year"
)


def _add_prompt(store: ReminderStore, req: Request) -> str:
    return _ADD_PROMPT


def _add(store: ReminderStore, req: Request) -> str:
    task = parse_task(req.text)
    if not store.add_task(req.user_id, task):
        raise NotFound("unable to add reminder")
    return "add: done"


def _delete_prompt(store: ReminderStore, req: Request) -> str:
    return format_listing(
        store.get_tasks(req.user_id),
        "To delete a reminder send\ndate-month-year:ReminderNumber",
    )


def _delete(store: ReminderStore, req: Request) -> str:
    selector = parse_selector(req.text)
    if not store.delete_task(req.user_id, selector.position, selector.date):
        raise NotFound("task not found")
    return "delete: done"


def _update_prompt(store: ReminderStore, req: Request) -> str:
    return format_listing(
        store.get_tasks(req.user_id),
        "To update a reminder send\ndate-month-year:ReminderNumber\n"
        "date-month-year\nSubject\nDescription\n\n"
        "leave a line empty to keep its current value",
    )


def _update(store: ReminderStore, req: Request) -> str:
    selector, patch = split_update(req.text)
    if not store.update_task(req.user_id, patch, selector.position, selector.date):
        raise NotFound("task not found")
    return "update: done"


# --- table ---


class CommandTable:
    def __init__(self, store: ReminderStore, commands: list[Command]) -> None:
        self._store = store
        self._commands = commands
        self._by_name: dict[str, Command] = {}
        for command in commands:
            for name in (command.name, *command.aliases):
                self._by_name[name.lower()] = command

    def lookup(self, name: str) -> Command | None:
        return self._by_name.get(name.lower())

    def run(self, name: str, request: Request) -> Reply:
        """Immediate reply; commands with an answer handler also start an ask."""
        command = self._by_name[name.lower()]
        try:
            if not self._started(command, request):
                return Reply(START_FIRST)
            text = command.run(self._store, request)
        except DatekeeperError as exc:
            return Reply(self._error_text(command, request, exc))
        awaiting = command.name if command.answer is not None else None
        return Reply(text, awaiting=awaiting)

    def answer(self, name: str, request: Request) -> Reply:
        """Handle the message that follows a command's prompt."""
        command = self._by_name[name.lower()]
        assert command.answer is not None, f"{command.name} does not take an answer"
        try:
            if not self._started(command, request):
                return Reply(START_FIRST)
            return Reply(command.answer(self._store, request))
        except DatekeeperError as exc:
            return Reply(self._error_text(command, request, exc))

    def _started(self, command: Command, request: Request) -> bool:
        return not command.requires_user or self._store.is_user(request.user_id)

    @staticmethod
    def _error_text(command: Command, request: Request, exc: DatekeeperError) -> str:
        if isinstance(exc, StoreFailure):
            log.exception("%s failed for user %s", command.name, request.user_id)
        else:
            log.debug("%s rejected for user %s: %s", command.name, request.user_id, exc.message)
        return f"{command.name}: {exc.message}"

    def help_text(self) -> str:
        lines = ["Following commands can be used"]
        for command in self._commands:
            names = " or ".join(f"/{n}" for n in (command.name, *command.aliases))
            lines.append(f"\n{names}\n{command.description}")
        return "\n".join(lines)


def build_commands(store: ReminderStore) -> CommandTable:
    table: CommandTable

    def _help(store: ReminderStore, req: Request) -> str:
        return table.help_text()

    table = CommandTable(
        store,
        [
            Command("start", "starts the bot", _start, aliases=("begin",), requires_user=False),
            Command("help", "show all commands", _help, requires_user=False),
            Command("list", "get all the reminders", _list, aliases=("get",)),
            Command(
                "listOf",
                "get all the reminders of a specific date",
                _list_of_prompt,
                answer=_list_of,
                aliases=("getOf",),
            ),
            Command("add", "add new reminder", _add_prompt, answer=_add, aliases=("remind",)),
            Command("update", "update a reminder", _update_prompt, answer=_update),
            Command(
                "delete", "delete a reminder", _delete_prompt, answer=_delete, aliases=("remove",)
            ),
        ],
    )
    return table
