"""Discord transport for the command table.

A DM starting with ``/`` or ``!`` names a command. Commands that need more
input reply with a prompt and leave a pending ask; the user's next plain
message goes to that command's answer handler. Text after the command word
(``/add 10-5`` + newline + ``Mom's birthday``) skips the prompt and is answered
directly.
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from datekeeper import health
from datekeeper.commands import CommandTable, Reply, Request
from datekeeper.formatting import chunk_message, format_reminder
from datekeeper.models import Task
from datekeeper.scheduler import setup_scheduler
from datekeeper.store import ReminderStore
from datekeeper.sweep import Notifier

log = logging.getLogger(__name__)

_PREFIXES = ("/", "!")
_UNKNOWN_HINT = "send /help to see the commands"


class AskState:
    """Which command, if any, is waiting for each user's next message."""

    def __init__(self) -> None:
        self._pending: dict[str, str] = {}

    def set(self, user_id: str, command: str) -> None:
        self._pending[user_id] = command

    def pop(self, user_id: str) -> str | None:
        return self._pending.pop(user_id, None)


def route(
    table: CommandTable, asks: AskState, user_id: str, content: str, name: str = ""
) -> Reply | None:
    """Map one incoming message to a reply. None means stay silent."""
    content = content.strip()
    if not content:
        return None

    if content[0] in _PREFIXES:
        word, _, rest = content[1:].partition("\n")
        word, _, inline = word.strip().partition(" ")
        rest = "\n".join(part for part in (inline.strip(), rest) if part)
        command = table.lookup(word)
        if command is None:
            return Reply(f"unknown command /{word}, {_UNKNOWN_HINT}")
        # a new command abandons whatever was being asked before
        asks.pop(user_id)
        if rest and command.answer is not None:
            return table.answer(command.name, Request(user_id, rest, name))
        reply = table.run(command.name, Request(user_id, rest, name))
        if reply.awaiting:
            asks.set(user_id, reply.awaiting)
        return reply

    pending = asks.pop(user_id)
    if pending is None:
        return Reply(_UNKNOWN_HINT)
    return table.answer(pending, Request(user_id, content, name))


def make_notifier(bot: discord.Client) -> Notifier:
    async def notify(user_id: str, task: Task) -> None:
        user = bot.get_user(int(user_id)) or await bot.fetch_user(int(user_id))
        dm = await user.create_dm()
        await dm.send(format_reminder(task))

    return notify


async def _send(channel: discord.abc.Messageable, text: str) -> None:
    for chunk in chunk_message(text):
        await channel.send(chunk)


def create_bot(store: ReminderStore, table: CommandTable) -> commands.Bot:
    """Only DMs are handled; guild messages are ignored."""
    intents = discord.Intents.default()
    intents.message_content = True

    bot = commands.Bot(
        command_prefix="!",
        intents=intents,
        status=discord.Status.online,
        activity=discord.Activity(type=discord.ActivityType.watching, name="your dates"),
    )
    asks = AskState()
    _ready_fired = False

    @bot.event
    async def on_ready():
        nonlocal _ready_fired
        log.info("online as %s", bot.user)

        # on_ready fires again on every reconnect; init must only happen once
        if _ready_fired:
            return
        _ready_fired = True

        scheduler = setup_scheduler(store, make_notifier(bot))
        scheduler.start()
        log.info("scheduler started: %d jobs", len(scheduler.get_jobs()))

        await health.start()

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return
        if not isinstance(message.channel, discord.DMChannel):
            return

        reply = route(
            table,
            asks,
            str(message.author.id),
            message.content,
            name=message.author.display_name,
        )
        if reply is None:
            return
        try:
            await _send(message.channel, reply.text)
        except discord.HTTPException:
            log.warning("could not reply to user %s", message.author.id, exc_info=True)

    return bot
