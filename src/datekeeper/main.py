"""Entry point for datekeeper."""

from __future__ import annotations

import asyncio
import atexit
import logging
import os
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from discord.ext.commands import Bot

from datekeeper.storage import DATA_DIR, STATE_DIR

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent
PID_FILE = STATE_DIR / "bot.pid"


HELP = """\
datekeeper -- Discord bot for birthdays, anniversaries and other dated reminders

commands:
  datekeeper                    Run the Discord bot
  datekeeper reminder list      Show a user's reminders
  datekeeper reminder add       Add a reminder for a user
  datekeeper reminder delete    Delete a reminder by date:number
  datekeeper reminder due       Print what the daily sweep would send
  datekeeper help               Show this help message

examples:
  datekeeper reminder add -u 1234 --date 10-5 -s "Mom's birthday" -d "buy flowers"
  datekeeper reminder delete -u 1234 10-5:1
  datekeeper reminder due --date 10-5-2026
"""


def _check_already_running() -> None:
    STATE_DIR.mkdir(parents=True, exist_ok=True)
    if PID_FILE.exists():
        pid = int(PID_FILE.read_text().strip())
        proc_cmdline = Path(f"/proc/{pid}/cmdline")
        if proc_cmdline.exists() and "datekeeper" in proc_cmdline.read_bytes().decode(errors="replace"):
            print(f"datekeeper is already running (pid {pid})")
            raise SystemExit(1)
    PID_FILE.write_text(str(os.getpid()))
    atexit.register(PID_FILE.unlink, missing_ok=True)


def _dispatch_subcommand() -> bool:
    """Route CLI subcommands. Returns True if handled."""
    if len(sys.argv) < 2:
        return False
    cmd = sys.argv[1]
    rest = sys.argv[2:]
    if cmd in ("help", "--help", "-h"):
        print(HELP)
        return True
    if cmd == "reminder":
        from datekeeper.reminder_cmd import run_reminder_command

        run_reminder_command(rest)
        return True
    return False


log = logging.getLogger(__name__)


async def _run(bot: Bot, token: str) -> None:
    """Run the bot until a signal or an unexpected error stops it."""
    from datekeeper import health

    loop = asyncio.get_running_loop()
    _background_tasks: set[asyncio.Task[None]] = set()

    def _on_signal(sig_name: str) -> None:
        async def _shutdown() -> None:
            log.info("received %s, shutting down", sig_name)
            if not bot.is_closed():
                await bot.close()

        task = loop.create_task(_shutdown())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    loop.add_signal_handler(signal.SIGTERM, _on_signal, "SIGTERM")
    loop.add_signal_handler(signal.SIGINT, _on_signal, "SIGINT")

    try:
        await bot.start(token)
    except asyncio.CancelledError:
        pass  # Signal handler already closed the bot
    finally:
        await health.stop()
        if not bot.is_closed():
            await bot.close()


def main() -> None:
    if _dispatch_subcommand():
        return

    load_dotenv(PROJECT_DIR / ".env")
    logging.basicConfig(
        level=os.environ.get("DATEKEEPER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    token = os.environ.get("DISCORD_TOKEN")
    if not token:
        print("Set DISCORD_TOKEN in .env")
        raise SystemExit(1)

    _check_already_running()

    from datekeeper.bot import create_bot
    from datekeeper.commands import build_commands
    from datekeeper.store import ReminderStore

    store = ReminderStore(DATA_DIR)
    bot = create_bot(store, build_commands(store))
    asyncio.run(_run(bot, token))


if __name__ == "__main__":
    main()
