"""User-configurable values loaded from environment variables."""

import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_TIMEZONE = "Asia/Kolkata"


def _parse_sweep_time(value: str) -> tuple[int, int]:
    """Parse HH:MM into (hour, minute). Exits on malformed input."""
    hour_str, sep, minute_str = value.partition(":")
    try:
        hour, minute = int(hour_str), int(minute_str)
    except ValueError:
        hour, minute = -1, -1
    if not sep or not 0 <= hour <= 23 or not 0 <= minute <= 59:
        print(f"Invalid DATEKEEPER_SWEEP_TIME: {value!r} (expected HH:MM)", file=sys.stderr)
        raise SystemExit(1)
    return hour, minute


TZ: ZoneInfo = ZoneInfo(os.environ.get("DATEKEEPER_TIMEZONE") or _DEFAULT_TIMEZONE)

DATA_DIR: Path = Path(
    os.environ.get("DATEKEEPER_DATA_DIR") or Path.home() / ".datekeeper"
).expanduser()

SWEEP_HOUR, SWEEP_MINUTE = _parse_sweep_time(
    os.environ.get("DATEKEEPER_SWEEP_TIME") or "00:00"
)
