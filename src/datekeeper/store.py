"""Per-user reminder store, one YAML document per user.

Document layout::

    id: "1234"
    name: Asha
    tasks:
      10-5:
        - id: 3f2a9c1b
          date: 10-5-0
          subject: Mom's birthday
          description: buy flowers

Tasks are grouped under a day-month key regardless of year, in insertion
order. The ordinal a user sees is the position in that list at read time, so
deleting #2 turns the old #3 into #2 on the next listing.

Every mutation is a read-modify-write under a per-user lock, written
atomically; a failure at any step leaves the previous document in place.
The lock is held both in-process and on a ``<user>.yaml.lock`` sidecar file,
so the operator CLI and the running bot never interleave their writes.
A document without an ``id`` is corrupt, except an empty one, which counts
as a user that was never created.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator
from datetime import date as _date
from pathlib import Path
from typing import Any

import yaml
from filelock import FileLock

from datekeeper.dates import TaskDate, date_key
from datekeeper.errors import InvalidFormat, StoreFailure
from datekeeper.models import Task, TaskPatch
from datekeeper.storage import read_yaml, slugify, write_yaml

log = logging.getLogger(__name__)

TaskMap = dict[str, list[Task]]


def _key_of(date: TaskDate | _date) -> str:
    return date_key(date.day, date.month)


class ReminderStore:
    def __init__(self, root: Path) -> None:
        self._users_dir = root / "users"
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _locked(self, user_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(user_id, threading.Lock())
        try:
            self._users_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreFailure("could not create the reminder directory") from exc
        with lock, FileLock(self._lock_path(user_id)):
            yield

    def _path(self, user_id: str) -> Path:
        return self._users_dir / f"{slugify(user_id) or '_'}.yaml"

    def _lock_path(self, user_id: str) -> Path:
        path = self._path(user_id)
        return path.with_name(path.name + ".lock")

    def _load(self, user_id: str) -> dict[str, Any] | None:
        path = self._path(user_id)
        try:
            doc = read_yaml(path)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise StoreFailure(f"could not read reminders of user {user_id}") from exc
        if not doc:
            return None
        if doc.get("id") is None:
            raise StoreFailure(f"reminder document of user {user_id} has no id")
        return doc

    def _save(self, user_id: str, doc: dict[str, Any], tasks: TaskMap) -> None:
        doc["tasks"] = {key: [t.to_dict() for t in items] for key, items in tasks.items() if items}
        try:
            write_yaml(self._path(user_id), doc)
        except (OSError, yaml.YAMLError) as exc:
            raise StoreFailure(f"could not save reminders of user {user_id}") from exc

    @staticmethod
    def _tasks(doc: dict[str, Any]) -> TaskMap:
        raw = doc.get("tasks") or {}
        try:
            return {
                str(key): [Task.from_dict(item) for item in items]
                for key, items in raw.items()
                if items
            }
        except (AttributeError, KeyError, TypeError, InvalidFormat) as exc:
            raise StoreFailure(f"corrupt reminder document for user {doc.get('id')}") from exc

    # ---- users ----

    def add_user(self, user_id: str, name: str = "") -> bool:
        """Idempotent. Returns False when the user already exists."""
        with self._locked(user_id):
            if self._load(user_id) is not None:
                return False
            self._save(user_id, {"id": user_id, "name": name}, {})
        log.info("new user %s", user_id)
        return True

    def is_user(self, user_id: str) -> bool:
        return self._load(user_id) is not None

    def list_users(self) -> list[str]:
        """Ids of every stored user. Unreadable documents are skipped."""
        if not self._users_dir.is_dir():
            return []
        users: list[str] = []
        try:
            paths = sorted(self._users_dir.glob("*.yaml"))
        except OSError as exc:
            raise StoreFailure("could not list users") from exc
        for path in paths:
            try:
                doc = read_yaml(path)
            except (OSError, ValueError, yaml.YAMLError):
                log.warning("Skipping corrupt user file: %s", path)
                continue
            if doc and doc.get("id") is not None:
                users.append(str(doc["id"]))
        return users

    # ---- tasks ----

    def add_task(self, user_id: str, task: Task) -> bool:
        """Append to the task's day-month list. False for unknown users."""
        with self._locked(user_id):
            doc = self._load(user_id)
            if doc is None:
                return False
            tasks = self._tasks(doc)
            tasks.setdefault(task.date.key, []).append(task)
            self._save(user_id, doc, tasks)
        log.info("user %s: added task %s on %s", user_id, task.id, task.date)
        return True

    def get_tasks(self, user_id: str) -> TaskMap | None:
        doc = self._load(user_id)
        if doc is None:
            return None
        return self._tasks(doc) or None

    def get_tasks_of_date(self, user_id: str, date: TaskDate | _date) -> list[Task] | None:
        """Tasks under date's day-month key; the year is not considered here."""
        tasks = self.get_tasks(user_id)
        if not tasks:
            return None
        return tasks.get(_key_of(date)) or None

    def delete_task(self, user_id: str, position: int, date: TaskDate | _date) -> bool:
        """Remove the task at 0-based position under date's key."""
        key = _key_of(date)
        with self._locked(user_id):
            doc = self._load(user_id)
            if doc is None:
                return False
            tasks = self._tasks(doc)
            items = tasks.get(key, [])
            if not 0 <= position < len(items):
                return False
            removed = items.pop(position)
            self._save(user_id, doc, tasks)
        log.info("user %s: deleted task %s from %s", user_id, removed.id, key)
        return True

    def update_task(
        self, user_id: str, patch: TaskPatch, position: int, date: TaskDate | _date
    ) -> bool:
        """Merge patch onto the task at position. A new day-month moves it to that key's end."""
        key = _key_of(date)
        with self._locked(user_id):
            doc = self._load(user_id)
            if doc is None:
                return False
            tasks = self._tasks(doc)
            items = tasks.get(key, [])
            if not 0 <= position < len(items):
                return False
            updated = patch.apply(items[position])
            if updated.date.key == key:
                items[position] = updated
            else:
                items.pop(position)
                tasks.setdefault(updated.date.key, []).append(updated)
            self._save(user_id, doc, tasks)
        log.info("user %s: updated task %s", user_id, updated.id)
        return True
