"""Shared fixtures for datekeeper tests."""

import os

os.environ.setdefault("DATEKEEPER_TIMEZONE", "Asia/Kolkata")
os.environ.setdefault("DATEKEEPER_SWEEP_TIME", "00:00")

import pytest


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    """Redirect all data file paths to a temp directory."""
    import datekeeper.main as main_mod
    import datekeeper.reminder_cmd as reminder_cmd_mod
    import datekeeper.storage as storage_mod

    state_dir = tmp_path / "state"
    monkeypatch.setattr(storage_mod, "DATA_DIR", tmp_path)
    monkeypatch.setattr(storage_mod, "STATE_DIR", state_dir)
    monkeypatch.setattr(reminder_cmd_mod, "DATA_DIR", tmp_path)
    monkeypatch.setattr(main_mod, "STATE_DIR", state_dir)
    monkeypatch.setattr(main_mod, "PID_FILE", state_dir / "bot.pid")
    return tmp_path


@pytest.fixture()
def store(data_dir):
    from datekeeper.store import ReminderStore

    return ReminderStore(data_dir)
