"""Shared YAML document I/O for persistent data files."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import yaml

from datekeeper.config import DATA_DIR, TZ as TZ

STATE_DIR = DATA_DIR / "state"

log = logging.getLogger(__name__)


def slugify(text: str, max_len: int = 50) -> str:
    """Convert text to a filesystem-safe slug."""
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug


def read_yaml(filepath: Path) -> dict[str, Any] | None:
    """None when the file does not exist. Raises ValueError if it is not a mapping."""
    if not filepath.exists():
        return None
    data = yaml.safe_load(filepath.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{filepath} is not a YAML mapping")
    return data


def write_yaml(filepath: Path, data: dict[str, Any]) -> None:
    """Atomic write (temp file + rename) so readers never see a partial document."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    content = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    fd, tmp = tempfile.mkstemp(dir=filepath.parent, suffix=".tmp")
    try:
        os.write(fd, content.encode())
    finally:
        os.close(fd)
    os.replace(tmp, filepath)
    log.debug("wrote %s", filepath)
