"""Utilities for structured resolution records."""

from __future__ import annotations

import datetime as _dt
import json
import os
from typing import Any, Dict, Optional

_LOG_PATH_ENV = "ANCHORPATH_LOG_PATH"


def log_jsonl(path: str, record: Dict[str, Any]) -> None:
    """Append *record* as a JSON line to *path*.

    The target directory is created on demand and the record is written as
    UTF-8 JSON with sorted keys and a trailing newline, so the file can be
    consumed as a JSONL stream.
    """

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, sort_keys=True))
        handle.write("\n")


def resolution_log_path() -> Optional[str]:
    """Return the configured record stream, or ``None`` when disabled."""

    value = os.getenv(_LOG_PATH_ENV, "").strip()
    return value or None


def log_resolution(record: Dict[str, Any], *, path: Optional[str] = None) -> bool:
    """Append *record* to the resolution stream if one is configured.

    Returns ``True`` when a line was written.
    """

    target = path or resolution_log_path()
    if target is None:
        return False
    payload = dict(record)
    payload.setdefault("timestamp", _dt.datetime.now(tz=_dt.timezone.utc).isoformat())
    log_jsonl(target, payload)
    return True


__all__ = ["log_jsonl", "log_resolution", "resolution_log_path"]
