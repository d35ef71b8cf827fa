"""UTC-focused helpers for log and run metadata."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")
