# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now() -> str:
    return utc_now().isoformat()


def epoch_ms() -> int:
    return int(utc_now().timestamp() * 1000)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (date or datetime, 'Z' suffix allowed) or an epoch
    number in seconds. Naive values are taken as UTC. Returns None when unparsable.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    except (ValueError, OverflowError, OSError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def relative_label(value: Any, now: Optional[datetime] = None) -> str:
    """Human relative date: Today / Yesterday / N days|weeks|months ago / M/D/YYYY."""
    dt = parse_timestamp(value)
    if dt is None:
        return "Recently posted"
    now = now or utc_now()
    diff_days = int(abs((now - dt).total_seconds()) // 86400)

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{diff_days // 7} weeks ago"
    if diff_days < 365:
        return f"{diff_days // 30} months ago"
    return f"{dt.month}/{dt.day}/{dt.year}"


def clock_label(epoch_seconds: float) -> str:
    """Local wall-clock time like '3:04:05 PM'."""
    return datetime.fromtimestamp(epoch_seconds).strftime("%I:%M:%S %p").lstrip("0")
