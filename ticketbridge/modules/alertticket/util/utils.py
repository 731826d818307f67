"""Small helpers shared by the alert ticket module."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Mapping

_DURATION_UNITS = {
    "y": timedelta(days=365),
    "w": timedelta(weeks=1),
    "d": timedelta(days=1),
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
}
_DURATION_RE = re.compile(r"(\d+)(ms|y|w|d|h|m|s)")


def now() -> datetime:
    return datetime.now(timezone.utc)


def parse_duration(value: str | int | float | timedelta | None) -> timedelta:
    """Parse a Prometheus style duration such as ``30m`` or ``1d12h``.

    Plain numbers are taken as seconds; ``None``, ``""`` and ``"0"`` give a zero
    duration.
    """
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    text = value.strip()
    if text in ("", "0"):
        return timedelta(0)

    total = timedelta(0)
    pos = 0
    for match in _DURATION_RE.finditer(text):
        if match.start() != pos:
            raise ValueError(f"not a valid duration string: {value!r}")
        total += int(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"not a valid duration string: {value!r}")
    return total


def parse_jira_datetime(value: str | None) -> datetime | None:
    """Jira sends ``2024-01-31T10:15:00.000+0000``; tolerate ISO variants too."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    match = re.match(r"^(.*[T ]\d{2}:\d{2}:\d{2}(?:\.\d+)?)([+-]\d{2})(\d{2})$", text)
    if match:
        text = f"{match.group(1)}{match.group(2)}:{match.group(3)}"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def mask_secrets(data: Mapping[str, object], secret_keys: tuple[str, ...]) -> dict:
    masked = {}
    for key, value in data.items():
        if key in secret_keys and value:
            masked[key] = "<secret>"
        elif isinstance(value, Mapping):
            masked[key] = mask_secrets(value, secret_keys)
        else:
            masked[key] = value
    return masked
