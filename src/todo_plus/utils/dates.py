"""
Timestamp and duration helpers for time tags.

Pure functions, no external dependencies. "Now" is always supplied by the
caller through a Clock so tests can freeze time.
"""

from datetime import datetime
from typing import Callable, Optional

Clock = Callable[[], datetime]

# @started(2024-01-01 09:30), local time, 24-hour clock
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

MS_PER_MINUTE = 60_000


def system_clock() -> datetime:
    return datetime.now()


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns the same moment."""
    return lambda: moment


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as a tag value, e.g. "2024-01-01 09:30"."""
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a tag timestamp back into a datetime.

    The canonical "YYYY-MM-DD HH:MM" form is tried first, then anything
    datetime.fromisoformat accepts (hand-edited values with seconds, a "T"
    separator, etc.). Timezone-aware values are converted to naive local
    time so they can be compared with the clock.

    Returns:
        datetime, or None if the value is missing or unparseable
    """
    if not value:
        return None

    value = value.strip()
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_duration(ms: int) -> str:
    """
    Format a millisecond span as a compact duration.

    Floors to whole minutes and omits zero components:
    5_400_000 → "1h30m", 3_600_000 → "1h", 59_999 → "0m".
    Negative spans are clamped to "0m".
    """
    minutes = max(int(ms) // MS_PER_MINUTE, 0)
    hours, rem_minutes = divmod(minutes, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if rem_minutes:
        parts.append(f"{rem_minutes}m")

    return "".join(parts) or "0m"


def elapsed_since(started: Optional[str], now: datetime) -> Optional[str]:
    """
    Duration between a started tag value and now.

    Returns:
        Formatted duration, or None when started is missing or malformed
    """
    start = parse_timestamp(started)
    if start is None:
        return None
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    ms = int((now - start).total_seconds() * 1000)
    return format_duration(ms)
