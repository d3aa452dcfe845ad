# session_scheduler/services/time_utils.py
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from session_scheduler.models.time_window import TimeWindow

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_FRACTION = re.compile(r"\.(\d+)")


def to_millis(value: Any) -> Optional[int]:
    """
    Resolve a timestamp-ish value to epoch milliseconds.

    Accepts epoch ms (int/float), ISO-8601 strings (trailing "Z" allowed,
    naive values are taken as UTC) and datetimes. Returns None for anything
    that can't be resolved instead of raising.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return int(value)

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # fromisoformat on 3.10 only takes 3 or 6 fractional digits
        text = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // _ONE_MS


def now_millis() -> int:
    return (datetime.now(timezone.utc) - _EPOCH) // _ONE_MS


def overlaps(
    a_start: Optional[int],
    a_end: Optional[int],
    b_start: Optional[int],
    b_end: Optional[int],
) -> bool:
    """
    Half-open overlap test for [a_start, a_end) and [b_start, b_end).

    Touching windows don't overlap; zero or negative durations never overlap.
    """
    if a_start is None or a_end is None or b_start is None or b_end is None:
        return False
    if a_end <= a_start or b_end <= b_start:
        return False
    return a_start < b_end and b_start < a_end


def window_of(start: Any, end: Any) -> Optional[TimeWindow]:
    start_ms = to_millis(start)
    end_ms = to_millis(end)
    if start_ms is None or end_ms is None:
        return None
    return TimeWindow(start_ms=start_ms, end_ms=end_ms)


def slot_window(slot) -> Optional[TimeWindow]:
    if slot is None:
        return None
    return window_of(slot.start, slot.end)


def format_overage_minutes(minutes: float) -> str:
    """
    Human label for the part of a slot not covered by a commitment.

    0 -> "0 min", 45 -> "45 min", 60 -> "1h", 65 -> "1h 5m"
    """
    # Halves round up, not to even
    value = int(math.floor(max(0, minutes) + 0.5))
    if value < 60:
        return f"{value} min"
    hours, mins = divmod(value, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"
