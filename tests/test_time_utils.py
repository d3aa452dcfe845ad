# tests/test_time_utils.py
from datetime import datetime, timezone

import pytest

from session_scheduler.models import Slot
from session_scheduler.services.time_utils import (
    format_overage_minutes,
    overlaps,
    slot_window,
    to_millis,
)

T0 = 1_000_000


def test_to_millis_accepts_ms_iso_and_datetime():
    expected = int(datetime(2026, 2, 9, 20, 0, tzinfo=timezone.utc).timestamp() * 1000)

    assert to_millis(expected) == expected
    assert to_millis(float(expected)) == expected
    assert to_millis("2026-02-09T20:00:00.000Z") == expected
    assert to_millis("2026-02-09T20:00:00+00:00") == expected
    # Naive values are UTC
    assert to_millis("2026-02-09T20:00:00") == expected
    assert to_millis(datetime(2026, 2, 9, 20, 0)) == expected


@pytest.mark.parametrize("value", [None, "", "not a date", True, float("nan"), [], {}])
def test_to_millis_returns_none_for_garbage(value):
    assert to_millis(value) is None


@pytest.mark.parametrize(
    "a, b",
    [
        ((0, 10), (5, 15)),
        ((0, 10), (10, 20)),
        ((0, 10), (2, 3)),
        ((0, 10), (10, 10)),
        ((5, 5), (0, 10)),
        ((0, 10), (-5, 0)),
        ((0, 10), (9, 8)),
    ],
)
def test_overlap_is_symmetric(a, b):
    assert overlaps(a[0], a[1], b[0], b[1]) == overlaps(b[0], b[1], a[0], a[1])


def test_adjacent_windows_do_not_overlap():
    t1 = T0 + 3_600_000
    t2 = t1 + 3_600_000
    assert overlaps(T0, t1, t1, t2) is False
    assert overlaps(T0, t1 + 1, t1, t2) is True


def test_degenerate_windows_never_overlap():
    # Zero-length window sitting inside another one
    assert overlaps(T0 + 5, T0 + 5, T0, T0 + 10) is False
    # Inverted window
    assert overlaps(T0 + 10, T0, T0, T0 + 10) is False


def test_missing_bounds_never_overlap():
    assert overlaps(None, T0, T0 - 1, T0 + 1) is False


def test_slot_window_drops_unparsable_slots():
    assert slot_window(Slot(id="a", start="nope", end="2026-01-01T10:00:00Z")) is None
    assert slot_window(Slot(id="b")) is None

    win = slot_window(Slot(id="c", start=0, end=60_000))
    assert win is not None
    assert win.duration_ms == 60_000


def test_format_overage_minutes():
    assert format_overage_minutes(0) == "0 min"
    assert format_overage_minutes(5) == "5 min"
    assert format_overage_minutes(60) == "1h"
    assert format_overage_minutes(61) == "1h 1m"
    assert format_overage_minutes(65) == "1h 5m"
    assert format_overage_minutes(125) == "2h 5m"
    assert format_overage_minutes(-3) == "0 min"


def test_format_overage_minutes_rounds_halves_up():
    assert format_overage_minutes(0.5) == "1 min"
    assert format_overage_minutes(2.5) == "3 min"
    assert format_overage_minutes(59.5) == "1h"
    assert format_overage_minutes(2.4) == "2 min"


def test_to_millis_accepts_any_number_of_fractional_digits():
    base = to_millis("2026-02-09T20:00:00Z")

    assert to_millis("2026-02-09T20:00:00.5Z") == base + 500
    assert to_millis("2026-02-09T20:00:00.25+00:00") == base + 250
    assert to_millis("2026-02-09T20:00:00.123456789Z") == base + 123


def test_non_scalar_timestamps_resolve_to_none():
    slot = Slot.model_validate({"id": "a", "start": {"seconds": 1}, "end": [1, 2]})

    assert slot.start is None
    assert slot.end is None
    assert slot_window(slot) is None
