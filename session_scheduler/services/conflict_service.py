# session_scheduler/services/conflict_service.py
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from session_scheduler.models.conflict_profile import ConflictProfile
from session_scheduler.models.poll import PollContext, PollStatus, Slot
from session_scheduler.models.time_window import (
    BusyWindow,
    ResolvedBusyWindow,
    TimeWindow,
)
from session_scheduler.services.time_utils import overlaps, slot_window, to_millis

logger = logging.getLogger(__name__)


def normalize_busy_windows(
    raw: Optional[Iterable[BusyWindow]],
) -> List[ResolvedBusyWindow]:
    """
    Resolve busy windows to epoch-ms bounds.

    Windows whose start or end can't be resolved are dropped, never raised on.
    """
    resolved: List[ResolvedBusyWindow] = []
    for win in raw or []:
        if win is None:
            continue
        start_ms = to_millis(win.start)
        end_ms = to_millis(win.end)
        if start_ms is None or end_ms is None:
            logger.debug(
                "Dropping busy window with unresolvable bounds (source=%s)",
                win.source_scheduler_id,
            )
            continue
        resolved.append(
            ResolvedBusyWindow(
                start_ms=start_ms,
                end_ms=end_ms,
                source_scheduler_id=win.source_scheduler_id or None,
                source_winning_slot_id=win.source_winning_slot_id or None,
                priority_at_ms=to_millis(win.priority_at_ms),
            )
        )
    return resolved


def _blocks_under_status(
    win: ResolvedBusyWindow,
    poll_status: PollStatus,
    poll_priority_at_ms: Optional[int],
) -> bool:
    """
    Status policy for an overlapping window.

    Open (or cancelled) polls are blocked by any overlap. A finalized poll is
    only blocked by sessions finalized strictly earlier; when either priority
    is unknown it is not blocked.
    """
    if poll_status != PollStatus.FINALIZED:
        return True
    if poll_priority_at_ms is None or win.priority_at_ms is None:
        return False
    return win.priority_at_ms < poll_priority_at_ms


def _winner_key(win: ResolvedBusyWindow):
    priority = math.inf if win.priority_at_ms is None else win.priority_at_ms
    return (priority, win.start_ms, win.end_ms, win.source_scheduler_id or "")


def find_blocking_window(
    busy_windows: Optional[Iterable[BusyWindow]],
    window: Optional[TimeWindow],
    *,
    exclude_scheduler_id: Optional[str] = None,
    poll_status: PollStatus = PollStatus.OPEN,
    poll_priority_at_ms: Optional[int] = None,
) -> Optional[ResolvedBusyWindow]:
    """
    Return the busy window that disqualifies a vote on `window`, or None.

    - A poll never blocks against its own busy windows (exclude_scheduler_id).
    - Overlap is half-open; degenerate windows never overlap.
    - When several windows block, the earliest-finalized one is reported
      (unknown priority sorts last), then earliest start, earliest end and
      source scheduler id, so the reason is stable across re-renders.
    """
    if window is None or window.is_degenerate:
        return None

    candidates: List[ResolvedBusyWindow] = []
    for win in normalize_busy_windows(busy_windows):
        if exclude_scheduler_id and win.source_scheduler_id == exclude_scheduler_id:
            continue
        if not overlaps(window.start_ms, window.end_ms, win.start_ms, win.end_ms):
            continue
        if not _blocks_under_status(win, poll_status, poll_priority_at_ms):
            continue
        candidates.append(win)

    if not candidates:
        return None

    return min(candidates, key=_winner_key)


def find_profile_blocker(
    profile: Optional[ConflictProfile],
    window: Optional[TimeWindow],
    poll: PollContext,
    *,
    slot_id: Optional[str] = None,
) -> Optional[ResolvedBusyWindow]:
    """
    Blocking window for one user's vote on one slot of `poll`.

    Users without a profile, or with auto-blocking turned off, are never blocked.
    """
    if profile is None or not profile.auto_block_conflicts:
        return None
    return find_blocking_window(
        profile.busy_windows,
        window,
        exclude_scheduler_id=poll.id,
        poll_status=poll.status,
        poll_priority_at_ms=poll.priority_for_slot(slot_id),
    )


def is_user_blocked_for_slot(
    profile: Optional[ConflictProfile],
    window: Optional[TimeWindow],
    poll: PollContext,
    *,
    slot_id: Optional[str] = None,
) -> bool:
    return find_profile_blocker(profile, window, poll, slot_id=slot_id) is not None


@dataclass
class UserBlockInfo:
    info_by_slot_id: Dict[str, ResolvedBusyWindow] = field(default_factory=dict)
    windows_by_slot_id: Dict[str, TimeWindow] = field(default_factory=dict)


def build_user_block_info(
    poll: PollContext,
    slots: Iterable[Slot],
    profile: Optional[ConflictProfile],
) -> UserBlockInfo:
    """
    Per-slot blocking reason for a single user, used to mark slots as
    "busy, ignored in results" and link to the blocking session.
    """
    result = UserBlockInfo()

    for slot in slots or []:
        win = slot_window(slot)
        if win is None:
            continue
        result.windows_by_slot_id[slot.id] = win

        blocker = find_profile_blocker(profile, win, poll, slot_id=slot.id)
        if blocker is not None:
            result.info_by_slot_id[slot.id] = blocker

    return result
