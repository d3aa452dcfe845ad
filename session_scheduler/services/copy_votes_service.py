# session_scheduler/services/copy_votes_service.py
"""
"Copy my votes to another poll".

Pure interval matching between the slots a user voted for in a source poll
and the slots of a destination poll. Conflict profiles are not consulted.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from session_scheduler.models.poll import Slot
from session_scheduler.models.vote import VoteRecord, VoteValue
from session_scheduler.services.time_utils import (
    format_overage_minutes,
    now_millis,
    overlaps,
    slot_window,
)
from session_scheduler.services.vote_utils import normalize_vote_value

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000


class MatchType(str, Enum):
    NONE = "none"
    COPIED = "copied"
    COPIED_EXTENDS = "copied-extends"
    OVERLAP_REVIEW = "overlap-review"


@dataclass(frozen=True)
class SourceWindow:
    slot_id: str
    start_ms: int
    end_ms: int
    vote: VoteValue

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass
class MatchInfo:
    type: MatchType
    source_vote: Optional[VoteValue] = None
    source_slot_id: Optional[str] = None
    overage_minutes: Optional[float] = None
    overage_label: Optional[str] = None


@dataclass
class CopyVotePlan:
    source_windows: List[SourceWindow] = field(default_factory=list)
    future_destination_slots: List[Slot] = field(default_factory=list)
    prefilled_votes: Dict[str, VoteValue] = field(default_factory=dict)
    match_info_by_slot_id: Dict[str, MatchInfo] = field(default_factory=dict)


def _collect_source_windows(
    source_slots: Iterable[Slot],
    source_votes: Mapping[str, Any],
    now_ms: int,
) -> List[SourceWindow]:
    source_by_id = {slot.id: slot for slot in source_slots or []}
    windows: List[SourceWindow] = []

    for slot_id, raw_vote in (source_votes or {}).items():
        vote = normalize_vote_value(raw_vote)
        if vote is None:
            continue
        win = slot_window(source_by_id.get(slot_id))
        if win is None:
            logger.debug("Source vote on unknown or unparsable slot %s", slot_id)
            continue
        if win.end_ms <= now_ms:
            continue
        windows.append(
            SourceWindow(slot_id=slot_id, start_ms=win.start_ms, end_ms=win.end_ms, vote=vote)
        )

    return windows


def _overlap_ms(start_ms: int, end_ms: int, src: SourceWindow) -> int:
    return max(0, min(end_ms, src.end_ms) - max(start_ms, src.start_ms))


def _classify(start_ms: int, end_ms: int, sources: List[SourceWindow]) -> MatchInfo:
    overlapping = [
        src for src in sources if overlaps(start_ms, end_ms, src.start_ms, src.end_ms)
    ]
    if not overlapping:
        return MatchInfo(type=MatchType.NONE)

    # Destination fully inside a source commitment: take the tightest fit
    containing = [
        src for src in overlapping if src.start_ms <= start_ms and end_ms <= src.end_ms
    ]
    if containing:
        chosen = min(containing, key=lambda s: (s.duration_ms, s.start_ms))
        return MatchInfo(
            type=MatchType.COPIED,
            source_vote=chosen.vote,
            source_slot_id=chosen.slot_id,
        )

    # Source covers the destination's start but ends early
    covers_start = [
        src for src in overlapping if src.start_ms <= start_ms < src.end_ms
    ]
    if covers_start:
        chosen = min(
            covers_start,
            key=lambda s: (max(0, end_ms - s.end_ms), s.duration_ms, s.start_ms),
        )
        overage_minutes = max(0, end_ms - chosen.end_ms) / MS_PER_MINUTE
        return MatchInfo(
            type=MatchType.COPIED_EXTENDS,
            source_vote=chosen.vote,
            source_slot_id=chosen.slot_id,
            overage_minutes=overage_minutes,
            overage_label=format_overage_minutes(overage_minutes),
        )

    # Destination starts before every overlapping source: flag, don't copy
    chosen = min(
        overlapping,
        key=lambda s: (-_overlap_ms(start_ms, end_ms, s), s.start_ms),
    )
    return MatchInfo(
        type=MatchType.OVERLAP_REVIEW,
        source_vote=chosen.vote,
        source_slot_id=chosen.slot_id,
    )


def build_copy_vote_plan(
    source_slots: Iterable[Slot],
    source_votes: Mapping[str, Any],
    source_no_times_work: bool,
    destination_slots: Iterable[Slot],
    now_ms: Optional[int] = None,
) -> CopyVotePlan:
    """
    Map a user's votes from a source poll onto a destination poll's slots.

    Only future slots take part on either side. Every future destination slot
    gets a MatchInfo; prefilled_votes holds values only for "copied" and
    "copied-extends" matches.
    """
    if now_ms is None:
        now_ms = now_millis()

    plan = CopyVotePlan()
    if not source_no_times_work:
        plan.source_windows = _collect_source_windows(source_slots, source_votes, now_ms)

    for dest in destination_slots or []:
        win = slot_window(dest)
        if win is None or win.end_ms <= now_ms:
            continue
        plan.future_destination_slots.append(dest)

        info = _classify(win.start_ms, win.end_ms, plan.source_windows)
        plan.match_info_by_slot_id[dest.id] = info
        if info.type in (MatchType.COPIED, MatchType.COPIED_EXTENDS):
            plan.prefilled_votes[dest.id] = info.source_vote

    logger.debug(
        "Copy plan: %d source windows, %d future destination slots, %d prefilled",
        len(plan.source_windows),
        len(plan.future_destination_slots),
        len(plan.prefilled_votes),
    )
    return plan


def can_user_copy_votes(
    slots: Iterable[Slot],
    vote_record: Optional[VoteRecord],
    now_ms: Optional[int] = None,
) -> bool:
    """
    Whether a user has anything worth copying out of this poll.

    The poll needs at least one future slot, and the user must either have
    declared that no times work or hold an attending vote on a future slot.
    """
    if vote_record is None:
        return False
    if now_ms is None:
        now_ms = now_millis()

    future_ids = set()
    for slot in slots or []:
        win = slot_window(slot)
        if win is not None and win.end_ms > now_ms:
            future_ids.add(slot.id)
    if not future_ids:
        return False

    if vote_record.no_times_work:
        return True

    return any(
        slot_id in future_ids and normalize_vote_value(raw) is not None
        for slot_id, raw in vote_record.votes.items()
    )
