# session_scheduler/schemas/snapshots.py
from typing import Any, Dict, List, Optional

from pydantic import Field

from session_scheduler.models import (
    BusyWindow,
    ConflictProfile,
    PollContext,
    PollStatus,
    RawTimestamp,
    Slot,
    SnapshotModel,
    VoteRecord,
)


class BlockingWindowRequest(SnapshotModel):
    busy_windows: List[BusyWindow] = Field(default_factory=list)
    slot: Slot
    exclude_scheduler_id: Optional[str] = None
    poll_status: PollStatus = PollStatus.OPEN
    poll_priority_at_ms: Optional[int] = None


class UserBlockInfoRequest(SnapshotModel):
    poll: PollContext
    slots: List[Slot] = Field(default_factory=list)
    profile: Optional[ConflictProfile] = None


class TallyRequest(SnapshotModel):
    poll: PollContext
    slots: List[Slot] = Field(default_factory=list)
    votes: List[VoteRecord] = Field(default_factory=list)
    # Keyed by voter id
    profiles: Dict[str, ConflictProfile] = Field(default_factory=dict)


class EligibleSlotsRequest(TallyRequest):
    required_emails: List[str] = Field(default_factory=list)


class AttendanceRequest(SnapshotModel):
    poll: PollContext
    slots: List[Slot] = Field(default_factory=list)
    # Falls back to poll.winning_slot_id
    winning_slot_id: Optional[str] = None
    votes: List[VoteRecord] = Field(default_factory=list)
    profiles: Dict[str, ConflictProfile] = Field(default_factory=dict)
    # Used when a vote record has no denormalized email
    participant_email_by_id: Dict[str, str] = Field(default_factory=dict)


class CopyVotePlanRequest(SnapshotModel):
    source_slots: List[Slot] = Field(default_factory=list)
    source_votes: Dict[str, Any] = Field(default_factory=dict)
    source_no_times_work: bool = False
    destination_slots: List[Slot] = Field(default_factory=list)
    # Optional 'now' for determinism in tests / simulations
    now: Optional[RawTimestamp] = None


class CopyEligibilityRequest(SnapshotModel):
    slots: List[Slot] = Field(default_factory=list)
    vote: Optional[VoteRecord] = None
    now: Optional[RawTimestamp] = None
