from session_scheduler.models.base import RawTimestamp, SnapshotModel, TimestampLike  # noqa: F401

from session_scheduler.models.time_window import (  # noqa: F401
    BusyWindow,
    ResolvedBusyWindow,
    TimeWindow,
)
from session_scheduler.models.poll import PollContext, PollStatus, Slot  # noqa: F401
from session_scheduler.models.vote import VoteRecord, VoteValue, VoterInfo  # noqa: F401
from session_scheduler.models.conflict_profile import ConflictProfile  # noqa: F401
