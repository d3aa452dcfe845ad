from dataclasses import dataclass
from typing import Optional

from pydantic import AliasChoices, Field

from session_scheduler.models.base import SnapshotModel, TimestampLike


@dataclass(frozen=True)
class TimeWindow:
    """Half-open [start_ms, end_ms) window. end_ms <= start_ms is degenerate."""

    start_ms: int
    end_ms: int

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def is_degenerate(self) -> bool:
        return self.end_ms <= self.start_ms


class BusyWindow(SnapshotModel):
    """
    A commitment the user already has, coming from another poll's finalized slot.

    Produced by the user profile service; read-only here.
    """

    start: TimestampLike = Field(
        default=None,
        validation_alias=AliasChoices("start", "startUtc", "start_utc"),
    )
    end: TimestampLike = Field(
        default=None,
        validation_alias=AliasChoices("end", "endUtc", "end_utc"),
    )
    source_scheduler_id: Optional[str] = None
    source_winning_slot_id: Optional[str] = None
    priority_at_ms: TimestampLike = Field(
        default=None,
        validation_alias=AliasChoices(
            "priority_at_ms", "priorityAtMs", "priority_at", "priorityAt"
        ),
    )


@dataclass(frozen=True)
class ResolvedBusyWindow:
    """Busy window with resolved epoch-millisecond bounds."""

    start_ms: int
    end_ms: int
    source_scheduler_id: Optional[str] = None
    source_winning_slot_id: Optional[str] = None
    # None means "priority unknown"; such a window never blocks a finalized poll
    priority_at_ms: Optional[int] = None
