from enum import Enum
from typing import Dict, Optional

from pydantic import AliasChoices, Field

from session_scheduler.models.base import SnapshotModel, TimestampLike


class PollStatus(str, Enum):
    OPEN = "OPEN"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"


class Slot(SnapshotModel):
    id: str
    start: TimestampLike = None
    end: TimestampLike = None


class PollContext(SnapshotModel):
    """
    The parts of a poll document the engine needs.

    priority_at_ms is the tie-break timestamp once the poll is FINALIZED
    (normally its finalization time). A finalized slot may carry its own
    override in finalized_slot_priority_at_ms.
    """

    id: str
    status: PollStatus = PollStatus.OPEN
    priority_at_ms: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "priority_at_ms", "priorityAtMs", "finalized_at_ms", "finalizedAtMs"
        ),
    )
    winning_slot_id: Optional[str] = None
    finalized_slot_priority_at_ms: Dict[str, int] = Field(default_factory=dict)

    @property
    def is_finalized(self) -> bool:
        return self.status == PollStatus.FINALIZED

    def priority_for_slot(self, slot_id: Optional[str] = None) -> Optional[int]:
        if slot_id is not None:
            override = self.finalized_slot_priority_at_ms.get(slot_id)
            if override is not None:
                return override
        return self.priority_at_ms
