from typing import List

from pydantic import Field

from session_scheduler.models.base import SnapshotModel
from session_scheduler.models.time_window import BusyWindow


class ConflictProfile(SnapshotModel):
    """
    Per-user conflict settings from the user profile service.

    When auto_block_conflicts is False, no busy window ever blocks the user's votes.
    """

    auto_block_conflicts: bool = False
    busy_windows: List[BusyWindow] = Field(default_factory=list)
