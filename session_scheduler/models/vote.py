from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field

from session_scheduler.models.base import SnapshotModel


class VoteValue(str, Enum):
    FEASIBLE = "FEASIBLE"
    # Implies FEASIBLE: always counted towards the feasible tally too
    PREFERRED = "PREFERRED"


class VoteRecord(SnapshotModel):
    """
    One voter's ballot for a poll.

    `votes` maps slot ids to raw values (string, bool or flag mapping) exactly
    as synced from the vote store. When no_times_work is set, `votes` is ignored.
    """

    voter_id: str = Field(validation_alias=AliasChoices("voter_id", "voterId", "id"))
    user_email: Optional[str] = None
    user_avatar: Optional[str] = None
    votes: Dict[str, Any] = Field(default_factory=dict)
    no_times_work: bool = False
    source: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("source", "lastVotedFrom", "last_voted_from"),
    )


@dataclass
class VoterInfo:
    voter_id: str
    email: Optional[str]
    avatar: Optional[str]
    source: str
