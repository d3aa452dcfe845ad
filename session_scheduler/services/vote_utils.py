# session_scheduler/services/vote_utils.py
from typing import Any, Mapping, Optional

from session_scheduler.models.vote import VoteRecord, VoteValue

_ATTENDING = (VoteValue.FEASIBLE, VoteValue.PREFERRED)


def normalize_vote_value(raw: Any) -> Optional[VoteValue]:
    """
    Collapse the raw vote encodings found in vote documents into VoteValue.

    - "preferred" / "FEASIBLE" (any case)
    - True (means FEASIBLE)
    - {"preferred": bool, "feasible": bool} (preferred wins)

    Everything else (None, False, "NO", numbers, ...) is "not attending".
    """
    if not raw:
        return None
    if raw is True:
        return VoteValue.FEASIBLE
    if isinstance(raw, VoteValue):
        return raw
    if isinstance(raw, str):
        try:
            return VoteValue(raw.strip().upper())
        except ValueError:
            return None
    if isinstance(raw, Mapping):
        if raw.get("preferred"):
            return VoteValue.PREFERRED
        if raw.get("feasible"):
            return VoteValue.FEASIBLE
    return None


def is_attending_vote(raw: Any) -> bool:
    return normalize_vote_value(raw) in _ATTENDING


def has_submitted_vote(record: Optional[VoteRecord]) -> bool:
    """A ballot counts as submitted once it says "no times work" or picks a slot."""
    if record is None:
        return False
    if record.no_times_work:
        return True
    return any(is_attending_vote(value) for value in record.votes.values())


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    normalized = str(email).strip().lower()
    return normalized or None
