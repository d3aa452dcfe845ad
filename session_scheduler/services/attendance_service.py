# session_scheduler/services/attendance_service.py
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from session_scheduler.models.conflict_profile import ConflictProfile
from session_scheduler.models.poll import PollContext, PollStatus, Slot
from session_scheduler.models.vote import VoteRecord
from session_scheduler.services.conflict_service import find_profile_blocker
from session_scheduler.services.time_utils import slot_window
from session_scheduler.services.vote_utils import is_attending_vote, normalize_email

logger = logging.getLogger(__name__)

CONFIRMED = "confirmed"
UNAVAILABLE = "unavailable"

EmailResolver = Union[Callable[[str], Optional[str]], Mapping[str, str]]


@dataclass
class AttendanceSummary:
    confirmed: List[str] = field(default_factory=list)
    unavailable: List[str] = field(default_factory=list)


def _resolve_email(
    record: VoteRecord, email_resolver: Optional[EmailResolver]
) -> Optional[str]:
    email = normalize_email(record.user_email)
    if email or email_resolver is None:
        return email
    if isinstance(email_resolver, Mapping):
        return normalize_email(email_resolver.get(record.voter_id))
    return normalize_email(email_resolver(record.voter_id))


def build_attendance_summary(
    poll: PollContext,
    winning_slot: Optional[Slot],
    vote_records: Iterable[VoteRecord],
    profiles_by_voter_id: Optional[Mapping[str, ConflictProfile]] = None,
    email_resolver: Optional[EmailResolver] = None,
) -> AttendanceSummary:
    """
    Split voters of a finalized poll into confirmed / unavailable for the
    winning slot.

    A voter is confirmed when they voted FEASIBLE or PREFERRED on the winning
    slot and none of their earlier-finalized commitments overlap it. If the
    same email shows up on several ballots, confirmed wins.

    Returns empty lists unless the poll is FINALIZED with a winning slot.
    """
    winning_slot_id = winning_slot.id if winning_slot is not None else poll.winning_slot_id
    if poll.status != PollStatus.FINALIZED or not winning_slot_id:
        return AttendanceSummary()

    profiles = profiles_by_voter_id or {}
    window = slot_window(winning_slot)
    attendance_by_email: Dict[str, str] = {}

    for record in vote_records or []:
        email = _resolve_email(record, email_resolver)
        if not email:
            logger.debug("No email for voter %s, leaving out of summary", record.voter_id)
            continue

        status = UNAVAILABLE
        if not record.no_times_work and is_attending_vote(
            record.votes.get(winning_slot_id)
        ):
            blocker = find_profile_blocker(
                profiles.get(record.voter_id), window, poll, slot_id=winning_slot_id
            )
            status = UNAVAILABLE if blocker is not None else CONFIRMED

        existing = attendance_by_email.get(email)
        if existing == CONFIRMED:
            continue
        if existing is None or status == CONFIRMED:
            attendance_by_email[email] = status

    summary = AttendanceSummary()
    for email, status in attendance_by_email.items():
        if status == CONFIRMED:
            summary.confirmed.append(email)
        else:
            summary.unavailable.append(email)
    return summary
