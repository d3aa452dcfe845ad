# session_scheduler/services/tally_service.py
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from session_scheduler.config import get_settings
from session_scheduler.models.conflict_profile import ConflictProfile
from session_scheduler.models.poll import PollContext, Slot
from session_scheduler.models.time_window import TimeWindow
from session_scheduler.models.vote import VoteRecord, VoteValue, VoterInfo
from session_scheduler.services.conflict_service import find_profile_blocker
from session_scheduler.services.time_utils import slot_window
from session_scheduler.services.vote_utils import normalize_email, normalize_vote_value

logger = logging.getLogger(__name__)


@dataclass
class SlotTally:
    feasible: int = 0
    preferred: int = 0


@dataclass
class SlotVoters:
    feasible: List[VoterInfo] = field(default_factory=list)
    preferred: List[VoterInfo] = field(default_factory=list)


@dataclass
class EffectiveTallies:
    tallies: Dict[str, SlotTally] = field(default_factory=dict)
    slot_voters: Dict[str, SlotVoters] = field(default_factory=dict)
    windows_by_slot_id: Dict[str, TimeWindow] = field(default_factory=dict)


def _voter_info(record: VoteRecord) -> VoterInfo:
    return VoterInfo(
        voter_id=record.voter_id,
        email=record.user_email,
        avatar=record.user_avatar,
        source=record.source or get_settings().DEFAULT_VOTE_SOURCE,
    )


def _roster_key(voter: VoterInfo) -> str:
    email = normalize_email(voter.email)
    if email:
        return email
    # Voters without an email still need a stable identity in the roster
    return f"id:{voter.voter_id}"


def _dedupe(voters: List[VoterInfo]) -> List[VoterInfo]:
    seen: Set[str] = set()
    unique: List[VoterInfo] = []
    for voter in voters:
        key = _roster_key(voter)
        if key in seen:
            continue
        seen.add(key)
        unique.append(voter)
    return unique


def build_effective_tallies(
    poll: PollContext,
    slots: Iterable[Slot],
    vote_records: Iterable[VoteRecord],
    profiles_by_voter_id: Optional[Mapping[str, ConflictProfile]] = None,
) -> EffectiveTallies:
    """
    Aggregate raw votes into per-slot tallies and voter rosters.

    A vote blocked by one of the voter's other commitments is invisible: it
    is neither counted nor listed. PREFERRED counts towards both tallies.
    Rosters are de-duplicated by normalized email (first occurrence kept);
    counts are not.

    Malformed entries (unknown slot, unparsable slot times, unrecognized
    vote values) are skipped.
    """
    profiles = profiles_by_voter_id or {}
    result = EffectiveTallies()

    for slot in slots or []:
        win = slot_window(slot)
        if win is None:
            logger.debug("Slot %s has unresolvable times, ignoring", slot.id)
            continue
        result.windows_by_slot_id[slot.id] = win

    blocked_count = 0

    for record in vote_records or []:
        if record.no_times_work:
            continue

        profile = profiles.get(record.voter_id)
        voter = _voter_info(record)

        for slot_id, raw_value in record.votes.items():
            value = normalize_vote_value(raw_value)
            if value is None:
                continue

            win = result.windows_by_slot_id.get(slot_id)
            if win is None:
                logger.debug(
                    "Vote from %s references unknown slot %s", record.voter_id, slot_id
                )
                continue

            if find_profile_blocker(profile, win, poll, slot_id=slot_id) is not None:
                blocked_count += 1
                continue

            tally = result.tallies.setdefault(slot_id, SlotTally())
            voters = result.slot_voters.setdefault(slot_id, SlotVoters())

            tally.feasible += 1
            voters.feasible.append(voter)
            if value == VoteValue.PREFERRED:
                tally.preferred += 1
                voters.preferred.append(voter)

    for slot_id, voters in result.slot_voters.items():
        result.slot_voters[slot_id] = SlotVoters(
            feasible=_dedupe(voters.feasible),
            preferred=_dedupe(voters.preferred),
        )

    logger.debug(
        "Tallied poll %s: %d slots with votes, %d votes hidden by conflicts",
        poll.id,
        len(result.tallies),
        blocked_count,
    )
    return result


def build_attendance_set_from_voters(voters: Optional[SlotVoters]) -> Set[str]:
    """Normalized emails of everyone who can attend a slot."""
    if voters is None:
        return set()
    emails = (normalize_email(v.email) for v in voters.feasible)
    return {email for email in emails if email}


def filter_slots_by_required_attendance(
    slots: Iterable[Slot],
    slot_voters_by_id: Mapping[str, SlotVoters],
    required_emails: Optional[Iterable[str]] = None,
) -> List[Slot]:
    """
    Slots that every required participant can attend.

    With no required participants every slot qualifies.
    """
    required = [e for e in (normalize_email(r) for r in required_emails or []) if e]
    slots = list(slots or [])
    if not required:
        return slots

    eligible: List[Slot] = []
    for slot in slots:
        voters = slot_voters_by_id.get(slot.id)
        if voters is None:
            continue
        attending = build_attendance_set_from_voters(voters)
        if all(email in attending for email in required):
            eligible.append(slot)
    return eligible
