# session_scheduler/routers/tallies.py
from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter

from session_scheduler.schemas.snapshots import EligibleSlotsRequest, TallyRequest
from session_scheduler.services.tally_service import (
    EffectiveTallies,
    build_effective_tallies,
    filter_slots_by_required_attendance,
)

router = APIRouter(prefix="/tallies", tags=["tallies"])


def _tallies_json(result: EffectiveTallies) -> Dict[str, Any]:
    return {
        "tallies": {
            slot_id: asdict(tally) for slot_id, tally in result.tallies.items()
        },
        "slot_voters": {
            slot_id: asdict(voters) for slot_id, voters in result.slot_voters.items()
        },
    }


@router.post("/effective")
def get_effective_tallies(payload: TallyRequest) -> Dict[str, Any]:
    """
    Per-slot counts and rosters, with votes hidden when the voter is
    committed to another session at that time.
    """
    result = build_effective_tallies(
        payload.poll, payload.slots, payload.votes, payload.profiles
    )
    return {"poll_id": payload.poll.id, **_tallies_json(result)}


@router.post("/eligible-slots")
def get_eligible_slots(payload: EligibleSlotsRequest) -> Dict[str, Any]:
    """
    Slots every required participant can attend, based on effective tallies.
    Used to decide which slots the creator may finalize.
    """
    result = build_effective_tallies(
        payload.poll, payload.slots, payload.votes, payload.profiles
    )
    eligible = filter_slots_by_required_attendance(
        payload.slots, result.slot_voters, payload.required_emails
    )
    return {
        "poll_id": payload.poll.id,
        "eligible_slot_ids": [slot.id for slot in eligible],
        **_tallies_json(result),
    }
