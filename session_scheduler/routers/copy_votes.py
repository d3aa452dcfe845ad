# session_scheduler/routers/copy_votes.py
from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from session_scheduler.schemas.snapshots import CopyEligibilityRequest, CopyVotePlanRequest
from session_scheduler.services.copy_votes_service import (
    CopyVotePlan,
    build_copy_vote_plan,
    can_user_copy_votes,
)
from session_scheduler.services.time_utils import to_millis

router = APIRouter(prefix="/copy-votes", tags=["copy-votes"])


def _resolve_now(now) -> Optional[int]:
    if now is None:
        return None
    now_ms = to_millis(now)
    if now_ms is None:
        raise HTTPException(status_code=400, detail=f"Unparsable now: {now!r}")
    return now_ms


def plan_to_json(plan: CopyVotePlan) -> Dict[str, Any]:
    return {
        "source_windows": [asdict(w) for w in plan.source_windows],
        "future_destination_slots": [
            slot.model_dump(mode="json") for slot in plan.future_destination_slots
        ],
        "prefilled_votes": dict(plan.prefilled_votes),
        "match_info_by_slot_id": {
            slot_id: asdict(info) for slot_id, info in plan.match_info_by_slot_id.items()
        },
    }


@router.post("/plan")
def get_copy_vote_plan(payload: CopyVotePlanRequest) -> Dict[str, Any]:
    """
    Prefill a destination poll from the user's votes in a source poll.

    `now` is optional; the current time is used when it's missing.
    """
    plan = build_copy_vote_plan(
        payload.source_slots,
        payload.source_votes,
        payload.source_no_times_work,
        payload.destination_slots,
        now_ms=_resolve_now(payload.now),
    )
    return plan_to_json(plan)


@router.post("/eligibility")
def get_copy_eligibility(payload: CopyEligibilityRequest) -> Dict[str, Any]:
    return {
        "can_copy": can_user_copy_votes(
            payload.slots, payload.vote, now_ms=_resolve_now(payload.now)
        )
    }
