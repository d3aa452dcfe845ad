# session_scheduler/routers/conflicts.py
from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter

from session_scheduler.schemas.snapshots import BlockingWindowRequest, UserBlockInfoRequest
from session_scheduler.services.conflict_service import (
    build_user_block_info,
    find_blocking_window,
)
from session_scheduler.services.time_utils import slot_window

router = APIRouter(prefix="/conflicts", tags=["conflicts"])


@router.post("/blocking-window")
def get_blocking_window(payload: BlockingWindowRequest) -> Dict[str, Any]:
    """
    Which busy window (if any) blocks a vote on one slot.

    Returns {"blocked": false, "blocking_window": null} when nothing blocks.
    """
    blocker = find_blocking_window(
        payload.busy_windows,
        slot_window(payload.slot),
        exclude_scheduler_id=payload.exclude_scheduler_id,
        poll_status=payload.poll_status,
        poll_priority_at_ms=payload.poll_priority_at_ms,
    )
    return {
        "slot_id": payload.slot.id,
        "blocked": blocker is not None,
        "blocking_window": asdict(blocker) if blocker is not None else None,
    }


@router.post("/user-block-info")
def get_user_block_info(payload: UserBlockInfoRequest) -> Dict[str, Any]:
    """
    Per-slot blocking reasons for one user, for the
    "busy, ignored in results" annotation.
    """
    info = build_user_block_info(payload.poll, payload.slots, payload.profile)
    return {
        "poll_id": payload.poll.id,
        "blocked_slots": {
            slot_id: asdict(blocker) for slot_id, blocker in info.info_by_slot_id.items()
        },
    }
