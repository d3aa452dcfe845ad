# session_scheduler/routers/attendance.py
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from session_scheduler.schemas.snapshots import AttendanceRequest
from session_scheduler.services.attendance_service import build_attendance_summary

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/summary")
def get_attendance_summary(payload: AttendanceRequest) -> Dict[str, Any]:
    """
    Confirmed / unavailable emails for the winning slot of a finalized poll.

    Example input:
      {
        "poll": {"id": "p1", "status": "FINALIZED", "priorityAtMs": 1000},
        "winningSlotId": "s1",
        "slots": [{"id": "s1", "start": "...", "end": "..."}],
        "votes": [{"voterId": "u1", "userEmail": "a@x.com", "votes": {"s1": "FEASIBLE"}}]
      }
    """
    poll = payload.poll
    winning_slot_id = payload.winning_slot_id or poll.winning_slot_id

    winning_slot = None
    if poll.is_finalized and winning_slot_id:
        winning_slot = next((s for s in payload.slots if s.id == winning_slot_id), None)
        if winning_slot is None:
            raise HTTPException(
                status_code=400,
                detail=f"Winning slot {winning_slot_id} not found among slots",
            )

    summary = build_attendance_summary(
        poll,
        winning_slot,
        payload.votes,
        payload.profiles,
        payload.participant_email_by_id,
    )
    return {
        "poll_id": poll.id,
        "winning_slot_id": winning_slot_id,
        "confirmed": summary.confirmed,
        "unavailable": summary.unavailable,
    }
