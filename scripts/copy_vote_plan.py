# scripts/copy_vote_plan.py
"""
Print the copy-votes plan for a JSON snapshot.

The snapshot has the same shape as the POST /copy-votes/plan body:

  {
    "sourceSlots": [{"id": "a", "start": "...", "end": "..."}],
    "sourceVotes": {"a": "PREFERRED"},
    "sourceNoTimesWork": false,
    "destinationSlots": [{"id": "x", "start": "...", "end": "..."}]
  }

Handy for checking why a slot was (or wasn't) prefilled without going
through the UI.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from session_scheduler.config import get_settings
from session_scheduler.logging_config import configure_logging
from session_scheduler.routers.copy_votes import plan_to_json
from session_scheduler.schemas.snapshots import CopyVotePlanRequest
from session_scheduler.services.copy_votes_service import build_copy_vote_plan
from session_scheduler.services.time_utils import to_millis

logger = logging.getLogger("session_scheduler.scripts.copy_vote_plan")


def load_snapshot(path: Path) -> CopyVotePlanRequest:
    return CopyVotePlanRequest.model_validate_json(path.read_text(encoding="utf-8"))


def run_once(snapshot: CopyVotePlanRequest, now_ms: int | None = None) -> dict:
    plan = build_copy_vote_plan(
        snapshot.source_slots,
        snapshot.source_votes,
        snapshot.source_no_times_work,
        snapshot.destination_slots,
        now_ms=now_ms,
    )
    logger.info(
        "Prefilled %d of %d future destination slots",
        len(plan.prefilled_votes),
        len(plan.future_destination_slots),
    )
    return plan_to_json(plan)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--snapshot",
        type=Path,
        required=True,
        help="JSON file with source/destination slots and the source votes",
    )
    parser.add_argument(
        "--now",
        default=None,
        help="Optional ISO-8601 'now' (defaults to the snapshot's, then the current time)",
    )
    args = parser.parse_args(argv)

    configure_logging(get_settings().LOG_LEVEL)

    try:
        snapshot = load_snapshot(args.snapshot)
    except OSError as e:
        parser.error(f"cannot read snapshot: {e}")
    except ValidationError as e:
        parser.error(f"invalid snapshot: {e}")

    now = args.now if args.now else snapshot.now
    now_ms = to_millis(now)
    if now is not None and now_ms is None:
        parser.error(f"unparsable now: {now!r}")

    print(json.dumps(run_once(snapshot, now_ms=now_ms), indent=2))


if __name__ == "__main__":
    main()
