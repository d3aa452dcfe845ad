# tests/test_tally_service.py
from session_scheduler.models import (
    BusyWindow,
    ConflictProfile,
    PollContext,
    PollStatus,
    Slot,
    VoteRecord,
)
from session_scheduler.services.tally_service import (
    build_attendance_set_from_voters,
    build_effective_tallies,
    filter_slots_by_required_attendance,
)

POLL = PollContext(id="poll-1", status=PollStatus.OPEN)

SLOTS = [
    Slot(id="s1", start="2026-03-01T18:00:00Z", end="2026-03-01T20:00:00Z"),
    Slot(id="s2", start="2026-03-02T18:00:00Z", end="2026-03-02T20:00:00Z"),
]


def _busy_on_s1(source="other-poll", priority=None):
    return ConflictProfile(
        auto_block_conflicts=True,
        busy_windows=[
            BusyWindow(
                start="2026-03-01T19:00:00Z",
                end="2026-03-01T21:00:00Z",
                source_scheduler_id=source,
                priority_at_ms=priority,
            )
        ],
    )


def test_preferred_counts_towards_both_tallies():
    votes = [
        VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "PREFERRED"}),
        VoteRecord(voter_id="u2", user_email="b@example.com", votes={"s1": "FEASIBLE", "s2": True}),
    ]

    result = build_effective_tallies(POLL, SLOTS, votes, {})

    assert result.tallies["s1"].feasible == 2
    assert result.tallies["s1"].preferred == 1
    assert result.tallies["s2"].feasible == 1
    assert result.tallies["s2"].preferred == 0

    s1 = result.slot_voters["s1"]
    assert [v.email for v in s1.feasible] == ["a@example.com", "b@example.com"]
    assert [v.email for v in s1.preferred] == ["a@example.com"]


def test_no_times_work_ignores_all_votes():
    votes = [
        VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "PREFERRED"}, no_times_work=True),
    ]

    result = build_effective_tallies(POLL, SLOTS, votes, {})

    assert result.tallies == {}
    assert result.slot_voters == {}


def test_unknown_slots_and_unrecognized_values_are_skipped():
    slots = SLOTS + [Slot(id="broken", start="nope", end="2026-03-02T20:00:00Z")]
    votes = [
        VoteRecord(
            voter_id="u1",
            user_email="a@example.com",
            votes={"ghost": "FEASIBLE", "broken": "FEASIBLE", "s1": "maybe", "s2": False},
        ),
    ]

    result = build_effective_tallies(POLL, slots, votes, {})

    assert result.tallies == {}
    assert "broken" not in result.windows_by_slot_id


def test_blocked_votes_are_invisible():
    votes = [
        VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "PREFERRED", "s2": "PREFERRED"}),
        VoteRecord(voter_id="u2", user_email="b@example.com", votes={"s1": "FEASIBLE"}),
    ]
    profiles = {"u1": _busy_on_s1()}

    result = build_effective_tallies(POLL, SLOTS, votes, profiles)

    # u1 is busy elsewhere during s1: not counted, not listed
    assert result.tallies["s1"].feasible == 1
    assert result.tallies["s1"].preferred == 0
    assert [v.voter_id for v in result.slot_voters["s1"].feasible] == ["u2"]
    assert result.slot_voters["s1"].preferred == []
    # s2 is unaffected
    assert result.tallies["s2"].preferred == 1


def test_busy_window_from_same_poll_does_not_hide_votes():
    votes = [VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "FEASIBLE"})]
    profiles = {"u1": _busy_on_s1(source="poll-1")}

    result = build_effective_tallies(POLL, SLOTS, votes, profiles)

    assert result.tallies["s1"].feasible == 1


def test_auto_block_disabled_keeps_votes():
    profile = _busy_on_s1()
    profile = profile.model_copy(update={"auto_block_conflicts": False})
    votes = [VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "FEASIBLE"})]

    result = build_effective_tallies(POLL, SLOTS, votes, {"u1": profile})

    assert result.tallies["s1"].feasible == 1


def test_finalized_poll_keeps_votes_blocked_only_by_later_sessions():
    poll = PollContext(id="poll-1", status=PollStatus.FINALIZED, priority_at_ms=1000)
    votes = [
        VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "FEASIBLE"}),
        VoteRecord(voter_id="u2", user_email="b@example.com", votes={"s1": "FEASIBLE"}),
    ]
    profiles = {
        "u1": _busy_on_s1(priority=2000),  # finalized after this poll
        "u2": _busy_on_s1(priority=500),  # finalized before this poll
    }

    result = build_effective_tallies(poll, SLOTS, votes, profiles)

    assert [v.voter_id for v in result.slot_voters["s1"].feasible] == ["u1"]


def test_roster_dedupes_by_normalized_email_keeping_first():
    votes = [
        VoteRecord(voter_id="u1", user_email="Alice@Example.com", votes={"s1": "PREFERRED"}, source="discord"),
        VoteRecord(voter_id="u2", user_email=" alice@example.com ", votes={"s1": "PREFERRED"}),
        VoteRecord(voter_id="u3", votes={"s1": "FEASIBLE"}),
        VoteRecord(voter_id="u4", votes={"s1": "FEASIBLE"}),
    ]

    result = build_effective_tallies(POLL, SLOTS, votes, {})

    feasible = result.slot_voters["s1"].feasible
    preferred = result.slot_voters["s1"].preferred
    # Counts are per ballot, rosters per person
    assert result.tallies["s1"].feasible == 4
    assert [v.voter_id for v in feasible] == ["u1", "u3", "u4"]
    assert [v.voter_id for v in preferred] == ["u1"]
    assert feasible[0].source == "discord"
    assert feasible[1].source == "web"


def test_attendance_set_and_required_attendance_filter():
    votes = [
        VoteRecord(voter_id="u1", user_email="a@example.com", votes={"s1": "FEASIBLE", "s2": "PREFERRED"}),
        VoteRecord(voter_id="u2", user_email="b@example.com", votes={"s2": "FEASIBLE"}),
    ]
    result = build_effective_tallies(POLL, SLOTS, votes, {})

    assert build_attendance_set_from_voters(result.slot_voters["s2"]) == {
        "a@example.com",
        "b@example.com",
    }
    assert build_attendance_set_from_voters(None) == set()

    eligible = filter_slots_by_required_attendance(
        SLOTS, result.slot_voters, ["B@example.com"]
    )
    assert [s.id for s in eligible] == ["s2"]

    # Nobody required: every slot is fine
    assert filter_slots_by_required_attendance(SLOTS, result.slot_voters, []) == SLOTS
