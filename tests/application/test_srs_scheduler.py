import pytest

from lingodeck.application.srs_scheduler import (
    ReviewKind,
    advance,
    classify,
    is_due,
)
from lingodeck.domain.constants import DAY_MS, MAX_SRS_LEVEL, SRS_INTERVAL_DAYS
from lingodeck.domain.models import ReviewState


def test_fresh_lesson_goes_to_level_one():
    state = advance(None, "L1", now=1000)

    assert state.lesson_id == "L1"
    assert state.srs_level == 1
    assert state.review_count == 1
    assert state.last_studied == 1000
    assert state.next_review == 1000 + 86_400_000


def test_levels_follow_the_ladder_and_cap():
    state = None
    now = 0
    previous_next = -1
    for step in range(1, 9):
        now += 1000
        state = advance(state, "L1", now)

        expected_level = min(step, MAX_SRS_LEVEL)
        assert state.srs_level == expected_level
        assert state.review_count == step
        assert state.next_review >= state.last_studied
        assert state.next_review > previous_next
        assert state.next_review - state.last_studied == SRS_INTERVAL_DAYS[expected_level] * DAY_MS
        previous_next = state.next_review


def test_at_cap_offset_stays_thirty_days():
    state = ReviewState(lesson_id="L1", srs_level=5, last_studied=0, next_review=0, review_count=7)

    after = advance(state, "L1", now=5_000)

    assert after.srs_level == 5
    assert after.review_count == 8
    assert after.last_studied == 5_000
    assert after.next_review == 5_000 + 30 * DAY_MS


def test_classify_new_when_no_state():
    status = classify(None, now=10)
    assert status.kind == ReviewKind.NEW
    assert status.days_left is None


def test_classify_due_boundary():
    state = ReviewState(lesson_id="L1", srs_level=1, last_studied=0, next_review=5_000)

    assert classify(state, now=5_000).kind == ReviewKind.DUE
    assert classify(state, now=4_999).kind == ReviewKind.WAITING
    assert is_due(state, 5_000)
    assert not is_due(state, 4_999)
    assert not is_due(None, 5_000)


@pytest.mark.parametrize(
    "remaining_ms, expected_days",
    [
        (1, 1),
        (DAY_MS, 1),
        (DAY_MS + 1, 2),
        (3 * DAY_MS, 3),
    ],
)
def test_classify_waiting_days_left_rounds_up(remaining_ms, expected_days):
    now = 1_000_000
    state = ReviewState(lesson_id="L1", srs_level=2, next_review=now + remaining_ms)

    status = classify(state, now)

    assert status.kind == ReviewKind.WAITING
    assert status.days_left == expected_days
