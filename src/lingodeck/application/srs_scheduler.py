"""
Spaced-repetition scheduling for lessons.

Each completed review moves a lesson one step up a fixed interval ladder
(0, 1, 3, 7, 14, 30 days). Levels never go down.
"""

import math
from dataclasses import dataclass
from enum import Enum

from lingodeck.domain.constants import DAY_MS, MAX_SRS_LEVEL, SRS_INTERVAL_DAYS
from lingodeck.domain.models import ReviewState


class ReviewKind(str, Enum):
    NEW = "new"
    DUE = "due"
    WAITING = "waiting"


@dataclass(frozen=True)
class ReviewStatus:
    """Classification of a lesson against the clock."""

    kind: ReviewKind
    days_left: int | None = None  # Only set for WAITING


def interval_ms(level: int) -> int:
    return SRS_INTERVAL_DAYS[level] * DAY_MS


def advance(current: ReviewState | None, lesson_id: str, now: int) -> ReviewState:
    """
    Compute the state after one more completed review.

    A lesson with no state starts from level 0 with no reviews.
    """
    level = current.srs_level if current else 0
    review_count = current.review_count if current else 0

    new_level = min(level + 1, MAX_SRS_LEVEL)
    return ReviewState(
        lesson_id=lesson_id,
        srs_level=new_level,
        last_studied=now,
        next_review=now + interval_ms(new_level),
        review_count=review_count + 1,
    )


def classify(state: ReviewState | None, now: int) -> ReviewStatus:
    if state is None:
        return ReviewStatus(ReviewKind.NEW)
    if now >= state.next_review:
        return ReviewStatus(ReviewKind.DUE)
    return ReviewStatus(ReviewKind.WAITING, math.ceil((state.next_review - now) / DAY_MS))


def is_due(state: ReviewState | None, now: int) -> bool:
    return state is not None and now >= state.next_review
