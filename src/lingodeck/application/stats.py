"""
Learning statistics for the progress overview.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta

from lingodeck.application.catalog import level_group
from lingodeck.application.utils.clock import local_day
from lingodeck.domain.constants import LEVEL_GROUPS, MAX_SRS_LEVEL
from lingodeck.domain.models import Lesson, ReviewState, SessionRecord, VocabularyEntry


@dataclass
class LearningStats:
    streak: int  # Consecutive study days ending today or yesterday
    total_sessions: int
    total_vocab: int
    total_learned_lessons: int
    level_counts: dict[str, int] = field(default_factory=dict)
    srs_distribution: list[int] = field(default_factory=list)  # Index = SRS level


class StatsCalculator:
    """
    Summarizes history, vocabulary and review state.

    Stateless and side-effect free.
    """

    def summarize(
        self,
        sessions: list[SessionRecord],
        vocab: list[VocabularyEntry],
        progress: Mapping[str, ReviewState],
        lessons: Iterable[Lesson],
        today: date,
    ) -> LearningStats:
        return LearningStats(
            streak=self._compute_streak(sessions, progress, today),
            total_sessions=len(sessions),
            total_vocab=len(vocab),
            total_learned_lessons=len(progress),
            level_counts=self._compute_level_counts(progress, lessons),
            srs_distribution=self._compute_srs_distribution(progress),
        )

    def _compute_streak(
        self,
        sessions: list[SessionRecord],
        progress: Mapping[str, ReviewState],
        today: date,
    ) -> int:
        """
        Count consecutive study days.

        A day counts if a session was saved or a lesson was reviewed on it.
        The streak is broken unless the latest study day is today or yesterday.
        """
        days = {local_day(s.timestamp) for s in sessions}
        days.update(local_day(p.last_studied) for p in progress.values())
        if not days:
            return 0

        ordered = sorted(days, reverse=True)
        if ordered[0] not in (today, today - timedelta(days=1)):
            return 0

        streak = 1
        for newer, older in zip(ordered, ordered[1:]):
            if newer - older != timedelta(days=1):
                break
            streak += 1
        return streak

    def _compute_level_counts(
        self, progress: Mapping[str, ReviewState], lessons: Iterable[Lesson]
    ) -> dict[str, int]:
        counts = {group: 0 for group in LEVEL_GROUPS}
        by_id = {lesson.id: lesson for lesson in lessons}
        for lesson_id in progress:
            lesson = by_id.get(lesson_id)
            if lesson:
                counts[level_group(lesson.level)] += 1
        return counts

    def _compute_srs_distribution(self, progress: Mapping[str, ReviewState]) -> list[int]:
        buckets = [0] * (MAX_SRS_LEVEL + 1)
        for state in progress.values():
            buckets[min(state.srs_level, MAX_SRS_LEVEL)] += 1
        return buckets
