"""Practice history ledger operations."""

from collections.abc import Iterable

from lingodeck.domain.models import (
    ChatMessage,
    LessonType,
    PuzzleTurn,
    SessionRecord,
)
from lingodeck.domain.ports import Clock, IdFactory


def build_session(
    *,
    topic: str,
    difficulty: str,
    target_lang: str,
    lesson_type: LessonType,
    messages: Iterable[ChatMessage],
    turns: Iterable[PuzzleTurn],
    clock: Clock,
    id_factory: IdFactory,
) -> SessionRecord:
    """Create a history record for a run that just finished."""
    return SessionRecord(
        id=id_factory(),
        timestamp=clock(),
        topic=topic,
        difficulty=difficulty,
        target_lang=target_lang,
        lesson_type=lesson_type,
        messages=list(messages),
        turns=list(turns),
    )


def prepend_session(history: list[SessionRecord], session: SessionRecord) -> list[SessionRecord]:
    return [session, *history]


def remove_session(
    history: list[SessionRecord], session_id: str
) -> tuple[list[SessionRecord], bool]:
    """Returns (new history, whether anything was removed)."""
    remaining = [s for s in history if s.id != session_id]
    return remaining, len(remaining) != len(history)


def find_session(history: Iterable[SessionRecord], session_id: str) -> SessionRecord | None:
    return next((s for s in history if s.id == session_id), None)
