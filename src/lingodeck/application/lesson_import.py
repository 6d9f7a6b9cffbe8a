"""Parsing of single-lesson import payloads (files or pasted JSON)."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from lingodeck.domain.constants import (
    IMPORTED_LESSON_DESCRIPTION,
    IMPORTED_LESSON_LEVEL,
    IMPORTED_LESSON_TITLE,
    IMPORTED_LESSON_TONE,
    IMPORTED_LESSON_TOPIC,
)
from lingodeck.domain.errors import LessonImportError
from lingodeck.domain.models import Lesson, LessonType
from lingodeck.domain.ports import IdFactory

logger = logging.getLogger(__name__)


def detect_lesson_type(turns: list[Any]) -> LessonType:
    """Reading lessons have no question on their first turn."""
    if not turns:
        return LessonType.CONVERSATION
    first = turns[0]
    question = first.get("question") if isinstance(first, Mapping) else None
    if not question or not str(question).strip():
        return LessonType.READING
    return LessonType.CONVERSATION


def parse_lesson(payload: Any, active_language: str, id_factory: IdFactory) -> Lesson:
    """
    Build a Lesson from an import payload, filling every optional field.

    Only `turns` is required. Generated lessons (e.g. raw model output) often
    carry just a title and turns.

    Raises:
        LessonImportError: If `turns` is missing, not a list, or a turn is malformed.
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("turns"), list):
        raise LessonImportError("Invalid lesson structure: 'turns' array is missing.")

    turns = payload["turns"]
    title = payload.get("title") or IMPORTED_LESSON_TITLE

    try:
        lesson = Lesson(
            id=payload.get("id") or id_factory(),
            language=payload.get("language") or active_language,
            type=payload.get("type") or detect_lesson_type(turns),
            title=title,
            description=payload.get("description") or IMPORTED_LESSON_DESCRIPTION,
            level=payload.get("level") or IMPORTED_LESSON_LEVEL,
            tone=payload.get("tone") or IMPORTED_LESSON_TONE,
            topic=payload.get("topic") or payload.get("title") or IMPORTED_LESSON_TOPIC,
            turns=turns,
        )
    except ValidationError as e:
        raise LessonImportError(f"Invalid lesson structure: {e}") from e

    logger.info(
        f"[import] parsed lesson '{lesson.title}' ({lesson.type.value}, {len(turns)} turns)"
    )
    return lesson
