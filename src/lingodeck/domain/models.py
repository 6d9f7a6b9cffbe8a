"""
Domain models for lessons, review state, vocabulary and practice history.

Records serialize with camelCase keys so stored ledgers and exported
snapshots keep the same JSON shape across versions.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lingodeck.domain.constants import DEFAULT_TARGET_LANGUAGE, MAX_SRS_LEVEL


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to the stored/exported JSON shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class LessonType(str, Enum):
    CONVERSATION = "Conversation"
    READING = "Reading"


class Sender(str, Enum):
    AI = "AI"
    USER = "USER"


class PuzzleTurn(_Record):
    """
    One step of a lesson plan.

    Reading lessons leave `question` and `question_translation` empty.
    """

    question: str = ""
    question_translation: str = ""
    target_answer: str
    target_answer_translation: str = ""
    words: list[str] = Field(default_factory=list)


class ChatMessage(_Record):
    id: str
    sender: Sender
    text: str
    translation: str | None = None


class Lesson(_Record):
    """
    A practice lesson.

    Built-in lessons ship with the package and are never persisted.
    Custom lessons live in the custom-lessons ledger and are upserted by id.
    """

    id: str
    # Older stored lessons predate multi-language support.
    language: str = DEFAULT_TARGET_LANGUAGE
    type: LessonType = LessonType.CONVERSATION
    title: str
    description: str = ""
    level: str = "Level 1"
    tone: str | None = None
    topic: str = ""
    turns: list[PuzzleTurn] = Field(default_factory=list)


class ReviewState(_Record):
    """
    Spaced-repetition state for one lesson.

    Attributes:
        lesson_id: The lesson this state belongs to.
        srs_level: Position on the interval ladder (0-5).
        last_studied: Epoch ms of the latest completed review.
        next_review: Epoch ms when the lesson becomes due again.
        review_count: Number of completed reviews.
    """

    lesson_id: str
    srs_level: int = Field(default=0, ge=0, le=MAX_SRS_LEVEL)
    last_studied: int = 0
    next_review: int = 0
    review_count: int = Field(default=0, ge=0)


class VocabularyEntry(_Record):
    text: str
    language: str
    count: int = Field(default=1, ge=1)
    last_seen: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return (self.text, self.language)


class SessionRecord(_Record):
    """A completed (or abandoned) practice run, kept newest-first in history."""

    id: str
    timestamp: int
    topic: str
    difficulty: str = ""
    target_lang: str = DEFAULT_TARGET_LANGUAGE
    lesson_type: LessonType = LessonType.CONVERSATION
    messages: list[ChatMessage] = Field(default_factory=list)
    # Legacy sessions carry no plan and cannot be restarted.
    turns: list[PuzzleTurn] = Field(default_factory=list)

    @property
    def can_restart(self) -> bool:
        return bool(self.turns)


class Snapshot(_Record):
    """Point-in-time serialization of all four ledgers."""

    timestamp: int = 0
    history: list[SessionRecord]
    vocab: list[VocabularyEntry]
    custom_lessons: list[Lesson]
    progress: dict[str, ReviewState]
