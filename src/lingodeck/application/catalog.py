"""
Lesson catalog resolution.

Merges built-in and custom lessons for the active language and splits them
into lessons due for review and the rest of the library.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from lingodeck.application.srs_scheduler import is_due
from lingodeck.domain.constants import DEFAULT_TARGET_LANGUAGE, LEVEL_GROUPS
from lingodeck.domain.models import Lesson, LessonType, ReviewState


class LibraryFilter(str, Enum):
    ALL = "all"
    CONVERSATION = "conversation"
    READING = "reading"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass
class CatalogView:
    due: list[Lesson] = field(default_factory=list)  # Soonest-due first
    library: list[Lesson] = field(default_factory=list)


def lesson_language(lesson: Lesson) -> str:
    return lesson.language or DEFAULT_TARGET_LANGUAGE


def resolve_catalog(
    custom: Iterable[Lesson],
    builtins: Iterable[Lesson],
    active_language: str,
    progress: Mapping[str, ReviewState],
    now: int,
) -> CatalogView:
    """
    Partition the catalog for `active_language` into due and library lessons.

    Custom lessons come before built-ins. A lesson is due once its
    next_review is at or before `now`; lessons never studied stay in the library.
    """
    catalog = [
        lesson
        for lesson in [*custom, *builtins]
        if lesson_language(lesson) == active_language
    ]

    due = [lesson for lesson in catalog if is_due(progress.get(lesson.id), now)]
    due.sort(key=lambda lesson: progress[lesson.id].next_review)

    due_ids = {lesson.id for lesson in due}
    library = [lesson for lesson in catalog if lesson.id not in due_ids]

    return CatalogView(due=due, library=library)


def level_group(level: str) -> str:
    """Map a level label to Beginner / Intermediate / Advanced."""
    for group, labels in LEVEL_GROUPS.items():
        if level in labels:
            return group
    return "Beginner"


def filter_library(
    lessons: Iterable[Lesson],
    search: str = "",
    kind: LibraryFilter = LibraryFilter.ALL,
) -> list[Lesson]:
    """Search title/topic and apply one filter chip."""
    needle = search.strip().lower()
    result = []

    for lesson in lessons:
        if needle and needle not in lesson.title.lower() and needle not in lesson.topic.lower():
            continue

        if kind == LibraryFilter.CONVERSATION and lesson.type != LessonType.CONVERSATION:
            continue
        if kind == LibraryFilter.READING and lesson.type != LessonType.READING:
            continue
        if kind in (LibraryFilter.BEGINNER, LibraryFilter.INTERMEDIATE, LibraryFilter.ADVANCED):
            if level_group(lesson.level).lower() != kind.value:
                continue

        result.append(lesson)

    return result
