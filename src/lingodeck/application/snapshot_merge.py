"""
Snapshot merge engine.

Reconciles a foreign snapshot (file import or cloud fetch) with the local
ledgers. Every function here is pure: inputs are never modified and the
result is a fresh set of ledger values.

Conflict rules differ per ledger on purpose:
- history:        local wins on id collision (sessions are historical facts)
- vocab:          max(count), max(last_seen) (never summed)
- custom lessons: foreign wins on id collision (import equals update)
- progress:       most recent last_studied wins
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from lingodeck.application.vocabulary import sort_by_count
from lingodeck.domain.constants import SNAPSHOT_REQUIRED_KEYS
from lingodeck.domain.errors import InvalidSnapshotError
from lingodeck.domain.models import (
    Lesson,
    ReviewState,
    SessionRecord,
    Snapshot,
    VocabularyEntry,
)

logger = logging.getLogger(__name__)


class MergePolicy(str, Enum):
    SMART_MERGE = "smart"
    # Lossy: the foreign snapshot replaces every local ledger wholesale.
    OVERWRITE = "overwrite"


def validate_snapshot(payload: Any) -> Snapshot:
    """
    Check that a foreign payload is a complete snapshot and parse it.

    Raises:
        InvalidSnapshotError: If the payload is not an object, lacks one of the
            four ledgers, or a ledger has the wrong shape.
    """
    if isinstance(payload, Snapshot):
        return payload

    if not isinstance(payload, Mapping):
        raise InvalidSnapshotError(
            f"Snapshot must be a JSON object, got {type(payload).__name__}."
        )

    missing = [k for k in SNAPSHOT_REQUIRED_KEYS if payload.get(k) is None]
    if missing:
        raise InvalidSnapshotError(
            f"Snapshot is missing required keys: {', '.join(missing)}.", missing_keys=missing
        )

    try:
        return Snapshot.model_validate(payload)
    except ValidationError as e:
        raise InvalidSnapshotError(
            f"Snapshot has an invalid structure ({e.error_count()} error(s)): {e}"
        ) from e


def merge_history(
    local: list[SessionRecord], foreign: list[SessionRecord]
) -> list[SessionRecord]:
    """
    Add unseen foreign sessions, newest first. Local wins on id collision.

    Duplicate ids inside `foreign` collapse to their first occurrence.
    """
    seen = {s.id for s in local}
    incoming: list[SessionRecord] = []
    for session in foreign:
        if session.id in seen:
            continue
        seen.add(session.id)
        incoming.append(session.model_copy(deep=True))

    merged = incoming + [s.model_copy(deep=True) for s in local]
    merged.sort(key=lambda s: s.timestamp, reverse=True)
    return merged


def merge_vocabulary(
    local: list[VocabularyEntry], foreign: list[VocabularyEntry]
) -> list[VocabularyEntry]:
    """Union by (text, language), keeping the larger count and the later last_seen."""
    by_key: dict[tuple[str, str], VocabularyEntry] = {}
    for entry in local:
        by_key[entry.key] = entry.model_copy()

    for entry in foreign:
        existing = by_key.get(entry.key)
        if existing is None:
            by_key[entry.key] = entry.model_copy()
            continue
        by_key[entry.key] = existing.model_copy(
            update={
                "count": max(existing.count, entry.count),
                "last_seen": max(existing.last_seen, entry.last_seen),
            }
        )

    return sort_by_count(by_key.values())


def merge_custom_lessons(local: list[Lesson], foreign: list[Lesson]) -> list[Lesson]:
    """Upsert foreign lessons by id. Overwritten lessons keep their position."""
    by_id: dict[str, Lesson] = {lesson.id: lesson.model_copy(deep=True) for lesson in local}
    for lesson in foreign:
        by_id[lesson.id] = lesson.model_copy(deep=True)
    return list(by_id.values())


def merge_progress(
    local: dict[str, ReviewState], foreign: dict[str, ReviewState]
) -> dict[str, ReviewState]:
    """Keep whichever record was studied most recently. Ties keep local."""
    merged = {lesson_id: state.model_copy() for lesson_id, state in local.items()}
    for state in foreign.values():
        existing = merged.get(state.lesson_id)
        if existing is None or state.last_studied > existing.last_studied:
            merged[state.lesson_id] = state.model_copy()
    return merged


def merge_snapshots(
    local: Snapshot,
    foreign: Snapshot | Mapping[str, Any],
    policy: MergePolicy = MergePolicy.SMART_MERGE,
) -> Snapshot:
    """
    Reconcile a foreign snapshot into the local one.

    Args:
        local: Current ledgers.
        foreign: Parsed snapshot or raw JSON payload. Raw payloads are validated first.
        policy: SMART_MERGE (default) or the lossy OVERWRITE.

    Returns:
        A new Snapshot holding the reconciled ledgers.

    Raises:
        InvalidSnapshotError: If `foreign` is not a complete snapshot.
    """
    incoming = validate_snapshot(foreign)

    if policy == MergePolicy.OVERWRITE:
        logger.warning("[merge] overwrite policy: local ledgers are replaced by the import")
        return incoming.model_copy(deep=True)

    merged = Snapshot(
        timestamp=max(local.timestamp, incoming.timestamp),
        history=merge_history(local.history, incoming.history),
        vocab=merge_vocabulary(local.vocab, incoming.vocab),
        custom_lessons=merge_custom_lessons(local.custom_lessons, incoming.custom_lessons),
        progress=merge_progress(local.progress, incoming.progress),
    )
    logger.info(
        f"[merge] history {len(local.history)}->{len(merged.history)}, "
        f"vocab {len(local.vocab)}->{len(merged.vocab)}, "
        f"lessons {len(local.custom_lessons)}->{len(merged.custom_lessons)}, "
        f"progress {len(local.progress)}->{len(merged.progress)}"
    )
    return merged
