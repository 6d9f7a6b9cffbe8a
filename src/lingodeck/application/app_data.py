"""
AppDataStore: owner of the four persisted ledgers.

Holds history, vocabulary, custom lessons and review progress in memory,
exposes the core operations as methods, and writes each ledger through a
KeyValueStore after it changes. A ledger's in-memory value is only replaced
once its write succeeded, so a failed write leaves the previous value intact.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import TypeAdapter, ValidationError

from lingodeck.application import session_recorder, srs_scheduler, vocabulary
from lingodeck.application.catalog import CatalogView, resolve_catalog
from lingodeck.application.id_service import generate_id
from lingodeck.application.lesson_import import parse_lesson
from lingodeck.application.snapshot_merge import MergePolicy, merge_snapshots
from lingodeck.application.stats import LearningStats, StatsCalculator
from lingodeck.application.utils.clock import local_day, now_ms
from lingodeck.data.sample_lessons import BUILTIN_LESSONS
from lingodeck.domain.constants import (
    BACKUP_FILE_PREFIX,
    DEFAULT_STORE_NAMESPACE,
    LEDGER_CUSTOM_LESSONS,
    LEDGER_HISTORY,
    LEDGER_PROGRESS,
    LEDGER_SCHEMA_SUFFIX,
    LEDGER_VOCABULARY,
    LEDGERS,
)
from lingodeck.domain.errors import PartialPersistenceError
from lingodeck.domain.models import (
    ChatMessage,
    Lesson,
    LessonType,
    PuzzleTurn,
    ReviewState,
    SessionRecord,
    Snapshot,
    VocabularyEntry,
)
from lingodeck.domain.ports import Clock, IdFactory, KeyValueStore

logger = logging.getLogger(__name__)

_ADAPTERS: dict[str, TypeAdapter] = {
    LEDGER_HISTORY: TypeAdapter(list[SessionRecord]),
    LEDGER_VOCABULARY: TypeAdapter(list[VocabularyEntry]),
    LEDGER_CUSTOM_LESSONS: TypeAdapter(list[Lesson]),
    LEDGER_PROGRESS: TypeAdapter(dict[str, ReviewState]),
}

# Per-record adapters, so one bad record does not take the whole ledger down
_RECORD_ADAPTERS: dict[str, TypeAdapter] = {
    LEDGER_HISTORY: TypeAdapter(SessionRecord),
    LEDGER_VOCABULARY: TypeAdapter(VocabularyEntry),
    LEDGER_CUSTOM_LESSONS: TypeAdapter(Lesson),
    LEDGER_PROGRESS: TypeAdapter(ReviewState),
}


@dataclass
class RestoreReport:
    """Outcome of restoring a snapshot. Ledgers are written independently."""

    policy: MergePolicy
    persisted: list[str] = field(default_factory=list)
    failures: list[PartialPersistenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def backup_filename(today: date) -> str:
    return f"{BACKUP_FILE_PREFIX}-{today.isoformat()}.json"


class AppDataStore:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        namespace: str = DEFAULT_STORE_NAMESPACE,
        builtin_lessons: list[Lesson] | None = None,
    ):
        self.store = store
        self.clock = clock or now_ms
        self.id_factory = id_factory or generate_id
        self.namespace = namespace
        self.builtin_lessons = BUILTIN_LESSONS if builtin_lessons is None else builtin_lessons

        self.history: list[SessionRecord] = []
        self.vocabulary: list[VocabularyEntry] = []
        self.custom_lessons: list[Lesson] = []
        self.progress: dict[str, ReviewState] = {}
        self.load()

    # ---------- Persistence ----------

    def key_for(self, ledger: str) -> str:
        return f"{self.namespace}_{ledger}_{LEDGER_SCHEMA_SUFFIX}"

    def load(self) -> None:
        """
        Read all ledgers.

        Missing ledgers load as empty. Records that fail validation are
        skipped, and an unparseable ledger loads as empty. In both cases the
        stored value is first copied to `<key>.corrupt-<ts>` so the next write
        cannot destroy it.
        """
        for ledger in LEDGERS:
            setattr(self, ledger, self._read(ledger))

    def _read(self, ledger: str) -> Any:
        empty: Any = {} if ledger == LEDGER_PROGRESS else []
        try:
            raw = self.store.get(self.key_for(ledger))
            if raw is None:
                return empty
            data = json.loads(raw)
        except ValueError as e:
            # Covers JSONDecodeError and UnicodeDecodeError
            self._preserve(ledger, f"unreadable: {e}")
            return empty

        if not isinstance(data, type(empty)):
            self._preserve(ledger, f"expected a JSON {type(empty).__name__}")
            return empty

        adapter = _RECORD_ADAPTERS[ledger]
        items = data.items() if isinstance(data, dict) else enumerate(data)
        kept: list[tuple[Any, Any]] = []
        skipped = 0
        for k, item in items:
            try:
                kept.append((k, adapter.validate_python(item)))
            except ValidationError as e:
                skipped += 1
                logger.debug(f"[store] {ledger}[{k!r}] skipped: {e}")

        if skipped:
            self._preserve(ledger, f"{skipped} invalid record(s) skipped")
        if isinstance(empty, dict):
            return dict(kept)
        return [record for _, record in kept]

    def _preserve(self, ledger: str, reason: str) -> None:
        """
        Copy a damaged ledger aside before anything can overwrite it.

        Raises:
            PartialPersistenceError: If the copy fails.
        """
        key = self.key_for(ledger)
        backup = f"{key}.corrupt-{self.clock()}"
        try:
            copied = self.store.copy(key, backup)
        except Exception as e:
            raise PartialPersistenceError(ledger, e) from e
        where = f", original kept as '{backup}'" if copied else ""
        logger.warning(f"[store] ledger '{ledger}' is damaged ({reason}){where}")

    def _dump(self, ledger: str, value: Any) -> str:
        payload = _ADAPTERS[ledger].dump_python(
            value, by_alias=True, mode="json", exclude_none=True
        )
        return json.dumps(payload, ensure_ascii=False)

    def _commit(self, ledger: str, value: Any) -> None:
        """
        Write a ledger, then adopt it in memory.

        Raises:
            PartialPersistenceError: If the store write fails.
        """
        try:
            self.store.set(self.key_for(ledger), self._dump(ledger, value))
        except Exception as e:
            raise PartialPersistenceError(ledger, e) from e
        setattr(self, ledger, value)
        logger.debug(f"[store] persisted {ledger}")

    # ---------- Vocabulary ----------

    def record_occurrences(self, raw_words: list[str], language: str) -> list[VocabularyEntry]:
        updated = vocabulary.record_occurrences(
            self.vocabulary, raw_words, language, self.clock()
        )
        self._commit(LEDGER_VOCABULARY, updated)
        return self.vocabulary

    # ---------- SRS ----------

    def advance(self, lesson_id: str) -> ReviewState:
        """Record a completed review of a lesson and schedule the next one."""
        state = srs_scheduler.advance(self.progress.get(lesson_id), lesson_id, self.clock())
        self._commit(LEDGER_PROGRESS, {**self.progress, lesson_id: state})
        logger.info(
            f"[srs] {lesson_id}: level {state.srs_level}, review #{state.review_count}"
        )
        return state

    def review_status(self, lesson_id: str, now: int | None = None) -> srs_scheduler.ReviewStatus:
        return srs_scheduler.classify(
            self.progress.get(lesson_id), self.clock() if now is None else now
        )

    # ---------- History ----------

    def record_session(self, session: SessionRecord) -> None:
        self._commit(LEDGER_HISTORY, session_recorder.prepend_session(self.history, session))

    def save_run(
        self,
        *,
        topic: str,
        difficulty: str,
        target_lang: str,
        lesson_type: LessonType,
        messages: list[ChatMessage],
        turns: list[PuzzleTurn],
    ) -> SessionRecord:
        """Build a history record for a finished run and record it."""
        session = session_recorder.build_session(
            topic=topic,
            difficulty=difficulty,
            target_lang=target_lang,
            lesson_type=lesson_type,
            messages=messages,
            turns=turns,
            clock=self.clock,
            id_factory=self.id_factory,
        )
        self.record_session(session)
        return session

    def delete_session(self, session_id: str) -> bool:
        remaining, removed = session_recorder.remove_session(self.history, session_id)
        if removed:
            self._commit(LEDGER_HISTORY, remaining)
        return removed

    def get_session(self, session_id: str) -> SessionRecord | None:
        return session_recorder.find_session(self.history, session_id)

    # ---------- Lessons ----------

    def _upsert_lesson(self, lesson: Lesson, prepend: bool) -> None:
        """Replace in place on an id match, otherwise insert at the front or back."""
        if any(existing.id == lesson.id for existing in self.custom_lessons):
            updated = [lesson if item.id == lesson.id else item for item in self.custom_lessons]
        elif prepend:
            updated = [lesson, *self.custom_lessons]
        else:
            updated = [*self.custom_lessons, lesson]
        self._commit(LEDGER_CUSTOM_LESSONS, updated)

    def add_custom_lesson(self, lesson: Lesson) -> None:
        """Upsert: replace in place when the id exists, otherwise add to the front."""
        self._upsert_lesson(lesson, prepend=True)

    def import_lesson(self, payload: Any, active_language: str) -> Lesson:
        """
        Parse an imported lesson and upsert it.

        Re-importing a lesson with a known id replaces it in place;
        otherwise the lesson is appended to the custom lessons.
        """
        lesson = parse_lesson(payload, active_language, self.id_factory)
        self._upsert_lesson(lesson, prepend=False)
        return lesson

    def update_custom_lesson(self, lesson_id: str, **changes: Any) -> Lesson | None:
        """Apply a partial update. Returns None when the lesson does not exist."""
        current = next((item for item in self.custom_lessons if item.id == lesson_id), None)
        if current is None:
            return None
        edited = Lesson.model_validate({**current.model_dump(), **changes, "id": lesson_id})
        self._commit(
            LEDGER_CUSTOM_LESSONS,
            [edited if item.id == lesson_id else item for item in self.custom_lessons],
        )
        return edited

    def delete_custom_lesson(self, lesson_id: str) -> bool:
        """Remove a custom lesson together with its review state."""
        remaining = [item for item in self.custom_lessons if item.id != lesson_id]
        removed = len(remaining) != len(self.custom_lessons)
        if removed:
            self._commit(LEDGER_CUSTOM_LESSONS, remaining)
        if lesson_id in self.progress:
            self._commit(
                LEDGER_PROGRESS, {k: v for k, v in self.progress.items() if k != lesson_id}
            )
        return removed

    def all_lessons(self) -> list[Lesson]:
        return [*self.custom_lessons, *self.builtin_lessons]

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        return next((item for item in self.all_lessons() if item.id == lesson_id), None)

    def resolve_catalog(self, active_language: str, now: int | None = None) -> CatalogView:
        return resolve_catalog(
            self.custom_lessons,
            self.builtin_lessons,
            active_language,
            self.progress,
            self.clock() if now is None else now,
        )

    # ---------- Snapshots ----------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            timestamp=self.clock(),
            history=self.history,
            vocab=self.vocabulary,
            custom_lessons=self.custom_lessons,
            progress=self.progress,
        )

    def export_snapshot(self) -> dict[str, Any]:
        return self.snapshot().to_json_dict()

    def export_json(self) -> str:
        return json.dumps(self.export_snapshot(), ensure_ascii=False, indent=2)

    def restore(
        self, payload: Any, policy: MergePolicy = MergePolicy.SMART_MERGE
    ) -> RestoreReport:
        """
        Merge a foreign snapshot into the local ledgers and persist them.

        Validation failures raise before anything is written. After that,
        each ledger is written on its own: a failed write is logged and
        reported while the other ledgers still go through.

        Raises:
            InvalidSnapshotError: If `payload` is not a complete snapshot.
        """
        merged = merge_snapshots(self.snapshot(), payload, policy)
        report = RestoreReport(policy=policy)

        for ledger, value in (
            (LEDGER_HISTORY, merged.history),
            (LEDGER_VOCABULARY, merged.vocab),
            (LEDGER_CUSTOM_LESSONS, merged.custom_lessons),
            (LEDGER_PROGRESS, merged.progress),
        ):
            try:
                self._commit(ledger, value)
                report.persisted.append(ledger)
            except PartialPersistenceError as e:
                logger.error(f"[restore] {e}")
                report.failures.append(e)

        logger.info(
            f"[restore] policy={policy.value} persisted={report.persisted} "
            f"failed={[f.ledger for f in report.failures]}"
        )
        return report

    # ---------- Stats ----------

    def stats(self, today: date | None = None) -> LearningStats:
        return StatsCalculator().summarize(
            self.history,
            self.vocabulary,
            self.progress,
            self.all_lessons(),
            today or local_day(self.clock()),
        )
