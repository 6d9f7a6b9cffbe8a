"""Tests for the snapshot merge engine."""

import pytest

from lingodeck.application.snapshot_merge import (
    MergePolicy,
    merge_custom_lessons,
    merge_history,
    merge_progress,
    merge_snapshots,
    merge_vocabulary,
    validate_snapshot,
)
from lingodeck.domain.errors import InvalidSnapshotError, StructuralValidationError
from lingodeck.domain.models import (
    Lesson,
    ReviewState,
    SessionRecord,
    Snapshot,
    VocabularyEntry,
)


def session(id: str, ts: int, topic: str = "t") -> SessionRecord:
    return SessionRecord(id=id, timestamp=ts, topic=topic)


def word(text: str, count: int, last_seen: int, language: str = "ko") -> VocabularyEntry:
    return VocabularyEntry(text=text, language=language, count=count, last_seen=last_seen)


def lesson(id: str, title: str) -> Lesson:
    return Lesson(id=id, title=title)


def state(lesson_id: str, last_studied: int, level: int = 1) -> ReviewState:
    return ReviewState(
        lesson_id=lesson_id,
        srs_level=level,
        last_studied=last_studied,
        next_review=last_studied,
        review_count=level,
    )


def empty_snapshot() -> Snapshot:
    return Snapshot(history=[], vocab=[], custom_lessons=[], progress={})


def raw_snapshot(**overrides):
    payload = {
        "timestamp": 1,
        "history": [],
        "vocab": [],
        "customLessons": [],
        "progress": {},
    }
    payload.update(overrides)
    return payload


class TestValidation:
    def test_missing_progress_rejected(self):
        payload = raw_snapshot()
        del payload["progress"]

        with pytest.raises(InvalidSnapshotError) as exc:
            validate_snapshot(payload)

        assert exc.value.missing_keys == ["progress"]
        assert isinstance(exc.value, StructuralValidationError)

    def test_null_ledger_counts_as_missing(self):
        with pytest.raises(InvalidSnapshotError) as exc:
            validate_snapshot(raw_snapshot(vocab=None, history=None))
        assert exc.value.missing_keys == ["history", "vocab"]

    def test_non_object_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            validate_snapshot([1, 2, 3])

    def test_wrong_shape_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            validate_snapshot(raw_snapshot(vocab=[{"text": "x"}]))

    def test_empty_ledgers_are_accepted(self):
        snap = validate_snapshot(raw_snapshot())
        assert snap.history == [] and snap.progress == {}

    def test_camel_case_payload_parses(self):
        snap = validate_snapshot(
            raw_snapshot(
                vocab=[{"text": "foo", "language": "ko", "count": 2, "lastSeen": 9}],
                progress={
                    "x": {
                        "lessonId": "x",
                        "srsLevel": 2,
                        "lastStudied": 5,
                        "nextReview": 10,
                        "reviewCount": 2,
                    }
                },
            )
        )
        assert snap.vocab[0].last_seen == 9
        assert snap.progress["x"].srs_level == 2


class TestHistory:
    def test_new_foreign_sessions_added_and_sorted(self):
        local = [session("b", 200), session("a", 100)]
        foreign = [session("c", 150), session("d", 300)]

        merged = merge_history(local, foreign)

        assert [s.id for s in merged] == ["d", "b", "c", "a"]

    def test_local_wins_on_id_collision(self):
        local = [session("a", 100, topic="local")]
        foreign = [session("a", 999, topic="foreign")]

        merged = merge_history(local, foreign)

        assert len(merged) == 1
        assert merged[0].topic == "local"
        assert merged[0].timestamp == 100

    def test_foreign_duplicates_collapse_to_first(self):
        foreign = [session("x", 300, topic="first"), session("x", 100, topic="second")]

        merged = merge_history([], foreign)

        assert [(s.id, s.topic) for s in merged] == [("x", "first")]


class TestVocabulary:
    def test_collision_takes_max_of_each_field(self):
        merged = merge_vocabulary([word("foo", 3, 100)], [word("foo", 5, 50)])

        assert len(merged) == 1
        assert merged[0].count == 5
        assert merged[0].last_seen == 100

    def test_counts_are_never_summed(self):
        merged = merge_vocabulary([word("foo", 4, 1)], [word("foo", 4, 1)])
        assert merged[0].count == 4

    def test_language_is_part_of_identity(self):
        merged = merge_vocabulary([word("no", 1, 1, "en")], [word("no", 2, 1, "es")])
        assert len(merged) == 2

    def test_result_sorted_by_count(self):
        merged = merge_vocabulary([word("a", 1, 1)], [word("b", 7, 1), word("c", 3, 1)])
        assert [e.text for e in merged] == ["b", "c", "a"]

    def test_vocabulary_merge_is_commutative(self):
        a = [word("foo", 3, 100), word("bar", 1, 10)]
        b = [word("foo", 5, 50), word("baz", 2, 20)]

        def as_map(entries):
            return {e.key: (e.count, e.last_seen) for e in entries}

        assert as_map(merge_vocabulary(a, b)) == as_map(merge_vocabulary(b, a))


class TestCustomLessons:
    def test_foreign_overwrites_on_collision(self):
        merged = merge_custom_lessons([lesson("x", "A")], [lesson("x", "B")])
        assert [(item.id, item.title) for item in merged] == [("x", "B")]

    def test_position_kept_and_new_lessons_appended(self):
        local = [lesson("x", "A"), lesson("y", "Y")]
        foreign = [lesson("z", "Z"), lesson("x", "A2")]

        merged = merge_custom_lessons(local, foreign)

        assert [item.id for item in merged] == ["x", "y", "z"]
        assert merged[0].title == "A2"

    def test_lesson_merge_is_not_commutative(self):
        a = [lesson("x", "A")]
        b = [lesson("x", "B")]

        assert merge_custom_lessons(a, b)[0].title == "B"
        assert merge_custom_lessons(b, a)[0].title == "A"


class TestProgress:
    def test_most_recently_studied_wins(self):
        local = {"x": state("x", 100, level=3), "y": state("y", 500, level=4)}
        foreign = {"x": state("x", 200, level=1), "y": state("y", 400, level=5)}

        merged = merge_progress(local, foreign)

        assert merged["x"].srs_level == 1
        assert merged["y"].srs_level == 4

    def test_tie_keeps_local(self):
        merged = merge_progress({"x": state("x", 100, level=2)}, {"x": state("x", 100, level=5)})
        assert merged["x"].srs_level == 2

    def test_foreign_only_entries_added(self):
        merged = merge_progress({}, {"n": state("n", 1)})
        assert list(merged) == ["n"]


class TestMergeSnapshots:
    def test_smart_merge_combines_every_ledger(self):
        local = Snapshot(
            timestamp=10,
            history=[session("s1", 100)],
            vocab=[word("foo", 3, 100)],
            custom_lessons=[lesson("x", "A")],
            progress={"x": state("x", 100)},
        )
        foreign = raw_snapshot(
            timestamp=20,
            history=[session("s2", 200).to_json_dict()],
            vocab=[word("foo", 5, 50).to_json_dict()],
            customLessons=[lesson("x", "B").to_json_dict()],
            progress={"x": state("x", 50, level=5).to_json_dict()},
        )

        merged = merge_snapshots(local, foreign)

        assert merged.timestamp == 20
        assert [s.id for s in merged.history] == ["s2", "s1"]
        assert (merged.vocab[0].count, merged.vocab[0].last_seen) == (5, 100)
        assert merged.custom_lessons[0].title == "B"
        assert merged.progress["x"].last_studied == 100

    def test_inputs_are_not_mutated(self):
        local = Snapshot(
            history=[session("s1", 100)],
            vocab=[word("foo", 3, 100)],
            custom_lessons=[lesson("x", "A")],
            progress={"x": state("x", 100)},
        )
        foreign = Snapshot(
            history=[session("s2", 200)],
            vocab=[word("foo", 9, 900)],
            custom_lessons=[lesson("x", "B")],
            progress={"x": state("x", 900)},
        )
        local_before = local.model_dump()
        foreign_before = foreign.model_dump()

        merged = merge_snapshots(local, foreign)
        merged.vocab[0].count = 1000

        assert local.model_dump() == local_before
        assert foreign.model_dump() == foreign_before

    def test_overwrite_policy_replaces_local(self):
        local = Snapshot(
            history=[session("s1", 100)],
            vocab=[word("foo", 3, 100)],
            custom_lessons=[lesson("x", "A")],
            progress={"x": state("x", 100)},
        )

        merged = merge_snapshots(local, raw_snapshot(), MergePolicy.OVERWRITE)

        assert merged.history == []
        assert merged.vocab == []
        assert merged.custom_lessons == []
        assert merged.progress == {}

    def test_overwrite_policy_still_validates(self):
        with pytest.raises(InvalidSnapshotError):
            merge_snapshots(empty_snapshot(), {"history": []}, MergePolicy.OVERWRITE)
