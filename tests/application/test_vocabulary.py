from lingodeck.application.vocabulary import (
    clean_token,
    entries_for,
    record_occurrences,
    search_vocabulary,
)
from lingodeck.domain.models import VocabularyEntry


def test_clean_token_strips_punctuation_and_quotes():
    assert clean_token("Hello,") == "Hello"
    assert clean_token("world!") == "world"
    assert clean_token('  "(quoted)"  ') == "quoted"
    assert clean_token("[a]{b}") == "ab"
    assert clean_token("입니다.") == "입니다"


def test_clean_token_is_idempotent():
    for raw in ["Hello,", "  ¿Qué?  ", "'tis", "a.b.c", "...", "plain"]:
        once = clean_token(raw)
        assert clean_token(once) == once


def test_clean_token_can_be_empty():
    assert clean_token("?!.") == ""
    assert clean_token("   ") == ""


def test_record_is_case_sensitive():
    result = record_occurrences([], ["Hello,", "world!", "hello"], "en", now=10)

    assert sorted(e.text for e in result) == ["Hello", "hello", "world"]
    assert all(e.count == 1 for e in result)
    assert all(e.language == "en" for e in result)


def test_record_skips_empty_tokens():
    result = record_occurrences([], ["", "...", "  ", "ok"], "en", now=10)
    assert [e.text for e in result] == ["ok"]


def test_repeat_increments_count_and_bumps_last_seen():
    first = record_occurrences([], ["저는"], "ko", now=100)
    second = record_occurrences(first, ["저는"], "ko", now=200)

    assert len(second) == 1
    assert second[0].count == 2
    assert second[0].last_seen == 200


def test_same_text_in_other_language_is_a_new_entry():
    ledger = record_occurrences([], ["no"], "en", now=1)
    ledger = record_occurrences(ledger, ["no"], "es", now=2)

    assert {(e.text, e.language) for e in ledger} == {("no", "en"), ("no", "es")}


def test_batching_does_not_change_counts():
    words = ["a", "b", "a", "c", "a", "b"]

    batched = record_occurrences([], words, "en", now=1)
    single: list[VocabularyEntry] = []
    for w in words:
        single = record_occurrences(single, [w], "en", now=1)

    def counts(ledger):
        return {e.text: e.count for e in ledger}

    assert counts(batched) == counts(single) == {"a": 3, "b": 2, "c": 1}


def test_ledger_sorted_by_count_descending():
    result = record_occurrences([], ["x", "y", "y", "z", "z", "z"], "en", now=1)
    assert [e.text for e in result] == ["z", "y", "x"]


def test_input_ledger_is_not_modified():
    original = [VocabularyEntry(text="hi", language="en", count=1, last_seen=5)]
    record_occurrences(original, ["hi"], "en", now=99)

    assert original[0].count == 1
    assert original[0].last_seen == 5


def test_search_and_language_views():
    ledger = [
        VocabularyEntry(text="Hello", language="en", count=2, last_seen=1),
        VocabularyEntry(text="hola", language="es", count=1, last_seen=1),
        VocabularyEntry(text="help", language="en", count=1, last_seen=1),
    ]

    assert [e.text for e in entries_for(ledger, "en")] == ["Hello", "help"]
    assert [e.text for e in search_vocabulary(ledger, "HEL")] == ["Hello", "help"]
    assert [e.text for e in search_vocabulary(ledger, "hol", language="en")] == []
