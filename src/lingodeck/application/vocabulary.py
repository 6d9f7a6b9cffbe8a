"""
Vocabulary aggregation for practiced words.

Pure computation over the vocabulary ledger: callers own persistence.
"""

import logging
from collections.abc import Iterable

from lingodeck.domain.constants import VOCAB_STRIP_CHARS
from lingodeck.domain.models import VocabularyEntry

logger = logging.getLogger(__name__)

_STRIP_TABLE = str.maketrans("", "", VOCAB_STRIP_CHARS)


def clean_token(raw: str) -> str:
    """
    Remove punctuation and quote characters, then trim whitespace.

    Case is preserved: "Hello," and "hello" stay distinct words.
    """
    return raw.translate(_STRIP_TABLE).strip()


def sort_by_count(entries: Iterable[VocabularyEntry]) -> list[VocabularyEntry]:
    """Most frequent first. Ties keep their prior order."""
    return sorted(entries, key=lambda e: e.count, reverse=True)


def record_occurrences(
    entries: list[VocabularyEntry],
    raw_words: Iterable[str],
    language: str,
    now: int,
) -> list[VocabularyEntry]:
    """
    Count one occurrence of every raw word for `language`.

    Args:
        entries: Current vocabulary ledger. Not modified.
        raw_words: Tokens exactly as they appeared in the lesson turn.
        language: Target language code the words belong to.
        now: Epoch ms stamped into `last_seen`.

    Returns:
        The new ledger, sorted descending by count.
    """
    updated = [e.model_copy() for e in entries]
    index = {e.key: i for i, e in enumerate(updated)}
    added = 0
    bumped = 0

    for raw in raw_words:
        text = clean_token(raw)
        if not text:
            continue

        key = (text, language)
        i = index.get(key)
        if i is not None:
            updated[i].count += 1
            updated[i].last_seen = now
            bumped += 1
        else:
            index[key] = len(updated)
            updated.append(VocabularyEntry(text=text, language=language, count=1, last_seen=now))
            added += 1

    logger.debug(f"[vocab] {language}: {added} new, {bumped} repeated")
    return sort_by_count(updated)


def entries_for(entries: Iterable[VocabularyEntry], language: str) -> list[VocabularyEntry]:
    return [e for e in entries if e.language == language]


def search_vocabulary(
    entries: Iterable[VocabularyEntry],
    query: str,
    language: str | None = None,
) -> list[VocabularyEntry]:
    """Case-insensitive substring search, optionally limited to one language."""
    needle = query.strip().lower()
    return [
        e
        for e in entries
        if (language is None or e.language == language) and needle in e.text.lower()
    ]
