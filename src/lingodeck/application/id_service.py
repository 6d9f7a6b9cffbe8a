"""Identifier generation for sessions and lessons."""

from ulid import ULID


def generate_id() -> str:
    """Generate a unique, time-ordered id using ULID."""
    return str(ULID())
