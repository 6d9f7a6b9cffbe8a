"""Centralized constants for lingodeck.

All magic numbers and storage identifiers live here so every layer
imports from a single source of truth.
"""

# ---------- SRS ----------
SRS_INTERVAL_DAYS = [0, 1, 3, 7, 14, 30]
MAX_SRS_LEVEL = len(SRS_INTERVAL_DAYS) - 1
DAY_MS = 24 * 60 * 60 * 1000

# ---------- Vocabulary ----------
VOCAB_STRIP_CHARS = ".,?!;:\"'(){}[]"

# ---------- Languages ----------
DEFAULT_TARGET_LANGUAGE = "ko"

# ---------- Ledgers ----------
LEDGER_HISTORY = "history"
LEDGER_VOCABULARY = "vocabulary"
LEDGER_CUSTOM_LESSONS = "custom_lessons"
LEDGER_PROGRESS = "progress"
LEDGERS = [LEDGER_HISTORY, LEDGER_VOCABULARY, LEDGER_CUSTOM_LESSONS, LEDGER_PROGRESS]
DEFAULT_STORE_NAMESPACE = "lingodeck"
LEDGER_SCHEMA_SUFFIX = "v1"

# Top-level keys a snapshot must carry to be accepted for restore.
SNAPSHOT_REQUIRED_KEYS = ["history", "vocab", "customLessons", "progress"]

# ---------- Lesson import defaults ----------
IMPORTED_LESSON_TITLE = "Imported Lesson"
IMPORTED_LESSON_DESCRIPTION = "No description"
IMPORTED_LESSON_LEVEL = "Level 1"
IMPORTED_LESSON_TONE = "Standard"
IMPORTED_LESSON_TOPIC = "General"

# ---------- Level groups ----------
LEVEL_GROUPS = {
    "Beginner": ["Beginner", "Level 1", "Level 2"],
    "Intermediate": ["Intermediate", "Level 3", "Level 4"],
    "Advanced": ["Advanced", "Level 5", "Level 6"],
}

# ---------- Remote snapshot (paste service) ----------
PASTE_API_URL = "https://dpaste.com/api/"
PASTE_EXPIRY_DAYS = 90
REQUEST_TIMEOUT = 30.0

# ---------- Backup files ----------
BACKUP_FILE_PREFIX = "lingodeck-backup"
