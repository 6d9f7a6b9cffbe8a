"""Exception hierarchy for lingodeck."""


class LingodeckError(Exception):
    """Base class for every error raised by lingodeck."""


class StructuralValidationError(LingodeckError):
    """A snapshot or lesson payload is missing its required shape."""


class InvalidSnapshotError(StructuralValidationError):
    """A foreign snapshot cannot be merged into the local ledgers."""

    def __init__(self, message: str, missing_keys: list[str] | None = None):
        super().__init__(message)
        self.missing_keys = missing_keys or []


class LessonImportError(StructuralValidationError):
    """A single-lesson import payload is malformed."""


class PartialPersistenceError(LingodeckError):
    """Writing one ledger to the durable store failed."""

    def __init__(self, ledger: str, cause: Exception):
        super().__init__(f"Failed to persist ledger '{ledger}': {cause}")
        self.ledger = ledger
        self.cause = cause


class ExternalFetchError(LingodeckError):
    """A remote snapshot could not be uploaded or downloaded."""
