"""lingodeck: spaced-repetition scheduling and ledger reconciliation for language practice."""

from lingodeck.consts import VERSION

__version__ = VERSION
__all__ = ["__version__"]
