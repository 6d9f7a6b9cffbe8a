import time
from datetime import date, datetime


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def local_day(epoch_ms: int) -> date:
    """Calendar day (local time) that an epoch-ms timestamp falls on."""
    return datetime.fromtimestamp(epoch_ms / 1000).date()
