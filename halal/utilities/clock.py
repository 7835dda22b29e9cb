"""Wall clock helpers.

Timestamps across the project are integer epoch milliseconds, the unit used
by persisted records and by exported documents.
"""
import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current time as integer epoch milliseconds."""
    return int(time.time() * 1000)
