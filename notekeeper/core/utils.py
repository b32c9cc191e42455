"""
Core Utilities.

Shared utility functions used across the package.
All modules should import identifier and clock helpers from this module.
"""

import time
from uuid import uuid4


def now_millis() -> int:
    """
    Return the current wall-clock time as integer epoch milliseconds.

    Note timestamps are stored as plain integers so they compare and
    serialize identically on every storage backend.
    """
    return time.time_ns() // 1_000_000


def new_id() -> str:
    """Return a fresh globally unique note identifier."""
    return str(uuid4())


def next_timestamp(previous: int, now: int) -> int:
    """
    Return a modification timestamp strictly greater than `previous`.

    Two mutations inside the same millisecond still produce increasing
    `updated_at` values.
    """
    return now if now > previous else previous + 1
