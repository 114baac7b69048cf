"""Current-time source shared by claims, the validator and the blacklist.

All time comparisons go through :func:`now` so tests can pin the clock::

    with clock.frozen(1_700_000_000):
        manager.refresh(token)
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta

_frozen_at: int | None = None


def now() -> int:
    """Return the current unix timestamp in whole seconds."""
    if _frozen_at is not None:
        return _frozen_at
    return int(time.time())


@contextmanager
def frozen(timestamp: int) -> Iterator[int]:
    """Pin :func:`now` to *timestamp* for the duration of the block."""
    global _frozen_at
    previous = _frozen_at
    _frozen_at = int(timestamp)
    try:
        yield _frozen_at
    finally:
        _frozen_at = previous


def to_timestamp(value: datetime | timedelta) -> int:
    """Convert a datetime, or an interval from now, to a unix timestamp.

    Naive datetimes are taken to be UTC.
    """
    if isinstance(value, timedelta):
        return now() + int(value.total_seconds())
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())
