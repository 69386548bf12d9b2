"""Time helpers.

Timestamps are persisted as naive UTC so SQLite and PostgreSQL read back the
same values the compliance windows are compared against.
"""

from datetime import datetime

import pytz


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def to_naive_utc(moment: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive input is assumed UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(pytz.utc).replace(tzinfo=None)
