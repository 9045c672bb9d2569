"""
Shared time helpers.
"""
import time
from datetime import datetime, timedelta, timezone

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NEVER_EXPIRES = datetime(9999, 1, 1, tzinfo=timezone.utc)


def epoch() -> int:
    """Current time as whole seconds since the Unix epoch"""
    return int(time.time())


def epoch_to_datetime(seconds: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime"""
    return UNIX_EPOCH + timedelta(seconds=seconds)
