"""Timestamp utilities"""

import time
from datetime import datetime, timezone


def utc_now_seconds() -> int:
    """Current wall-clock time as whole seconds since epoch"""
    return int(time.time())


def seconds_until(target: int, now: int) -> int:
    """Seconds remaining until `target`, never negative"""
    return max(target - now, 0)


def to_iso8601(timestamp: int) -> str:
    """Render epoch seconds as an ISO-8601 UTC string"""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
