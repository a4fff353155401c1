"""Time sources for the savings lifecycle"""

from timelock_savings.domain.fixed_point import U64_MAX
from timelock_savings.utils.time_utils import utc_now_seconds


class SystemClock:
    """Wall clock in whole seconds"""

    def now(self) -> int:
        return utc_now_seconds()


class FrozenClock:
    """Manually driven clock for tests and simulations"""

    def __init__(self, timestamp: int = 0):
        self.set(timestamp)

    def now(self) -> int:
        return self.timestamp

    def set(self, timestamp: int) -> None:
        if not 0 <= timestamp <= U64_MAX:
            raise ValueError(f"timestamp must fit in u64, got {timestamp}")
        self.timestamp = timestamp

    def advance(self, seconds: int) -> int:
        self.set(self.timestamp + seconds)
        return self.timestamp
