"""Contract limits and defaults"""

from typing import Final

MIN_LOCK_DURATION: Final[int] = 86_400  # 1 day
MAX_LOCK_DURATION: Final[int] = 315_360_000  # 10 years

MAX_INTEREST_RATE_BPS: Final[int] = 5_000  # 50%
MAX_EMERGENCY_PENALTY_BPS: Final[int] = 5_000  # 50%

# Only read when the penalty key is missing, which initialize() rules out
DEFAULT_EMERGENCY_PENALTY_BPS: Final[int] = 1_000  # 10%
