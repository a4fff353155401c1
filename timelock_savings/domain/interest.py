"""Interest and penalty engine - pure functions over checked integers"""

from typing import Final

from timelock_savings.domain.exceptions import Overflow, TimeError, Underflow
from timelock_savings.domain.fixed_point import (
    I128,
    U64,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
)
from timelock_savings.domain.models import EmergencyPayout, SavingsGoal

SECONDS_PER_YEAR: Final[int] = 31_536_000
BASIS_POINTS: Final[int] = 10_000

# Single divisor so interest is truncated exactly once
ANNUAL_RATE_DIVISOR: Final[int] = SECONDS_PER_YEAR * BASIS_POINTS


def accrue(balance: int, rate_bps: int, elapsed_seconds: int) -> int:
    """
    Simple interest earned by `balance` over `elapsed_seconds`.

    interest = balance * rate_bps * elapsed_seconds / (SECONDS_PER_YEAR * BASIS_POINTS)

    Requirements:
    - Multiply before dividing; one truncating division toward zero
    - Overflow if either multiplication leaves the i128 domain
    - DivisionError if the final division fails

    Example:
        10_000 at 500 bps for one year -> 500
        10_000 at 500 bps for 30 days + 1s -> 41
    """
    scaled = checked_mul(balance, rate_bps, I128, Overflow)
    scaled = checked_mul(scaled, elapsed_seconds, I128, Overflow)
    return checked_div(scaled, ANNUAL_RATE_DIVISOR)


def total_balance(goal: SavingsGoal) -> int:
    """Principal plus interest compounded so far"""
    return checked_add(goal.principal, goal.accrued_interest, I128, Overflow)


def elapsed_since_compound(goal: SavingsGoal, now: int) -> int:
    """Seconds since the last compounding; TimeError if the clock went backwards"""
    return checked_sub(now, goal.last_compound_time, U64, TimeError)


def project_balance(goal: SavingsGoal, now: int) -> int:
    """
    Balance including interest pending up to `now`, without touching the goal.

    Matches what compounding at `now` followed by a balance read returns.
    """
    elapsed = elapsed_since_compound(goal, now)
    balance = total_balance(goal)
    pending = accrue(balance, goal.interest_rate, elapsed)
    return checked_add(balance, pending, I128, Overflow)


def split_penalty(total: int, penalty_bps: int) -> EmergencyPayout:
    """
    Split an early-exit balance into owner payout and admin penalty.

    penalty = total * penalty_bps / BASIS_POINTS (truncated)
    withdrawal = total - penalty
    """
    penalty = checked_div(checked_mul(total, penalty_bps, I128, Overflow), BASIS_POINTS)
    withdrawal = checked_sub(total, penalty, I128, Underflow)
    return EmergencyPayout(withdrawal=withdrawal, penalty=penalty)
