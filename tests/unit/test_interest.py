"""Unit tests for interest accrual and penalty split"""

import pytest
from timelock_savings.domain.exceptions import Overflow, TimeError
from timelock_savings.domain.fixed_point import I128_MAX
from timelock_savings.domain.interest import (
    ANNUAL_RATE_DIVISOR,
    SECONDS_PER_YEAR,
    accrue,
    project_balance,
    split_penalty,
    total_balance,
)
from timelock_savings.domain.models import SavingsGoal


def make_goal(principal=10_000, accrued=0, rate=500, last_compound=0, active=True) -> SavingsGoal:
    return SavingsGoal(
        owner="user",
        principal=principal,
        interest_rate=rate,
        start_time=0,
        lock_duration=SECONDS_PER_YEAR,
        unlock_time=SECONDS_PER_YEAR,
        accrued_interest=accrued,
        last_compound_time=last_compound,
        is_active=active,
    )


def test_combined_divisor():
    assert ANNUAL_RATE_DIVISOR == 315_360_000_000


def test_accrue_full_year():
    """5% of 10,000 over one year"""
    assert accrue(10_000, 500, SECONDS_PER_YEAR) == 500


def test_accrue_thirty_days_truncates():
    # 10_000 * 500 * 2_592_001 / 315_360_000_000 = 41.096...
    assert accrue(10_000, 500, 2_592_001) == 41


def test_accrue_multiplies_before_dividing():
    """Dividing the rate first would lose the whole amount"""
    assert accrue(1_000_000, 1, SECONDS_PER_YEAR) == 100
    assert accrue(1, 1, 1) == 0


def test_accrue_zero_rate_or_zero_elapsed():
    assert accrue(5_000, 0, 10 * SECONDS_PER_YEAR) == 0
    assert accrue(5_000, 500, 0) == 0


@pytest.mark.parametrize("balance,rate", [(1, 1), (10_000, 500), (987_654_321, 5000)])
def test_accrue_monotonic_in_elapsed(balance, rate):
    elapsed = [0, 1, 59, 3_600, 86_400, 2_592_000, SECONDS_PER_YEAR, 10 * SECONDS_PER_YEAR]
    interest = [accrue(balance, rate, e) for e in elapsed]
    assert interest == sorted(interest)


def test_accrue_first_multiplication_overflow():
    with pytest.raises(Overflow):
        accrue(2**120, 5000, 1)


def test_accrue_second_multiplication_overflow():
    with pytest.raises(Overflow):
        accrue(2**100, 5000, 2**40)


def test_total_balance_overflow():
    with pytest.raises(Overflow):
        total_balance(make_goal(principal=I128_MAX, accrued=1))


def test_project_balance_matches_compounding():
    goal = make_goal(accrued=100, last_compound=1_000)
    expected = 10_100 + accrue(10_100, 500, SECONDS_PER_YEAR)
    assert project_balance(goal, 1_000 + SECONDS_PER_YEAR) == expected


def test_project_balance_clock_behind_watermark():
    with pytest.raises(TimeError):
        project_balance(make_goal(last_compound=1_000), 999)


def test_split_penalty_ten_percent():
    payout = split_penalty(10_000, 1000)
    assert payout.penalty == 1_000
    assert payout.withdrawal == 9_000


def test_split_penalty_truncates_in_owner_favour():
    payout = split_penalty(10_009, 1000)
    assert payout.penalty == 1_000
    assert payout.withdrawal == 9_009


def test_split_penalty_zero_and_max():
    assert split_penalty(10_000, 0).penalty == 0
    payout = split_penalty(10_001, 5000)
    assert payout.penalty == 5_000
    assert payout.withdrawal == 5_001
