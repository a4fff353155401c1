"""Unit tests for the savings error set"""

from timelock_savings.domain.exceptions import (
    SAVINGS_ERRORS,
    DomainException,
    GoalOverflow,
    LedgerError,
    SavingsError,
    StillLocked,
)


def test_error_codes_are_stable_and_unique():
    codes = [error.code for error in SAVINGS_ERRORS]
    assert codes == list(range(1, 17))
    assert SAVINGS_ERRORS[-1] is GoalOverflow


def test_error_name_and_default_message():
    error = StillLocked()
    assert error.name == "StillLocked"
    assert str(error) == "StillLocked"
    assert str(StillLocked("unlocks tomorrow")) == "unlocks tomorrow"


def test_ledger_errors_are_not_savings_errors():
    assert issubclass(LedgerError, DomainException)
    assert not issubclass(LedgerError, SavingsError)
    assert all(issubclass(error, SavingsError) for error in SAVINGS_ERRORS)
