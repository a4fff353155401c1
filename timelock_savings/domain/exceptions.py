"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LedgerError(DomainException):
    """Token ledger rejected a transfer or is unavailable"""

    pass


class ConcurrentUpdate(DomainException):
    """Another unit of work changed a stored value after this one read it"""

    pass


class SavingsError(DomainException):
    """
    Base class for the closed set of savings contract errors.

    Each subclass carries a stable numeric code so hosts can report
    failures without depending on class names.
    """

    code: int = 0

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.__class__.__name__


class AlreadyInitialized(SavingsError):
    """Contract configuration has already been written"""

    code = 1


class NotInitialized(SavingsError):
    """Contract configuration is missing"""

    code = 2


class InvalidAmount(SavingsError):
    """Deposit amount is not a positive integer"""

    code = 3


class InvalidDuration(SavingsError):
    """Lock duration outside the allowed window"""

    code = 4


class RateTooHigh(SavingsError):
    """Interest rate above the maximum"""

    code = 5


class PenaltyTooHigh(SavingsError):
    """Emergency penalty above the maximum"""

    code = 6


class Overflow(SavingsError):
    """Arithmetic result does not fit the integer domain"""

    code = 7


class GoalNotFound(SavingsError):
    """No goal stored for (owner, goal_id)"""

    code = 8


class GoalInactive(SavingsError):
    """Goal has already been terminated"""

    code = 9


class StillLocked(SavingsError):
    """Withdrawal attempted before unlock time"""

    code = 10


class AlreadyWithdrawn(SavingsError):
    """Goal funds have already been paid out"""

    code = 11


class Unauthorized(SavingsError):
    """Caller may not act as the requested identity"""

    code = 12


class TimeError(SavingsError):
    """Clock moved backwards relative to stored watermark"""

    code = 13


class DivisionError(SavingsError):
    """Division by zero or quotient outside the integer domain"""

    code = 14


class Underflow(SavingsError):
    """Subtraction result below the integer domain"""

    code = 15


class GoalOverflow(SavingsError):
    """Goal id or goal counter space exhausted"""

    code = 16


SAVINGS_ERRORS: tuple[type[SavingsError], ...] = (
    AlreadyInitialized,
    NotInitialized,
    InvalidAmount,
    InvalidDuration,
    RateTooHigh,
    PenaltyTooHigh,
    Overflow,
    GoalNotFound,
    GoalInactive,
    StillLocked,
    AlreadyWithdrawn,
    Unauthorized,
    TimeError,
    DivisionError,
    Underflow,
    GoalOverflow,
)
