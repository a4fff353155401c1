"""Checked integer arithmetic for balances, timestamps and counters"""

from typing import Final, Tuple, Type

from timelock_savings.domain.exceptions import (
    DivisionError,
    Overflow,
    SavingsError,
    Underflow,
)

# (min, max) inclusive bounds
IntDomain = Tuple[int, int]

I128: Final[IntDomain] = (-(2**127), 2**127 - 1)
U64: Final[IntDomain] = (0, 2**64 - 1)

I128_MAX: Final[int] = I128[1]
U64_MAX: Final[int] = U64[1]


def _require_int(value: int) -> None:
    # bool is an int subclass; reject it so flags never leak into balances
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"checked arithmetic requires int operands, got {type(value).__name__}")


def _fits(value: int, domain: IntDomain) -> bool:
    return domain[0] <= value <= domain[1]


def _operands(a: int, b: int, domain: IntDomain, error: Type[SavingsError]) -> None:
    _require_int(a)
    _require_int(b)
    if not (_fits(a, domain) and _fits(b, domain)):
        raise error(f"operand outside integer domain [{domain[0]}, {domain[1]}]")


def checked_add(
    a: int,
    b: int,
    domain: IntDomain = I128,
    error: Type[SavingsError] = Overflow,
) -> int:
    """Add two integers, raising `error` if the sum leaves `domain`"""
    _operands(a, b, domain, error)
    result = a + b
    if not _fits(result, domain):
        raise error(f"{a} + {b} does not fit integer domain")
    return result


def checked_sub(
    a: int,
    b: int,
    domain: IntDomain = I128,
    error: Type[SavingsError] = Underflow,
) -> int:
    """Subtract b from a, raising `error` if the difference leaves `domain`"""
    _operands(a, b, domain, error)
    result = a - b
    if not _fits(result, domain):
        raise error(f"{a} - {b} does not fit integer domain")
    return result


def checked_mul(
    a: int,
    b: int,
    domain: IntDomain = I128,
    error: Type[SavingsError] = Overflow,
) -> int:
    """Multiply two integers, raising `error` if the product leaves `domain`"""
    _operands(a, b, domain, error)
    result = a * b
    if not _fits(result, domain):
        raise error(f"{a} * {b} does not fit integer domain")
    return result


def checked_div(
    a: int,
    b: int,
    domain: IntDomain = I128,
    error: Type[SavingsError] = DivisionError,
) -> int:
    """
    Integer division truncating toward zero.

    Python's // floors, so the quotient is built from absolute values and
    the sign re-applied. Raises `error` on a zero divisor or when the
    quotient does not fit `domain` (e.g. I128 min / -1).

    Example:
        checked_div(-7, 2) == -3  (floor division would give -4)
    """
    _operands(a, b, domain, error)
    if b == 0:
        raise error(f"division of {a} by zero")

    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient

    if not _fits(quotient, domain):
        raise error(f"{a} / {b} does not fit integer domain")
    return quotient
