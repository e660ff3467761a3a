"""Checked unsigned 64-bit arithmetic.

Python integers never wrap, so overflow is detected by range-checking every
operand and result against the u64 domain rather than by inspecting carry
bits. Any value outside [0, 2**64 - 1] raises ArithmeticOverflowError.
"""

from ..core.exceptions import ArithmeticOverflowError
from ..core.types import U64_MAX


def _check(operation: str, result: int, *operands: int) -> int:
    if not 0 <= result <= U64_MAX:
        raise ArithmeticOverflowError(operation, operands)
    return result


def _check_operands(operation: str, *operands: int) -> None:
    for value in operands:
        if not 0 <= value <= U64_MAX:
            raise ArithmeticOverflowError(operation, operands)


def checked_add(a: int, b: int) -> int:
    """a + b, rejecting results above U64_MAX."""
    _check_operands("add", a, b)
    return _check("add", a + b, a, b)


def checked_sub(a: int, b: int) -> int:
    """a - b, rejecting underflow below zero."""
    _check_operands("sub", a, b)
    return _check("sub", a - b, a, b)


def saturating_sub(a: int, b: int) -> int:
    """a - b clamped at zero."""
    _check_operands("saturating_sub", a, b)
    return a - b if a > b else 0


def mul_div_floor(a: int, b: int, divisor: int) -> int:
    """
    Compute floor(a * b / divisor) exactly.

    The product is formed at full width (up to 128 bits for u64 operands)
    before dividing, so no precision is lost; only the final quotient has to
    fit in u64.

    Raises:
        ArithmeticOverflowError: operand or quotient outside u64
        ZeroDivisionError: divisor is zero
    """
    _check_operands("mul_div", a, b, divisor)
    if divisor == 0:
        raise ZeroDivisionError("mul_div_floor divisor must be non-zero")
    return _check("mul_div", (a * b) // divisor, a, b, divisor)


def mul_div_floor_split(a: int, b: int, divisor: int) -> int:
    """
    Same result as mul_div_floor, reordered to keep the whole-quotient term small.

    floor(a*b/d) == (a // d) * b + floor((a % d) * b / d)
    """
    _check_operands("mul_div", a, b, divisor)
    if divisor == 0:
        raise ZeroDivisionError("mul_div_floor divisor must be non-zero")
    quotient, remainder = divmod(a, divisor)
    return _check("mul_div", quotient * b + (remainder * b) // divisor, a, b, divisor)


def ensure_u64(name: str, value: int) -> int:
    """Reject a single input that does not fit in u64."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    _check_operands(name, value)
    return value
