"""
Fixed-point integer helpers (uint256 domain).

All monetary arithmetic in the exchange goes through this module:
- `mul_div` computes `floor(a * b / denominator)`; Python ints give the
  product unbounded width, so only the final result is range-checked.
- `mul_div_up` is the ceiling variant, used for *required* inputs.
- `checked_*` helpers keep reserves and supplies inside uint256.

Rounding always favors the pool: amounts paid out are floored, amounts
demanded from a caller are ceiled.
"""

from __future__ import annotations

from ...core.errors import DivisionByZero, InvalidAmount, Overflow


UINT256_BITS = 256
MAX_UINT256 = (1 << UINT256_BITS) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint256(name: str, value: int) -> int:
    """Validate that `value` is an int in [0, 2**256 - 1] and return it."""
    _require_int(name, value)
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative: {value}")
    if value > MAX_UINT256:
        raise Overflow(f"{name} exceeds uint256: {value}")
    return value


def _require_operands(a: int, b: int, denominator: int) -> None:
    for name, v in (("a", a), ("b", b), ("denominator", denominator)):
        _require_int(name, v)
        if v < 0:
            raise InvalidAmount(f"{name} must be non-negative: {v}")
    if denominator == 0:
        raise DivisionByZero("mul_div denominator is zero")


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute `floor(a * b / denominator)`.

    Raises:
        DivisionByZero: If denominator == 0
        Overflow: If the result does not fit in a uint256
    """
    _require_operands(a, b, denominator)
    result = (a * b) // denominator
    if result > MAX_UINT256:
        raise Overflow(f"mul_div result exceeds uint256: {result}")
    return result


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """
    Compute `ceil(a * b / denominator)`.

    Same failure modes as `mul_div`.
    """
    _require_operands(a, b, denominator)
    result = (a * b + denominator - 1) // denominator
    if result > MAX_UINT256:
        raise Overflow(f"mul_div_up result exceeds uint256: {result}")
    return result


def checked_add(a: int, b: int) -> int:
    _require_int("a", a)
    _require_int("b", b)
    result = a + b
    if result > MAX_UINT256:
        raise Overflow(f"uint256 addition overflow: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    _require_int("a", a)
    _require_int("b", b)
    if b > a:
        raise Overflow(f"uint256 subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    _require_int("a", a)
    _require_int("b", b)
    result = a * b
    if result > MAX_UINT256:
        raise Overflow(f"uint256 multiplication overflow: {a} * {b}")
    return result
