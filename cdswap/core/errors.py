"""Exception types for the exchange ledger.

Every public operation either completes or raises one of these before any
reserve, position or balance is touched. Validation failures also subclass
``ValueError`` so callers that only care about "bad input" can catch that.
"""

from __future__ import annotations


class ExchangeError(Exception):
    """Base class for all exchange failures."""


class InvalidReserves(ExchangeError, ValueError):
    """Raised when quoting against a zero reserve."""


class DivisionByZero(ExchangeError, ZeroDivisionError):
    """Raised by the arithmetic helpers on a zero denominator."""


class Overflow(ExchangeError, OverflowError):
    """Raised when a result does not fit in a uint256."""


class InvalidAmount(ExchangeError, ValueError):
    """Raised for zero, negative or over-balance amounts."""


class InsufficientTokenAmount(ExchangeError, ValueError):
    """Raised when a deposit offers fewer tokens than the current ratio requires."""

    def __init__(self, offered: int, required: int) -> None:
        self.offered = offered
        self.required = required
        super().__init__(f"insufficient token amount: offered {offered} < required {required}")


class InsufficientOutputAmount(ExchangeError, ValueError):
    """Raised when the realized output is below the caller's minimum."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out
        super().__init__(f"insufficient output amount: {amount_out} < min {min_amount_out}")


class InsufficientBalance(ExchangeError, ValueError):
    """Raised by an asset ledger when a transfer exceeds the sender's balance."""


class InvariantViolation(ExchangeError):
    """Raised when a post-state violates one or more pool invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
