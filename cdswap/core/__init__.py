"""
Core exchange algorithms (functional core).

Submodules:
- `liquidity`: deposit / withdraw transitions
- `swap`: ETH -> CD and CD -> ETH transitions
- `invariants`: pool invariant checkers
- `errors`: exception taxonomy

Only the errors are re-exported here; the transition modules import the
state layer, which itself depends on `errors`.
"""

from .errors import (
    DivisionByZero,
    ExchangeError,
    InsufficientBalance,
    InsufficientOutputAmount,
    InsufficientTokenAmount,
    InvalidAmount,
    InvalidReserves,
    InvariantViolation,
    Overflow,
)

__all__ = [
    "DivisionByZero",
    "ExchangeError",
    "InsufficientBalance",
    "InsufficientOutputAmount",
    "InsufficientTokenAmount",
    "InvalidAmount",
    "InvalidReserves",
    "InvariantViolation",
    "Overflow",
]
