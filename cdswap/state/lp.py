"""
Liquidity positions for the pool.

One position per owner; shares accumulate across deposits. Positions are
only changed by the exchange's liquidity operations.
"""

from __future__ import annotations

from typing import Dict

from ..core.errors import InvalidAmount
from .balances import Address, Amount


class LPTable:
    """
    Share table mapping owner -> shares.

    Notes:
    - Shares are always non-negative.
    - Zero entries are omitted: an owner with no shares is absent.
    """

    def __init__(self) -> None:
        self._shares: Dict[Address, Amount] = {}

    def get(self, owner: Address) -> Amount:
        """Get shares held by owner. Returns 0 if not found."""
        return self._shares.get(owner, 0)

    def set(self, owner: Address, amount: Amount) -> None:
        if amount < 0:
            raise InvalidAmount(f"LP shares cannot be negative: {amount}")
        if amount == 0:
            self._shares.pop(owner, None)
        else:
            self._shares[owner] = amount

    def add(self, owner: Address, delta: int) -> None:
        """Add delta to a position (delta may be negative)."""
        current = self.get(owner)
        new_amount = current + delta
        if new_amount < 0:
            raise InvalidAmount(f"Insufficient LP shares: {current} + {delta} = {new_amount} < 0")
        self.set(owner, new_amount)

    def subtract(self, owner: Address, delta: Amount) -> None:
        if delta < 0:
            raise InvalidAmount(f"Delta must be non-negative: {delta}")
        self.add(owner, -delta)

    def total(self) -> Amount:
        return sum(self._shares.values())

    def copy(self) -> "LPTable":
        copied = LPTable()
        copied._shares = dict(self._shares)
        return copied

    def get_all_positions(self) -> Dict[Address, Amount]:
        """Return all non-zero positions."""
        return dict(self._shares)

    def __len__(self) -> int:
        return len(self._shares)

    def __repr__(self) -> str:
        return f"LPTable({len(self._shares)} positions)"
