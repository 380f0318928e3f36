"""
Two-asset balance tracking and the asset-transfer capability.

Implements BalanceTable[Address, AssetId] -> Amount. The exchange only needs
the `AssetLedger` protocol; `BalanceTable` is the in-memory implementation
used by tests and offline simulations.
"""

from __future__ import annotations

from typing import Dict, Protocol, Tuple

from ..core.errors import InsufficientBalance, InvalidAmount


# Type aliases
Address = str  # Opaque owner identity
AssetId = str
Amount = int  # Non-negative integer (uint256)

BASE_ASSET: AssetId = "ETH"
TOKEN_ASSET: AssetId = "CD"


class AssetLedger(Protocol):
    """Moves units of an asset between identified owners, atomically."""

    def balance_of(self, owner: Address, asset: AssetId) -> Amount:
        ...

    def transfer(self, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        """Raise InsufficientBalance if `sender` holds less than `amount`."""
        ...


class BalanceTable:
    """
    Balance table mapping (owner, asset) -> amount.

    Zero balances are omitted to keep the table sparse. Callers sort keys
    explicitly wherever a deterministic order matters.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Address, AssetId], Amount] = {}

    def get(self, owner: Address, asset: AssetId) -> Amount:
        """Get balance for (owner, asset). Returns 0 if not found."""
        return self._balances.get((owner, asset), 0)

    def balance_of(self, owner: Address, asset: AssetId) -> Amount:
        return self.get(owner, asset)

    def set(self, owner: Address, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (owner, asset).

        Raises:
            InvalidAmount: If amount is negative
        """
        if amount < 0:
            raise InvalidAmount(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((owner, asset), None)
        else:
            self._balances[(owner, asset)] = amount

    def credit(self, owner: Address, asset: AssetId, amount: Amount) -> None:
        """Mint `amount` into an owner's balance (funding outside the exchange)."""
        if amount < 0:
            raise InvalidAmount(f"Credit must be non-negative: {amount}")
        self.set(owner, asset, self.get(owner, asset) + amount)

    def transfer(self, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        """
        Move `amount` of `asset` from `sender` to `recipient`.

        Raises:
            InvalidAmount: If amount is negative
            InsufficientBalance: If sender holds less than amount
        """
        if amount < 0:
            raise InvalidAmount(f"Transfer amount must be non-negative: {amount}")
        available = self.get(sender, asset)
        if available < amount:
            raise InsufficientBalance(
                f"Insufficient {asset} balance for {sender}: {available} < {amount}"
            )
        if amount == 0 or sender == recipient:
            return
        self.set(sender, asset, available - amount)
        self.set(recipient, asset, self.get(recipient, asset) + amount)

    def get_all_balances(self) -> Dict[Tuple[Address, AssetId], Amount]:
        """Return all balances."""
        return dict(self._balances)

    def verify_non_negative(self) -> bool:
        return all(amount >= 0 for amount in self._balances.values())

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
