"""
Pool state for the ETH/CD exchange.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from ..core.errors import InvalidAmount, Overflow
from ..kernels.python.fixed_point import MAX_UINT256
from .balances import BASE_ASSET, TOKEN_ASSET, Amount, AssetId


class PoolPhase(Enum):
    """Pool macro-state: EMPTY has no shares outstanding, ACTIVE has some."""
    EMPTY = "EMPTY"
    ACTIVE = "ACTIVE"


@dataclass(frozen=True)
class PoolState:
    """
    Reserves and share supply of the pool.

    Attributes:
        reserve_base: Base asset (ETH) held by the pool
        reserve_token: Token (CD) held by the pool
        total_shares: Total LP shares outstanding
        base_asset: Base asset identifier
        token_asset: Token asset identifier
    """
    reserve_base: Amount = 0
    reserve_token: Amount = 0
    total_shares: Amount = 0
    base_asset: AssetId = BASE_ASSET
    token_asset: AssetId = TOKEN_ASSET

    def __post_init__(self) -> None:
        if self.base_asset == self.token_asset:
            raise ValueError(f"Pool assets must differ: {self.base_asset!r}")
        for name in ("reserve_base", "reserve_token", "total_shares"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if value < 0:
                raise InvalidAmount(f"{name} must be non-negative: {value}")
            if value > MAX_UINT256:
                raise Overflow(f"{name} exceeds uint256: {value}")

    @property
    def phase(self) -> PoolPhase:
        return PoolPhase.ACTIVE if self.total_shares > 0 else PoolPhase.EMPTY

    def reserves(self) -> Tuple[Amount, Amount]:
        return self.reserve_base, self.reserve_token

    def get_reserve(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            ValueError: If asset is not in this pool
        """
        if asset == self.base_asset:
            return self.reserve_base
        elif asset == self.token_asset:
            return self.reserve_token
        else:
            raise ValueError(f"Asset {asset} not in pool ({self.base_asset}, {self.token_asset})")

    def get_constant_product(self) -> int:
        """k = reserve_base * reserve_token."""
        return self.reserve_base * self.reserve_token

    def with_reserves(self, reserve_base: Amount, reserve_token: Amount, total_shares: Amount) -> "PoolState":
        return replace(self, reserve_base=reserve_base, reserve_token=reserve_token, total_shares=total_shares)

    def __repr__(self) -> str:
        return (
            f"PoolState(reserves=({self.reserve_base} {self.base_asset}, "
            f"{self.reserve_token} {self.token_asset}), "
            f"total_shares={self.total_shares}, phase={self.phase.value})"
        )
