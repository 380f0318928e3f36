"""
State management for the ETH/CD exchange
"""

from .balances import BASE_ASSET, TOKEN_ASSET, AssetLedger, BalanceTable
from .lp import LPTable
from .pools import PoolPhase, PoolState

__all__ = [
    "BASE_ASSET",
    "TOKEN_ASSET",
    "AssetLedger",
    "BalanceTable",
    "LPTable",
    "PoolPhase",
    "PoolState",
]
