"""Invariant checkers for the exchange pool.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass). The exchange runs
`check_all()` on every candidate post-state before committing it.

Reserve non-negativity and the uint256 range are enforced by `PoolState`
itself and are not repeated here.
"""

from __future__ import annotations

from typing import Callable

from ..state.lp import LPTable
from ..state.pools import PoolState


def inv_shares_match_positions(pool: PoolState, positions: LPTable) -> bool:
    return pool.total_shares == positions.total()


def inv_empty_pool_has_no_token(pool: PoolState, positions: LPTable) -> bool:
    if pool.total_shares != 0:
        return True
    return pool.reserve_token == 0


def inv_empty_pool_has_no_base(pool: PoolState, positions: LPTable) -> bool:
    if pool.total_shares != 0:
        return True
    return pool.reserve_base == 0


def inv_active_pool_has_base(pool: PoolState, positions: LPTable) -> bool:
    if pool.total_shares == 0:
        return True
    return pool.reserve_base > 0


InvariantFn = Callable[[PoolState, LPTable], bool]

INVARIANT_REGISTRY: dict[str, InvariantFn] = {
    "inv_shares_match_positions": inv_shares_match_positions,
    "inv_empty_pool_has_no_token": inv_empty_pool_has_no_token,
    "inv_empty_pool_has_no_base": inv_empty_pool_has_no_base,
    "inv_active_pool_has_base": inv_active_pool_has_base,
}


def check_all(pool: PoolState, positions: LPTable) -> list[str]:
    """Return the IDs of all violated invariants (empty = all pass)."""
    return [name for name, fn in INVARIANT_REGISTRY.items() if not fn(pool, positions)]
