# [TESTER] v1

from __future__ import annotations

import pytest

from cdswap.core.errors import InsufficientOutputAmount, InsufficientTokenAmount, InvalidAmount
from cdswap.core.liquidity import add_liquidity, quote_remove_liquidity, quote_required_token, remove_liquidity
from cdswap.state.lp import LPTable
from cdswap.state.pools import PoolPhase, PoolState


def _seeded_pool() -> tuple[PoolState, LPTable]:
    positions = LPTable()
    positions.add("alice", 1000)
    return PoolState(reserve_base=1000, reserve_token=500, total_shares=1000), positions


def test_first_deposit_into_empty_pool() -> None:
    pool = PoolState()
    res = add_liquidity(pool, owner="alice", amount_token_offered=500, value_base_sent=1000)
    assert res.shares_minted == 1000
    assert res.pool.reserves() == (1000, 500)
    assert res.pool.total_shares == 1000
    assert res.pool.phase is PoolPhase.ACTIVE
    # Input snapshot is untouched.
    assert pool.reserves() == (0, 0)


def test_deposit_under_supplying_tokens_fails() -> None:
    pool, _ = _seeded_pool()
    with pytest.raises(InsufficientTokenAmount):
        add_liquidity(pool, owner="bob", amount_token_offered=40, value_base_sent=100)


def test_deposit_takes_only_required_tokens() -> None:
    pool, _ = _seeded_pool()
    res = add_liquidity(pool, owner="bob", amount_token_offered=70, value_base_sent=100)
    assert res.shares_minted == 100
    assert (res.base_in, res.token_in, res.token_refund) == (100, 50, 20)
    assert res.pool.reserves() == (1100, 550)
    assert res.pool.total_shares == 1100


def test_remove_liquidity_checks_owner_position() -> None:
    pool, positions = _seeded_pool()
    with pytest.raises(InvalidAmount):
        remove_liquidity(pool, positions, owner="alice", shares_to_burn=0)
    with pytest.raises(InvalidAmount):
        remove_liquidity(pool, positions, owner="alice", shares_to_burn=1001)
    with pytest.raises(InvalidAmount):
        remove_liquidity(pool, positions, owner="mallory", shares_to_burn=1)


def test_remove_all_liquidity_empties_pool() -> None:
    pool, positions = _seeded_pool()
    res = remove_liquidity(pool, positions, owner="alice", shares_to_burn=1000)
    assert (res.base_out, res.token_out) == (1000, 500)
    assert res.pool.reserves() == (0, 0)
    assert res.pool.phase is PoolPhase.EMPTY


def test_remove_liquidity_minimums() -> None:
    pool, positions = _seeded_pool()
    res = remove_liquidity(pool, positions, owner="alice", shares_to_burn=100, min_base_out=100, min_token_out=50)
    assert (res.base_out, res.token_out) == (100, 50)
    with pytest.raises(InsufficientOutputAmount):
        remove_liquidity(pool, positions, owner="alice", shares_to_burn=100, min_token_out=51)


def test_liquidity_quotes() -> None:
    pool, _ = _seeded_pool()
    assert quote_required_token(pool, 100) == 50
    assert quote_required_token(PoolState(), 100) == 0
    assert quote_remove_liquidity(pool, 250) == (250, 125)
