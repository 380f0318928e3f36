# [TESTER] v1

from __future__ import annotations

import pytest

from cdswap.core.errors import InsufficientBalance, InvalidAmount, Overflow
from cdswap.kernels.python.fixed_point import MAX_UINT256
from cdswap.state.balances import BASE_ASSET, TOKEN_ASSET, BalanceTable
from cdswap.state.lp import LPTable
from cdswap.state.pools import PoolPhase, PoolState


def test_balance_table_transfer_moves_funds() -> None:
    table = BalanceTable()
    table.credit("alice", BASE_ASSET, 100)
    table.transfer(BASE_ASSET, "alice", "bob", 40)
    assert table.get("alice", BASE_ASSET) == 60
    assert table.balance_of("bob", BASE_ASSET) == 40
    assert table.get("bob", TOKEN_ASSET) == 0


def test_balance_table_rejects_overdraft_without_side_effects() -> None:
    table = BalanceTable()
    table.credit("alice", BASE_ASSET, 10)
    with pytest.raises(InsufficientBalance):
        table.transfer(BASE_ASSET, "alice", "bob", 11)
    assert table.get_all_balances() == {("alice", BASE_ASSET): 10}


def test_balance_table_stays_sparse() -> None:
    table = BalanceTable()
    table.credit("alice", TOKEN_ASSET, 5)
    table.transfer(TOKEN_ASSET, "alice", "bob", 5)
    assert ("alice", TOKEN_ASSET) not in table.get_all_balances()
    with pytest.raises(InvalidAmount):
        table.set("alice", TOKEN_ASSET, -1)


def test_lp_table_accumulates_and_removes_empty_positions() -> None:
    positions = LPTable()
    positions.add("alice", 10)
    positions.add("alice", 5)
    positions.add("bob", 1)
    assert positions.get("alice") == 15
    assert positions.total() == 16
    positions.subtract("bob", 1)
    assert positions.get("bob") == 0
    assert "bob" not in positions.get_all_positions()
    assert len(positions) == 1


def test_lp_table_rejects_negative_positions() -> None:
    positions = LPTable()
    positions.add("alice", 3)
    with pytest.raises(InvalidAmount):
        positions.subtract("alice", 4)
    assert positions.get("alice") == 3


def test_lp_table_copy_is_independent() -> None:
    positions = LPTable()
    positions.add("alice", 3)
    copied = positions.copy()
    copied.add("alice", 1)
    assert positions.get("alice") == 3
    assert copied.get("alice") == 4


def test_pool_state_phase_and_reserves() -> None:
    pool = PoolState()
    assert pool.phase is PoolPhase.EMPTY
    assert pool.reserves() == (0, 0)

    active = pool.with_reserves(1000, 500, 1000)
    assert active.phase is PoolPhase.ACTIVE
    assert active.get_reserve(BASE_ASSET) == 1000
    assert active.get_reserve(TOKEN_ASSET) == 500
    assert active.get_constant_product() == 500_000
    assert pool.reserves() == (0, 0)
    with pytest.raises(ValueError):
        active.get_reserve("BTC")


def test_pool_state_validates_fields() -> None:
    with pytest.raises(InvalidAmount):
        PoolState(reserve_base=-1)
    with pytest.raises(Overflow):
        PoolState(total_shares=MAX_UINT256 + 1)
    with pytest.raises(TypeError):
        PoolState(reserve_token=True)
    with pytest.raises(ValueError):
        PoolState(base_asset="CD", token_asset="CD")
