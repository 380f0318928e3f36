"""
Swap operations: ETH -> CD and CD -> ETH.

The quote and the post-state are derived from the same `PoolState` snapshot,
so a swap can never be priced against reserves other than the ones it
mutates. The input reserve is measured *before* the input is credited.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.cpmm_swap import DEFAULT_FEE_BPS, swap_exact_in
from ..kernels.python.fixed_point import require_uint256
from ..state.balances import Address, Amount, AssetId
from ..state.pools import PoolState
from .errors import InsufficientOutputAmount


@dataclass(frozen=True)
class SwapExecuted:
    pool: PoolState
    owner: Address
    asset_in: AssetId
    asset_out: AssetId
    amount_in: Amount
    amount_out: Amount
    k_before: int
    k_after: int


def _swap(
    pool: PoolState,
    *,
    owner: Address,
    base_in: bool,
    amount_in: Amount,
    min_amount_out: Amount,
    fee_bps: int,
) -> SwapExecuted:
    require_uint256("amount_in", amount_in)
    require_uint256("min_amount_out", min_amount_out)

    if base_in:
        reserve_in, reserve_out = pool.reserve_base, pool.reserve_token
        asset_in, asset_out = pool.base_asset, pool.token_asset
    else:
        reserve_in, reserve_out = pool.reserve_token, pool.reserve_base
        asset_in, asset_out = pool.token_asset, pool.base_asset

    quote = swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )

    if quote.amount_out < min_amount_out:
        raise InsufficientOutputAmount(quote.amount_out, min_amount_out)

    if base_in:
        next_pool = pool.with_reserves(quote.new_reserve_in, quote.new_reserve_out, pool.total_shares)
    else:
        next_pool = pool.with_reserves(quote.new_reserve_out, quote.new_reserve_in, pool.total_shares)

    return SwapExecuted(
        pool=next_pool,
        owner=owner,
        asset_in=asset_in,
        asset_out=asset_out,
        amount_in=amount_in,
        amount_out=quote.amount_out,
        k_before=quote.k_before,
        k_after=quote.k_after,
    )


def swap_base_for_token(
    pool: PoolState,
    *,
    owner: Address,
    input_base: Amount,
    min_token_out: Amount,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> SwapExecuted:
    """
    Sell `input_base` ETH for CD.

    Raises:
        InvalidReserves: If either reserve is zero
        InsufficientOutputAmount: If the output is below min_token_out
    """
    return _swap(
        pool,
        owner=owner,
        base_in=True,
        amount_in=input_base,
        min_amount_out=min_token_out,
        fee_bps=fee_bps,
    )


def swap_token_for_base(
    pool: PoolState,
    *,
    owner: Address,
    input_token: Amount,
    min_base_out: Amount,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> SwapExecuted:
    """Sell `input_token` CD for ETH. Same failure modes as `swap_base_for_token`."""
    return _swap(
        pool,
        owner=owner,
        base_in=False,
        amount_in=input_token,
        min_amount_out=min_base_out,
        fee_bps=fee_bps,
    )
