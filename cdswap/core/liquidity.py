"""
Liquidity management operations: add/remove liquidity.

Both functions are pure. They read a `PoolState` snapshot and the owner's
position, validate every precondition, and return the candidate post-state
together with the asset amounts the caller must move. Nothing is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.fixed_point import require_uint256
from ..kernels.python.lp_math import burn_liquidity, mint_liquidity, required_token_amount
from ..state.balances import Address, Amount
from ..state.lp import LPTable
from ..state.pools import PoolPhase, PoolState
from .errors import InsufficientOutputAmount, InvalidAmount


@dataclass(frozen=True)
class LiquidityAdded:
    pool: PoolState
    owner: Address
    shares_minted: Amount
    base_in: Amount
    token_in: Amount
    token_refund: Amount


@dataclass(frozen=True)
class LiquidityRemoved:
    pool: PoolState
    owner: Address
    shares_burned: Amount
    base_out: Amount
    token_out: Amount


def add_liquidity(
    pool: PoolState,
    *,
    owner: Address,
    amount_token_offered: Amount,
    value_base_sent: Amount,
) -> LiquidityAdded:
    """
    Add liquidity to the pool.

    Empty pool: the depositor sets the price. Shares minted equal
    `value_base_sent` and the whole `amount_token_offered` is taken.

    Active pool: the depositor must offer at least
        required = floor(value_base_sent * reserve_token / reserve_base)
    tokens (reserves measured before this deposit). Only `required` is taken
    and shares minted are
        floor(total_shares * value_base_sent / reserve_base)

    Raises:
        InvalidAmount: If value_base_sent is zero or the deposit mints no shares
        InsufficientTokenAmount: If amount_token_offered < required
    """
    res = mint_liquidity(
        reserve_base=pool.reserve_base,
        reserve_token=pool.reserve_token,
        total_shares=pool.total_shares,
        value_base=value_base_sent,
        amount_token_offered=amount_token_offered,
    )
    return LiquidityAdded(
        pool=pool.with_reserves(res.new_reserve_base, res.new_reserve_token, res.new_total_shares),
        owner=owner,
        shares_minted=res.shares_minted,
        base_in=res.base_used,
        token_in=res.token_used,
        token_refund=res.token_refund,
    )


def remove_liquidity(
    pool: PoolState,
    positions: LPTable,
    *,
    owner: Address,
    shares_to_burn: Amount,
    min_base_out: Amount = 0,
    min_token_out: Amount = 0,
) -> LiquidityRemoved:
    """
    Remove liquidity from the pool.

    Outputs:
        base_out = floor(reserve_base * shares_to_burn / total_shares)
        token_out = floor(reserve_token * shares_to_burn / total_shares)

    The pool keeps any rounding remainder. Burning all outstanding shares
    returns both reserves exactly and leaves the pool EMPTY.

    Raises:
        InvalidAmount: If shares_to_burn is zero or exceeds the owner's position
        InsufficientOutputAmount: If an output is below its minimum
    """
    require_uint256("shares_to_burn", shares_to_burn)
    require_uint256("min_base_out", min_base_out)
    require_uint256("min_token_out", min_token_out)

    if shares_to_burn == 0:
        raise InvalidAmount("shares_to_burn must be positive")
    held = positions.get(owner)
    if shares_to_burn > held:
        raise InvalidAmount(f"shares_to_burn ({shares_to_burn}) exceeds position of {owner} ({held})")

    res = burn_liquidity(
        shares=shares_to_burn,
        reserve_base=pool.reserve_base,
        reserve_token=pool.reserve_token,
        total_shares=pool.total_shares,
    )

    if res.base_out < min_base_out:
        raise InsufficientOutputAmount(res.base_out, min_base_out)
    if res.token_out < min_token_out:
        raise InsufficientOutputAmount(res.token_out, min_token_out)

    return LiquidityRemoved(
        pool=pool.with_reserves(res.new_reserve_base, res.new_reserve_token, res.new_total_shares),
        owner=owner,
        shares_burned=shares_to_burn,
        base_out=res.base_out,
        token_out=res.token_out,
    )


def quote_required_token(pool: PoolState, value_base_sent: Amount) -> Amount:
    """
    Tokens a deposit of `value_base_sent` must bring at current reserves.

    In an EMPTY pool any token amount is accepted, so the quote is 0.
    """
    require_uint256("value_base_sent", value_base_sent)
    if pool.phase is PoolPhase.EMPTY:
        return 0
    return required_token_amount(
        value_base=value_base_sent,
        reserve_base=pool.reserve_base,
        reserve_token=pool.reserve_token,
    )


def quote_remove_liquidity(pool: PoolState, shares: Amount) -> tuple[Amount, Amount]:
    """(base_out, token_out) that burning `shares` would return at current reserves."""
    res = burn_liquidity(
        shares=shares,
        reserve_base=pool.reserve_base,
        reserve_token=pool.reserve_token,
        total_shares=pool.total_shares,
    )
    return res.base_out, res.token_out
