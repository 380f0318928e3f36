"""
Liquidity math kernel.

Share accounting for the ETH/CD pool:
- The first deposit into an empty pool mints one share per unit of base
  asset and takes the full offered token amount (it sets the price).
- Later deposits must bring tokens in the current ratio; only the required
  amount is taken and shares are minted pro rata to the base contribution.
- Burns return the pro rata share of both reserves, floored.

Written as a small set of pure functions with explicit rounding rules.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...core.errors import InsufficientTokenAmount, InvalidAmount
from .fixed_point import checked_add, checked_sub, mul_div, require_uint256


@dataclass(frozen=True)
class MintLiquidityResult:
    shares_minted: int
    base_used: int
    token_used: int
    token_refund: int
    new_reserve_base: int
    new_reserve_token: int
    new_total_shares: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    base_out: int
    token_out: int
    new_reserve_base: int
    new_reserve_token: int
    new_total_shares: int


def required_token_amount(*, value_base: int, reserve_base: int, reserve_token: int) -> int:
    """
    Tokens a deposit of `value_base` must bring to keep the reserve ratio.

    `reserve_base` is measured before the deposit is credited.
    """
    require_uint256("value_base", value_base)
    require_uint256("reserve_base", reserve_base)
    require_uint256("reserve_token", reserve_token)
    return mul_div(value_base, reserve_token, reserve_base)


def mint_liquidity(
    *,
    reserve_base: int,
    reserve_token: int,
    total_shares: int,
    value_base: int,
    amount_token_offered: int,
) -> MintLiquidityResult:
    """
    Mint shares for a deposit of `value_base` base units and up to
    `amount_token_offered` tokens.

    Raises:
        InvalidAmount: If value_base is zero, the pool state is inconsistent,
            or the deposit is too small to mint a share
        InsufficientTokenAmount: If fewer tokens are offered than the ratio requires
    """
    for name, v in (
        ("reserve_base", reserve_base),
        ("reserve_token", reserve_token),
        ("total_shares", total_shares),
        ("value_base", value_base),
        ("amount_token_offered", amount_token_offered),
    ):
        require_uint256(name, v)

    if value_base == 0:
        raise InvalidAmount("value_base must be positive")

    if total_shares == 0:
        if reserve_base != 0 or reserve_token != 0:
            raise InvalidAmount("cannot mint initial liquidity when reserves are non-zero")
        return MintLiquidityResult(
            shares_minted=value_base,
            base_used=value_base,
            token_used=amount_token_offered,
            token_refund=0,
            new_reserve_base=value_base,
            new_reserve_token=amount_token_offered,
            new_total_shares=value_base,
        )

    token_required = required_token_amount(
        value_base=value_base,
        reserve_base=reserve_base,
        reserve_token=reserve_token,
    )
    if amount_token_offered < token_required:
        raise InsufficientTokenAmount(offered=amount_token_offered, required=token_required)

    minted = mul_div(total_shares, value_base, reserve_base)
    if minted == 0:
        raise InvalidAmount("shares_minted is zero (deposit too small)")

    return MintLiquidityResult(
        shares_minted=minted,
        base_used=value_base,
        token_used=token_required,
        token_refund=amount_token_offered - token_required,
        new_reserve_base=checked_add(reserve_base, value_base),
        new_reserve_token=checked_add(reserve_token, token_required),
        new_total_shares=checked_add(total_shares, minted),
    )


def burn_liquidity(*, shares: int, reserve_base: int, reserve_token: int, total_shares: int) -> BurnLiquidityResult:
    """
    Burn `shares` for the underlying reserves (floor rounding).

    Burning the entire supply returns both reserves exactly.
    """
    for name, v in (
        ("shares", shares),
        ("reserve_base", reserve_base),
        ("reserve_token", reserve_token),
        ("total_shares", total_shares),
    ):
        require_uint256(name, v)

    if shares == 0:
        raise InvalidAmount("shares must be positive")
    if shares > total_shares:
        raise InvalidAmount(f"cannot burn more than total_shares: {shares} > {total_shares}")

    base_out = mul_div(reserve_base, shares, total_shares)
    token_out = mul_div(reserve_token, shares, total_shares)

    new_total_shares = checked_sub(total_shares, shares)
    new_reserve_base = checked_sub(reserve_base, base_out)
    new_reserve_token = checked_sub(reserve_token, token_out)
    if new_total_shares == 0 and (new_reserve_base != 0 or new_reserve_token != 0):
        raise AssertionError("full burn must drain both reserves")

    return BurnLiquidityResult(
        base_out=base_out,
        token_out=token_out,
        new_reserve_base=new_reserve_base,
        new_reserve_token=new_reserve_token,
        new_total_shares=new_total_shares,
    )
