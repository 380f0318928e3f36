"""
CPMM swap kernel (ETH/CD exchange semantics).

- Fee is charged on the input leg and baked into the pricing formula:
      amount_in_with_fee = amount_in * (10_000 - fee_bps)
      amount_out = floor(amount_in_with_fee * reserve_out
                         / (reserve_in * 10_000 + amount_in_with_fee))
  With the default 100 bps this is exactly
      floor(amount_in * 99 * reserve_out / (reserve_in * 100 + amount_in * 99)).
- The whole input (fee included) stays in the pool, so `k` never decreases.

Pure functions with explicit rounding; no state is read or written here.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...core.errors import InvalidAmount, InvalidReserves, InvariantViolation
from .fixed_point import checked_add, checked_sub, mul_div, mul_div_up, require_uint256


BPS_DENOM = 10_000
DEFAULT_FEE_BPS = 100


def _require_fee_bps(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    # A 100% fee would make every output zero.
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM})")


def _require_reserves(input_reserve: int, output_reserve: int) -> None:
    require_uint256("input_reserve", input_reserve)
    require_uint256("output_reserve", output_reserve)
    if input_reserve == 0 or output_reserve == 0:
        raise InvalidReserves(f"reserves must be positive: ({input_reserve}, {output_reserve})")


@dataclass(frozen=True)
class SwapQuote:
    amount_out: int
    amount_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def quote_output(
    input_amount: int,
    input_reserve: int,
    output_reserve: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """
    Output amount for an exact-in swap against `(input_reserve, output_reserve)`.

    Raises InvalidReserves if either reserve is zero. For any positive input the
    result is strictly below `output_reserve`.
    """
    require_uint256("input_amount", input_amount)
    _require_reserves(input_reserve, output_reserve)
    _require_fee_bps(fee_bps)

    input_amount_with_fee = input_amount * (BPS_DENOM - fee_bps)
    denominator = input_reserve * BPS_DENOM + input_amount_with_fee
    return mul_div(input_amount_with_fee, output_reserve, denominator)


def quote_input(
    output_amount: int,
    input_reserve: int,
    output_reserve: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """
    Smallest input whose `quote_output` is at least `output_amount`.

    Inverse of the exact-in formula with ceil rounding:
        amount_in = ceil(reserve_in * amount_out * 10_000
                         / ((reserve_out - amount_out) * (10_000 - fee_bps)))
    """
    require_uint256("output_amount", output_amount)
    _require_reserves(input_reserve, output_reserve)
    _require_fee_bps(fee_bps)
    if output_amount == 0:
        raise InvalidAmount("output_amount must be positive")
    if output_amount >= output_reserve:
        raise InvalidAmount(
            f"cannot drain full reserve: output_amount ({output_amount}) >= output_reserve ({output_reserve})"
        )

    amount_in = mul_div_up(
        input_reserve * output_amount,
        BPS_DENOM,
        (output_reserve - output_amount) * (BPS_DENOM - fee_bps),
    )
    if quote_output(amount_in, input_reserve, output_reserve, fee_bps) < output_amount:
        raise AssertionError("computed amount_in insufficient for output_amount")
    return amount_in


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> SwapQuote:
    """
    Exact-in swap quote + post-state.

    The full `amount_in` is credited to the input reserve. Raises
    InvariantViolation if the constant product would decrease.
    """
    amount_out = quote_output(amount_in, reserve_in, reserve_out, fee_bps)

    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = checked_sub(reserve_out, amount_out)

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise InvariantViolation(["inv_k_non_decreasing"])

    return SwapQuote(
        amount_out=amount_out,
        amount_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
