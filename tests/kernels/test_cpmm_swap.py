# [TESTER] v1

from __future__ import annotations

import pytest

from cdswap.core.errors import InvalidAmount, InvalidReserves
from cdswap.kernels.python.cpmm_swap import quote_input, quote_output, swap_exact_in


def test_quote_output_matches_worked_example() -> None:
    # numerator = 100*99*1000 = 9_900_000; denominator = 1000*100 + 100*99 = 109_900
    assert quote_output(100, 1000, 1000) == 90


def test_quote_output_matches_percent_form_of_the_formula() -> None:
    for amount, r_in, r_out in [(1, 1, 1), (7, 13, 1_000_003), (123_456, 999, 5), (10**18, 10**21, 3 * 10**20)]:
        expected = (amount * 99 * r_out) // (r_in * 100 + amount * 99)
        assert quote_output(amount, r_in, r_out) == expected


def test_quote_output_rejects_empty_reserves() -> None:
    with pytest.raises(InvalidReserves):
        quote_output(100, 0, 1000)
    with pytest.raises(InvalidReserves):
        quote_output(100, 1000, 0)


def test_quote_output_of_zero_input_is_zero() -> None:
    assert quote_output(0, 1000, 1000) == 0


def test_quote_output_never_drains_reserve() -> None:
    out = quote_output(10**30, 1, 1000)
    assert out < 1000


def test_fee_bps_changes_price() -> None:
    assert quote_output(500, 1000, 1000) == 331
    assert quote_output(500, 1000, 1000, fee_bps=0) == 333
    with pytest.raises(ValueError):
        quote_output(500, 1000, 1000, fee_bps=10_000)


def test_quote_input_is_smallest_sufficient_input() -> None:
    amount_in = quote_input(90, 1000, 1000)
    assert amount_in == 100
    assert quote_output(amount_in, 1000, 1000) >= 90
    assert quote_output(amount_in - 1, 1000, 1000) < 90


def test_quote_input_cannot_drain_reserve() -> None:
    with pytest.raises(InvalidAmount):
        quote_input(1000, 1000, 1000)
    with pytest.raises(InvalidAmount):
        quote_input(0, 1000, 1000)


def test_swap_exact_in_post_state_keeps_k() -> None:
    quote = swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=100)
    assert quote.amount_out == 90
    assert (quote.new_reserve_in, quote.new_reserve_out) == (1100, 910)
    assert quote.k_before == 1_000_000
    assert quote.k_after == 1_001_000
    assert quote.k_after >= quote.k_before
