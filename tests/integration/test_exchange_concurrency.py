# [TESTER] v1

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

from cdswap.core.errors import ExchangeError
from cdswap.integration.exchange import Exchange
from cdswap.state.balances import BASE_ASSET, TOKEN_ASSET, BalanceTable


TRADERS = [f"trader{i}" for i in range(8)]
FUNDING = 1_000_000


def _total(ledger: BalanceTable, asset: str) -> int:
    return sum(amount for (_owner, a), amount in ledger.get_all_balances().items() if a == asset)


def _run_trader(exchange: Exchange, owner: str, seed: int) -> int:
    rng = random.Random(seed)
    rejected = 0
    for _ in range(200):
        op = rng.randrange(4)
        try:
            if op == 0:
                exchange.swap_base_for_token(rng.randint(1, 5_000), 0, owner)
            elif op == 1:
                exchange.swap_token_for_base(rng.randint(1, 5_000), 0, owner)
            elif op == 2:
                value = rng.randint(1, 5_000)
                exchange.add_liquidity(exchange.quote_required_token(value) + 10, value, owner)
            else:
                held = exchange.share_of(owner)
                if held:
                    exchange.remove_liquidity(rng.randint(1, held), owner)
        except ExchangeError:
            rejected += 1
    return rejected


def test_concurrent_operations_conserve_assets() -> None:
    ledger = BalanceTable()
    for owner in ["alice", *TRADERS]:
        ledger.credit(owner, BASE_ASSET, FUNDING)
        ledger.credit(owner, TOKEN_ASSET, FUNDING)
    exchange = Exchange(ledger)
    exchange.add_liquidity(200_000, 100_000, "alice")

    base_supply = _total(ledger, BASE_ASSET)
    token_supply = _total(ledger, TOKEN_ASSET)

    with ThreadPoolExecutor(max_workers=len(TRADERS)) as pool:
        futures = [pool.submit(_run_trader, exchange, owner, seed) for seed, owner in enumerate(TRADERS)]
        for fut in futures:
            fut.result()

    assert _total(ledger, BASE_ASSET) == base_supply
    assert _total(ledger, TOKEN_ASSET) == token_supply
    assert ledger.verify_non_negative()

    reserve_base, reserve_token = exchange.reserves()
    pool_account = exchange.config.pool_account
    assert ledger.get(pool_account, BASE_ASSET) == reserve_base
    assert ledger.get(pool_account, TOKEN_ASSET) == reserve_token
    assert exchange.total_shares() == sum(exchange.positions().values())
    assert reserve_base > 0 and reserve_token > 0


def test_independent_exchanges_do_not_share_state() -> None:
    ledger_a, ledger_b = BalanceTable(), BalanceTable()
    for ledger in (ledger_a, ledger_b):
        ledger.credit("alice", BASE_ASSET, FUNDING)
        ledger.credit("alice", TOKEN_ASSET, FUNDING)
    a, b = Exchange(ledger_a), Exchange(ledger_b)

    a.add_liquidity(500, 1000, "alice")

    assert a.reserves() == (1000, 500)
    assert b.reserves() == (0, 0)
    assert b.share_of("alice") == 0
