"""
ETH/CD exchange: imperative shell around the functional core.

Every public operation runs as one critical section on the exchange lock:
1. Snapshot the current `PoolState` and positions.
2. Compute the candidate post-state with the pure core (`cdswap.core`).
3. Check pool invariants on the candidate.
4. Move assets through the `AssetLedger` (inputs pulled, outputs paid).
5. Commit the candidate.

Any failure in steps 2-4 raises before anything is committed. If a transfer
fails part-way, the transfers already made are reversed first, so the pool,
the positions and the ledger balances end up exactly as they were.

Distinct `Exchange` instances share no state and no lock.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.errors import ExchangeError, InsufficientBalance, InvariantViolation
from ..core.invariants import check_all
from ..core.liquidity import (
    add_liquidity as _add_liquidity,
    quote_remove_liquidity as _quote_remove_liquidity,
    quote_required_token as _quote_required_token,
    remove_liquidity as _remove_liquidity,
)
from ..core.swap import swap_base_for_token as _swap_base_for_token
from ..core.swap import swap_token_for_base as _swap_token_for_base
from ..kernels.python.cpmm_swap import quote_output as _quote_output
from ..state.balances import Address, Amount, AssetId, AssetLedger
from ..state.canonical import has_surrogates
from ..state.lp import LPTable
from ..state.pools import PoolPhase, PoolState
from .config import ExchangeConfig
from .snapshot import ExchangeSnapshot, snapshot_from_state, state_from_snapshot


logger = logging.getLogger(__name__)

# (asset, sender, recipient, amount)
Transfer = Tuple[AssetId, Address, Address, Amount]


class Exchange:
    """
    Two-asset constant-product exchange ledger.

    Holds the pool reserves under `config.pool_account` in the given ledger.
    """

    def __init__(
        self,
        ledger: AssetLedger,
        config: Optional[ExchangeConfig] = None,
        *,
        pool: Optional[PoolState] = None,
        positions: Optional[LPTable] = None,
    ) -> None:
        self._config = config if config is not None else ExchangeConfig()
        self._ledger = ledger
        if pool is None:
            pool = PoolState(base_asset=self._config.base_asset, token_asset=self._config.token_asset)
        if (pool.base_asset, pool.token_asset) != (self._config.base_asset, self._config.token_asset):
            raise ValueError(
                f"pool assets ({pool.base_asset}, {pool.token_asset}) do not match config "
                f"({self._config.base_asset}, {self._config.token_asset})"
            )
        self._pool = pool
        self._positions = positions.copy() if positions is not None else LPTable()

        violations = check_all(self._pool, self._positions)
        if violations:
            raise InvariantViolation(violations)

        self._lock = threading.RLock()

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Any,
        ledger: AssetLedger,
        config: Optional[ExchangeConfig] = None,
    ) -> "Exchange":
        pool, positions = state_from_snapshot(snapshot)
        return cls(ledger, config, pool=pool, positions=positions)

    # -- Read-only queries ---------------------------------------------------

    @property
    def config(self) -> ExchangeConfig:
        return self._config

    @property
    def pool(self) -> PoolState:
        with self._lock:
            return self._pool

    def reserves(self) -> Tuple[Amount, Amount]:
        """(reserve_base, reserve_token)."""
        with self._lock:
            return self._pool.reserves()

    def token_reserve(self) -> Amount:
        with self._lock:
            return self._pool.reserve_token

    def total_shares(self) -> Amount:
        with self._lock:
            return self._pool.total_shares

    def share_of(self, owner: Address) -> Amount:
        """Shares held by `owner`; 0 for unknown owners."""
        with self._lock:
            return self._positions.get(owner)

    def phase(self) -> PoolPhase:
        with self._lock:
            return self._pool.phase

    def positions(self) -> Dict[Address, Amount]:
        with self._lock:
            return self._positions.get_all_positions()

    def snapshot(self) -> ExchangeSnapshot:
        with self._lock:
            return snapshot_from_state(self._pool, self._positions)

    # -- Quotes (never mutate) -----------------------------------------------

    def quote_output(self, input_amount: Amount, input_reserve: Amount, output_reserve: Amount) -> Amount:
        """Pure pricing function at this exchange's fee."""
        return _quote_output(input_amount, input_reserve, output_reserve, self._config.fee_bps)

    def quote_swap(self, amount_in: Amount, *, base_in: bool = True) -> Amount:
        """Output a swap of `amount_in` would receive at the current reserves."""
        with self._lock:
            reserve_base, reserve_token = self._pool.reserves()
        if base_in:
            return self.quote_output(amount_in, reserve_base, reserve_token)
        return self.quote_output(amount_in, reserve_token, reserve_base)

    def quote_required_token(self, value_base_sent: Amount) -> Amount:
        with self._lock:
            return _quote_required_token(self._pool, value_base_sent)

    def quote_remove_liquidity(self, shares: Amount) -> Tuple[Amount, Amount]:
        with self._lock:
            return _quote_remove_liquidity(self._pool, shares)

    # -- Mutating operations -------------------------------------------------

    def add_liquidity(self, amount_token_offered: Amount, value_base_sent: Amount, owner: Address) -> Amount:
        """
        Deposit `value_base_sent` ETH and up to `amount_token_offered` CD.

        Returns the number of shares minted.
        """
        self._require_owner(owner)
        with self._atomic("add_liquidity", owner):
            res = _add_liquidity(
                self._pool,
                owner=owner,
                amount_token_offered=amount_token_offered,
                value_base_sent=value_base_sent,
            )
            positions = self._positions.copy()
            positions.add(owner, res.shares_minted)

            pool_account = self._config.pool_account
            self._commit(
                res.pool,
                positions,
                [
                    (res.pool.base_asset, owner, pool_account, res.base_in),
                    (res.pool.token_asset, owner, pool_account, res.token_in),
                ],
            )
            logger.debug(
                f"add_liquidity: owner={owner} base_in={res.base_in} token_in={res.token_in} "
                f"shares_minted={res.shares_minted}"
            )
            return res.shares_minted

    def remove_liquidity(
        self,
        shares_to_burn: Amount,
        owner: Address,
        *,
        min_base_out: Amount = 0,
        min_token_out: Amount = 0,
    ) -> Tuple[Amount, Amount]:
        """
        Burn `shares_to_burn` of `owner`'s shares.

        Returns (base_returned, token_returned).
        """
        self._require_owner(owner)
        with self._atomic("remove_liquidity", owner):
            res = _remove_liquidity(
                self._pool,
                self._positions,
                owner=owner,
                shares_to_burn=shares_to_burn,
                min_base_out=min_base_out,
                min_token_out=min_token_out,
            )
            positions = self._positions.copy()
            positions.subtract(owner, res.shares_burned)

            pool_account = self._config.pool_account
            self._commit(
                res.pool,
                positions,
                [
                    (res.pool.base_asset, pool_account, owner, res.base_out),
                    (res.pool.token_asset, pool_account, owner, res.token_out),
                ],
            )
            logger.debug(
                f"remove_liquidity: owner={owner} shares_burned={res.shares_burned} "
                f"base_out={res.base_out} token_out={res.token_out}"
            )
            return res.base_out, res.token_out

    def swap_base_for_token(self, input_base: Amount, min_token_out: Amount, owner: Address) -> Amount:
        """Sell `input_base` ETH for at least `min_token_out` CD. Returns CD received."""
        self._require_owner(owner)
        with self._atomic("swap_base_for_token", owner):
            res = _swap_base_for_token(
                self._pool,
                owner=owner,
                input_base=input_base,
                min_token_out=min_token_out,
                fee_bps=self._config.fee_bps,
            )
            self._apply_swap(res.pool, res.asset_in, res.asset_out, res.amount_in, res.amount_out, owner)
            return res.amount_out

    def swap_token_for_base(self, input_token: Amount, min_base_out: Amount, owner: Address) -> Amount:
        """Sell `input_token` CD for at least `min_base_out` ETH. Returns ETH received."""
        self._require_owner(owner)
        with self._atomic("swap_token_for_base", owner):
            res = _swap_token_for_base(
                self._pool,
                owner=owner,
                input_token=input_token,
                min_base_out=min_base_out,
                fee_bps=self._config.fee_bps,
            )
            self._apply_swap(res.pool, res.asset_in, res.asset_out, res.amount_in, res.amount_out, owner)
            return res.amount_out

    # -- Internals -----------------------------------------------------------

    def _require_owner(self, owner: Address) -> None:
        if not isinstance(owner, str) or not owner:
            raise TypeError("owner must be a non-empty string")
        if has_surrogates(owner):
            raise ValueError(f"owner must be valid Unicode: {owner!r}")
        if owner == self._config.pool_account:
            raise ValueError("owner must not be the pool account")

    @contextmanager
    def _atomic(self, operation: str, owner: Address) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except ExchangeError as exc:
                logger.debug(f"{operation} rejected for {owner}: {exc}")
                raise

    def _apply_swap(
        self,
        next_pool: PoolState,
        asset_in: AssetId,
        asset_out: AssetId,
        amount_in: Amount,
        amount_out: Amount,
        owner: Address,
    ) -> None:
        pool_account = self._config.pool_account
        self._commit(
            next_pool,
            self._positions,
            [
                (asset_in, owner, pool_account, amount_in),
                (asset_out, pool_account, owner, amount_out),
            ],
        )
        logger.debug(f"swap: owner={owner} {amount_in} {asset_in} -> {amount_out} {asset_out}")

    def _commit(self, next_pool: PoolState, next_positions: LPTable, transfers: List[Transfer]) -> None:
        violations = check_all(next_pool, next_positions)
        if violations:
            raise InvariantViolation(violations)

        self._precheck_balances(transfers)
        self._execute_transfers(transfers)

        previous_phase = self._pool.phase
        self._pool = next_pool
        self._positions = next_positions
        if next_pool.phase is not previous_phase:
            logger.info(f"pool phase {previous_phase.value} -> {next_pool.phase.value}: {next_pool!r}")

    def _precheck_balances(self, transfers: List[Transfer]) -> None:
        needed: Dict[Tuple[Address, AssetId], Amount] = {}
        for asset, sender, _recipient, amount in transfers:
            if amount:
                needed[(sender, asset)] = needed.get((sender, asset), 0) + amount
        for (sender, asset), amount in sorted(needed.items()):
            available = self._ledger.balance_of(sender, asset)
            if available < amount:
                raise InsufficientBalance(f"Insufficient {asset} balance for {sender}: {available} < {amount}")

    def _execute_transfers(self, transfers: List[Transfer]) -> None:
        done: List[Transfer] = []
        try:
            for transfer in transfers:
                asset, sender, recipient, amount = transfer
                if amount == 0:
                    continue
                self._ledger.transfer(asset, sender, recipient, amount)
                done.append(transfer)
        except Exception:
            self._reverse_transfers(done)
            raise

    def _reverse_transfers(self, done: List[Transfer]) -> None:
        # Every reversal is attempted; a failed one does not stop the rest.
        for asset, sender, recipient, amount in reversed(done):
            try:
                self._ledger.transfer(asset, recipient, sender, amount)
            except Exception:
                logger.exception(f"failed to reverse transfer of {amount} {asset} from {sender} to {recipient}")

    def __repr__(self) -> str:
        return f"Exchange({self._pool!r}, positions={len(self._positions)}, fee_bps={self._config.fee_bps})"
