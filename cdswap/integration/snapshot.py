"""
Exchange state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing and comparison.
- Round-trippable into `PoolState` + `LPTable`.
- Explicit versioning.

A snapshot covers the pool and the LP positions only; asset balances belong
to the external ledger.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from ..state.canonical import canonical_json_bytes, domain_sep_bytes, has_surrogates, sha256_hex
from ..state.lp import LPTable
from ..state.pools import PoolState


EXCHANGE_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if has_surrogates(value):
        raise ValueError(f"{name} must be valid Unicode")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class ExchangeSnapshot:
    """
    Deterministic, versioned snapshot of the exchange state.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("exchange_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("exchange_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "data": self.data}


def snapshot_from_state(pool: PoolState, positions: LPTable) -> ExchangeSnapshot:
    position_entries = [
        {"owner": owner, "shares": int(shares)}
        for owner, shares in positions.get_all_positions().items()
    ]
    position_entries.sort(key=lambda e: e["owner"])

    data: Dict[str, Any] = {
        "pool": {
            "base_asset": pool.base_asset,
            "token_asset": pool.token_asset,
            "reserve_base": pool.reserve_base,
            "reserve_token": pool.reserve_token,
            "total_shares": pool.total_shares,
        },
        "positions": position_entries,
    }
    return ExchangeSnapshot(version=EXCHANGE_SNAPSHOT_VERSION, data=data)


def state_from_snapshot(obj: Any) -> Tuple[PoolState, LPTable]:
    """
    Rebuild `(PoolState, LPTable)` from an `ExchangeSnapshot` or its `to_dict()` form.

    Raises TypeError/ValueError on malformed input.
    """
    if isinstance(obj, ExchangeSnapshot):
        version, data = obj.version, obj.data
    elif isinstance(obj, Mapping):
        version, data = obj.get("version"), obj.get("data")
    else:
        raise TypeError("snapshot must be an ExchangeSnapshot or a mapping")

    if version != EXCHANGE_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version!r}")
    if not isinstance(data, Mapping):
        raise TypeError("snapshot data must be an object")

    pool_obj = data.get("pool")
    if not isinstance(pool_obj, Mapping):
        raise TypeError("snapshot pool must be an object")
    pool = PoolState(
        reserve_base=_require_int(pool_obj.get("reserve_base"), name="pool.reserve_base"),
        reserve_token=_require_int(pool_obj.get("reserve_token"), name="pool.reserve_token"),
        total_shares=_require_int(pool_obj.get("total_shares"), name="pool.total_shares"),
        base_asset=_require_str(pool_obj.get("base_asset"), name="pool.base_asset"),
        token_asset=_require_str(pool_obj.get("token_asset"), name="pool.token_asset"),
    )

    entries = data.get("positions", [])
    if not isinstance(entries, list):
        raise TypeError("snapshot positions must be a list")
    positions = LPTable()
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot position must be an object")
        owner = _require_str(entry.get("owner"), name="position.owner")
        shares = _require_int(entry.get("shares"), name="position.shares")
        if owner in seen:
            raise ValueError(f"duplicate position for owner {owner!r}")
        if shares == 0:
            raise ValueError(f"zero-share position for owner {owner!r}")
        seen.add(owner)
        positions.set(owner, shares)

    return pool, positions
