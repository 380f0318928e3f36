"""
Exchange configuration.

`ExchangeConfig` is a frozen dataclass with safe defaults (1% fee, ETH/CD).
It can be loaded from a YAML mapping or from `CDSWAP_*` environment
variables; both paths validate eagerly and fail closed on unknown keys.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..kernels.python.cpmm_swap import BPS_DENOM, DEFAULT_FEE_BPS
from ..state.balances import BASE_ASSET, TOKEN_ASSET
from ..state.canonical import has_surrogates


DEFAULT_POOL_ACCOUNT = "exchange"

_ENV_PREFIX = "CDSWAP_"


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    value = value.strip()
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if has_surrogates(value):
        raise ValueError(f"{name} must be valid Unicode")
    return value


@dataclass(frozen=True)
class ExchangeConfig:
    # Swap fee on the input leg, in basis points (100 = 1%).
    fee_bps: int = DEFAULT_FEE_BPS

    base_asset: str = BASE_ASSET
    token_asset: str = TOKEN_ASSET

    # Ledger account that holds the pool's reserves.
    pool_account: str = DEFAULT_POOL_ACCOUNT

    def __post_init__(self) -> None:
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps < BPS_DENOM):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOM})")
        object.__setattr__(self, "base_asset", _require_str(self.base_asset, name="base_asset"))
        object.__setattr__(self, "token_asset", _require_str(self.token_asset, name="token_asset"))
        object.__setattr__(self, "pool_account", _require_str(self.pool_account, name="pool_account"))
        if self.base_asset == self.token_asset:
            raise ValueError("base_asset and token_asset must differ")


_CONFIG_KEYS = frozenset(f.name for f in fields(ExchangeConfig))


def config_from_mapping(obj: Mapping[str, Any]) -> ExchangeConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("exchange config must be a mapping")
    unknown = sorted(set(obj) - _CONFIG_KEYS)
    if unknown:
        raise ValueError(f"unknown exchange config keys: {', '.join(map(str, unknown))}")
    return ExchangeConfig(**dict(obj))


def load_config(path: Union[str, Path]) -> ExchangeConfig:
    """
    Load an `ExchangeConfig` from a YAML file.

    An empty file yields the defaults. The document may either be the config
    mapping itself or nest it under an `exchange:` key.
    """
    raw = Path(path).read_text(encoding="utf-8")
    obj = yaml.safe_load(raw)
    if obj is None:
        return ExchangeConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    if set(obj) == {"exchange"}:
        obj = obj["exchange"] or {}
    return config_from_mapping(obj)


def _int_env(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip(), 10)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer: {raw!r}") from exc


def _str_env(environ: Mapping[str, str], name: str) -> Optional[str]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def config_from_env(
    base: Optional[ExchangeConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ExchangeConfig:
    """
    Apply `CDSWAP_FEE_BPS`, `CDSWAP_BASE_ASSET`, `CDSWAP_TOKEN_ASSET` and
    `CDSWAP_POOL_ACCOUNT` overrides on top of `base` (defaults if None).
    """
    env = os.environ if environ is None else environ
    cfg = base if base is not None else ExchangeConfig()

    overrides: dict[str, Any] = {}
    fee_bps = _int_env(env, _ENV_PREFIX + "FEE_BPS")
    if fee_bps is not None:
        overrides["fee_bps"] = fee_bps
    for key in ("base_asset", "token_asset", "pool_account"):
        value = _str_env(env, _ENV_PREFIX + key.upper())
        if value is not None:
            overrides[key] = value

    if not overrides:
        return cfg
    return replace(cfg, **overrides)
