"""
Imperative shell: the locked `Exchange`, its configuration and snapshots.
"""

from .config import ExchangeConfig, config_from_env, config_from_mapping, load_config
from .exchange import Exchange
from .snapshot import ExchangeSnapshot, snapshot_from_state, state_from_snapshot

__all__ = [
    "Exchange",
    "ExchangeConfig",
    "ExchangeSnapshot",
    "config_from_env",
    "config_from_mapping",
    "load_config",
    "snapshot_from_state",
    "state_from_snapshot",
]
