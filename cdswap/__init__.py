"""
cdswap: a two-asset (ETH/CD) constant-product exchange ledger.

Public API:
- `Exchange(ledger, config)`: atomic add/remove liquidity and swaps
- `quote_output(input_amount, input_reserve, output_reserve)`: pure pricing
- `mul_div(a, b, denominator)`: the uint256 arithmetic helper
"""

from .core.errors import (
    DivisionByZero,
    ExchangeError,
    InsufficientBalance,
    InsufficientOutputAmount,
    InsufficientTokenAmount,
    InvalidAmount,
    InvalidReserves,
    InvariantViolation,
    Overflow,
)
from .integration.config import ExchangeConfig, config_from_env, load_config
from .integration.exchange import Exchange
from .integration.snapshot import ExchangeSnapshot
from .kernels.python.cpmm_swap import SwapQuote, quote_input, quote_output
from .kernels.python.fixed_point import MAX_UINT256, mul_div, mul_div_up
from .state.balances import BASE_ASSET, TOKEN_ASSET, AssetLedger, BalanceTable
from .state.lp import LPTable
from .state.pools import PoolPhase, PoolState

__version__ = "0.1.0"

__all__ = [
    "Exchange",
    "ExchangeConfig",
    "ExchangeSnapshot",
    "config_from_env",
    "load_config",
    "quote_output",
    "quote_input",
    "SwapQuote",
    "mul_div",
    "mul_div_up",
    "MAX_UINT256",
    "BASE_ASSET",
    "TOKEN_ASSET",
    "AssetLedger",
    "BalanceTable",
    "LPTable",
    "PoolPhase",
    "PoolState",
    "ExchangeError",
    "InvalidReserves",
    "DivisionByZero",
    "Overflow",
    "InsufficientTokenAmount",
    "InvalidAmount",
    "InsufficientOutputAmount",
    "InsufficientBalance",
    "InvariantViolation",
]
