"""
Kernel layer.

This package groups the deterministic integer kernels used by the exchange.
`cdswap/kernels/python/` holds the production Python kernels: pure functions
with explicit rounding that the functional core (`cdswap/core/`) builds on.
"""
