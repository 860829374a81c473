"""Pool package.

Provides LiquidityPool (the constant product engine), PoolRegistry (pair
creation and lookup) and the flash swap callback capability.
"""

from .addressing import compute_pair_address, sort_tokens
from .callee import FlashSwapCallee
from .pair import LiquidityPool, PoolState
from .registry import PoolRegistry

__all__ = [
    "LiquidityPool",
    "PoolState",
    "PoolRegistry",
    "FlashSwapCallee",
    "sort_tokens",
    "compute_pair_address",
]
