"""Mathematical utilities for XaviSwap.

This package provides the fixed-point primitives used by the pools:
- UQ112x112: binary fixed point for time-weighted price accumulators
"""

from xaviswap.math.uq112x112 import Q112, decode, encode, uqdiv

__all__ = ["Q112", "encode", "uqdiv", "decode"]
