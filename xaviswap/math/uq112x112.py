"""UQ112x112 binary fixed-point numbers.

A UQ112x112 value is an unsigned integer whose low 112 bits are the
fractional part. Pool reserves fit in 112 bits, so the ratio of two reserves
encodes without overflow and accumulates with full precision.
"""

from __future__ import annotations

from decimal import Decimal

from xaviswap.constants import Q112
from xaviswap.safe_int import S

__all__ = ["Q112", "encode", "uqdiv", "decode"]


def encode(y: int) -> int:
    """Encode a uint112 integer as UQ112x112."""
    return (S(S(y).to_uint112()) << 112).value


def uqdiv(x: int, y: int) -> int:
    """Divide a UQ112x112 by a uint112, truncating.

    Raises:
        DivisionByZero: If y is zero
    """
    return (S(x) // S(y).to_uint112()).value


def decode(x: int) -> Decimal:
    """Convert a UQ112x112 (or an accumulator difference) to a Decimal ratio."""
    return Decimal(x) / Decimal(Q112)
