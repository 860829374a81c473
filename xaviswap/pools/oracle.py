"""Time-weighted average prices from pool accumulators.

A pool's cumulative prices only move when its reserves are updated. An
oracle consumer takes two observations some time apart; the difference of the
accumulators divided by the elapsed time is the time-weighted average price
over that window, which a single-block trade cannot move much.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from xaviswap.constants import TIMESTAMP_MODULUS
from xaviswap.errors import InvalidPath, ValidationError
from xaviswap.math.uq112x112 import decode, encode, uqdiv
from xaviswap.models.types import normalize_address
from xaviswap.pools.pair import LiquidityPool


@dataclass(frozen=True)
class PriceObservation:
    """Accumulator values at a point in time (timestamp modulo 2**32)."""

    timestamp: int
    price0_cumulative: int
    price1_cumulative: int


def current_cumulative_prices(pool: LiquidityPool) -> PriceObservation:
    """Observe the accumulators as of the current block.

    If the pool has not been touched this block, the accumulators are
    extended with the current reserves up to now, as if an update happened.
    """
    block_timestamp = pool.chain.timestamp % TIMESTAMP_MODULUS
    price0 = pool.price0_cumulative_last
    price1 = pool.price1_cumulative_last
    reserve0, reserve1, last = pool.get_reserves()
    if last != block_timestamp and reserve0 != 0 and reserve1 != 0:
        elapsed = (block_timestamp - last) % TIMESTAMP_MODULUS
        price0 += uqdiv(encode(reserve1), reserve0) * elapsed
        price1 += uqdiv(encode(reserve0), reserve1) * elapsed
    return PriceObservation(block_timestamp, price0, price1)


def average_prices(older: PriceObservation, newer: PriceObservation) -> tuple[int, int]:
    """UQ112x112 average prices (token1 per token0, token0 per token1) between two observations.

    Raises:
        ValidationError: If no time elapsed between the observations
    """
    elapsed = (newer.timestamp - older.timestamp) % TIMESTAMP_MODULUS
    if elapsed == 0:
        raise ValidationError("Observations must be taken at different times")
    return (
        (newer.price0_cumulative - older.price0_cumulative) // elapsed,
        (newer.price1_cumulative - older.price1_cumulative) // elapsed,
    )


def average_price(older: PriceObservation, newer: PriceObservation) -> tuple[Decimal, Decimal]:
    """Average prices as Decimals, for display."""
    price0, price1 = average_prices(older, newer)
    return decode(price0), decode(price1)


def consult(
    pool: LiquidityPool,
    older: PriceObservation,
    newer: PriceObservation,
    token: str,
    amount_in: int,
) -> int:
    """Value `amount_in` of `token` in the other token at the average price.

    Raises:
        InvalidPath: If `token` is not one of the pool's tokens
    """
    token = normalize_address(token)
    price0, price1 = average_prices(older, newer)
    if token == pool.token0:
        return (price0 * amount_in) >> 112
    if token == pool.token1:
        return (price1 * amount_in) >> 112
    raise InvalidPath(f"Token {token} not in pool {pool.address}")


__all__ = [
    "PriceObservation",
    "current_cumulative_prices",
    "average_prices",
    "average_price",
    "consult",
]
