"""Path quoting through registry pools.

PathQuoter walks a token path hop by hop: forward with get_amount_out for
exact-input trades, backward with get_amount_in for exact-output trades.
Every consecutive pair in the path must have a pool.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from xaviswap.amm.constant_product import ConstantProduct, constant_product
from xaviswap.errors import InvalidPath, PairNotFound
from xaviswap.models.types import normalize_address
from xaviswap.pools.addressing import sort_tokens
from xaviswap.pools.pair import LiquidityPool
from xaviswap.pools.registry import PoolRegistry
from xaviswap.routing.types import Hop, PathQuote

logger = structlog.get_logger()


class PathQuoter:
    """Computes amounts along multi-hop paths.

    Args:
        registry: Registry used to resolve pools
        amm: Quote math. Defaults to the constant product singleton.
    """

    def __init__(self, registry: PoolRegistry, amm: ConstantProduct | None = None) -> None:
        self.registry = registry
        self.amm = amm if amm is not None else constant_product

    def pool_for(self, token_a: str, token_b: str) -> LiquidityPool:
        """Resolve the pool for a pair.

        Raises:
            PairNotFound: If no pool exists for the pair
        """
        pool = self.registry.pool(token_a, token_b)
        if pool is None:
            raise PairNotFound(f"No pool for {token_a}/{token_b}")
        return pool

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_a, reserve_b)."""
        token0, _ = sort_tokens(token_a, token_b)
        reserve0, reserve1, _ = self.pool_for(token_a, token_b).get_reserves()
        if normalize_address(token_a) == token0:
            return reserve0, reserve1
        return reserve1, reserve0

    @staticmethod
    def _check_path(path: Sequence[str]) -> tuple[str, ...]:
        if len(path) < 2:
            raise InvalidPath(f"Path needs at least 2 tokens, got {len(path)}")
        return tuple(normalize_address(token) for token in path)

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        """Amounts at every step for an exact input, walking the path forward."""
        path = self._check_path(path)
        amounts = [amount_in]
        for i in range(len(path) - 1):
            reserve_in, reserve_out = self.get_reserves(path[i], path[i + 1])
            amounts.append(self.amm.get_amount_out(amounts[i], reserve_in, reserve_out))
        return amounts

    def get_amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        """Amounts at every step for an exact output, walking the path backward."""
        path = self._check_path(path)
        amounts = [0] * len(path)
        amounts[-1] = amount_out
        for i in range(len(path) - 1, 0, -1):
            reserve_in, reserve_out = self.get_reserves(path[i - 1], path[i])
            amounts[i - 1] = self.amm.get_amount_in(amounts[i], reserve_in, reserve_out)
        return amounts

    def _build_quote(self, path: tuple[str, ...], amounts: list[int]) -> PathQuote:
        hops = tuple(
            Hop(
                pool=self.pool_for(path[i], path[i + 1]).address,
                token_in=path[i],
                token_out=path[i + 1],
                amount_in=amounts[i],
                amount_out=amounts[i + 1],
            )
            for i in range(len(path) - 1)
        )
        return PathQuote(path=path, amounts=tuple(amounts), hops=hops)

    def quote_exact_input(self, amount_in: int, path: Sequence[str]) -> PathQuote:
        """Forward quote with per-hop detail."""
        checked = self._check_path(path)
        quote = self._build_quote(checked, self.get_amounts_out(amount_in, checked))
        logger.debug(
            "path_quoted",
            kind="exact_input",
            hops=len(quote.hops),
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
        )
        return quote

    def quote_exact_output(self, amount_out: int, path: Sequence[str]) -> PathQuote:
        """Reverse quote with per-hop detail."""
        checked = self._check_path(path)
        quote = self._build_quote(checked, self.get_amounts_in(amount_out, checked))
        logger.debug(
            "path_quoted",
            kind="exact_output",
            hops=len(quote.hops),
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
        )
        return quote


__all__ = ["PathQuoter"]
