"""Constant product liquidity pool.

A LiquidityPool holds two token balances and prices trades by x * y = k
with a 0.3% fee on input. It is also the fungible share token for its
liquidity providers.

Every mutating operation works from observed balances: callers transfer
tokens in first, then call mint/swap (or transfer shares in, then call
burn). The pool compares balances against its cached reserves to find out
what was paid, and finishes each operation by re-syncing reserves.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from xaviswap.chain import Chain, external
from xaviswap.constants import (
    FEE_ADJUSTMENT,
    FEE_DENOMINATOR,
    LP_TOKEN_DECIMALS,
    LP_TOKEN_NAME,
    LP_TOKEN_SYMBOL,
    MINIMUM_LIQUIDITY,
    PROTOCOL_FEE_DIVISOR,
    TIMESTAMP_MODULUS,
    ZERO_ADDRESS,
)
from xaviswap.errors import (
    AlreadyInitialized,
    Forbidden,
    IdenticalAddresses,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidCallee,
    InvalidRecipient,
    KInvariantViolation,
    Locked,
    ReserveOverflow,
)
from xaviswap.events import Burn, Mint, Swap, Sync
from xaviswap.math.uq112x112 import encode, uqdiv
from xaviswap.models.types import normalize_address
from xaviswap.pools.callee import FlashSwapCallee
from xaviswap.safe_int import UINT112_MAX, S
from xaviswap.tokens.erc20 import FungibleToken
from xaviswap.transfer import safe_transfer

if TYPE_CHECKING:
    from xaviswap.pools.registry import PoolRegistry

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolState:
    """Read-only view of a pool's accounting."""

    address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    block_timestamp_last: int
    price0_cumulative_last: int
    price1_cumulative_last: int
    k_last: int
    total_supply: int


class LiquidityPool(FungibleToken):
    """Reserve accounting and share minting for one token pair.

    Args:
        chain: Execution host
        address: Pool address (derived deterministically by the registry)
        registry: Address of the registry that created the pool
    """

    def __init__(self, chain: Chain, address: str, registry: str) -> None:
        super().__init__(chain, address, LP_TOKEN_NAME, LP_TOKEN_SYMBOL, LP_TOKEN_DECIMALS)
        self.registry = normalize_address(registry)
        self.token0 = ZERO_ADDRESS
        self.token1 = ZERO_ADDRESS
        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0
        self.price0_cumulative_last = 0
        self.price1_cumulative_last = 0
        # reserve0 * reserve1 as of the most recent liquidity event
        self.k_last = 0
        self._unlocked = True

    # --- Guards ---

    @contextmanager
    def nonreentrant(self) -> Iterator[None]:
        """Hold the pool lock for the duration of the block.

        Raises:
            Locked: If the pool is already inside a guarded operation
        """
        if not self._unlocked:
            raise Locked()
        self._unlocked = False
        try:
            yield
        finally:
            self._unlocked = True

    # --- Views ---

    @property
    def initialized(self) -> bool:
        return self.token0 != ZERO_ADDRESS

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_timestamp_last)."""
        return self.reserve0, self.reserve1, self.block_timestamp_last

    def state(self) -> PoolState:
        return PoolState(
            address=self.address,
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            block_timestamp_last=self.block_timestamp_last,
            price0_cumulative_last=self.price0_cumulative_last,
            price1_cumulative_last=self.price1_cumulative_last,
            k_last=self.k_last,
            total_supply=self.total_supply,
        )

    # --- Lifecycle ---

    @external
    def initialize(self, caller: str, token0: str, token1: str) -> None:
        """Set the pool's tokens. Called once by the registry right after deployment."""
        if normalize_address(caller) != self.registry:
            raise Forbidden("Only the registry can initialize a pool")
        if self.initialized:
            raise AlreadyInitialized()
        token0 = normalize_address(token0)
        token1 = normalize_address(token1)
        if token0 == token1:
            raise IdenticalAddresses()
        if token0 > token1:
            token0, token1 = token1, token0
        self.token0 = token0
        self.token1 = token1

    # --- Internal helpers ---

    def _registry(self) -> PoolRegistry:
        from xaviswap.pools.registry import PoolRegistry

        return self.chain.get_as(self.registry, PoolRegistry)

    def _balance(self, token: str) -> int:
        return self.chain.get(token).balance_of(self.address)  # type: ignore[attr-defined]

    def _balances(self) -> tuple[int, int]:
        return self._balance(self.token0), self._balance(self.token1)

    def _send(self, token: str, to: str, value: int) -> None:
        safe_transfer(self.chain, token, self.address, to, value)

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Commit balances as reserves and advance the price accumulators.

        Accumulators use the reserves from before this update so that an
        observation reflects the price that held over the elapsed interval.

        Raises:
            ReserveOverflow: If either balance exceeds uint112
        """
        if balance0 > UINT112_MAX or balance1 > UINT112_MAX:
            raise ReserveOverflow(f"Balances ({balance0}, {balance1}) exceed uint112")

        block_timestamp = self.chain.timestamp % TIMESTAMP_MODULUS
        # Wraps around with the 32-bit timestamp
        time_elapsed = (block_timestamp - self.block_timestamp_last) % TIMESTAMP_MODULUS
        if time_elapsed > 0 and reserve0 != 0 and reserve1 != 0:
            self.price0_cumulative_last += uqdiv(encode(reserve1), reserve0) * time_elapsed
            self.price1_cumulative_last += uqdiv(encode(reserve0), reserve1) * time_elapsed

        self.reserve0 = balance0
        self.reserve1 = balance1
        self.block_timestamp_last = block_timestamp
        self.emit(Sync(self.address, balance0, balance1))
        logger.debug(
            "reserves_synced",
            pool=self.address[-8:],
            reserve0=balance0,
            reserve1=balance1,
            time_elapsed=time_elapsed,
        )

    def _mint_fee(self, reserve0: int, reserve1: int) -> bool:
        """Mint the protocol's share of fee growth since the last liquidity event.

        Fee growth shows up as growth of sqrt(k). Minting
        supply * (rootK - rootKLast) / (5 * rootK + rootKLast) shares gives the
        fee recipient 1/6 of that growth.

        Returns:
            True if the protocol fee is switched on
        """
        fee_to = self._registry().fee_to
        fee_on = fee_to != ZERO_ADDRESS
        k_last = self.k_last
        if fee_on:
            if k_last != 0:
                root_k = (S(reserve0) * reserve1).sqrt()
                root_k_last = S(k_last).sqrt()
                if root_k > root_k_last:
                    numerator = S(self.total_supply) * (root_k - root_k_last)
                    denominator = root_k * PROTOCOL_FEE_DIVISOR + root_k_last
                    liquidity = (numerator // denominator).value
                    if liquidity > 0:
                        self._mint(fee_to, liquidity)
                        logger.debug(
                            "protocol_fee_minted",
                            pool=self.address[-8:],
                            fee_to=fee_to,
                            liquidity=liquidity,
                        )
        elif k_last != 0:
            self.k_last = 0
        return fee_on

    # --- Liquidity ---

    @external
    def mint(self, caller: str, to: str) -> int:
        """Mint shares for tokens transferred in since the last reserve update.

        Returns:
            Shares minted to `to`

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth no shares
        """
        with self.nonreentrant():
            reserve0, reserve1, _ = self.get_reserves()
            balance0, balance1 = self._balances()
            amount0 = (S(balance0) - reserve0).value
            amount1 = (S(balance1) - reserve1).value

            fee_on = self._mint_fee(reserve0, reserve1)
            # Read after _mint_fee, which can grow the supply
            total_supply = self.total_supply
            if total_supply == 0:
                root = (S(amount0) * amount1).sqrt()
                if root <= MINIMUM_LIQUIDITY:
                    raise InsufficientLiquidityMinted(
                        f"Initial deposit ({amount0}, {amount1}) too small to lock "
                        f"{MINIMUM_LIQUIDITY} shares"
                    )
                liquidity = (root - MINIMUM_LIQUIDITY).value
                self._mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
            else:
                liquidity = (
                    (S(amount0) * total_supply // reserve0)
                    .min(S(amount1) * total_supply // reserve1)
                    .value
                )
            if liquidity <= 0:
                raise InsufficientLiquidityMinted()

            self._mint(to, liquidity)
            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self.k_last = self.reserve0 * self.reserve1
            self.emit(Mint(self.address, normalize_address(caller), amount0, amount1))
            logger.debug(
                "liquidity_minted",
                pool=self.address[-8:],
                to=to,
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
            )
            return liquidity

    @external
    def burn(self, caller: str, to: str) -> tuple[int, int]:
        """Burn the shares held by the pool and send the underlying tokens to `to`.

        Returns:
            (amount0, amount1) sent to `to`

        Raises:
            InsufficientLiquidityBurned: If either side rounds down to zero
        """
        with self.nonreentrant():
            reserve0, reserve1, _ = self.get_reserves()
            token0, token1 = self.token0, self.token1
            balance0, balance1 = self._balances()
            liquidity = self.balance_of(self.address)

            fee_on = self._mint_fee(reserve0, reserve1)
            total_supply = self.total_supply
            if total_supply == 0:
                raise InsufficientLiquidityBurned("Pool has no outstanding shares")
            # Balances, not reserves: pro-rata share of everything the pool holds
            amount0 = (S(liquidity) * balance0 // total_supply).value
            amount1 = (S(liquidity) * balance1 // total_supply).value
            if amount0 <= 0 or amount1 <= 0:
                raise InsufficientLiquidityBurned(
                    f"Burning {liquidity} shares yields ({amount0}, {amount1})"
                )

            self._burn(self.address, liquidity)
            self._send(token0, to, amount0)
            self._send(token1, to, amount1)
            balance0, balance1 = self._balances()

            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self.k_last = self.reserve0 * self.reserve1
            self.emit(
                Burn(self.address, normalize_address(caller), amount0, amount1, normalize_address(to))
            )
            logger.debug(
                "liquidity_burned",
                pool=self.address[-8:],
                to=to,
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
            )
            return amount0, amount1

    # --- Trading ---

    @external
    def swap(
        self,
        caller: str,
        amount0_out: int,
        amount1_out: int,
        to: str,
        data: bytes = b"",
    ) -> None:
        """Send the requested outputs, then verify enough input arrived.

        If `data` is non-empty, `to` must implement FlashSwapCallee and is
        called after the outputs are sent and before inputs are measured.

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InsufficientLiquidity: If an output would drain its reserve
            InvalidRecipient: If `to` is one of the pool's tokens
            InsufficientInputAmount: If nothing was paid in
            KInvariantViolation: If the fee-adjusted product decreased
        """
        with self.nonreentrant():
            if amount0_out < 0 or amount1_out < 0 or (amount0_out == 0 and amount1_out == 0):
                raise InsufficientOutputAmount(
                    f"Invalid swap outputs ({amount0_out}, {amount1_out})"
                )
            reserve0, reserve1, _ = self.get_reserves()
            if amount0_out >= reserve0 or amount1_out >= reserve1:
                raise InsufficientLiquidity(
                    f"Outputs ({amount0_out}, {amount1_out}) not below reserves "
                    f"({reserve0}, {reserve1})"
                )

            token0, token1 = self.token0, self.token1
            to = normalize_address(to)
            if to in (token0, token1):
                raise InvalidRecipient()

            # Optimistic transfer: pay out before checking what came in
            if amount0_out > 0:
                self._send(token0, to, amount0_out)
            if amount1_out > 0:
                self._send(token1, to, amount1_out)
            if data:
                self._flash_callback(caller, to, amount0_out, amount1_out, data)
            balance0, balance1 = self._balances()

            amount0_in = S(balance0).saturating_sub(reserve0 - amount0_out).value
            amount1_in = S(balance1).saturating_sub(reserve1 - amount1_out).value
            if amount0_in == 0 and amount1_in == 0:
                raise InsufficientInputAmount()

            balance0_adjusted = S(balance0) * FEE_DENOMINATOR - S(amount0_in) * FEE_ADJUSTMENT
            balance1_adjusted = S(balance1) * FEE_DENOMINATOR - S(amount1_in) * FEE_ADJUSTMENT
            if balance0_adjusted * balance1_adjusted < S(reserve0) * reserve1 * FEE_DENOMINATOR**2:
                raise KInvariantViolation(
                    f"Fee-adjusted product {(balance0_adjusted * balance1_adjusted).value} "
                    f"below {reserve0 * reserve1 * FEE_DENOMINATOR**2}"
                )

            self._update(balance0, balance1, reserve0, reserve1)
            self.emit(
                Swap(
                    self.address,
                    normalize_address(caller),
                    amount0_in,
                    amount1_in,
                    amount0_out,
                    amount1_out,
                    to,
                )
            )
            logger.debug(
                "swap_executed",
                pool=self.address[-8:],
                amount0_in=amount0_in,
                amount1_in=amount1_in,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
            )

    def _flash_callback(
        self, caller: str, to: str, amount0_out: int, amount1_out: int, data: bytes
    ) -> None:
        callee = self.chain.get(to)
        if not isinstance(callee, FlashSwapCallee):
            raise InvalidCallee(f"{to} cannot receive flash swaps")
        logger.debug("flash_swap_callback", pool=self.address[-8:], callee=to)
        callee.on_flash_swap(self.address, normalize_address(caller), amount0_out, amount1_out, data)

    # --- Reconciliation ---

    @external
    def skim(self, caller: str, to: str) -> tuple[int, int]:
        """Send balances in excess of reserves to `to`.

        Returns:
            (excess0, excess1) sent
        """
        with self.nonreentrant():
            balance0, balance1 = self._balances()
            excess0 = S(balance0).saturating_sub(self.reserve0).value
            excess1 = S(balance1).saturating_sub(self.reserve1).value
            if excess0:
                self._send(self.token0, to, excess0)
            if excess1:
                self._send(self.token1, to, excess1)
            logger.debug("pool_skimmed", pool=self.address[-8:], by=caller, excess0=excess0, excess1=excess1)
            return excess0, excess1

    @external
    def sync(self, caller: str) -> None:
        """Force reserves to match balances."""
        with self.nonreentrant():
            balance0, balance1 = self._balances()
            self._update(balance0, balance1, self.reserve0, self.reserve1)
            logger.debug("pool_force_synced", pool=self.address[-8:], by=caller)
