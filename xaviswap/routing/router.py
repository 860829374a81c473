"""Trade and liquidity orchestration.

The Router is the caller-facing entry point. It quotes trades against pool
reserves, enforces the caller's bounds (deadline, minimum output / maximum
input, maximum trade size), moves the caller's input into the first pool and
drives each pool's swap/mint/burn.

Supports:
- Exact-input and exact-output swaps over paths of any length
- Native-asset variants that wrap input / unwrap output at the path ends
- Liquidity provision with ratio resolution and automatic pair creation
- Liquidity withdrawal with per-side minimums

Intermediate hop outputs go straight to the next pool. The router only holds
funds within a single call, when it has to wrap or unwrap the native asset.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

import structlog

from xaviswap.admin import AdminControls
from xaviswap.amm.constant_product import constant_product
from xaviswap.chain import Chain, Contract, checked_address, external
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.errors import (
    DeadlineExpired,
    ExcessiveInputAmount,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientOutputAmount,
    InvalidPath,
    TradeSizeExceeded,
    UnsupportedAsset,
)
from xaviswap.events import MaxSwapPercentUpdated
from xaviswap.models.types import normalize_address
from xaviswap.pools.addressing import compute_pair_address, sort_tokens
from xaviswap.pools.registry import PoolRegistry
from xaviswap.routing.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from xaviswap.routing.quoting import PathQuoter
from xaviswap.tokens.erc20 import FungibleToken
from xaviswap.tokens.wrapped import WrappedNative
from xaviswap.transfer import safe_transfer, safe_transfer_from, safe_transfer_native

logger = structlog.get_logger()


class Router(Contract):
    """Routes trades and liquidity operations through registry pools.

    Args:
        chain: Execution host
        address: Router address
        registry: Address of the PoolRegistry
        wrapped_native: Address of the WrappedNative token
        owner: Owner of the pause switch and risk settings
        config: Initial risk settings
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        registry: str,
        wrapped_native: str,
        owner: str,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
    ) -> None:
        super().__init__(chain, address)
        self.registry = normalize_address(registry)
        self.wrapped_native = normalize_address(wrapped_native)
        self.admin = AdminControls(owner=owner)
        self.config = config

    # --- Collaborators ---

    def _registry(self) -> PoolRegistry:
        return self.chain.get_as(self.registry, PoolRegistry)

    def _wrapper(self) -> WrappedNative:
        return self.chain.get_as(self.wrapped_native, WrappedNative)

    def _quoter(self) -> PathQuoter:
        return PathQuoter(self._registry(), constant_product)

    # --- Guards ---

    def _guard(self, deadline: int, to: str) -> None:
        """Common entry checks: pause switch, deadline, then recipient."""
        self.admin.require_not_paused()
        if self.chain.timestamp > deadline:
            raise DeadlineExpired(f"Deadline {deadline} passed at {self.chain.timestamp}")
        checked_address(to)

    def _receive_native(self, caller: str, value: int) -> None:
        if value:
            safe_transfer_native(self.chain, caller, self.address, value)

    def _check_trade_size(self, path: Sequence[str], amount_in: int) -> None:
        """Circuit breaker on the first hop's input against its input-side reserve."""
        reserve_in, _ = self._quoter().get_reserves(path[0], path[1])
        limit = self.config.max_input_for(reserve_in)
        if amount_in > limit:
            raise TradeSizeExceeded(
                f"Input {amount_in} exceeds {self.config.max_swap_percent}% of reserve "
                f"{reserve_in} ({limit})"
            )

    # --- Transfers ---

    def _pay_into_pool(self, token: str, payer: str, pool: str, amount: int) -> None:
        """Move `amount` of `token` from `payer` into `pool` and check it all arrived.

        Raises:
            UnsupportedAsset: If the pool received a different amount
        """
        asset = self.chain.get_as(token, FungibleToken)
        before = asset.balance_of(pool)
        if normalize_address(payer) == self.address:
            safe_transfer(self.chain, token, self.address, pool, amount)
        else:
            safe_transfer_from(self.chain, token, self.address, payer, pool, amount)
        received = asset.balance_of(pool) - before
        if received != amount:
            raise UnsupportedAsset(
                f"{token} delivered {received} instead of {amount}; "
                "fee-on-transfer and rebasing assets are not supported"
            )

    def _wrap_into_pool(self, pool: str, amount: int) -> None:
        self._wrapper().deposit(self.address, amount)
        self._pay_into_pool(self.wrapped_native, self.address, pool, amount)

    def _unwrap_to(self, to: str, amount: int) -> None:
        self._wrapper().withdraw(self.address, amount)
        safe_transfer_native(self.chain, self.address, to, amount)

    def _refund(self, caller: str, amount: int) -> None:
        if amount > 0:
            safe_transfer_native(self.chain, self.address, caller, amount)

    # --- Liquidity ---

    def _add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
    ) -> tuple[int, int]:
        """Resolve desired amounts to the pair actually deposited.

        An empty pool takes the desired amounts as-is. Otherwise one side is
        matched to the current reserve ratio, choosing the option that does
        not exceed either desired amount.
        """
        registry = self._registry()
        if registry.get_pair(token_a, token_b) == ZERO_ADDRESS:
            registry.create_pair(self.address, token_a, token_b)
        reserve_a, reserve_b = self._quoter().get_reserves(token_a, token_b)
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired

        amount_b_optimal = constant_product.quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            if amount_b_optimal < amount_b_min:
                raise InsufficientBAmount(f"B amount {amount_b_optimal} below minimum {amount_b_min}")
            return amount_a_desired, amount_b_optimal

        amount_a_optimal = constant_product.quote(amount_b_desired, reserve_b, reserve_a)
        if amount_a_optimal > amount_a_desired or amount_a_optimal < amount_a_min:
            raise InsufficientAAmount(f"A amount {amount_a_optimal} below minimum {amount_a_min}")
        return amount_a_optimal, amount_b_desired

    @external
    def add_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int, int]:
        """Deposit two tokens, creating the pool if needed.

        Returns:
            (amount_a, amount_b, liquidity)
        """
        self._guard(deadline, to)
        amount_a, amount_b = self._add_liquidity(
            token_a, token_b, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min
        )
        pool = self._quoter().pool_for(token_a, token_b)
        self._pay_into_pool(token_a, caller, pool.address, amount_a)
        self._pay_into_pool(token_b, caller, pool.address, amount_b)
        liquidity = pool.mint(self.address, to)
        logger.info(
            "liquidity_added",
            pool=pool.address[-8:],
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b, liquidity

    @external
    def add_liquidity_native(
        self,
        caller: str,
        token: str,
        amount_token_desired: int,
        amount_token_min: int,
        amount_native_min: int,
        to: str,
        deadline: int,
        value: int = 0,
    ) -> tuple[int, int, int]:
        """Deposit a token and native balance (`value`); unused native is refunded.

        Returns:
            (amount_token, amount_native, liquidity)
        """
        self._guard(deadline, to)
        self._receive_native(caller, value)
        amount_token, amount_native = self._add_liquidity(
            token,
            self.wrapped_native,
            amount_token_desired,
            value,
            amount_token_min,
            amount_native_min,
        )
        pool = self._quoter().pool_for(token, self.wrapped_native)
        self._pay_into_pool(token, caller, pool.address, amount_token)
        self._wrap_into_pool(pool.address, amount_native)
        liquidity = pool.mint(self.address, to)
        self._refund(caller, value - amount_native)
        logger.info(
            "liquidity_added",
            pool=pool.address[-8:],
            amount_a=amount_token,
            amount_b=amount_native,
            liquidity=liquidity,
            native=True,
        )
        return amount_token, amount_native, liquidity

    def _remove_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
    ) -> tuple[int, int]:
        pool = self._quoter().pool_for(token_a, token_b)
        # Burn-by-transfer: the pool burns whatever shares it holds
        safe_transfer_from(self.chain, pool.address, self.address, caller, pool.address, liquidity)
        amount0, amount1 = pool.burn(self.address, to)
        token0, _ = sort_tokens(token_a, token_b)
        if normalize_address(token_a) == token0:
            amount_a, amount_b = amount0, amount1
        else:
            amount_a, amount_b = amount1, amount0
        if amount_a < amount_a_min:
            raise InsufficientAAmount(f"A amount {amount_a} below minimum {amount_a_min}")
        if amount_b < amount_b_min:
            raise InsufficientBAmount(f"B amount {amount_b} below minimum {amount_b_min}")
        logger.info(
            "liquidity_removed",
            pool=pool.address[-8:],
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b

    @external
    def remove_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        """Burn `liquidity` shares (the router must be approved) and send both tokens to `to`.

        Returns:
            (amount_a, amount_b)
        """
        self._guard(deadline, to)
        return self._remove_liquidity(
            caller, token_a, token_b, liquidity, amount_a_min, amount_b_min, to
        )

    @external
    def remove_liquidity_native(
        self,
        caller: str,
        token: str,
        liquidity: int,
        amount_token_min: int,
        amount_native_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        """Burn shares of a token/wrapped-native pool, paying the native side unwrapped.

        Returns:
            (amount_token, amount_native)
        """
        self._guard(deadline, to)
        amount_token, amount_native = self._remove_liquidity(
            caller,
            token,
            self.wrapped_native,
            liquidity,
            amount_token_min,
            amount_native_min,
            self.address,
        )
        safe_transfer(self.chain, token, self.address, to, amount_token)
        self._unwrap_to(to, amount_native)
        return amount_token, amount_native

    # --- Swaps ---

    def _swap(self, amounts: Sequence[int], path: Sequence[str], to: str) -> None:
        """Execute each hop; the input for hop 0 must already be in its pool."""
        quoter = self._quoter()
        for i in range(len(path) - 1):
            token_in, token_out = path[i], path[i + 1]
            token0, _ = sort_tokens(token_in, token_out)
            amount_out = amounts[i + 1]
            if normalize_address(token_in) == token0:
                amount0_out, amount1_out = 0, amount_out
            else:
                amount0_out, amount1_out = amount_out, 0
            if i < len(path) - 2:
                recipient = quoter.pool_for(token_out, path[i + 2]).address
            else:
                recipient = to
            quoter.pool_for(token_in, token_out).swap(
                self.address, amount0_out, amount1_out, recipient, b""
            )

    def _first_pool(self, path: Sequence[str]) -> str:
        return self._quoter().pool_for(path[0], path[1]).address

    def _require_native_in(self, path: Sequence[str]) -> None:
        if len(path) < 2 or normalize_address(path[0]) != self.wrapped_native:
            raise InvalidPath("Path must start with the wrapped native token")

    def _require_native_out(self, path: Sequence[str]) -> None:
        if len(path) < 2 or normalize_address(path[-1]) != self.wrapped_native:
            raise InvalidPath("Path must end with the wrapped native token")

    def _exact_input_amounts(
        self, amount_in: int, amount_out_min: int, path: Sequence[str]
    ) -> list[int]:
        amounts = self._quoter().get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise InsufficientOutputAmount(f"Output {amounts[-1]} below minimum {amount_out_min}")
        self._check_trade_size(path, amounts[0])
        return amounts

    def _exact_output_amounts(
        self, amount_out: int, amount_in_max: int, path: Sequence[str]
    ) -> list[int]:
        amounts = self._quoter().get_amounts_in(amount_out, path)
        if amounts[0] > amount_in_max:
            raise ExcessiveInputAmount(f"Input {amounts[0]} above maximum {amount_in_max}")
        self._check_trade_size(path, amounts[0])
        return amounts

    def _log_swap(self, kind: str, path: Sequence[str], amounts: Sequence[int]) -> None:
        logger.info(
            "swap_routed",
            kind=kind,
            hops=len(path) - 1,
            amount_in=amounts[0],
            amount_out=amounts[-1],
        )

    @external
    def swap_exact_tokens_for_tokens(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Sell exactly `amount_in` of path[0] for at least `amount_out_min` of path[-1]."""
        self._guard(deadline, to)
        amounts = self._exact_input_amounts(amount_in, amount_out_min, path)
        self._pay_into_pool(path[0], caller, self._first_pool(path), amounts[0])
        self._swap(amounts, path, to)
        self._log_swap("exact_tokens_for_tokens", path, amounts)
        return amounts

    @external
    def swap_tokens_for_exact_tokens(
        self,
        caller: str,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Buy exactly `amount_out` of path[-1] for at most `amount_in_max` of path[0]."""
        self._guard(deadline, to)
        amounts = self._exact_output_amounts(amount_out, amount_in_max, path)
        self._pay_into_pool(path[0], caller, self._first_pool(path), amounts[0])
        self._swap(amounts, path, to)
        self._log_swap("tokens_for_exact_tokens", path, amounts)
        return amounts

    @external
    def swap_exact_native_for_tokens(
        self,
        caller: str,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
        value: int = 0,
    ) -> list[int]:
        """Sell exactly `value` native for at least `amount_out_min` of path[-1]."""
        self._guard(deadline, to)
        self._require_native_in(path)
        self._receive_native(caller, value)
        amounts = self._exact_input_amounts(value, amount_out_min, path)
        self._wrap_into_pool(self._first_pool(path), amounts[0])
        self._swap(amounts, path, to)
        self._log_swap("exact_native_for_tokens", path, amounts)
        return amounts

    @external
    def swap_tokens_for_exact_native(
        self,
        caller: str,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Buy exactly `amount_out` native for at most `amount_in_max` of path[0]."""
        self._guard(deadline, to)
        self._require_native_out(path)
        amounts = self._exact_output_amounts(amount_out, amount_in_max, path)
        self._pay_into_pool(path[0], caller, self._first_pool(path), amounts[0])
        self._swap(amounts, path, self.address)
        self._unwrap_to(to, amounts[-1])
        self._log_swap("tokens_for_exact_native", path, amounts)
        return amounts

    @external
    def swap_exact_tokens_for_native(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Sell exactly `amount_in` of path[0] for at least `amount_out_min` native."""
        self._guard(deadline, to)
        self._require_native_out(path)
        amounts = self._exact_input_amounts(amount_in, amount_out_min, path)
        self._pay_into_pool(path[0], caller, self._first_pool(path), amounts[0])
        self._swap(amounts, path, self.address)
        self._unwrap_to(to, amounts[-1])
        self._log_swap("exact_tokens_for_native", path, amounts)
        return amounts

    @external
    def swap_native_for_exact_tokens(
        self,
        caller: str,
        amount_out: int,
        path: Sequence[str],
        to: str,
        deadline: int,
        value: int = 0,
    ) -> list[int]:
        """Buy exactly `amount_out` of path[-1] with native; any unused `value` is refunded."""
        self._guard(deadline, to)
        self._require_native_in(path)
        self._receive_native(caller, value)
        amounts = self._exact_output_amounts(amount_out, value, path)
        self._wrap_into_pool(self._first_pool(path), amounts[0])
        self._swap(amounts, path, to)
        self._refund(caller, value - amounts[0])
        self._log_swap("native_for_exact_tokens", path, amounts)
        return amounts

    # --- Views ---

    def sort_tokens(self, token_a: str, token_b: str) -> tuple[str, str]:
        return sort_tokens(token_a, token_b)

    def pair_for(self, token_a: str, token_b: str) -> str:
        return compute_pair_address(self.registry, token_a, token_b)

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        return self._quoter().get_reserves(token_a, token_b)

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        return constant_product.quote(amount_a, reserve_a, reserve_b)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return constant_product.get_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return constant_product.get_amount_in(amount_out, reserve_in, reserve_out)

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        return self._quoter().get_amounts_out(amount_in, path)

    def get_amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        return self._quoter().get_amounts_in(amount_out, path)

    # --- Administration ---

    @property
    def owner(self) -> str:
        return self.admin.owner

    @property
    def paused(self) -> bool:
        return self.admin.paused

    @property
    def max_swap_percent(self) -> int:
        return self.config.max_swap_percent

    @external
    def set_max_swap_percent(self, caller: str, percent: int) -> None:
        """Change the first-hop trade size limit; bounded to (0, 100]."""
        self.admin.only_owner(caller)
        old = self.config.max_swap_percent
        self.config = replace(self.config, max_swap_percent=percent)
        self.emit(MaxSwapPercentUpdated(self.address, old, percent))
        logger.info("max_swap_percent_updated", old=old, new=percent)

    @external
    def pause(self, caller: str) -> None:
        self.emit(self.admin.pause(caller, self.address))

    @external
    def unpause(self, caller: str) -> None:
        self.emit(self.admin.unpause(caller, self.address))

    @external
    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self.emit(self.admin.transfer_ownership(caller, new_owner, self.address))

    @external
    def renounce_ownership(self, caller: str) -> None:
        self.admin.renounce_ownership(caller)


__all__ = ["Router"]
