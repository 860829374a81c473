"""Pool registry (factory).

PoolRegistry creates at most one LiquidityPool per unordered token pair, at
a deterministic address, and holds the protocol-fee configuration and the
pair-creation pause switch. Pools are referenced by address; resolve them
through the Chain (or the `pool` helper).
"""

from __future__ import annotations

import structlog

from xaviswap.admin import AdminControls
from xaviswap.chain import Chain, Contract, checked_address, external
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.errors import Forbidden, PairExists
from xaviswap.events import PairCreated
from xaviswap.models.types import normalize_address
from xaviswap.pools.addressing import compute_pair_address, sort_tokens
from xaviswap.pools.pair import LiquidityPool

logger = structlog.get_logger()


class PoolRegistry(Contract):
    """Registry of liquidity pools keyed by canonical token pair.

    Args:
        chain: Execution host
        address: Registry address
        fee_to_setter: Account allowed to configure the protocol-fee recipient.
            Also the initial owner of the pause switch unless `owner` is given.
        owner: Owner of the administrative controls
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        fee_to_setter: str,
        owner: str | None = None,
    ) -> None:
        super().__init__(chain, address)
        self.fee_to = ZERO_ADDRESS
        self.fee_to_setter = normalize_address(fee_to_setter)
        self.admin = AdminControls(owner=owner or fee_to_setter)
        self._pairs: dict[tuple[str, str], str] = {}
        self.all_pairs: list[str] = []

    # --- Lookups ---

    def get_pair(self, token_a: str, token_b: str) -> str:
        """Return the pool address for a pair, or the zero address if none exists."""
        return self._pairs.get(sort_tokens(token_a, token_b), ZERO_ADDRESS)

    def pool(self, token_a: str, token_b: str) -> LiquidityPool | None:
        """Resolve the pool for a pair (order independent)."""
        address = self.get_pair(token_a, token_b)
        if address == ZERO_ADDRESS:
            return None
        return self.chain.get_as(address, LiquidityPool)

    def all_pairs_length(self) -> int:
        return len(self.all_pairs)

    def pair_address(self, token_a: str, token_b: str) -> str:
        """Address the pool for this pair has (or will have once created)."""
        return compute_pair_address(self.address, token_a, token_b)

    # --- Pair creation ---

    @external
    def create_pair(self, caller: str, token_a: str, token_b: str) -> str:
        """Deploy and initialize the pool for a new pair.

        Raises:
            PausedError: If pair creation is paused
            IdenticalAddresses: If both tokens are the same
            ZeroAddress: If a token is the zero address
            PairExists: If the pair already has a pool
        """
        self.admin.require_not_paused()
        token0, token1 = sort_tokens(token_a, token_b)
        if (token0, token1) in self._pairs:
            raise PairExists(f"Pair {token0}/{token1} already exists")

        pool = self.chain.deploy(
            LiquidityPool,
            self.address,
            deployer=self.address,
            address=compute_pair_address(self.address, token0, token1),
        )
        pool.initialize(self.address, token0, token1)
        self._pairs[(token0, token1)] = pool.address
        self.all_pairs.append(pool.address)
        self.emit(PairCreated(self.address, token0, token1, pool.address, len(self.all_pairs)))
        logger.info(
            "pair_created",
            pool=pool.address,
            token0=token0,
            token1=token1,
            by=normalize_address(caller),
            total_pairs=len(self.all_pairs),
        )
        return pool.address

    # --- Protocol fee configuration ---

    @external
    def set_fee_to(self, caller: str, fee_to: str) -> None:
        if normalize_address(caller) != self.fee_to_setter:
            raise Forbidden("Only the fee setter can change the fee recipient")
        self.fee_to = checked_address(fee_to)
        logger.info("fee_to_updated", fee_to=self.fee_to)

    @external
    def set_fee_to_setter(self, caller: str, fee_to_setter: str) -> None:
        if normalize_address(caller) != self.fee_to_setter:
            raise Forbidden("Only the fee setter can hand over the role")
        self.fee_to_setter = checked_address(fee_to_setter)
        logger.info("fee_to_setter_updated", fee_to_setter=self.fee_to_setter)

    # --- Administration ---

    @property
    def owner(self) -> str:
        return self.admin.owner

    @property
    def paused(self) -> bool:
        return self.admin.paused

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
