"""Tests for Router liquidity and token-to-token swaps."""

import pytest

from xaviswap.constants import MINIMUM_LIQUIDITY
from xaviswap.errors import (
    DeadlineExpired,
    ExcessiveInputAmount,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidAddress,
    InvalidPath,
    PairNotFound,
    TradeSizeExceeded,
    TransferFromFailed,
    UnsupportedAsset,
)
from xaviswap.events import Swap
from xaviswap.models.types import UINT256_MAX
from xaviswap.pools.pair import LiquidityPool
from tests.helpers import ALICE, BOB, CAROL, DEPLOYER, deadline, make_token, provide_liquidity
from tests.helpers.contracts import FeeOnTransferToken


@pytest.fixture
def small_pool(deployment, token_a, token_b) -> LiquidityPool:
    """A/B pool holding exactly (1000 A, 4000 B)."""
    provide_liquidity(deployment, ALICE, token_a.address, token_b.address, 1000, 4000)
    return deployment.registry.pool(token_a.address, token_b.address)


class TestAddLiquidity:
    """Tests for two-token liquidity provision."""

    def test_first_provision_creates_pair(self, router, registry, chain, token_a, token_b):
        amount_a, amount_b, liquidity = router.add_liquidity(
            ALICE, token_a.address, token_b.address, 1000, 4000, 0, 0, ALICE, deadline(chain)
        )

        assert (amount_a, amount_b) == (1000, 4000)
        assert liquidity == 2000 - MINIMUM_LIQUIDITY
        pool = registry.pool(token_a.address, token_b.address)
        assert pool.balance_of(ALICE) == liquidity
        assert router.get_reserves(token_a.address, token_b.address) == (1000, 4000)

    def test_excess_b_is_not_taken(self, router, chain, small_pool, token_a, token_b):
        before = token_b.balance_of(BOB)
        amount_a, amount_b, liquidity = router.add_liquidity(
            BOB, token_a.address, token_b.address, 1000, 5000, 0, 0, BOB, deadline(chain)
        )
        assert (amount_a, amount_b) == (1000, 4000)
        assert liquidity == 2000
        assert token_b.balance_of(BOB) == before - 4000

    def test_excess_a_is_not_taken(self, router, chain, small_pool, token_a, token_b):
        amount_a, amount_b, _ = router.add_liquidity(
            BOB, token_a.address, token_b.address, 1000, 2000, 0, 0, BOB, deadline(chain)
        )
        assert (amount_a, amount_b) == (500, 2000)

    def test_b_minimum_enforced(self, router, chain, small_pool, token_a, token_b):
        with pytest.raises(InsufficientBAmount):
            router.add_liquidity(
                BOB, token_a.address, token_b.address, 1000, 5000, 0, 4500, BOB, deadline(chain)
            )

    def test_a_minimum_enforced(self, router, chain, small_pool, token_a, token_b):
        with pytest.raises(InsufficientAAmount):
            router.add_liquidity(
                BOB, token_a.address, token_b.address, 1000, 2000, 600, 0, BOB, deadline(chain)
            )

    def test_expired_deadline(self, router, chain, token_a, token_b):
        with pytest.raises(DeadlineExpired):
            router.add_liquidity(
                ALICE, token_a.address, token_b.address, 1000, 4000, 0, 0, ALICE, chain.timestamp - 1
            )

    def test_deadline_equal_to_now_is_accepted(self, router, chain, token_a, token_b):
        router.add_liquidity(
            ALICE, token_a.address, token_b.address, 1000, 4000, 0, 0, ALICE, chain.timestamp
        )

    def test_fee_on_transfer_asset_rejected_and_pair_rolled_back(
        self, deployment, router, registry, chain, token_a
    ):
        taxed = make_token(deployment, "TAX", holders=[ALICE], token_cls=FeeOnTransferToken)
        before = taxed.balance_of(ALICE)

        with pytest.raises(UnsupportedAsset):
            router.add_liquidity(
                ALICE, taxed.address, token_a.address, 10_000, 10_000, 0, 0, ALICE, deadline(chain)
            )

        assert registry.all_pairs_length() == 0
        assert not chain.is_contract(registry.pair_address(taxed.address, token_a.address))
        assert taxed.balance_of(ALICE) == before


class TestRemoveLiquidity:
    """Tests for share withdrawal through the router."""

    def test_remove_returns_request_order(self, router, chain, small_pool, token_a, token_b):
        small_pool.approve(ALICE, router.address, UINT256_MAX)
        before_a = token_a.balance_of(ALICE)
        before_b = token_b.balance_of(ALICE)

        amount_b, amount_a = router.remove_liquidity(
            ALICE, token_b.address, token_a.address, 500, 0, 0, ALICE, deadline(chain)
        )

        assert (amount_a, amount_b) == (250, 1000)
        assert token_a.balance_of(ALICE) == before_a + 250
        assert token_b.balance_of(ALICE) == before_b + 1000
        assert small_pool.balance_of(ALICE) == 500

    def test_minimum_rolls_back_the_burn(self, router, chain, small_pool, token_a, token_b):
        small_pool.approve(ALICE, router.address, UINT256_MAX)
        with pytest.raises(InsufficientAAmount):
            router.remove_liquidity(
                ALICE, token_a.address, token_b.address, 500, 251, 0, ALICE, deadline(chain)
            )
        assert small_pool.balance_of(ALICE) == 1000
        assert small_pool.total_supply == 2000

    def test_b_minimum(self, router, chain, small_pool, token_a, token_b):
        small_pool.approve(ALICE, router.address, UINT256_MAX)
        with pytest.raises(InsufficientBAmount):
            router.remove_liquidity(
                ALICE, token_a.address, token_b.address, 500, 0, 1001, ALICE, deadline(chain)
            )

    def test_requires_share_approval(self, router, chain, small_pool, token_a, token_b):
        with pytest.raises(TransferFromFailed):
            router.remove_liquidity(
                ALICE, token_a.address, token_b.address, 500, 0, 0, ALICE, deadline(chain)
            )

    def test_unknown_pair(self, router, chain, token_a, token_c):
        with pytest.raises(PairNotFound):
            router.remove_liquidity(
                ALICE, token_a.address, token_c.address, 1, 0, 0, ALICE, deadline(chain)
            )


class TestSwapExactTokensForTokens:
    """Tests for exact-input token swaps."""

    def test_single_hop(self, router, chain, small_pool, token_a, token_b):
        """100 A against (1000, 4000) buys 362 B."""
        before_a = token_a.balance_of(BOB)
        before_b = token_b.balance_of(BOB)

        amounts = router.swap_exact_tokens_for_tokens(
            BOB, 100, 362, [token_a.address, token_b.address], BOB, deadline(chain)
        )

        assert amounts == [100, 362]
        assert token_a.balance_of(BOB) == before_a - 100
        assert token_b.balance_of(BOB) == before_b + 362
        assert router.get_reserves(token_a.address, token_b.address) == (1100, 3638)

    def test_output_below_minimum_fails(self, router, chain, small_pool, token_a, token_b):
        before = token_a.balance_of(BOB)
        events = len(chain.events)
        with pytest.raises(InsufficientOutputAmount):
            router.swap_exact_tokens_for_tokens(
                BOB, 100, 363, [token_a.address, token_b.address], BOB, deadline(chain)
            )
        assert token_a.balance_of(BOB) == before
        assert len(chain.events) == events

    def test_multi_hop_routes_pool_to_pool(
        self, router, chain, pool_ab, pool_bc, token_a, token_b, token_c
    ):
        path = [token_a.address, token_b.address, token_c.address]
        expected = router.get_amounts_out(10**18, path)
        before_c = token_c.balance_of(BOB)

        amounts = router.swap_exact_tokens_for_tokens(BOB, 10**18, 0, path, BOB, deadline(chain))

        assert amounts == expected
        assert token_c.balance_of(BOB) == before_c + amounts[-1]
        # Intermediate B went straight from the first pool into the second
        assert token_b.balance_of(router.address) == 0
        first, second = chain.events_of(Swap)[-2:]
        assert first.to == pool_bc.address
        assert second.to == BOB

    def test_trade_size_limit(self, router, chain, small_pool, token_a, token_b):
        """Default limit is 30% of the input-side reserve."""
        path = [token_a.address, token_b.address]
        with pytest.raises(TradeSizeExceeded):
            router.swap_exact_tokens_for_tokens(BOB, 301, 0, path, BOB, deadline(chain))
        router.swap_exact_tokens_for_tokens(BOB, 300, 0, path, BOB, deadline(chain))

    def test_trade_size_limit_checks_first_hop_only(
        self, deployment, router, chain, small_pool, token_a, token_b, token_c
    ):
        provide_liquidity(deployment, ALICE, token_b.address, token_c.address, 2000, 2000)
        path = [token_a.address, token_b.address, token_c.address]

        amounts = router.swap_exact_tokens_for_tokens(BOB, 300, 0, path, BOB, deadline(chain))

        # Second hop input is far above 30% of its 2000 B reserve
        assert amounts[1] > 600

    def test_expired_deadline(self, router, chain, small_pool, token_a, token_b):
        chain.advance(10)
        with pytest.raises(DeadlineExpired):
            router.swap_exact_tokens_for_tokens(
                BOB, 100, 0, [token_a.address, token_b.address], BOB, chain.timestamp - 5
            )

    def test_path_too_short(self, router, chain, small_pool, token_a):
        with pytest.raises(InvalidPath):
            router.swap_exact_tokens_for_tokens(BOB, 100, 0, [token_a.address], BOB, deadline(chain))

    def test_unsupported_asset_rolls_back_input(self, deployment, router, registry, chain, token_a):
        """A taxed token in an existing pool is rejected after the pull and fully undone."""
        taxed = make_token(deployment, "TAX", holders=[ALICE, BOB], token_cls=FeeOnTransferToken)
        pool = chain.get_as(registry.create_pair(ALICE, taxed.address, token_a.address), LiquidityPool)
        taxed.transfer(ALICE, pool.address, 100_000)
        token_a.transfer(ALICE, pool.address, 100_000)
        pool.mint(ALICE, ALICE)
        before = taxed.balance_of(BOB)
        pool_balance = taxed.balance_of(pool.address)

        with pytest.raises(UnsupportedAsset):
            router.swap_exact_tokens_for_tokens(
                BOB, 1000, 0, [taxed.address, token_a.address], BOB, deadline(chain)
            )

        assert taxed.balance_of(BOB) == before
        assert taxed.balance_of(pool.address) == pool_balance

    def test_malformed_recipient_rejected(self, router, chain, small_pool, token_a, token_b):
        """Output can never be credited to an address nobody controls."""
        balance_before = token_a.balance_of(BOB)
        reserves_before = small_pool.get_reserves()

        with pytest.raises(InvalidAddress):
            router.swap_exact_tokens_for_tokens(
                BOB, 100, 0, [token_a.address, token_b.address], "not-an-address", deadline(chain)
            )

        assert token_a.balance_of(BOB) == balance_before
        assert small_pool.get_reserves() == reserves_before
        assert "0xnot-an-address" not in token_b.balances


class TestSwapTokensForExactTokens:
    """Tests for exact-output token swaps."""

    def test_single_hop(self, router, chain, small_pool, token_a, token_b):
        before_a = token_a.balance_of(BOB)
        amounts = router.swap_tokens_for_exact_tokens(
            BOB, 362, 100, [token_a.address, token_b.address], BOB, deadline(chain)
        )
        assert amounts == [100, 362]
        assert token_a.balance_of(BOB) == before_a - 100

    def test_excessive_input_fails_before_any_transfer(
        self, deployment, router, chain, small_pool, token_a, token_b
    ):
        """CAROL never approved the router, so any pull would fail with a transfer error."""
        token_a.mint(DEPLOYER, CAROL, 1000)
        with pytest.raises(ExcessiveInputAmount):
            router.swap_tokens_for_exact_tokens(
                CAROL, 362, 99, [token_a.address, token_b.address], CAROL, deadline(chain)
            )
        with pytest.raises(TransferFromFailed):
            router.swap_tokens_for_exact_tokens(
                CAROL, 362, 100, [token_a.address, token_b.address], CAROL, deadline(chain)
            )

    def test_multi_hop_delivers_exact_output(
        self, router, chain, pool_ab, pool_bc, token_a, token_b, token_c
    ):
        path = [token_a.address, token_b.address, token_c.address]
        before_c = token_c.balance_of(BOB)

        amounts = router.swap_tokens_for_exact_tokens(BOB, 10**18, 10**19, path, BOB, deadline(chain))

        assert amounts[-1] == 10**18
        assert token_c.balance_of(BOB) == before_c + 10**18

    def test_output_reserve_cannot_be_drained(self, router, chain, small_pool, token_a, token_b):
        with pytest.raises(InsufficientLiquidity):
            router.swap_tokens_for_exact_tokens(
                BOB, 4000, 10**9, [token_a.address, token_b.address], BOB, deadline(chain)
            )


class TestRouterViews:
    """Pure helpers exposed by the router."""

    def test_quote_helpers(self, router):
        assert router.quote(100, 1000, 4000) == 400
        assert router.get_amount_out(100, 1000, 4000) == 362
        assert router.get_amount_in(362, 1000, 4000) == 100

    def test_pair_for_matches_registry(self, router, registry, small_pool, token_a, token_b):
        assert router.pair_for(token_b.address, token_a.address) == small_pool.address
        assert registry.get_pair(token_a.address, token_b.address) == small_pool.address

    def test_sort_tokens(self, router, token_a, token_b):
        token0, token1 = router.sort_tokens(token_a.address, token_b.address)
        assert token0 < token1
