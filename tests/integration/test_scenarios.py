"""End-to-end scenarios across tokens, pools, registry and router."""

import pytest

from xaviswap.errors import PausedError
from xaviswap.models.types import UINT256_MAX
from xaviswap.pools.oracle import consult, current_cumulative_prices
from tests.helpers import ALICE, BOB, CAROL, DEPLOYER, ONE, deadline, make_token, provide_liquidity


def value_per_share(pool) -> float:
    reserve0, reserve1, _ = pool.get_reserves()
    return reserve0 * reserve1 / pool.total_supply**2


class TestLiquidityProviderLifecycle:
    """Provide, let traders pay fees, withdraw."""

    def test_fees_accrue_to_providers(self, router, chain, pool_ab, token_a, token_b):
        before = value_per_share(pool_ab)
        path = [token_a.address, token_b.address]

        for _ in range(5):
            received = router.swap_exact_tokens_for_tokens(BOB, 100 * ONE, 0, path, BOB, deadline(chain))[-1]
            router.swap_exact_tokens_for_tokens(
                BOB, received, 0, list(reversed(path)), BOB, deadline(chain)
            )
            chain.advance(15)

        assert value_per_share(pool_ab) > before
        # Round trips cost the trader
        assert token_a.balance_of(BOB) < 1_000_000 * ONE

    def test_full_withdrawal_returns_more_than_deposited(
        self, deployment, router, chain, pool_ab, token_a, token_b
    ):
        # BOB joins at the same price as ALICE
        shares = provide_liquidity(deployment, BOB, token_a.address, token_b.address, 100 * ONE, 400 * ONE)
        a_before = token_a.balance_of(BOB)
        b_before = token_b.balance_of(BOB)

        path = [token_a.address, token_b.address]
        out = router.swap_exact_tokens_for_tokens(ALICE, 500 * ONE, 0, path, ALICE, deadline(chain))[-1]
        router.swap_exact_tokens_for_tokens(ALICE, out, 0, list(reversed(path)), ALICE, deadline(chain))

        pool_ab.approve(BOB, router.address, UINT256_MAX)
        amount_a, amount_b = router.remove_liquidity(
            BOB, token_a.address, token_b.address, shares, 0, 0, BOB, deadline(chain)
        )

        assert token_a.balance_of(BOB) == a_before + amount_a
        assert token_b.balance_of(BOB) == b_before + amount_b
        assert amount_a * amount_b > (100 * ONE) * (400 * ONE)
        assert pool_ab.balance_of(BOB) == 0


class TestProtocolFeeScenario:
    """The deployer earns a sixth of fee growth when the fee is on."""

    def test_fee_recipient_can_withdraw_its_cut(self, fee_deployment, chain):
        router = fee_deployment.router
        token_x = make_token(fee_deployment, "XXX", holders=[ALICE, BOB])
        token_y = make_token(fee_deployment, "YYY", holders=[ALICE, BOB])
        provide_liquidity(fee_deployment, ALICE, token_x.address, token_y.address, 10_000 * ONE, 10_000 * ONE)
        pool = fee_deployment.registry.pool(token_x.address, token_y.address)
        path = [token_x.address, token_y.address]

        for _ in range(10):
            out = router.swap_exact_tokens_for_tokens(BOB, 1_000 * ONE, 0, path, BOB, deadline(chain))[-1]
            router.swap_exact_tokens_for_tokens(BOB, out, 0, list(reversed(path)), BOB, deadline(chain))
        assert pool.balance_of(DEPLOYER) == 0

        # The fee is minted on the next liquidity event
        provide_liquidity(fee_deployment, ALICE, token_x.address, token_y.address, ONE, ONE)
        fee_shares = pool.balance_of(DEPLOYER)
        assert fee_shares > 0

        pool.approve(DEPLOYER, router.address, UINT256_MAX)
        amount_x, amount_y = router.remove_liquidity(
            DEPLOYER, token_x.address, token_y.address, fee_shares, 0, 0, CAROL, deadline(chain)
        )
        assert amount_x > 0 and amount_y > 0
        assert token_x.balance_of(CAROL) == amount_x


class TestOracleScenario:
    def test_last_block_trade_does_not_move_average(self, router, chain, pool_ab, token_a, token_b):
        older = current_cumulative_prices(pool_ab)

        chain.advance(3600)
        # A large trade at the end of the window
        router.swap_exact_tokens_for_tokens(
            BOB, 2_000 * ONE, 0, [token_a.address, token_b.address], BOB, deadline(chain)
        )
        newer = current_cumulative_prices(pool_ab)

        assert consult(pool_ab, older, newer, token_a.address, ONE) == 4 * ONE
        assert consult(pool_ab, older, newer, token_b.address, 4 * ONE) == ONE


class TestEmergencyPause:
    def test_registry_pause_blocks_new_pools_only(
        self, deployment, router, registry, chain, pool_ab, token_a, token_b, token_c
    ):
        registry.pause(DEPLOYER)
        balance_before = token_c.balance_of(ALICE)

        with pytest.raises(PausedError):
            provide_liquidity(deployment, ALICE, token_a.address, token_c.address, ONE, ONE)
        assert token_c.balance_of(ALICE) == balance_before
        assert registry.all_pairs_length() == 1

        # Existing pools keep trading
        router.swap_exact_tokens_for_tokens(BOB, ONE, 0, [token_a.address, token_b.address], BOB, deadline(chain))

    def test_router_pause_leaves_pools_usable_directly(self, router, chain, pool_ab, token_a, token_b):
        router.pause(DEPLOYER)
        reserve0, reserve1, _ = pool_ab.get_reserves()

        # Direct pool interaction bypasses the router switch
        token_in = chain.get(pool_ab.token0)
        token_in.transfer(BOB, pool_ab.address, ONE)
        expected = router.get_amount_out(ONE, reserve0, reserve1)
        pool_ab.swap(BOB, 0, expected, BOB, b"")

        assert pool_ab.get_reserves()[:2] == (reserve0 + ONE, reserve1 - expected)
