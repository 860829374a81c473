"""Pytest configuration and fixtures."""

import pytest

from xaviswap.chain import Chain
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.deployment import Deployment, deploy
from xaviswap.pools.pair import LiquidityPool
from xaviswap.pools.registry import PoolRegistry
from xaviswap.routing.router import Router
from xaviswap.tokens.erc20 import Token
from xaviswap.tokens.wrapped import WrappedNative
from tests.helpers import (
    ALICE,
    BOB,
    DEPLOYER,
    GENESIS_TIMESTAMP,
    INITIAL_NATIVE_BALANCE,
    ONE,
    make_token,
    provide_liquidity,
)


@pytest.fixture
def chain() -> Chain:
    """Fresh chain with a fixed clock and funded native balances."""
    chain = Chain(timestamp=GENESIS_TIMESTAMP)
    for account in (ALICE, BOB):
        chain.fund(account, INITIAL_NATIVE_BALANCE)
    return chain


@pytest.fixture
def deployment(chain: Chain) -> Deployment:
    """Full deployment with the protocol fee switched off."""
    return deploy(chain, deployer=DEPLOYER, fee_to=ZERO_ADDRESS)


@pytest.fixture
def fee_deployment(chain: Chain) -> Deployment:
    """Full deployment with the protocol fee paid to the deployer (production default)."""
    return deploy(chain, deployer=DEPLOYER)


@pytest.fixture
def router(deployment: Deployment) -> Router:
    return deployment.router


@pytest.fixture
def registry(deployment: Deployment) -> PoolRegistry:
    return deployment.registry


@pytest.fixture
def wxrp(deployment: Deployment) -> WrappedNative:
    return deployment.wrapped_native


@pytest.fixture
def token_a(deployment: Deployment) -> Token:
    """Token held by ALICE and BOB, router approved."""
    return make_token(deployment, "AAA", holders=[ALICE, BOB])


@pytest.fixture
def token_b(deployment: Deployment) -> Token:
    """Token held by ALICE and BOB, router approved."""
    return make_token(deployment, "BBB", holders=[ALICE, BOB])


@pytest.fixture
def token_c(deployment: Deployment) -> Token:
    """Token held by ALICE and BOB, router approved."""
    return make_token(deployment, "CCC", holders=[ALICE, BOB])


@pytest.fixture
def pool_ab(deployment: Deployment, token_a: Token, token_b: Token) -> LiquidityPool:
    """A/B pool seeded by ALICE with 10,000 A and 40,000 B."""
    provide_liquidity(deployment, ALICE, token_a.address, token_b.address, 10_000 * ONE, 40_000 * ONE)
    return deployment.registry.pool(token_a.address, token_b.address)


@pytest.fixture
def pool_bc(deployment: Deployment, token_b: Token, token_c: Token) -> LiquidityPool:
    """B/C pool seeded by ALICE with 40,000 B and 20,000 C."""
    provide_liquidity(deployment, ALICE, token_b.address, token_c.address, 40_000 * ONE, 20_000 * ONE)
    return deployment.registry.pool(token_b.address, token_c.address)


@pytest.fixture
def pool_native(deployment: Deployment, token_a: Token) -> LiquidityPool:
    """A/WXRP pool seeded by ALICE with 10,000 A and 5,000 native."""
    deployment.router.add_liquidity_native(
        ALICE,
        token_a.address,
        10_000 * ONE,
        0,
        0,
        ALICE,
        deployment.chain.timestamp + 600,
        value=5_000 * ONE,
    )
    return deployment.registry.pool(token_a.address, deployment.wrapped_native.address)
