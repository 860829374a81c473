"""Deploy a complete XaviSwap instance on a Chain.

Deployment order follows the production scripts: wrapped native asset
first, then the registry, then the router wired to both.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from xaviswap.chain import Chain
from xaviswap.pools.registry import PoolRegistry
from xaviswap.routing.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from xaviswap.routing.router import Router
from xaviswap.tokens.wrapped import WrappedNative

logger = structlog.get_logger()

# Deployer used when none is given (local/dev deployments)
DEFAULT_DEPLOYER = "0x" + "de" * 20


@dataclass
class Deployment:
    """Handles to the contracts of one deployment."""

    chain: Chain
    deployer: str
    wrapped_native: WrappedNative
    registry: PoolRegistry
    router: Router


def deploy(
    chain: Chain | None = None,
    deployer: str = DEFAULT_DEPLOYER,
    fee_to: str | None = None,
    config: RouterConfig = DEFAULT_ROUTER_CONFIG,
) -> Deployment:
    """Deploy wrapper, registry and router.

    Args:
        chain: Host to deploy on. A fresh Chain is created if None.
        deployer: Account that owns the registry and router and sets fees
        fee_to: Protocol fee recipient. Defaults to the deployer; pass the
            zero address to leave the protocol fee off.
        config: Router risk settings
    """
    chain = chain if chain is not None else Chain()
    wrapped_native = chain.deploy(WrappedNative, deployer=deployer)
    registry = chain.deploy(PoolRegistry, deployer, deployer=deployer)
    router = chain.deploy(
        Router,
        registry.address,
        wrapped_native.address,
        deployer,
        config,
        deployer=deployer,
    )
    registry.set_fee_to(deployer, fee_to if fee_to is not None else deployer)

    logger.info(
        "xaviswap_deployed",
        deployer=deployer,
        wrapped_native=wrapped_native.address,
        registry=registry.address,
        router=router.address,
        fee_to=registry.fee_to,
        max_swap_percent=config.max_swap_percent,
    )
    return Deployment(
        chain=chain,
        deployer=deployer,
        wrapped_native=wrapped_native,
        registry=registry,
        router=router,
    )


__all__ = ["Deployment", "deploy", "DEFAULT_DEPLOYER"]
