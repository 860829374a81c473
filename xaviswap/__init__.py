"""XaviSwap - constant product AMM with multi-hop routing."""

__version__ = "0.1.0"

from xaviswap.chain import Chain  # noqa: E402
from xaviswap.deployment import Deployment, deploy  # noqa: E402
from xaviswap.pools import LiquidityPool, PoolRegistry  # noqa: E402
from xaviswap.routing import Router, RouterConfig  # noqa: E402
from xaviswap.tokens import Token, WrappedNative  # noqa: E402

__all__ = [
    "Chain",
    "Deployment",
    "deploy",
    "LiquidityPool",
    "PoolRegistry",
    "Router",
    "RouterConfig",
    "Token",
    "WrappedNative",
    "__version__",
]
