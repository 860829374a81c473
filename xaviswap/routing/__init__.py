"""Routing package.

Provides the Router (caller-facing trade and liquidity entry points), the
PathQuoter used to walk multi-hop paths, and the router's risk settings.
"""

from xaviswap.routing.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from xaviswap.routing.quoting import PathQuoter
from xaviswap.routing.router import Router
from xaviswap.routing.types import Hop, PathQuote

__all__ = [
    "Router",
    "PathQuoter",
    "RouterConfig",
    "DEFAULT_ROUTER_CONFIG",
    "Hop",
    "PathQuote",
]
