"""AMM math.

Provides the constant product quote primitives shared by the router and
the HTTP quote API.
"""

from xaviswap.amm.constant_product import ConstantProduct, constant_product

__all__ = ["ConstantProduct", "constant_product"]
