"""Router configuration."""

from dataclasses import dataclass

from xaviswap.constants import DEFAULT_MAX_SWAP_PERCENT
from xaviswap.errors import InvalidConfiguration


@dataclass(frozen=True)
class RouterConfig:
    """Risk settings for the router.

    Attributes:
        max_swap_percent: Largest first-hop input allowed, as a percentage of
            that hop's input-side reserve. Bounded to (0, 100].
    """

    max_swap_percent: int = DEFAULT_MAX_SWAP_PERCENT

    def __post_init__(self) -> None:
        if not 0 < self.max_swap_percent <= 100:
            raise InvalidConfiguration(
                f"max_swap_percent must be in (0, 100], got {self.max_swap_percent}"
            )

    def max_input_for(self, reserve_in: int) -> int:
        """Largest input accepted against a reserve of `reserve_in`."""
        return reserve_in * self.max_swap_percent // 100


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()
