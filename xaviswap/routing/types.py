"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Hop:
    """One pool crossing in a route."""

    pool: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class PathQuote:
    """Amounts along a path, as computed by the quoter.

    `amounts[i]` is the amount of `path[i]` entering hop i (or, for the last
    element, leaving the final hop).
    """

    path: tuple[str, ...]
    amounts: tuple[int, ...]
    hops: tuple[Hop, ...]

    @property
    def amount_in(self) -> int:
        return self.amounts[0]

    @property
    def amount_out(self) -> int:
        return self.amounts[-1]

    @property
    def is_multihop(self) -> bool:
        """Check if this is a multi-hop route."""
        return len(self.path) > 2


__all__ = ["Hop", "PathQuote"]
