"""Constant product quote primitives.

These functions reproduce the pool's fee and invariant arithmetic exactly,
so a quote computed here always passes the pool's own check:

    amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)
    amount_in  = (reserve_in * amount_out * 1000) / ((reserve_out - amount_out) * 997) + 1

Rounding always favours the pool: outputs round down, inputs round up.
"""

from __future__ import annotations

from xaviswap.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from xaviswap.errors import (
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
)
from xaviswap.safe_int import S


class ConstantProduct:
    """Quote math for x * y = k pools with a 0.3% input fee."""

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B worth `amount_a` of A at the current reserve ratio (no fee).

        Raises:
            InsufficientAmount: If amount_a is zero
            InsufficientLiquidity: If either reserve is empty
        """
        if amount_a <= 0:
            raise InsufficientAmount()
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity()
        return (S(amount_a) * reserve_b // reserve_a).value

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = FEE_NUMERATOR,
    ) -> int:
        """Calculate output amount using constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: Share of input (out of 1000) that reaches the curve

        Returns:
            Output token amount, rounded down

        Raises:
            InsufficientInputAmount: If amount_in is zero
            InsufficientLiquidity: If either reserve is empty
        """
        if amount_in <= 0:
            raise InsufficientInputAmount()
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity()

        amount_in_with_fee = S(amount_in) * fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * FEE_DENOMINATOR + amount_in_with_fee
        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = FEE_NUMERATOR,
    ) -> int:
        """Calculate required input for desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: Share of input (out of 1000) that reaches the curve

        Returns:
            Required input amount: floor division plus one unit, so integer
            truncation can never leave the pool short

        Raises:
            InsufficientOutputAmount: If amount_out is zero
            InsufficientLiquidity: If a reserve is empty or amount_out >= reserve_out
        """
        if amount_out <= 0:
            raise InsufficientOutputAmount()
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity()
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} cannot reach reserve {reserve_out}"
            )

        numerator = S(reserve_in) * amount_out * FEE_DENOMINATOR
        denominator = (S(reserve_out) - amount_out) * fee_multiplier
        return ((numerator // denominator) + 1).value


# Singleton instance
constant_product = ConstantProduct()


__all__ = ["ConstantProduct", "constant_product"]
