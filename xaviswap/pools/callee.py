"""Flash swap callback capability."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FlashSwapCallee(Protocol):
    """Contract that can receive a flash swap.

    The pool sends the requested outputs first, then calls on_flash_swap on
    the recipient. Before returning, the callee must pay the pool enough
    input for the fee-adjusted invariant to hold, otherwise the whole swap
    reverts.
    """

    def on_flash_swap(
        self,
        pool: str,
        sender: str,
        amount0: int,
        amount1: int,
        data: bytes,
    ) -> None:
        """Handle a flash swap.

        Args:
            pool: Address of the pool making the callback
            sender: Account that called swap on the pool
            amount0: token0 amount sent to the callee
            amount1: token1 amount sent to the callee
            data: Opaque bytes passed through from the swap call
        """
        ...
