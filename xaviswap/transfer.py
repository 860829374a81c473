"""Safe asset transfer helpers.

Token implementations in the wild differ in what they return: some return
True, some return nothing. Both count as success. An explicit False or a
reverted call is a failure and is reported as a TransferError.
"""

from __future__ import annotations

from typing import Any

from xaviswap.chain import Chain
from xaviswap.errors import (
    NativeTransferFailed,
    TransferFailed,
    TransferFromFailed,
    XaviSwapError,
)


def _succeeded(result: Any) -> bool:
    return result is None or result is True


def safe_transfer(chain: Chain, token: str, caller: str, to: str, value: int) -> None:
    """Call token.transfer on behalf of `caller`.

    Raises:
        TransferFailed: If the call reverted or returned False
    """
    try:
        result = chain.get(token).transfer(caller, to, value)  # type: ignore[attr-defined]
    except XaviSwapError as err:
        raise TransferFailed(f"transfer of {value} {token} to {to} reverted: {err}") from err
    if not _succeeded(result):
        raise TransferFailed(f"transfer of {value} {token} to {to} returned {result!r}")


def safe_transfer_from(
    chain: Chain, token: str, caller: str, owner: str, to: str, value: int
) -> None:
    """Call token.transfer_from with `caller` as spender.

    Raises:
        TransferFromFailed: If the call reverted or returned False
    """
    try:
        result = chain.get(token).transfer_from(caller, owner, to, value)  # type: ignore[attr-defined]
    except XaviSwapError as err:
        raise TransferFromFailed(
            f"transfer_from of {value} {token} from {owner} to {to} reverted: {err}"
        ) from err
    if not _succeeded(result):
        raise TransferFromFailed(
            f"transfer_from of {value} {token} from {owner} to {to} returned {result!r}"
        )


def safe_transfer_native(chain: Chain, sender: str, to: str, value: int) -> None:
    """Send native balance.

    Raises:
        NativeTransferFailed: If the sender cannot cover the amount
    """
    try:
        chain.transfer_native(sender, to, value)
    except NativeTransferFailed:
        raise
    except XaviSwapError as err:
        raise NativeTransferFailed(str(err)) from err


__all__ = ["safe_transfer", "safe_transfer_from", "safe_transfer_native"]
