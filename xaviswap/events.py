"""Event records emitted by XaviSwap contracts.

Events are appended to the Chain event log and rolled back with the rest of
the state when a call reverts.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Event:
    """Base event: every record carries the emitting contract address."""

    address: str


@dataclass(frozen=True)
class Transfer(Event):
    sender: str
    recipient: str
    value: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class Deposit(Event):
    owner: str
    value: int


@dataclass(frozen=True)
class Withdrawal(Event):
    owner: str
    value: int


@dataclass(frozen=True)
class Mint(Event):
    sender: str
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Burn(Event):
    sender: str
    amount0: int
    amount1: int
    to: str


@dataclass(frozen=True)
class Swap(Event):
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    to: str


@dataclass(frozen=True)
class Sync(Event):
    """Reserve-change notification."""

    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class PairCreated(Event):
    token0: str
    token1: str
    pair: str
    index: int


@dataclass(frozen=True)
class Paused(Event):
    account: str


@dataclass(frozen=True)
class Unpaused(Event):
    account: str


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class MaxSwapPercentUpdated(Event):
    old_percent: int
    new_percent: int
