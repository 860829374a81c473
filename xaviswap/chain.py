"""In-process execution host for XaviSwap contracts.

The pool and router assume a host that serializes calls and rolls back a
failed call completely. Chain provides that host:
- a directory of deployed contracts keyed by address
- a block clock (seconds)
- native-asset balances
- an append-only event log
- atomic calls: every external call snapshots all state and restores it if
  any exception escapes, so a failed inner call leaves nothing behind even
  when its caller recovers

Contracts reference each other by address and resolve through the Chain on
every call, so no contract holds a live reference to another.
"""

from __future__ import annotations

import copy
import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import structlog
from eth_abi.packed import encode_packed
from eth_utils import keccak

from xaviswap.errors import InvalidAddress, NativeTransferFailed, NotAContract
from xaviswap.events import Event
from xaviswap.models.types import is_valid_address, normalize_address

logger = structlog.get_logger()

C = TypeVar("C", bound="Contract")
F = TypeVar("F", bound=Callable[..., Any])


class Contract:
    """Base class for state deployed on a Chain.

    All instance attributes except the chain reference are treated as
    contract storage and captured by snapshots.
    """

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = address

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy({k: v for k, v in vars(self).items() if k != "chain"})

    def restore(self, state: dict[str, Any]) -> None:
        vars(self).update(state)

    def emit(self, event: Event) -> None:
        self.chain.emit(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"


def external(method: F) -> F:
    """Run a contract method as one atomic unit of work."""

    @functools.wraps(method)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.chain.atomic():
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def checked_address(address: str) -> str:
    """Normalize an address, rejecting anything that is not 20 hex bytes.

    Raises:
        InvalidAddress: If the address is malformed
    """
    if not is_valid_address(address):
        raise InvalidAddress(f"Invalid address: {address}")
    return normalize_address(address)


class Chain:
    """Execution host: clock, contracts, native balances and event log."""

    def __init__(self, timestamp: int | None = None) -> None:
        self.timestamp = int(time.time()) if timestamp is None else timestamp
        self.events: list[Event] = []
        self._contracts: dict[str, Contract] = {}
        self._native: dict[str, int] = {}
        self._nonces: dict[str, int] = {}
        self._depth = 0

    # --- Clock ---

    def advance(self, seconds: int) -> int:
        """Move the block clock forward and return the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards: {seconds}")
        self.timestamp += seconds
        return self.timestamp

    # --- Contracts ---

    def next_address(self, deployer: str) -> str:
        """Derive the address of the next contract deployed by `deployer`."""
        deployer = checked_address(deployer)
        nonce = self._nonces.get(deployer, 0)
        digest = keccak(encode_packed(["address", "uint256"], [deployer, nonce]))
        return "0x" + digest[12:].hex()

    def deploy(
        self,
        contract_cls: Callable[..., C],
        *args: Any,
        deployer: str,
        address: str | None = None,
        **kwargs: Any,
    ) -> C:
        """Deploy a contract and register it in the directory.

        Args:
            contract_cls: Contract class; called as contract_cls(chain, address, *args, **kwargs)
            deployer: Account creating the contract (drives address derivation)
            address: Explicit address (used for deterministic pair deployment)
        """
        deployer = checked_address(deployer)
        with self.atomic():
            if address is None:
                address = self.next_address(deployer)
                self._nonces[deployer] = self._nonces.get(deployer, 0) + 1
            address = checked_address(address)
            if address in self._contracts:
                raise InvalidAddress(f"Address already in use: {address}")
            contract = contract_cls(self, address, *args, **kwargs)
            self._contracts[address] = contract
            logger.debug(
                "contract_deployed",
                kind=type(contract).__name__,
                address=address,
                deployer=deployer,
            )
            return contract

    def get(self, address: str) -> Contract:
        """Resolve an address to its contract.

        Raises:
            NotAContract: If nothing is deployed at the address
        """
        contract = self._contracts.get(normalize_address(address))
        if contract is None:
            raise NotAContract(f"No contract at {address}")
        return contract

    def get_as(self, address: str, expected: type[C]) -> C:
        """Resolve an address to a contract of the expected type."""
        contract = self.get(address)
        if not isinstance(contract, expected):
            raise NotAContract(f"{address} is a {type(contract).__name__}, not a {expected.__name__}")
        return contract

    def is_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    # --- Native asset ---

    def native_balance(self, account: str) -> int:
        return self._native.get(normalize_address(account), 0)

    def fund(self, account: str, amount: int) -> None:
        """Credit native balance out of thin air (genesis allocation)."""
        if amount < 0:
            raise ValueError(f"Funding amount must be non-negative: {amount}")
        account = checked_address(account)
        self._native[account] = self._native.get(account, 0) + amount

    def transfer_native(self, sender: str, to: str, amount: int) -> None:
        """Move native balance between accounts.

        Raises:
            NativeTransferFailed: If the sender cannot cover the amount
        """
        sender = checked_address(sender)
        to = checked_address(to)
        if amount < 0:
            raise NativeTransferFailed(f"Negative native transfer: {amount}")
        balance = self._native.get(sender, 0)
        if balance < amount:
            raise NativeTransferFailed(
                f"Native balance {balance} of {sender} below transfer amount {amount}"
            )
        self._native[sender] = balance - amount
        self._native[to] = self._native.get(to, 0) + amount

    # --- Events ---

    def emit(self, event: Event) -> None:
        self.events.append(event)
        logger.debug("event_emitted", kind=type(event).__name__, address=event.address)

    def events_of(self, kind: type[Event], address: str | None = None) -> list[Event]:
        """Filter the event log by event type and optionally by emitter."""
        return [
            e
            for e in self.events
            if isinstance(e, kind) and (address is None or e.address == normalize_address(address))
        ]

    # --- Atomicity ---

    @property
    def in_call(self) -> bool:
        return self._depth > 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed block as a single all-or-nothing unit.

        Every level takes its own savepoint. A failing nested call is rolled
        back even when an outer caller catches the error and carries on.
        """
        saved = self._snapshot()
        self._depth += 1
        try:
            yield
        except Exception as err:
            self._restore(saved)
            if self._depth == 1:
                logger.warning(
                    "transaction_reverted",
                    error=type(err).__name__,
                    reason=str(err),
                )
            else:
                logger.debug(
                    "call_reverted",
                    depth=self._depth,
                    error=type(err).__name__,
                )
            raise
        finally:
            self._depth -= 1

    def _snapshot(self) -> dict[str, Any]:
        return {
            "contracts": dict(self._contracts),
            "storage": {addr: c.snapshot() for addr, c in self._contracts.items()},
            "native": dict(self._native),
            "nonces": dict(self._nonces),
            "event_count": len(self.events),
        }

    def _restore(self, saved: dict[str, Any]) -> None:
        self._contracts = dict(saved["contracts"])
        for addr, state in saved["storage"].items():
            self._contracts[addr].restore(state)
        self._native = saved["native"]
        self._nonces = saved["nonces"]
        del self.events[saved["event_count"] :]


__all__ = ["Chain", "Contract", "external", "checked_address"]
