"""Fungible token accounting shared by assets and pool shares.

FungibleToken implements the standard transfer/approve/transferFrom surface.
LiquidityPool inherits it for its shares; Token adds an owner-gated mint for
plain assets.
"""

from __future__ import annotations

import structlog

from xaviswap.chain import Chain, Contract, checked_address, external
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.errors import (
    Forbidden,
    InsufficientAllowance,
    InsufficientBalance,
    ZeroAddress,
)
from xaviswap.events import Approval, Transfer
from xaviswap.models.types import UINT256_MAX, normalize_address
from xaviswap.safe_int import S

logger = structlog.get_logger()


class FungibleToken(Contract):
    """Balance/allowance accounting with conservation of total supply."""

    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str,
        symbol: str,
        decimals: int = 18,
    ) -> None:
        super().__init__(chain, address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.total_supply = 0
        self.balances: dict[str, int] = {}
        self.allowances: dict[tuple[str, str], int] = {}

    # --- Views ---

    def balance_of(self, account: str) -> int:
        return self.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    # --- Internal accounting ---

    def _mint(self, to: str, value: int) -> None:
        to = checked_address(to)
        self.total_supply = (S(self.total_supply) + value).to_uint256()
        self.balances[to] = self.balances.get(to, 0) + value
        self.emit(Transfer(self.address, ZERO_ADDRESS, to, value))

    def _burn(self, owner: str, value: int) -> None:
        owner = normalize_address(owner)
        balance = self.balances.get(owner, 0)
        if balance < value:
            raise InsufficientBalance(f"Burn of {value} exceeds balance {balance} of {owner}")
        self.balances[owner] = balance - value
        self.total_supply = (S(self.total_supply) - value).value
        self.emit(Transfer(self.address, owner, ZERO_ADDRESS, value))

    def _transfer(self, sender: str, to: str, value: int) -> None:
        sender = normalize_address(sender)
        to = checked_address(to)
        if sender == ZERO_ADDRESS:
            # Locked minimum liquidity lives here and must never move
            raise Forbidden("Transfers from the zero address are not allowed")
        if value < 0:
            raise InsufficientBalance(f"Negative transfer amount: {value}")
        balance = self.balances.get(sender, 0)
        if balance < value:
            raise InsufficientBalance(f"Transfer of {value} exceeds balance {balance} of {sender}")
        self.balances[sender] = balance - value
        self.balances[to] = self.balances.get(to, 0) + value
        self.emit(Transfer(self.address, sender, to, value))

    def _approve(self, owner: str, spender: str, value: int) -> None:
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        self.allowances[(owner, spender)] = value
        self.emit(Approval(self.address, owner, spender, value))

    # --- External surface ---

    @external
    def approve(self, caller: str, spender: str, value: int) -> bool:
        if checked_address(spender) == ZERO_ADDRESS:
            raise ZeroAddress("Cannot approve the zero address")
        self._approve(caller, spender, value)
        return True

    @external
    def transfer(self, caller: str, to: str, value: int) -> bool:
        self._transfer(caller, to, value)
        return True

    @external
    def transfer_from(self, caller: str, owner: str, to: str, value: int) -> bool:
        """Move `value` from `owner` to `to` using the caller's allowance.

        An allowance of 2**256-1 is treated as infinite and never decremented.
        """
        key = (normalize_address(owner), normalize_address(caller))
        allowed = self.allowances.get(key, 0)
        if allowed != UINT256_MAX:
            if allowed < value:
                raise InsufficientAllowance(
                    f"Allowance {allowed} of {caller} below transfer amount {value}"
                )
            self.allowances[key] = allowed - value
        self._transfer(owner, to, value)
        return True


class Token(FungibleToken):
    """Plain fungible asset with an owner who may mint."""

    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str,
        symbol: str,
        decimals: int = 18,
        owner: str = ZERO_ADDRESS,
    ) -> None:
        super().__init__(chain, address, name, symbol, decimals)
        self.owner = normalize_address(owner)

    @external
    def mint(self, caller: str, to: str, value: int) -> None:
        if normalize_address(caller) != self.owner:
            raise Forbidden(f"Only the owner can mint {self.symbol}")
        self._mint(to, value)
        logger.debug("token_minted", token=self.symbol, to=to, value=value)
