"""Wrapped native asset (WXRP in the production deployment).

deposit locks native balance in the wrapper and mints the same amount of
tokens 1:1; withdraw burns tokens and releases native balance.
"""

from __future__ import annotations

from xaviswap.chain import Chain, external
from xaviswap.events import Deposit, Withdrawal
from xaviswap.tokens.erc20 import FungibleToken


class WrappedNative(FungibleToken):
    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str = "Wrapped XRP",
        symbol: str = "WXRP",
    ) -> None:
        super().__init__(chain, address, name, symbol, decimals=18)

    @external
    def deposit(self, caller: str, value: int) -> None:
        self.chain.transfer_native(caller, self.address, value)
        self._mint(caller, value)
        self.emit(Deposit(self.address, caller, value))

    @external
    def withdraw(self, caller: str, value: int) -> None:
        self._burn(caller, value)
        self.chain.transfer_native(self.address, caller, value)
        self.emit(Withdrawal(self.address, caller, value))
