"""Administrative controls: ownership and the pause switch.

Registry and Router each own one AdminControls instance. Every setter checks
the caller against the current owner; renouncing ownership is disabled so a
deployment can never end up without an administrator.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from xaviswap.chain import checked_address
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.errors import Forbidden, OwnershipRenounceDisabled, PausedError, ZeroAddress
from xaviswap.events import Event, OwnershipTransferred, Paused, Unpaused
from xaviswap.models.types import normalize_address

logger = structlog.get_logger()


@dataclass
class AdminControls:
    """Owner-guarded pause flag.

    Attributes:
        owner: Account allowed to change settings
        paused: When True, guarded entry points fail with PausedError
    """

    owner: str
    paused: bool = False

    def __post_init__(self) -> None:
        self.owner = normalize_address(self.owner)

    def only_owner(self, caller: str) -> None:
        if normalize_address(caller) != self.owner:
            raise Forbidden(f"{caller} is not the owner")

    def require_not_paused(self) -> None:
        if self.paused:
            raise PausedError()

    def pause(self, caller: str, emitter: str) -> Event:
        self.only_owner(caller)
        self.require_not_paused()
        self.paused = True
        logger.info("paused", contract=emitter, by=caller)
        return Paused(emitter, normalize_address(caller))

    def unpause(self, caller: str, emitter: str) -> Event:
        self.only_owner(caller)
        if not self.paused:
            raise PausedError("Pausable: not paused")
        self.paused = False
        logger.info("unpaused", contract=emitter, by=caller)
        return Unpaused(emitter, normalize_address(caller))

    def transfer_ownership(self, caller: str, new_owner: str, emitter: str) -> Event:
        self.only_owner(caller)
        new_owner = checked_address(new_owner)
        if new_owner == ZERO_ADDRESS:
            raise ZeroAddress("New owner is the zero address")
        previous, self.owner = self.owner, new_owner
        logger.info("ownership_transferred", contract=emitter, previous=previous, new=new_owner)
        return OwnershipTransferred(emitter, previous, new_owner)

    def renounce_ownership(self, caller: str) -> None:
        self.only_owner(caller)
        raise OwnershipRenounceDisabled()
