"""Tests for the owner-guarded pause switch."""

import pytest

from xaviswap.admin import AdminControls
from xaviswap.constants import ZERO_ADDRESS
from xaviswap.errors import (
    Forbidden,
    InvalidAddress,
    OwnershipRenounceDisabled,
    PausedError,
    ZeroAddress,
)
from xaviswap.events import OwnershipTransferred, Paused, Unpaused
from tests.helpers import ALICE, BOB, CAROL

EMITTER = CAROL


@pytest.fixture
def admin() -> AdminControls:
    return AdminControls(owner=ALICE.upper().replace("0X", "0x"))


class TestAdminControls:
    def test_owner_is_normalized(self, admin):
        assert admin.owner == ALICE
        assert not admin.paused

    def test_only_owner(self, admin):
        admin.only_owner(ALICE)
        with pytest.raises(Forbidden):
            admin.only_owner(BOB)

    def test_pause_cycle(self, admin):
        event = admin.pause(ALICE, EMITTER)
        assert event == Paused(EMITTER, ALICE)
        with pytest.raises(PausedError):
            admin.require_not_paused()

        event = admin.unpause(ALICE, EMITTER)
        assert event == Unpaused(EMITTER, ALICE)
        admin.require_not_paused()

    def test_pause_twice_fails(self, admin):
        admin.pause(ALICE, EMITTER)
        with pytest.raises(PausedError):
            admin.pause(ALICE, EMITTER)

    def test_non_owner_cannot_pause(self, admin):
        with pytest.raises(Forbidden):
            admin.pause(BOB, EMITTER)
        assert not admin.paused

    def test_transfer_ownership(self, admin):
        event = admin.transfer_ownership(ALICE, BOB, EMITTER)
        assert event == OwnershipTransferred(EMITTER, ALICE, BOB)
        assert admin.owner == BOB
        with pytest.raises(Forbidden):
            admin.only_owner(ALICE)

    def test_transfer_to_zero_address_fails(self, admin):
        with pytest.raises(ZeroAddress):
            admin.transfer_ownership(ALICE, ZERO_ADDRESS, EMITTER)
        assert admin.owner == ALICE

    def test_transfer_to_malformed_address_fails(self, admin):
        with pytest.raises(InvalidAddress):
            admin.transfer_ownership(ALICE, "0xnope", EMITTER)
        assert admin.owner == ALICE

    def test_renounce_always_fails(self, admin):
        with pytest.raises(OwnershipRenounceDisabled):
            admin.renounce_ownership(ALICE)
        with pytest.raises(Forbidden):
            admin.renounce_ownership(BOB)
        assert admin.owner == ALICE
