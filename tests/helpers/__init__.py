"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Accounts, clock and common amounts
- factories: Token deployment and liquidity provision
- contracts: Flash swap borrowers and tokens with unusual transfer behaviour
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    DEADLINE_WINDOW,
    DEPLOYER,
    GENESIS_TIMESTAMP,
    INITIAL_NATIVE_BALANCE,
    INITIAL_TOKEN_BALANCE,
    ONE,
)
from tests.helpers.factories import deadline, make_token, provide_liquidity, seeded_deployment

__all__ = [
    # Constants
    "DEPLOYER",
    "ALICE",
    "BOB",
    "CAROL",
    "GENESIS_TIMESTAMP",
    "DEADLINE_WINDOW",
    "ONE",
    "INITIAL_TOKEN_BALANCE",
    "INITIAL_NATIVE_BALANCE",
    # Factories
    "deadline",
    "make_token",
    "provide_liquidity",
    "seeded_deployment",
]
