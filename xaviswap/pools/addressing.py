"""Canonical token ordering and deterministic pool addresses.

A pool's address depends only on the registry address and the sorted token
pair, so anyone can compute it without a lookup (CREATE2 semantics).
"""

from __future__ import annotations

from eth_abi.packed import encode_packed
from eth_utils import keccak

from xaviswap.constants import INIT_CODE_HASH, ZERO_ADDRESS
from xaviswap.errors import IdenticalAddresses, InvalidAddress, ZeroAddress
from xaviswap.models.types import is_valid_address, normalize_address


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the pair in canonical order (token0 < token1).

    Raises:
        IdenticalAddresses: If both tokens are the same
        ZeroAddress: If the smaller token is the zero address
        InvalidAddress: If either token is not a 20-byte hex address
    """
    for token in (token_a, token_b):
        if not is_valid_address(token):
            raise InvalidAddress(f"Invalid token address: {token}")
    token_a = normalize_address(token_a)
    token_b = normalize_address(token_b)
    if token_a == token_b:
        raise IdenticalAddresses()
    token0, token1 = (token_a, token_b) if token_a < token_b else (token_b, token_a)
    if token0 == ZERO_ADDRESS:
        raise ZeroAddress()
    return token0, token1


def compute_pair_address(registry: str, token_a: str, token_b: str) -> str:
    """Derive the pool address for a token pair without any lookup.

    address = keccak256(0xff ++ registry ++ keccak256(token0 ++ token1) ++ INIT_CODE_HASH)[12:]
    """
    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(encode_packed(["address", "address"], [token0, token1]))
    digest = keccak(
        encode_packed(
            ["bytes1", "address", "bytes32", "bytes32"],
            [b"\xff", normalize_address(registry), salt, INIT_CODE_HASH],
        )
    )
    return "0x" + digest[12:].hex()


__all__ = ["sort_tokens", "compute_pair_address"]
