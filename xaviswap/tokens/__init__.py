"""Fungible assets: plain tokens and the wrapped native asset."""

from xaviswap.tokens.erc20 import FungibleToken, Token
from xaviswap.tokens.wrapped import WrappedNative

__all__ = ["FungibleToken", "Token", "WrappedNative"]
