"""Pydantic models and shared types for XaviSwap."""

from xaviswap.models.api import (
    ErrorResponse,
    HopModel,
    PairInfo,
    PathAmountRequest,
    PathQuoteResponse,
    QuoteRequest,
    QuoteResponse,
    ReservesResponse,
)
from xaviswap.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "QuoteRequest",
    "QuoteResponse",
    "PathAmountRequest",
    "PathQuoteResponse",
    "HopModel",
    "ReservesResponse",
    "PairInfo",
    "ErrorResponse",
]
