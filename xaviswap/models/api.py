"""Request and response models for the quote API.

Amounts are accepted as ints or decimal strings and always returned as
decimal strings, since they routinely exceed the 2^53 range JSON clients
can represent exactly.
"""

from pydantic import BaseModel, ConfigDict, Field

from xaviswap.models.types import Address, Uint256


class QuoteRequest(BaseModel):
    """Proportional quote: amount of B worth amount_a of A at the given reserves."""

    amount_a: Uint256
    reserve_a: Uint256
    reserve_b: Uint256


class QuoteResponse(BaseModel):
    amount_b: str


class PathAmountRequest(BaseModel):
    """Exact amount at one end of a path (input for amounts-out, output for amounts-in)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Uint256
    path: list[Address] = Field(min_length=2)


class HopModel(BaseModel):
    pool: str
    token_in: str
    token_out: str
    amount_in: str
    amount_out: str


class PathQuoteResponse(BaseModel):
    path: list[str]
    amounts: list[str]
    hops: list[HopModel]


class ReservesResponse(BaseModel):
    pair: str
    token_a: str
    token_b: str
    reserve_a: str
    reserve_b: str


class PairInfo(BaseModel):
    address: str
    token0: str
    token1: str
    reserve0: str
    reserve1: str
    total_supply: str
    block_timestamp_last: int


class ErrorResponse(BaseModel):
    error: str
    detail: str
