"""API endpoints for XaviSwap quotes.

All endpoints are read-only views over the router and registry.
"""

import importlib
import os
from functools import lru_cache
from typing import NoReturn

import structlog
from fastapi import APIRouter, Depends, HTTPException

from xaviswap.amm.constant_product import constant_product
from xaviswap.deployment import Deployment, deploy
from xaviswap.errors import PairNotFound, XaviSwapError
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
from xaviswap.pools.pair import LiquidityPool
from xaviswap.routing.quoting import PathQuoter
from xaviswap.routing.types import PathQuote

logger = structlog.get_logger()

router = APIRouter()


# Zero-argument callable returning the Deployment to serve, as "package.module:function"
DEPLOYMENT_FACTORY = os.environ.get("XAVISWAP_DEPLOYMENT_FACTORY")


def load_deployment(factory_path: str | None = DEPLOYMENT_FACTORY) -> Deployment:
    """Build the deployment the API reads from.

    Without a factory the API serves a fresh local deployment, which has no
    pairs until liquidity is added to it in-process.

    Args:
        factory_path: "package.module:function" naming a zero-argument callable

    Raises:
        ValueError: If factory_path is not of the form "module:function"
        TypeError: If the factory does not return a Deployment
    """
    if not factory_path:
        logger.warning("empty_deployment_served", hint="set XAVISWAP_DEPLOYMENT_FACTORY")
        return deploy()
    module_name, _, attr = factory_path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Deployment factory must look like 'module:function', got {factory_path!r}")
    factory = getattr(importlib.import_module(module_name), attr)
    deployment = factory()
    if not isinstance(deployment, Deployment):
        raise TypeError(f"{factory_path} returned {type(deployment).__name__}, not a Deployment")
    logger.info("deployment_loaded", factory=factory_path, pairs=len(deployment.registry.all_pairs))
    return deployment


@lru_cache(maxsize=1)
def _default_deployment() -> Deployment:
    return load_deployment()


def get_deployment() -> Deployment:
    """Dependency provider for the deployment the API reads from.

    Override this in tests to inject a prepared deployment:
        app.dependency_overrides[get_deployment] = lambda: deployment
    """
    return _default_deployment()


def _raise_http(err: XaviSwapError) -> NoReturn:
    status = 404 if isinstance(err, PairNotFound) else 400
    logger.info("quote_rejected", error=type(err).__name__, reason=str(err))
    detail = ErrorResponse(error=type(err).__name__, detail=str(err))
    raise HTTPException(status_code=status, detail=detail.model_dump())


def _path_response(quote: PathQuote) -> PathQuoteResponse:
    return PathQuoteResponse(
        path=list(quote.path),
        amounts=[str(a) for a in quote.amounts],
        hops=[
            HopModel(
                pool=h.pool,
                token_in=h.token_in,
                token_out=h.token_out,
                amount_in=str(h.amount_in),
                amount_out=str(h.amount_out),
            )
            for h in quote.hops
        ],
    )


@router.get("/pairs")
async def list_pairs(deployment: Deployment = Depends(get_deployment)) -> list[PairInfo]:
    """List every pool in creation order."""
    pairs = []
    for address in deployment.registry.all_pairs:
        state = deployment.chain.get_as(address, LiquidityPool).state()
        pairs.append(
            PairInfo(
                address=state.address,
                token0=state.token0,
                token1=state.token1,
                reserve0=str(state.reserve0),
                reserve1=str(state.reserve1),
                total_supply=str(state.total_supply),
                block_timestamp_last=state.block_timestamp_last,
            )
        )
    return pairs


@router.get("/pairs/{token_a}/{token_b}/reserves")
async def get_reserves(
    token_a: str,
    token_b: str,
    deployment: Deployment = Depends(get_deployment),
) -> ReservesResponse:
    """Reserves of a pair ordered as requested."""
    try:
        reserve_a, reserve_b = deployment.router.get_reserves(token_a, token_b)
        pair = deployment.registry.get_pair(token_a, token_b)
    except XaviSwapError as err:
        _raise_http(err)
    return ReservesResponse(
        pair=pair,
        token_a=token_a.lower(),
        token_b=token_b.lower(),
        reserve_a=str(reserve_a),
        reserve_b=str(reserve_b),
    )


@router.post("/quote")
async def quote(request: QuoteRequest) -> QuoteResponse:
    """Proportional quote at given reserves (no fee)."""
    try:
        amount_b = constant_product.quote(request.amount_a, request.reserve_a, request.reserve_b)
    except XaviSwapError as err:
        _raise_http(err)
    return QuoteResponse(amount_b=str(amount_b))


@router.post("/amounts-out")
async def amounts_out(
    request: PathAmountRequest,
    deployment: Deployment = Depends(get_deployment),
) -> PathQuoteResponse:
    """Forward quote for an exact input along a path."""
    try:
        result = PathQuoter(deployment.registry).quote_exact_input(request.amount, request.path)
    except XaviSwapError as err:
        _raise_http(err)
    return _path_response(result)


@router.post("/amounts-in")
async def amounts_in(
    request: PathAmountRequest,
    deployment: Deployment = Depends(get_deployment),
) -> PathQuoteResponse:
    """Reverse quote for an exact output along a path."""
    try:
        result = PathQuoter(deployment.registry).quote_exact_output(request.amount, request.path)
    except XaviSwapError as err:
        _raise_http(err)
    return _path_response(result)
