"""FastAPI application exposing XaviSwap quotes."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from xaviswap import __version__
from xaviswap.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("XAVISWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("XAVISWAP_PORT", "8000"))
DEBUG = os.environ.get("XAVISWAP_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("XAVISWAP_LOG_LEVEL", "INFO").upper()

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, LOG_LEVEL, logging.INFO)
    ),
)

app = FastAPI(
    title="XaviSwap",
    description="Constant product AMM quotes",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - XAVISWAP_HOST: Host to bind to (default: 0.0.0.0)
    - XAVISWAP_PORT: Port to bind to (default: 8000)
    - XAVISWAP_DEBUG: Enable debug/reload mode (default: false)
    - XAVISWAP_LOG_LEVEL: Minimum log level (default: INFO)
    - XAVISWAP_DEPLOYMENT_FACTORY: "module:function" returning the Deployment to
      serve (default: an empty local deployment)
    """
    uvicorn.run(
        "xaviswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
