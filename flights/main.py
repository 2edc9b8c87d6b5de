from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from flights.api import api_router
from flights.config import get_adsb_cookie, settings
from flights.ingestors import AdsbExchangeTraceFetcher
from flights.storage import build_storage_backend

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("flights")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the storage backend and trace source shared by all requests."""

    app.state.storage = build_storage_backend(settings)
    logger.info(
        "Storage backend initialized: %s (%s)",
        settings.storage_backend,
        settings.s3_bucket if settings.storage_backend == "s3" else settings.storage_root,
    )

    try:
        cookie = get_adsb_cookie()
    except RuntimeError:
        # Cache enumeration still works without a trace source.
        logger.warning("ADS-B cookie unavailable; serving cached data only")
        app.state.trace_fetcher = None
    else:
        app.state.trace_fetcher = AdsbExchangeTraceFetcher(cookie=cookie)

    yield


app = FastAPI(title="Flights", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "Flights service is running"}
