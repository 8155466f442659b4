"""
Main application entry point.
Configures logging, builds the FastAPI app and runs the cache sweeper.
"""
import asyncio
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from asset_tracker.api.routes import create_app
from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.config.settings import settings

# Configure logging for stdout/stderr collectors
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)

logger = logging.getLogger(__name__)


async def sweep_cache_forever(cache: TTLCache, interval_seconds: float):
    """Periodically evict expired entries so idle keys do not pile up."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = cache.sweep()
            if removed:
                logger.debug(f"Cache sweep evicted {removed} entries")
        except Exception as e:
            logger.error(f"Error in cache sweep: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the cache sweeper on startup and cancel it on shutdown."""
    logger.info("Starting Asset Tracker API...")
    sweeper = asyncio.create_task(
        sweep_cache_forever(app.state.cache, app.state.settings.cache_sweep_interval_seconds)
    )
    try:
        yield
    finally:
        logger.info("Shutting down Asset Tracker API...")
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        logger.info("Shutdown complete")


app = create_app(settings)
app.router.lifespan_context = lifespan


def main():
    """Run the application."""
    logger.info(
        "Configuration loaded",
        extra={
            "host": settings.host,
            "port": settings.port,
            "log_level": settings.log_level,
            "crypto_provider": settings.crypto_provider,
            "cache_ttl_seconds": settings.cache_ttl_seconds,
            "request_timeout_seconds": settings.request_timeout_seconds,
        },
    )

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
        access_log=True,
    )


if __name__ == "__main__":
    main()
