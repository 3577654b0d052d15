import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from listing_gateway.api import health, listings
from listing_gateway.connectors.hostaway import HostawayConnector
from listing_gateway.core.config import get_settings
from listing_gateway.core.errors import UpstreamUnavailable
from listing_gateway.core.logging_config import setup_logging
from listing_gateway.services.currency import CurrencyConverter
from listing_gateway.services.image_resolver import ImageResolver, load_static_image_table
from listing_gateway.services.repository import ListingRepository

setup_logging()
settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
    resolver = ImageResolver(load_static_image_table(settings.static_image_table_path))
    connector = HostawayConnector(client, settings.hostaway_api_url, settings.authorization_token)
    app.state.repository = ListingRepository(connector, resolver)
    app.state.currency = CurrencyConverter(
        client,
        settings.exchange_rate_url,
        base=settings.base_currency,
        target=settings.target_currency,
        fallback_rate=settings.fallback_exchange_rate,
    )

    if settings.preload_listings:
        try:
            await app.state.repository.refresh()
        except Exception:
            logger.exception("Error preloading listings")

    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

origins = [origin.strip() for origin in settings.cors_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    return JSONResponse(
        status_code=500,
        content={"error": f"Failed to fetch {exc.what}", "message": str(exc)},
    )


app.include_router(health.router)
app.include_router(listings.router)
