"""
ShipQuote — FastAPI application entry point.

Configures logging, middleware and the error handler, and registers all
API routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import admin, orders, pricing, profile, quotes
from app.config import settings
from app.core.exceptions import ShipQuoteError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    from app.database import engine

    logger.info("%s starting (%s)", settings.APP_NAME, settings.APP_ENV)
    yield

    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Shipping price quotes for cross-border parcel routes.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(ShipQuoteError)
async def shipquote_error_handler(request: Request, exc: ShipQuoteError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


# --- Routers ---
app.include_router(pricing.router, tags=["Pricing API"])
app.include_router(quotes.router, prefix=f"{settings.API_V1_PREFIX}/quotes", tags=["Quotes"])
app.include_router(orders.router, prefix=f"{settings.API_V1_PREFIX}/orders", tags=["Orders"])
app.include_router(profile.router, prefix=f"{settings.API_V1_PREFIX}/profile", tags=["Profile"])
app.include_router(admin.router, prefix=f"{settings.API_V1_PREFIX}/admin", tags=["Admin"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }
