"""
Storefront Backend
FastAPI application entry point

- Shipping quotes via Melhor Envio
- CEP address lookup via BrasilAPI
- Error sanitization middleware
- Health endpoint with DB ping
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from app.api.routes import shipping
from app.core.config import settings, shipping_config
from app.core.database import engine, ping_database
from app.core.error_handler import (
    ErrorSanitizationMiddleware,
    sanitize_error_message,
    shipping_validation_exception_handler,
)

# Import models to register them with SQLAlchemy
from app.models import Product  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log shipping configuration on startup, dispose the engine on shutdown."""
    logger.info(
        f"{settings.APP_NAME} starting ({settings.ENVIRONMENT}) - "
        f"carrier configured: {shipping_config.has_carrier_credentials}, "
        f"carrier base URL: {shipping_config.api_base_url}, "
        f"origin CEP: {shipping_config.origin_postal_code}"
    )

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    lifespan=lifespan,
    title="Storefront API",
    description="""
## Storefront API

Shipping quotes for the storefront product pages and cart.

### Features
- **Shipping**: Cheapest and fastest Melhor Envio options for a product and CEP
- **CEP Lookup**: Address prefill from BrasilAPI

Shipping quote failures are answered with HTTP 200 and an
`{"error", "message"}` body meant to be shown to the customer.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Shipping", "description": "Shipping quotes and CEP lookup"},
    ],
)

app.add_exception_handler(RequestValidationError, shipping_validation_exception_handler)

# Catches unhandled exceptions
app.add_middleware(ErrorSanitizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shipping.router, prefix="/api", tags=["Shipping"])


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Storefront API",
        "version": "1.0.0",
        "status": "operational"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with actual DB ping.
    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "shipping_carrier_configured": shipping_config.has_carrier_credentials,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        await ping_database()
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check database ping failed: {type(e).__name__}: {e}")
        health_status["database"] = f"error: {type(e).__name__}: {sanitize_error_message(e)[:100]}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
