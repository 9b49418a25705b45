"""
Storefront Backend
FastAPI application entry point

- Homepage section store and rendered storefront read path
- Product page layout singleton
- Product variant resolution and authoring
- Error sanitization middleware and domain error translation
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from storefront.api.routes import homepage, product_layout, product_variants
from storefront.core.config import settings
from storefront.core.database import AsyncSessionLocal, create_tables
from storefront.core.error_handler import ErrorSanitizationMiddleware, register_exception_handlers
from storefront.core.redis_client import close_redis

# Import models to register them with SQLAlchemy
from storefront.models import Category, Product, HomepageSection, SiteSettings  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables in local environments; release the cache client on shutdown."""
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ensured (AUTO_CREATE_TABLES)")

    yield

    await close_redis()
    logger.info("Redis client closed")


app = FastAPI(
    lifespan=lifespan,
    title=f"{settings.APP_NAME} API",
    description="Homepage composition, product page layout and variant resolution.",
    version="1.0.0",
)

# Error sanitization (catches unhandled exceptions)
app.add_middleware(ErrorSanitizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(homepage.router, prefix="/api", tags=["Homepage"])
app.include_router(product_layout.router, prefix="/api", tags=["Product Page Layout"])
app.include_router(product_variants.router, prefix="/api", tags=["Product Variants"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check with a database ping. Returns 503 if the database is unreachable."""
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {type(e).__name__}: {str(e)[:100]}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
