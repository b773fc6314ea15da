"""Main FastAPI application"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from solemate.core.config import settings
from solemate.core.database import init_db, close_db
from solemate.core.logging import setup_logging
from solemate.core.middleware import setup_middleware, register_exception_handlers
from solemate.api.v1 import api_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging()
    logger.info(f"Starting up {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    if settings.ENVIRONMENT != "test":
        await init_db()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Guest sessions, dual-mode cart/wishlist storage and sign-in migration",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan
)

setup_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "solemate.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=settings.WORKERS
    )
