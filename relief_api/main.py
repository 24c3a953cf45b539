"""
FastAPI Main Application
Relief coordination API service
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from relief_api.api.v1.router import api_router
from relief_api.core.config import settings
from relief_api.core.database import AsyncSessionLocal, check_database_health, close_database, init_database
from relief_api.core.handlers import register_exception_handlers
from relief_api.core.logging import setup_logging
from relief_api.middleware.logging import LoggingMiddleware
from relief_api.middleware.security import SecurityHeadersMiddleware
from relief_api.services.bootstrap_admin import ensure_bootstrap_admin_exists

# Setup structured logging
setup_logging()
logger = structlog.get_logger()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Relief API Service", version=VERSION, environment=settings.ENVIRONMENT)

    await init_database()

    # Ensure bootstrap admin exists (idempotent)
    async with AsyncSessionLocal() as session:
        await ensure_bootstrap_admin_exists(session)

    yield

    logger.info("Shutting down Relief API Service")
    await close_database()


app = FastAPI(
    title="Relief API",
    description="Relief coordination API: administration, permissions and audit trail",
    version=VERSION,
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan
)

cors_origins = settings.cors_origins
if settings.ENVIRONMENT == "development" and not cors_origins:
    cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

logger.info("Configuring CORS", environment=settings.ENVIRONMENT, origins=cors_origins)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)
# Added last so it wraps everything, preflight requests never reach the other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "X-Requested-With",
        "X-Request-ID",
    ],
    expose_headers=["Content-Disposition", "X-Request-ID"],
    max_age=600,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint for Docker and load balancers"""
    database_ok = await check_database_health()
    content = {
        "status": "healthy" if database_ok else "unhealthy",
        "service": "relief-api",
        "version": VERSION,
        "timestamp": time.time(),
        "database": "connected" if database_ok else "unavailable",
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=content)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "relief_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )
