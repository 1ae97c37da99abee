"""
Jarimae - FastAPI Backend Application
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
import structlog

from jarimae import __version__
from jarimae.config import settings
from jarimae.api import auth, reservations, stores
from jarimae.api.errors import register_exception_handlers


def configure_logging() -> None:
    """Configure structured logging"""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Jarimae API", version=__version__)
    yield
    logger.info("Shutting down Jarimae API")


# Create FastAPI application
app = FastAPI(
    title="Jarimae",
    description="Restaurant reservation marketplace",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": __version__}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from jarimae.database import SessionLocal

    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.warning("Database readiness check failed", error=str(e))
        checks["database"] = "failed"

    # Check Redis
    try:
        from jarimae.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["redis"] = "ok"
    except Exception as e:
        logger.warning("Broker readiness check failed", error=str(e))
        checks["redis"] = "failed"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(stores.router, prefix="/stores", tags=["Stores"])
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "jarimae.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
