import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ringside.api.v1 import wrestlers
from ringside.core.config import get_settings
from ringside.core.logging import get_logger, setup_logging
from ringside.db.session import create_db_and_tables, engine
from ringside.pipelines.analyze_mentions import AnalysisPipeline
from ringside.schemas.common import ErrorResponse, HealthResponse
from ringside.services.scheduler import AutoUpdateScheduler
from ringside.services.storage.metrics_store import MetricsStore

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()

    pipeline = AnalysisPipeline(store=MetricsStore(engine))
    scheduler = AutoUpdateScheduler(interval_minutes=settings.AUTO_UPDATE_INTERVAL_MINUTES)
    scheduler.add_update_callback(pipeline.refresh)

    app.state.pipeline = pipeline
    app.state.scheduler = scheduler

    if settings.AUTO_UPDATE_ENABLED:
        scheduler.start(run_immediately=True)
    else:
        logger.info("Auto-update disabled")

    try:
        yield
    finally:
        scheduler.stop()


app = FastAPI(
    title="Ringside API",
    description="Wrestler mention tracking and push/burial analysis from wrestling news",
    version=VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
    lifespan=lifespan
)

# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["X-Request-ID"] = str(uuid.uuid4())
    return response

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Global exception handler
@app.exception_handler(500)
async def internal_server_error(request: Request, exc: Exception):
    logger.error(f"Internal server error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error").model_dump(exclude_none=True)
    )

# Include routers
app.include_router(wrestlers.router, prefix="/api/v1/wrestlers", tags=["wrestlers"])

# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    pipeline = getattr(request.app.state, "pipeline", None)
    scheduler = getattr(request.app.state, "scheduler", None)

    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.now(timezone.utc),
        auto_update=bool(scheduler and scheduler.is_running),
        last_update=pipeline.updated_at if pipeline else None
    )
