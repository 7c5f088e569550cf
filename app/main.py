import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.deps import get_metrics
from app.api.routes import matches
from app.config import settings
from app.exceptions import (
    DatabaseError,
    InvalidEventTypeError,
    NotFoundError,
    OddsServiceError,
    ResolutionError,
    ValidationError,
)
from app.services.cache import CacheService
from app.services.match_store import MatchStore
from app.services.metrics import MetricsService
from app.services.rate_limiter import limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting ako-odds service")
    app.state.store = MatchStore(settings.database_url)
    await app.state.store.open()
    app.state.cache = CacheService(settings.redis_url)
    app.state.metrics = MetricsService(app.state.cache)
    yield
    # Shutdown
    await app.state.cache.close()
    await app.state.store.close()
    logger.info("Shutting down ako-odds service")


app = FastAPI(
    title="ako-odds",
    description="Odds history and single/accumulator bet calculation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# Paths served without an API key
PUBLIC_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

# Most specific class first: HTTP status and log level of each domain error
ERROR_RESPONSES: list[tuple[type[OddsServiceError], int, int]] = [
    (NotFoundError, 404, logging.INFO),
    (ValidationError, 400, logging.INFO),
    (InvalidEventTypeError, 400, logging.WARNING),
    (ResolutionError, 500, logging.ERROR),
    (DatabaseError, 503, logging.ERROR),
]


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    """Reject requests without the configured X-API-Key (when enabled)."""
    protected = settings.api_key_enabled and settings.api_key
    if protected and request.url.path not in PUBLIC_PATHS:
        if request.headers.get("X-API-Key") != settings.api_key:
            return JSONResponse(
                status_code=401,
                content={"error": "UNAUTHORIZED", "message": "Invalid or missing API key"},
            )
    return await call_next(request)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Log and count requests."""
    if request.url.path in ("/health", "/metrics"):
        return await call_next(request)

    logger.info(f"Incoming request: {request.method} {request.url.path}")
    metrics = getattr(request.app.state, "metrics", None)
    started = time.perf_counter()
    if metrics:
        await metrics.track_request()

    response = await call_next(request)

    if metrics:
        await metrics.track_latency((time.perf_counter() - started) * 1000)
        if response.status_code >= 400:
            await metrics.track_error()
    return response


@app.exception_handler(OddsServiceError)
async def odds_service_error_handler(request: Request, exc: OddsServiceError):
    status_code, level = next(
        ((status, level) for cls, status, level in ERROR_RESPONSES if isinstance(exc, cls)),
        (500, logging.ERROR),
    )
    logger.log(level, f"{exc.code} on {request.url.path}: {exc.message} - {exc.details}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
app.include_router(matches.router, prefix="/api/matches", tags=["matches"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "ako-odds"}


@app.get("/metrics")
async def read_metrics(metrics: MetricsService = Depends(get_metrics)):
    """Get API metrics (requests, latency, cache, ingestion)."""
    return await metrics.get_metrics()


@app.post("/metrics/reset")
async def reset_metrics(metrics: MetricsService = Depends(get_metrics)):
    """Reset all metrics counters."""
    await metrics.reset()
    return {"status": "reset"}
