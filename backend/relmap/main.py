"""Main FastAPI application."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from relmap.api.social import router as social_router
from relmap.domain.common.errors import DomainError, NotFoundError, PersistenceFailure, ValidationError
from relmap.infra.db import base as db_base
# Import all models to ensure they're registered with Base
from relmap.infra.db.models import InteractionModel, PersonModel  # noqa: F401
from relmap.infra.messaging.redis_bus import redis_bus
from relmap.settings import get_config_store, settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    get_config_store().load_initial()

    if db_base.engine is not None:
        try:
            async with db_base.engine.begin() as conn:
                await conn.run_sync(db_base.Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            # Database might not be ready yet; requests will surface PersistenceFailure
            logger.warning(f"Could not connect to database during startup: {e}")

    if settings.social_events_enabled:
        try:
            await redis_bus.connect()
            await redis_bus.ping()
            logger.info(f"[EVENTS] Publishing social events on {settings.social_events_channel!r}")
        except (RedisError, OSError) as e:
            logger.warning(f"Could not connect to Redis during startup: {e}")

    yield

    await redis_bus.disconnect()
    if db_base.engine is not None:
        await db_base.engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logger.info(f"[SERVER REQUEST] {request.method} {request.url.path}")
        logger.debug(f"   Query params: {dict(request.query_params)}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"[SERVER RESPONSE] {request.method} {request.url.path} - "
            f"{response.status_code} ({process_time:.3f}s)"
        )
        return response


# Add logging middleware AFTER CORS (CORS must be first)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with logging."""
    errors = exc.errors()
    logger.error(f"[VALIDATION ERROR] {request.method} {request.url.path} ({len(errors)} errors)")
    for i, error in enumerate(errors, 1):
        logger.error(f"   Error {i}: {error.get('loc')} {error.get('msg')}")
    return JSONResponse(
        status_code=422,
        content={"detail": errors, "error_code": ValidationError.error_code},
    )


def _domain_error_response(status_code: int, exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_code": exc.error_code},
    )


# Domain error handlers: map domain exceptions to correct HTTP status
@app.exception_handler(NotFoundError)
async def domain_not_found_handler(request: Request, exc: NotFoundError):
    """Return 404 when a resource is not found."""
    return _domain_error_response(404, exc)


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    """Return 422 for domain validation errors."""
    return _domain_error_response(422, exc)


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure):
    """Return 503 when the store is unavailable."""
    logger.error(f"[PERSISTENCE] {request.method} {request.url.path}: {exc}")
    return _domain_error_response(503, exc)


@app.get("/health")
@app.get(f"{settings.api_v1_prefix}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


# API v1 routes
app.include_router(social_router, prefix=f"{settings.api_v1_prefix}/social", tags=["social"])
