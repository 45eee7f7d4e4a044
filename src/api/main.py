"""
FastAPI Application Setup

Main entry point for the SwipeMatch API application.

Responsibility:
    - FastAPI app initialization
    - Router registration (swipes, users, pairs)
    - CORS middleware configuration
    - Global exception handlers (domain error taxonomy -> HTTP)
    - Request logging middleware
    - Health check endpoint

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration

Error Mapping:
    - InvalidUserIdError, InvalidUserPairError -> 400
    - UnknownUserError -> 404
    - ReswipeForbiddenError, ReswipeCooldownError -> 409
      (cooldown adds Retry-After with the remaining seconds)
    - TransientStoreError and subclasses -> 503 with Retry-After
    - Any other DomainException -> 400
    - Unexpected exceptions -> 500
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.api.dependencies import BACKEND_REDIS, MatchingContainer, get_container
from src.api.routers import pairs_router, swipes_router, users_router
from src.api.schemas.common import ErrorResponse
from src.domain.shared.exceptions import (
    ConflictExhaustedError,
    DomainException,
    InvalidUserIdError,
    InvalidUserPairError,
    LockAcquisitionTimeoutError,
    ReswipeCooldownError,
    ReswipeForbiddenError,
    TransientStoreError,
    UnknownUserError,
)
from src.infrastructure.persistence.redis.connection import (
    close_connections,
    health_check as redis_health_check,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

# Seconds clients should wait before resubmitting after a transient failure
TRANSIENT_RETRY_AFTER_SECONDS = 1

# Most specific first: LockAcquisitionTimeoutError and ConflictExhaustedError
# are TransientStoreError subclasses
ERROR_MAPPING: list[tuple[type[DomainException], int, str]] = [
    (InvalidUserIdError, status.HTTP_400_BAD_REQUEST, "INVALID_USER_ID"),
    (InvalidUserPairError, status.HTTP_400_BAD_REQUEST, "INVALID_USER_PAIR"),
    (UnknownUserError, status.HTTP_404_NOT_FOUND, "UNKNOWN_USER"),
    (ReswipeForbiddenError, status.HTTP_409_CONFLICT, "RESWIPE_FORBIDDEN"),
    (ReswipeCooldownError, status.HTTP_409_CONFLICT, "RESWIPE_COOLDOWN"),
    (LockAcquisitionTimeoutError, status.HTTP_503_SERVICE_UNAVAILABLE, "PAIR_BUSY"),
    (ConflictExhaustedError, status.HTTP_503_SERVICE_UNAVAILABLE, "PAIR_CONTENDED"),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_UNAVAILABLE"),
]


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: "ok", or "degraded" when the Redis backend does not answer
        version: API version
        timestamp: Unix timestamp of health check
        backend: Edge store backend in use ("memory" or "redis")
        redis: Redis PING result (None for the memory backend)
    """

    status: str = "ok"
    version: str = API_VERSION
    timestamp: float
    backend: str
    redis: Optional[bool] = None


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Log every request with method, path, status code and duration.

    Logging Format:
        INFO: "Incoming request: POST /api/swipes/interest"
        INFO: "Request completed: POST /api/swipes/interest - 200 - 0.004s"
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )
    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def _classify(exc: DomainException) -> tuple[int, str]:
    for exc_type, status_code, code in ERROR_MAPPING:
        if isinstance(exc, exc_type):
            return status_code, code
    return status.HTTP_400_BAD_REQUEST, exc.__class__.__name__.replace("Error", "").upper()


def _error_details(exc: DomainException) -> dict:
    details: dict = {"exception_type": exc.__class__.__name__}
    for attr in ("user_id", "from_user", "to_user", "pair_key", "attempts", "operation"):
        value = getattr(exc, attr, None)
        if value is not None:
            details[attr] = value if isinstance(value, (int, float)) else str(value)
    if isinstance(exc, ReswipeCooldownError):
        details["retry_after_seconds"] = exc.retry_after_seconds
    return details


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Converts every DomainException subclass to an ErrorResponse with the
    status code from ERROR_MAPPING. Retryable failures carry Retry-After.

    Examples:
        >>> # ReswipeForbiddenError
        >>> # Returns: 409 {"code": "RESWIPE_FORBIDDEN", "retryable": false, ...}

        >>> # LockAcquisitionTimeoutError
        >>> # Returns: 503 {"code": "PAIR_BUSY", "retryable": true, ...}, Retry-After: 1
    """
    status_code, error_code = _classify(exc)

    headers: dict[str, str] = {}
    retryable = exc.retryable
    if isinstance(exc, ReswipeCooldownError):
        retryable = True
        headers["Retry-After"] = str(exc.retry_after_seconds)
    elif isinstance(exc, TransientStoreError):
        headers["Retry-After"] = str(TRANSIENT_RETRY_AFTER_SECONDS)

    error_response = ErrorResponse(
        code=error_code,
        message=str(exc),
        retryable=retryable,
        details=_error_details(exc),
    )

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Domain exception: {exc.__class__.__name__} - {exc} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
        headers=headers or None,
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler converting unexpected exceptions to 500.

    Logs full stack trace for debugging.
    """
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc), "type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {exc} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


# ============================================================================
# APP FACTORY
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_container.cache_info().currsize and get_container().backend == BACKEND_REDIS:
        close_connections()


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Configuration:
        - Routers: /api/swipes, /api/users, /api/pairs
        - Health: GET /health
        - CORS: Allow all origins (development mode)

    Usage:
        >>> app = create_app()
        >>> # uvicorn src.api.main:app --reload

    Architecture Note:
        Factory pattern allows easy testing with dependency overrides
        (app.dependency_overrides[get_container] = ...).
    """
    app = FastAPI(
        title="SwipeMatch API",
        version=API_VERSION,
        description=(
            "Mutual-interest matching: record swipes, form connections exactly "
            "once, list connections and candidates."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Production: restrict to specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(request_logging_middleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(swipes_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(pairs_router, prefix="/api")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        tags=["health"],
    )
    async def health_check(
        container: MatchingContainer = Depends(get_container),
    ) -> HealthCheckResponse:
        redis_ok: Optional[bool] = None
        if container.backend == BACKEND_REDIS:
            redis_ok = redis_health_check()

        return HealthCheckResponse(
            status="degraded" if redis_ok is False else "ok",
            timestamp=time.time(),
            backend=container.backend,
            redis=redis_ok,
        )

    logger.info("FastAPI application created successfully")
    logger.info("Registered routers: /api/swipes, /api/users, /api/pairs")

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn src.api.main:app --reload
app = create_app()
