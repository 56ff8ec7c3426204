"""
DevConnector API - developer profiles.

FastAPI application serving profile documents, their experience and
education entries, and GitHub repository listings.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings, validate_security_settings
from app.database import engine, init_db
from app.errors import ProfileServiceError
from app.logging_config import bind_context, clear_context, configure_logging, get_logger
from app.middleware.rate_limit import limiter
from app.routers.profile import router as profile_router

# Import models to register them with Base.metadata
from app.models import Profile, User  # noqa: F401

configure_logging(settings.log_level)
logger = get_logger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan handler for startup/shutdown."""
    validate_security_settings()
    await init_db()
    logger.info("api_started", environment=settings.environment)
    yield
    await engine.dispose()


app = FastAPI(
    title="DevConnector API",
    description="Developer profiles with experience, education and GitHub repositories",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter state
app.state.limiter = limiter

# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(profile_router)


# --- Middleware ---


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a unique request ID to each request and to its log context."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    clear_context()
    bind_context(request_id=request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception Handlers ---


def _sanitize_error_detail(error: dict[str, Any]) -> dict[str, Any]:
    """Reduce a Pydantic error to the JSON-safe fields callers need."""
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    return {
        "field": ".".join(loc),
        "message": error.get("msg", "Invalid value"),
        "type": error.get("type"),
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject invalid input with every failing field listed."""
    request_id = getattr(request.state, "request_id", None)
    errors = [_sanitize_error_detail(e) for e in exc.errors()]
    fields = sorted({e["field"] for e in errors if e["field"]})
    message = f"Invalid fields: {', '.join(fields)}" if fields else "Validation error"

    logger.info("request_validation_failed", path=request.url.path, fields=fields)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message,
                "request_id": request_id,
                "details": errors,
            }
        },
    )


@app.exception_handler(ProfileServiceError)
async def profile_service_exception_handler(
    request: Request, exc: ProfileServiceError
) -> JSONResponse:
    """Map service errors to their HTTP status and the standard envelope."""
    request_id = getattr(request.state, "request_id", None)
    if exc.http_status >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code, error_type=type(exc).__name__)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response(request_id))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent error format."""
    request_id = getattr(request.state, "request_id", None)
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# --- Health Check ---


@app.get("/api/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the API is running.
    """
    return {"status": "healthy"}
