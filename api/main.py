"""
Guitar Repair API - FastAPI Main Application
Repair case records, similar-case estimates and rule-based pricing
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from guitar_repair_core import __version__
from guitar_repair_core.errors import (
    CaseNotFoundError,
    CaseValidationError,
    RepairError,
    StoreCorruptedError,
    StoreNotFoundError,
)

from api.config import config
from api.security_config import EXPOSE_HEADERS, get_allowed_hosts, get_allowed_origins
from api.storage import check_storage_health, record_store

# Routers
from api.routers import documents, estimate, repairs

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.APP_LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Application metadata
APP_NAME = "Guitar Repair API"
APP_VERSION = __version__
APP_DESCRIPTION = "Repair case records, similar-case price estimates and rule-based quotes"

ERROR_STATUS = {
    CaseValidationError: status.HTTP_400_BAD_REQUEST,
    CaseNotFoundError: status.HTTP_404_NOT_FOUND,
    StoreNotFoundError: status.HTTP_404_NOT_FOUND,
    StoreCorruptedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ErrorResponse(BaseModel):
    """Standard error response model"""
    code: str
    message: str
    hint: Optional[str] = None
    traceId: str
    meta: Dict[str, Any]


class AppContext:
    """Application context manager"""
    def __init__(self):
        self.start_time = time.time()
        self.ready = False

    def startup(self):
        logger.info(f"Starting {APP_NAME} (env={config.APP_ENV}, store={record_store.path})")
        if not record_store.exists():
            logger.warning(f"Record store not found yet, it will be created on first save: {record_store.path}")
        self.ready = True

    def shutdown(self):
        logger.info(f"Shutting down {APP_NAME}")
        self.ready = False


# Initialize application context
app_context = AppContext()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    app_context.startup()
    yield
    app_context.shutdown()


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description=APP_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configure CORS with whitelist
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Range"],
    expose_headers=EXPOSE_HEADERS
)

# Configure trusted hosts with whitelist
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=get_allowed_hosts()
)

# Configure rate limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATE_LIMIT_DEFAULT],
    enabled=config.RATE_LIMIT_ENABLED,
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", str(uuid.uuid4()))


def _error_response(request: Request, status_code: int, error: ErrorResponse, headers=None) -> JSONResponse:
    response = JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error),
        headers=headers,
    )
    response.headers["X-Trace-Id"] = error.traceId
    return response


# Rate limit exceeded handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded"""
    return _error_response(request, status.HTTP_429_TOO_MANY_REQUESTS, ErrorResponse(
        code="RATE_LIMIT_EXCEEDED",
        message="Too many requests",
        hint="Please wait before making more requests",
        traceId=_trace_id(request),
        meta={"limit": str(exc.detail)}
    ))


# Middleware for trace ID injection
@app.middleware("http")
async def inject_trace_id(request: Request, call_next):
    """Inject trace ID into all requests and responses"""
    trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4()))
    request.state.trace_id = trace_id

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["X-Trace-Id"] = trace_id
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"[{trace_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
    )
    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors"""
    errors = exc.errors()
    return _error_response(request, status.HTTP_400_BAD_REQUEST, ErrorResponse(
        code="VALIDATION_ERROR",
        message="Invalid request parameters",
        hint=str(errors[0]["msg"]) if errors else None,
        traceId=_trace_id(request),
        meta={"fields": [".".join(str(p) for p in e.get("loc", ())) for e in errors]}
    ))


@app.exception_handler(RepairError)
async def repair_error_handler(request: Request, exc: RepairError):
    """Map core errors onto the error envelope"""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    trace_id = _trace_id(request)
    if status_code >= 500:
        logger.error(f"[{trace_id}] {exc.code}: {exc.message}")
    else:
        logger.info(f"[{trace_id}] {exc.code}: {exc.message}")
    return _error_response(request, status_code, ErrorResponse(
        code=exc.code,
        message=exc.message,
        hint=exc.hint,
        traceId=trace_id,
        meta={"path": request.url.path}
    ))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    detail = exc.detail if isinstance(exc.detail, dict) else {}
    return _error_response(request, exc.status_code, ErrorResponse(
        code=detail.get("code", "HTTP_ERROR"),
        message=detail.get("message", str(exc.detail)),
        hint=detail.get("hint"),
        traceId=_trace_id(request),
        meta={"path": request.url.path}
    ), headers=exc.headers)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    trace_id = _trace_id(request)
    logger.error(f"[{trace_id}] Unhandled exception: {exc}", exc_info=True)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(
        code="INTERNAL_ERROR",
        message="An internal error occurred",
        hint="Please contact support with the trace ID",
        traceId=trace_id,
        meta={"path": request.url.path}
    ))


# Health check endpoint
@app.get("/healthz")
async def health_check():
    """Liveness check"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.time() - app_context.start_time
    }


# Readiness check endpoint
@app.get("/readyz")
def readiness_check(request: Request):
    """Readiness check with record store validation"""
    storage = check_storage_health()
    ready = app_context.ready and storage["status"] != "error"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if ready else "degraded",
            "storage": storage,
            "ts": datetime.now(timezone.utc).isoformat(),
            "traceId": _trace_id(request),
        }
    )


app.include_router(repairs.router)
app.include_router(estimate.router)
app.include_router(documents.router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
        "docs": "/docs",
        "health": "/healthz",
        "ready": "/readyz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=config.is_development(),
        log_level=config.APP_LOG_LEVEL.lower()
    )
