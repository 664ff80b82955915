from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
import time
import uuid

from .config import settings
from .database import create_tables
from .errors import PricingError, DecodeError, ValidationError, NotFoundError, StoreWriteError
from .utils.logging_config import setup_logging, get_logger, set_request_context, clear_request_context

from .routers import channels, health

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(settings.log_level, settings.log_json)

    logger.info(f"Starting channel-pricing service ({settings.environment})")
    logger.info(f"CORS Origins: {settings.cors_origins}")

    create_tables()
    logger.info("Database ready")

    yield

    logger.info("Shutting down channel-pricing service")


# Create FastAPI app
app = FastAPI(
    title="Channel Pricing API",
    description="Per-channel model pricing: legacy ratios, unified model configs and migration between them",
    version="1.0.0",
    lifespan=lifespan
)


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        start = time.time()
        try:
            response = await call_next(request)
            logger.api_request(
                request.method,
                request.url.path,
                response.status_code,
                (time.time() - start) * 1000,
            )
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIdMiddleware)


# ================================
# ERROR HANDLERS
# ================================

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return _error_response(400, message)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    if isinstance(exc, (DecodeError, ValidationError)):
        return _error_response(400, exc.message)
    if isinstance(exc, NotFoundError):
        return _error_response(404, exc.message)
    if isinstance(exc, StoreWriteError) and exc.conflict:
        return _error_response(409, exc.message)
    logger.error(f"Unhandled pricing error on {request.url.path}: {exc.message}")
    return _error_response(500, exc.message)


# Include routers
app.include_router(channels.router)
app.include_router(health.router)


@app.get("")
@app.get("/")
async def root():
    return {
        "message": "Channel Pricing API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running",
    }
