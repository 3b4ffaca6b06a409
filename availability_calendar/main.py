from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
import time
import uuid

from . import __version__
from .config import settings
from .services.calendar_store import CalendarDataStore
from .utils.logging_config import setup_logging, get_logger, set_request_context, clear_request_context
from .routers import calendar, health

logger = get_logger("availability_calendar")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    logger.info(f"🚀 Starting availability-calendar {__version__}")
    logger.info(f"📍 Environment: {settings.environment}")
    logger.info(f"🔐 CORS Origins: {settings.cors_origins}")

    yield

    logger.info(f"👋 Shutting down availability-calendar ({len(app.state.calendar_store)} days in store)")


# Create FastAPI app
app = FastAPI(
    title="Availability Calendar API",
    description="Day availability feed merged into booking and unavailability events",
    version=__version__,
    lifespan=lifespan
)

# One day store per application instance
app.state.calendar_store = CalendarDataStore()


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        started = time.time()
        try:
            response = await call_next(request)
            logger.api_request(
                request.method,
                request.url.path,
                response.status_code,
                round((time.time() - started) * 1000, 2)
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


app.add_middleware(RequestIdMiddleware)


# Include routers
app.include_router(health.router)
app.include_router(calendar.router)


@app.get("/")
async def root():
    return {
        "message": "Availability Calendar API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
@app.get("/health/")
async def health_check():
    return {"status": "healthy"}
