"""
Step Gate — FastAPI Application Entry Point

Aggregates all routers, configures middleware and error translation,
and initializes the database on startup.
"""
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from stepgate.config import get_settings
from stepgate.database import SessionLocal, init_db
from stepgate.errors import GateError, Unexpected
from stepgate.routes import session_router, verification_router, reward_router, admin_router
from stepgate.utils.logger import get_logger, setup_logging

settings = get_settings()
setup_logging()
logger = get_logger("main")

# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Verification gate for the study-resources landing page: session tracking, "
        "registration, AI screenshot verification of two steps, gated reward link, "
        "and an admin lead view."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ─── Startup ─────────────────────────────────────────────────────────
BOOT_TIME = time.time()


@app.on_event("startup")
def on_startup():
    """Initialize database tables and log boot info."""
    init_db()

    logger.info(
        "\n%s\n  %s v%s\n  TIME: %s\n  GEMINI KEY: %s\n  REWARD LINK: %s\n  ADMIN: %s\n  DEBUG: %s\n%s",
        "=" * 60,
        settings.APP_NAME, settings.APP_VERSION,
        datetime.now().isoformat(),
        "[OK] Loaded" if settings.GEMINI_API_KEY else "[!] Missing",
        "[OK] Configured" if settings.REWARD_LINK else "[!] Missing",
        "[OK] Enabled" if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD else "[!] Disabled",
        settings.DEBUG,
        "=" * 60,
    )


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info("%s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration)

    return response


# ─── Error Translation ───────────────────────────────────────────────
@app.exception_handler(GateError)
async def gate_error_handler(request: Request, exc: GateError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    return JSONResponse(
        status_code=400,
        content={"error": "Missing or invalid fields", "fields": fields},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=Unexpected().to_body())


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(session_router)
app.include_router(verification_router)
app.include_router(reward_router)
app.include_router(admin_router)


@app.get("/health", tags=["Health"])
def deep_health():
    """Detailed health check including dependency statuses."""
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning("Health check: database unreachable: %s", e)
    finally:
        db.close()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "ai_classifier": "available" if settings.GEMINI_API_KEY else "unavailable",
        "uptime_seconds": round(time.time() - BOOT_TIME, 1),
        "version": settings.APP_VERSION,
    }
