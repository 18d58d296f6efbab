# tracker/main.py
import logging
import psutil # For system metrics in health check
import time   # For uptime calculation
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Dict, Any
from datetime import datetime, timedelta, timezone

from tracker.core.config import settings, PROJECT_NAME, API_PREFIX, VERSION
from tracker.db.database import connect_to_mongo, close_mongo_connection, check_database_health, ensure_indexes

from tracker.api.v1.endpoints.assignments import router as assignments_router
from tracker.api.v1.endpoints.work_ranges import router as work_ranges_router

logger = logging.getLogger(__name__)

APP_START_TIME = time.time()

app = FastAPI(
    title=f"{PROJECT_NAME} API",
    version=VERSION,
    description="API for tracking assignments and planning work periods on a calendar",
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
    openapi_url=f"{API_PREFIX}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Responses ---
# Every error leaves the API as {"error": "<message>"}

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Headers are kept so 405 responses still carry Allow
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    logger.info(f"Rejected request to {request.url.path}: {messages}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "; ".join(messages) or "Invalid request"},
    )

# --- Event Handlers for DB Connection ---
@app.on_event("startup")
async def startup_event():
    """Connect to MongoDB and ensure indexes on application startup."""
    logger.info("Executing startup event: Connecting to database...")
    connected = await connect_to_mongo()
    if not connected:
        logger.critical("FATAL: Database connection failed on startup. Application might not function correctly.")
        return
    logger.info("Startup event: Database connection successful.")
    try:
        await ensure_indexes()
    except Exception as e:
        logger.error(f"Error ensuring database indexes: {e}", exc_info=True)

@app.on_event("shutdown")
async def shutdown_event():
    """Disconnect from MongoDB on application shutdown."""
    logger.info("Executing shutdown event: Disconnecting from database...")
    await close_mongo_connection()

# --- Health Endpoints ---
@app.get("/health", status_code=200, tags=["Health Check"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint that reports:
    - Application status and metrics (uptime, memory)
    - Database connectivity and collections
    """
    db_health = await check_database_health()

    process = psutil.Process()
    memory_info = process.memory_info()

    uptime_seconds = time.time() - APP_START_TIME
    uptime = str(timedelta(seconds=int(uptime_seconds)))

    health_info = {
        "status": "OK",
        "application": {
            "name": PROJECT_NAME,
            "version": VERSION,
            "status": "OK",
            "uptime": uptime,
            "memory_usage": {
                "rss_bytes": memory_info.rss,
                "vms_bytes": memory_info.vms,
                "percent": f"{process.memory_percent():.2f}%"
            }
        },
        "database": db_health,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    if db_health.get("status") in ("ERROR", "WARNING"):
        health_info["status"] = db_health["status"]

    return health_info

@app.get("/healthz", tags=["Probes"], status_code=status.HTTP_200_OK)
async def liveness_probe():
    """Liveness probe: the process is running and responsive."""
    return {"status": "live"}

@app.get("/readyz", tags=["Probes"])
async def readiness_probe(response: Response):
    """Readiness probe: the database is reachable."""
    db_health = await check_database_health()
    if db_health.get("status") == "ERROR":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not_ready", "database": db_health}
    response.status_code = status.HTTP_200_OK
    return {"status": "ready", "database": db_health}

# --- Include API Routers ---
app.include_router(assignments_router, prefix=API_PREFIX)
app.include_router(work_ranges_router, prefix=API_PREFIX)
