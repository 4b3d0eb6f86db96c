"""
DoseTrack Backend
FastAPI application for prescription dose scheduling and adherence tracking
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# Configuration and database
from config import settings
from database import init_db, database_reachable

from api import include_routers

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


# ==================== LIFESPAN ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENV}")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")


# ==================== APP INITIALIZATION ====================

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## DoseTrack API

    Tracks whether a patient has taken each prescribed dose, on schedule.

    ### Features
    - **Schedule Expansion**: Delivered prescriptions become one dose record per medicine per day
    - **Self-healing Reads**: Missing schedules are backfilled on the first adherence read
    - **Time Windows**: Doses are bucketed as pending, due now, overdue, upcoming, taken or skipped
    - **Dose Updates**: Mark doses taken or skipped; clients poll for fresh state
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Attach modular API routers
include_routers(app, prefix=settings.API_PREFIX)


# ==================== EXCEPTION HANDLERS ====================

def _error_body(status_code: int, message, **extra) -> dict:
    return {
        "error": True,
        "message": message,
        "status_code": status_code,
        "timestamp": datetime.utcnow().isoformat(),
        **extra
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail)
    )


@app.exception_handler(SQLAlchemyError)
async def storage_exception_handler(request, exc: SQLAlchemyError):
    logger.error(f"Storage error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=503,
        content=_error_body(
            503,
            "Storage temporarily unavailable" if not settings.DEBUG else str(exc),
            retryable=True
        )
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body(
            500,
            "An unexpected error occurred" if not settings.DEBUG else str(exc)
        )
    )


# ==================== HEALTH ====================

@app.get("/health", tags=["health"])
async def health_check():
    """Service and database health"""
    db_ok = database_reachable()
    return {
        "status": "healthy" if db_ok else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": "connected" if db_ok else "unavailable",
        "timestamp": datetime.utcnow().isoformat()
    }


# ==================== MAIN ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
