"""
CivicTrack - Main FastAPI Application

The entry point for the civic issue reporting backend.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import get_settings
from app.api.v1.router import api_router
from app.core.exceptions import CivicTrackError
from app.db.session import init_db

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s %s started (%s)", settings.project_name, __version__, settings.environment)
    yield


configure_logging()

app = FastAPI(
    title=settings.project_name,
    description="""
    CivicTrack: report, track and moderate local civic issues.

    ## Subsystems

    - **Issues**: Report submission, radius search, status history, votes
    - **Users**: A reporter's own issues and stats
    - **Moderation**: Flag threshold with automatic hiding
    - **Admin**: Full issue listing, visibility overrides and analytics
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CivicTrackError)
async def civictrack_error_handler(request: Request, exc: CivicTrackError):
    logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    body = {
        "error": exc.error,
        "message": exc.message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


# Include API router
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint - system status."""
    return {
        "system": settings.project_name,
        "status": "operational",
        "version": __version__,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
