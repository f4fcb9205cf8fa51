"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pathcraft.api.routes import milestones, roadmaps, stats
from pathcraft.core.auth import ensure_default_user
from pathcraft.core.config import get_settings
from pathcraft.core.database import close_db, get_db_session, init_db
from pathcraft.core.exceptions import (
    GenerationError,
    MalformedRoadmapError,
    PathcraftError,
    ValidationError,
)
from pathcraft.core.logging import configure_logging, get_logger
from pathcraft.services.progress_service import RoadmapLocks

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging(debug=settings.DEBUG, level=settings.LOG_LEVEL)
    logger.info(
        "Starting Pathcraft",
        version=settings.APP_VERSION,
        env=settings.ENV,
        debug=settings.DEBUG,
    )
    await init_db()
    async with get_db_session() as db:
        await ensure_default_user(db)
    yield
    # Shutdown
    logger.info("Shutting down Pathcraft")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="LLM-generated study roadmaps with progress tracking",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)
app.state.roadmap_locks = RoadmapLocks()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PathcraftError)
async def pathcraft_error_handler(request: Request, exc: PathcraftError) -> JSONResponse:
    """Render domain errors as ``{"error": message}``."""
    if isinstance(exc, GenerationError):
        context = {}
        if isinstance(exc, MalformedRoadmapError):
            context = {"head": exc.head, "tail": exc.tail}
        logger.error(
            "Roadmap generation failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            **context,
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=str(exc),
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Invalid request bodies are a 400, answered before any model call."""
    details = [
        {
            "loc": list(err.get("loc", [])),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    error = ValidationError("Invalid roadmap request")
    logger.info("Validation error", path=request.url.path, details=details)
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.public_message, "details": details},
    )


# Include routers
app.include_router(roadmaps.router, prefix="/api")
app.include_router(milestones.router, prefix="/api")
app.include_router(stats.router, prefix="/api")


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "env": settings.ENV,
    }


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "pathcraft.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
