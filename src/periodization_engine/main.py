"""FastAPI application for the periodization engine."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import configure_logging, get_settings
from .api.deps import get_store, get_template_service
from .api.routes import objectives, planner, programs, templates, volume
from .api.exception_handlers import register_exception_handlers


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting Periodization Engine v{__version__}")
    logger.info(f"Database: {get_store().db_path}")
    if settings.seed_builtin_templates:
        get_template_service().seed_builtin_templates()
    yield
    # Shutdown
    logger.info("Shutting down Periodization Engine")


app = FastAPI(
    title="Periodization Engine API",
    description="Periodized training volume management and program planning",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(volume.router, prefix="/api/v1/volume", tags=["volume"])
app.include_router(programs.router, prefix="/api/v1/programs", tags=["programs"])
app.include_router(templates.router, prefix="/api/v1/templates", tags=["templates"])
app.include_router(planner.router, prefix="/api/v1/planner", tags=["planner"])
app.include_router(objectives.router, prefix="/api/v1/objectives", tags=["objectives"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Periodization Engine API",
        "version": __version__,
        "status": "healthy",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
