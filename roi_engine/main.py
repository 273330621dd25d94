"""
ROI Annotation Engine - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roi_engine.api.exceptions import register_exception_handlers
from roi_engine.api.routers import sessions, system
from roi_engine.config import get_settings
from roi_engine.core.constants import SystemConstants
from roi_engine.services.session_manager import SessionManager

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    logger.info("Starting ROI Annotation Engine server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    app.state.session_manager = SessionManager(
        editor_settings=settings.editor,
        max_sessions=settings.session.max_sessions,
    )
    app.state.config = settings.to_dict()

    yield

    logger.info("Shutting down ROI Annotation Engine server...")
    app.state.session_manager.clear()
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="ROI Annotation Engine",
    description="Interactive region-of-interest editing and measurement over static images",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(sessions.router, prefix="/api/sessions", tags=["Sessions"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "ROI Annotation Engine",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "sessions": "/api/sessions",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "session_manager": getattr(app.state, "session_manager", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "roi_engine.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level="info",
    )


if __name__ == "__main__":
    run()
