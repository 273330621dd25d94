"""
API exception hierarchy and handlers.

The core engine never raises for interaction edge cases; these exceptions
cover the HTTP surface only (unknown sessions or regions, missing or bad
pixel data).
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from roi_engine.core.constants import ErrorMessages

logger = logging.getLogger(__name__)


class EngineException(Exception):
    """Base exception for API-level errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SessionNotFoundException(EngineException):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(ErrorMessages.SESSION_NOT_FOUND.format(session_id=session_id))
        self.session_id = session_id


class ROINotFoundException(EngineException):
    status_code = 404

    def __init__(self, session_id: str, roi_id: str):
        super().__init__(ErrorMessages.ROI_NOT_FOUND.format(session_id=session_id, roi_id=roi_id))
        self.roi_id = roi_id


class ImageRequiredException(EngineException):
    status_code = 409

    def __init__(self, session_id: str):
        super().__init__(ErrorMessages.IMAGE_REQUIRED.format(session_id=session_id))
        self.session_id = session_id


class InvalidImageException(EngineException):
    status_code = 400

    def __init__(self, error: str):
        super().__init__(ErrorMessages.INVALID_IMAGE.format(error=error))


def safe_endpoint(func):
    """
    Wrap an async endpoint so unexpected errors become 500 responses.

    EngineException and HTTPException pass through to their handlers.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (EngineException, HTTPException):
            raise
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {e}") from e

    return wrapper


async def engine_exception_handler(request: Request, exc: EngineException) -> JSONResponse:
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "detail": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the engine exception hierarchy."""
    app.add_exception_handler(EngineException, engine_exception_handler)
