"""
Shared FastAPI dependencies for the ROI annotation engine.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Path, Request

from roi_engine.api.exceptions import SessionNotFoundException
from roi_engine.services.editor_service import EditorSession
from roi_engine.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


def get_session_manager(request: Request) -> SessionManager:
    """
    Get the SessionManager instance from app state.

    Raises:
        HTTPException: If the manager was not initialized
    """
    try:
        return request.app.state.session_manager
    except AttributeError as e:
        logger.error(f"Session manager not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Session manager not initialized"
        )


def get_session(
    session_id: str = Path(..., description="Editor session identifier"),
    session_manager: SessionManager = Depends(get_session_manager),
) -> EditorSession:
    """
    Resolve a session id to its EditorSession.

    Raises:
        SessionNotFoundException: If the session does not exist
    """
    session = session_manager.get(session_id)
    if session is None:
        raise SessionNotFoundException(session_id)
    return session


def get_config(request: Request) -> Dict[str, Any]:
    """Get application configuration."""
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return {}
