"""
System API Router - Status and configuration
"""

import logging
import time

from fastapi import APIRouter, Depends

from roi_engine.api.dependencies import get_config, get_session_manager
from roi_engine.api.exceptions import safe_endpoint

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(session_manager=Depends(get_session_manager)) -> dict:
    """Get system status"""
    return {
        "status": "healthy",
        "uptime": time.time() - START_TIME,
        "active_sessions": len(session_manager),
        "max_sessions": session_manager.max_sessions,
    }


@router.get("/config")
@safe_endpoint
async def get_configuration(config=Depends(get_config)) -> dict:
    """Get current configuration"""
    return config
