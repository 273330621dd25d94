"""
Service layer for the ROI annotation engine
"""

from .editor_service import EditorSession
from .session_manager import SessionManager

__all__ = ["EditorSession", "SessionManager"]
