"""
API Routers for the ROI annotation engine
"""

from . import sessions, system

__all__ = ["sessions", "system"]
