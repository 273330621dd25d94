"""
Session Manager - keeps editor sessions alive for the HTTP surface
"""

import logging
import uuid
from collections import OrderedDict
from threading import RLock
from typing import Iterable, List, Optional

import numpy as np

from roi_engine.config import EditorSettings
from roi_engine.core.constants import SessionConstants
from roi_engine.schemas import ContainerBox, ROIAnnotation, SessionSummary
from roi_engine.services.editor_service import ConfirmCallback, EditorSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Bounded, insertion-ordered registry of editor sessions"""

    def __init__(
        self,
        editor_settings: Optional[EditorSettings] = None,
        max_sessions: int = SessionConstants.DEFAULT_MAX_SESSIONS,
    ):
        """
        Initialize Session Manager

        Args:
            editor_settings: Settings applied to every new session
            max_sessions: Oldest sessions are evicted beyond this count
        """
        self.editor_settings = editor_settings or EditorSettings()
        self.max_sessions = max_sessions
        self.sessions: "OrderedDict[str, EditorSession]" = OrderedDict()

        # Thread safety for the registry (RLock allows reentrant locking)
        self.lock = RLock()

        logger.info(f"Session Manager initialized with max sessions: {max_sessions}")

    def create(
        self,
        image_ref: str,
        initial_rois: Iterable[ROIAnnotation] = (),
        container: Optional[ContainerBox] = None,
        image: Optional[np.ndarray] = None,
        confirm_callback: Optional[ConfirmCallback] = None,
    ) -> EditorSession:
        """
        Open a new editor session.

        Returns:
            The initialized session
        """
        with self.lock:
            session_id = f"{SessionConstants.SESSION_ID_PREFIX}{uuid.uuid4().hex[:8]}"
            session = EditorSession(
                settings=self.editor_settings,
                confirm_callback=confirm_callback,
                session_id=session_id,
            )
            session.initialize(image_ref, initial_rois, container=container, image=image)
            self.sessions[session_id] = session

            while len(self.sessions) > self.max_sessions:
                evicted_id, _ = self.sessions.popitem(last=False)
                logger.warning(f"Evicted session {evicted_id} (limit {self.max_sessions})")

            logger.info(f"Created session {session_id} for image {image_ref!r}")
            return session

    def get(self, session_id: str) -> Optional[EditorSession]:
        with self.lock:
            return self.sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self.lock:
            removed = self.sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Deleted session {session_id}")
        return removed is not None

    def list_sessions(self) -> List[SessionSummary]:
        with self.lock:
            sessions = list(self.sessions.values())
        return [
            SessionSummary(
                session_id=s.session_id,
                image_ref=s.image_ref,
                roi_count=len(s.store),
                total_burden=s.total_burden,
            )
            for s in sessions
        ]

    def clear(self) -> None:
        with self.lock:
            self.sessions.clear()
        logger.info("All sessions cleared")

    def __len__(self) -> int:
        return len(self.sessions)
