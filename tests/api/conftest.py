"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh session manager to avoid state contamination.
    """
    from roi_engine.config import EditorSettings, Settings
    from roi_engine.main import app
    from roi_engine.services.session_manager import SessionManager

    settings = Settings(editor=EditorSettings(intensity_seed=0))

    session_manager = SessionManager(editor_settings=settings.editor, max_sessions=5)

    # Set in app state
    app.state.session_manager = session_manager
    app.state.config = settings.to_dict()

    # Create test client (no context manager so the lifespan does not replace state)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    session_manager.clear()


@pytest.fixture
def unit_container_payload():
    """Container where device pixels equal annotation units at zoom 1"""
    return {"left": 0, "top": 0, "width": 100, "height": 100}


@pytest.fixture
def create_session(client, unit_container_payload):
    """Factory that opens a session and returns its snapshot JSON"""

    def _create(initial_rois=None, **extra):
        payload = {
            "image_ref": "case-001/ct-slice-12",
            "initial_rois": initial_rois or [],
            "container": unit_container_payload,
        }
        payload.update(extra)
        response = client.post("/api/sessions", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _create
