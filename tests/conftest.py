"""
Pytest configuration and fixtures for ROI annotation engine tests
"""

import cv2
import numpy as np
import pytest

from roi_engine.config import EditorSettings
from roi_engine.core.annotation_store import AnnotationStore
from roi_engine.core.interaction import InteractionStateMachine
from roi_engine.core.measurement import MeasurementEngine, RandomIntensityProxy
from roi_engine.core.view_transform import ViewTransform
from roi_engine.schemas import ContainerBox, Point, ROIAnnotation
from roi_engine.services.editor_service import EditorSession


def make_roi(points, roi_id=None, confirmed=False, label="Lesion A"):
    """Build an ROIAnnotation from (x, y) tuples"""
    return ROIAnnotation(
        id=roi_id,
        points=[Point(x=x, y=y) for x, y in points],
        label=label,
        is_confirmed=confirmed,
    )


@pytest.fixture
def roi_factory():
    return make_roi


@pytest.fixture
def unit_container():
    """Container whose device pixels coincide with annotation units at zoom 1"""
    return ContainerBox(left=0, top=0, width=100, height=100)


@pytest.fixture
def offset_container():
    """Realistic container offset inside the page"""
    return ContainerBox(left=100, top=50, width=800, height=400)


@pytest.fixture
def view(unit_container):
    return ViewTransform(container=unit_container)


@pytest.fixture
def measurement_engine():
    return MeasurementEngine(mm_per_unit=3.5, sampler=RandomIntensityProxy(seed=0))


@pytest.fixture
def store(measurement_engine):
    """Store with the measurement engine wired in as geometry hook"""
    store = AnnotationStore()
    store.on_geometry_change(measurement_engine.apply)
    return store


@pytest.fixture
def machine(store, view):
    return InteractionStateMachine(store, view)


@pytest.fixture
def editor_settings():
    return EditorSettings(intensity_seed=0)


@pytest.fixture
def session(editor_settings, unit_container):
    """Editor session initialized on a blank image reference"""
    session = EditorSession(settings=editor_settings, session_id="sess_test")
    session.initialize("case-001/ct-slice-12", [], container=unit_container)
    return session


@pytest.fixture
def test_image():
    """Grayscale-ish BGR test image: bright left half, dark right half"""
    image = np.full((100, 200, 3), 50, dtype=np.uint8)
    cv2.rectangle(image, (0, 0), (99, 99), (200, 200, 200), -1)
    return image
