"""
Constants and configuration values for the ROI annotation engine.
Centralizes all magic numbers and configuration constants.
"""


# Annotation Space Constants
class AnnotationSpace:
    """Normalized coordinate system tied to the image's own bounding box."""

    SCALE = 100.0  # Percent of the untransformed container extent


# View Constants
class ViewConstants:
    """Constants related to zoom, pan and display adjustments."""

    # Zoom
    DEFAULT_ZOOM = 1.0
    ZOOM_MIN = 1.0
    ZOOM_MAX = 4.0
    ZOOM_STEP = 0.5

    # Display filters (percent, display-only)
    DEFAULT_BRIGHTNESS = 100.0
    BRIGHTNESS_MIN = 50.0
    BRIGHTNESS_MAX = 150.0
    DEFAULT_CONTRAST = 100.0
    CONTRAST_MIN = 50.0
    CONTRAST_MAX = 200.0

    # Hit-testing and handles, in annotation units at zoom 1
    BASE_HIT_THRESHOLD = 3.0
    BASE_HANDLE_RADIUS = 5.0


# Editor Constants
class EditorConstants:
    """Constants for drawing gestures and committed regions."""

    MIN_COMMITTED_POINTS = 2
    DEFAULT_LABEL = "Doctor ROI"
    ROI_ID_PREFIX = "roi_"
    ROI_ID_HEX_LENGTH = 9


# Measurement Constants
class MeasurementConstants:
    """Constants for derived measurements."""

    # Placeholder calibration standing in for pixel-spacing metadata
    MM_PER_UNIT = 3.5

    # Intensity proxy range (Hounsfield-like units)
    INTENSITY_LOW = 30
    INTENSITY_HIGH = 90


# Session Constants
class SessionConstants:
    """Constants for editor session management."""

    DEFAULT_MAX_SESSIONS = 50
    SESSION_ID_PREFIX = "sess_"


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000
    PREVIEW_JPEG_QUALITY = 85


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Color Constants (BGR format for OpenCV)
class Colors:
    """Standard colors for drawing operations (BGR format)."""

    TEAL = (180, 212, 45)
    AMBER = (11, 158, 245)
    WHITE = (255, 255, 255)
    BLACK = (0, 0, 0)
    SLATE = (42, 23, 15)

    # Semantic colors
    CONFIRMED = TEAL
    PROPOSED = AMBER
    HANDLE_FILL = SLATE
    LABEL = WHITE


# Drawing Constants
class DrawingConstants:
    """Constants for overlay rendering."""

    DEFAULT_LINE_THICKNESS = 2
    THIN_LINE = 1
    DEFAULT_FONT_SCALE = 0.5
    # Handle radius in pixels at zoom 1
    HANDLE_RADIUS_PX = 5
    FILL_ALPHA = 0.2


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    SESSION_NOT_FOUND = "Editor session {session_id} not found"
    ROI_NOT_FOUND = "ROI {roi_id} not found in session {session_id}"
    IMAGE_REQUIRED = "Editor session {session_id} has no pixel data attached"
    INVALID_IMAGE = "Could not decode image data: {error}"
