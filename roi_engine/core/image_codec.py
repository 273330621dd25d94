"""
Image format conversion utilities.

The engine never owns image storage; callers may attach pixel data to a
session for intensity sampling and overlay previews. This module converts
between:
- NumPy arrays (OpenCV BGR format)
- PIL Images (RGB format)
- Base64 encoded strings
"""

import base64
import binascii
import io
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Raised when supplied bytes are not a decodable image"""


class ImageCodec:
    """Utilities for converting between image formats."""

    @staticmethod
    def pil_to_numpy(image: Image.Image) -> np.ndarray:
        """
        Convert PIL Image to a BGR (or single-channel) NumPy array.

        Palette, alpha and 16-bit modes are normalised first.
        """
        if image.mode not in ("L", "RGB"):
            image = image.convert("RGB")

        array = np.array(image)
        if len(array.shape) == 3 and array.shape[2] == 3:
            array = cv2.cvtColor(array, cv2.COLOR_RGB2BGR)
        return array

    @staticmethod
    def from_base64(base64_string: str) -> np.ndarray:
        """
        Decode a base64 string (optionally a data URL) into a NumPy array.

        Raises:
            ImageDecodeError: If the payload is not valid base64 image data
        """
        payload = base64_string
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]

        try:
            image_bytes = base64.b64decode(payload, validate=True)
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (binascii.Error, UnidentifiedImageError, OSError) as e:
            logger.error(f"Failed to decode base64 image: {e}")
            raise ImageDecodeError(str(e)) from e

        return ImageCodec.pil_to_numpy(image)

    @staticmethod
    def to_base64(image: np.ndarray, format: str = ".jpg", quality: int = 85) -> str:
        """
        Encode OpenCV image (NumPy array) to base64 string.

        Args:
            image: OpenCV image (NumPy array)
            format: Image format ('.png', '.jpg', etc.)
            quality: JPEG quality (ignored for other formats)

        Returns:
            Base64 encoded string
        """
        params = [cv2.IMWRITE_JPEG_QUALITY, quality] if format in (".jpg", ".jpeg") else []
        ok, buffer = cv2.imencode(format, image, params)
        if not ok:
            raise ValueError(f"OpenCV could not encode image as {format}")
        return base64.b64encode(buffer).decode("utf-8")

    @staticmethod
    def ensure_bgr(image: np.ndarray) -> np.ndarray:
        """
        Ensure image is in BGR format (convert from grayscale if needed).

        Args:
            image: Input image (grayscale or BGR)

        Returns:
            Image in BGR format
        """
        if len(image.shape) == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        return image.copy()
