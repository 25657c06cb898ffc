"""
preprocessor.py

Page image preparation ahead of text recognition.

Scanned legal documents are usually grey, slightly rotated and faded.
Pages are converted to grayscale once, then optionally deskewed and
contrast-enhanced. Each step is toggleable via config.
"""

import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from DocExtract import config

logger = logging.getLogger(__name__)


def prepare_page(
    image: Image.Image,
    enable_deskew: Optional[bool] = None,
    enable_contrast_enhancement: Optional[bool] = None,
) -> Image.Image:
    """
    Prepare a rendered page for recognition.

    Args:
        image: Rendered page (any PIL mode).
        enable_deskew: Override config ENABLE_DESKEW.
        enable_contrast_enhancement: Override config ENABLE_CONTRAST_ENHANCEMENT.

    Returns:
        Grayscale ("L") PIL Image.
    """
    if enable_deskew is None:
        enable_deskew = config.ENABLE_DESKEW
    if enable_contrast_enhancement is None:
        enable_contrast_enhancement = config.ENABLE_CONTRAST_ENHANCEMENT

    result = image.convert("L")

    if enable_deskew:
        result = deskew(result)

    if enable_contrast_enhancement:
        result = enhance_contrast(result)

    return result


def estimate_skew(gray: np.ndarray) -> float:
    """
    Skew angle in degrees from the minimum-area rectangle around ink pixels.

    Returns 0.0 when there is too little ink to measure.
    """
    coords = np.column_stack(np.where(gray < 128)).astype(np.float32)
    if len(coords) < 50:
        return 0.0

    angle = cv2.minAreaRect(coords)[-1]

    # OpenCV reports either [-90, 0) or (0, 90] depending on version
    if angle < -45:
        angle = -(90 + angle)
    elif angle > 45:
        angle = 90 - angle
    else:
        angle = -angle
    return float(angle)


def deskew(image: Image.Image) -> Image.Image:
    """Rotate a grayscale page back to horizontal for small scan rotations."""
    angle = estimate_skew(np.array(image))

    # Large angles usually mean an intentionally rotated page
    if abs(angle) > config.MAX_DESKEW_ANGLE or abs(angle) < 0.1:
        return image

    logger.info("Deskewing by %.2f degrees", angle)
    return image.rotate(-angle, resample=Image.BICUBIC, expand=True, fillcolor=255)


def enhance_contrast(image: Image.Image) -> Image.Image:
    """Apply CLAHE to a grayscale page to recover faded strokes."""
    clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
    return Image.fromarray(clahe.apply(np.array(image)))
