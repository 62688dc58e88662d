"""Image loading helpers producing engine-ready grayscale buffers.

The engine consumes one byte per pixel. Color images are converted with
OpenCV's luminance weights (0.299 R + 0.587 G + 0.114 B).
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from src.common.types import GrayscaleImage

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def to_grayscale(image: np.ndarray) -> GrayscaleImage:
    """Convert a BGR, BGRA or single-channel uint8 array to grayscale.

    Args:
        image: Image as numpy array (H, W), (H, W, 1), (H, W, 3) or (H, W, 4).

    Returns:
        GrayscaleImage wrapping a (H, W) uint8 array.

    Raises:
        ValidationError: If the array is not a supported image.
    """
    if not isinstance(image, np.ndarray) or image.size == 0:
        raise ValidationError("Invalid image: empty or not a numpy array")

    if image.dtype != np.uint8:
        raise ValidationError(f"Expected uint8 image, got {image.dtype}")

    if image.ndim == 2:
        gray = image
    elif image.ndim == 3 and image.shape[2] == 1:
        gray = image[:, :, 0]
    elif image.ndim == 3 and image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    elif image.ndim == 3 and image.shape[2] == 4:
        gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    else:
        raise ValidationError(f"Invalid image shape: {image.shape}")

    return GrayscaleImage(data=np.ascontiguousarray(gray))


def load_grayscale(path: Union[str, Path]) -> GrayscaleImage:
    """Read an image file (BMP, PNG, JPEG, ...) as grayscale.

    Raises:
        ValidationError: If the file does not exist or cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        raise ValidationError(f"Image file not found: {path}")

    image = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise ValidationError(f"Could not decode image file: {path}")

    logger.debug(f"Loaded {path.name}: {image.shape[1]}x{image.shape[0]}")
    return GrayscaleImage(data=image)
