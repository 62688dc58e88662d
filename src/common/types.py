"""
Common type definitions shared by the barcode bridge.

This module provides Pydantic-based type definitions for the data that
crosses module boundaries: grayscale image buffers handed to the decode
engine and the region of interest stored in the scan settings.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Helper methods for common operations
- Integration with numpy arrays and OpenCV
"""

from typing import Tuple

import numpy as np
from pydantic import BaseModel, Field, field_validator


class GrayscaleImage(BaseModel):
    """
    Type-safe wrapper for single-channel 8-bit images.

    The decode engine consumes one byte per pixel in row-major order, so
    this model only accepts 2D uint8 arrays.

    Attributes:
        data: The underlying numpy array containing image data.
            Shape: (H, W). Dtype: uint8 (0-255).

    Example:
        >>> import cv2
        >>> image = cv2.imread("label.png", cv2.IMREAD_GRAYSCALE)
        >>> gray = GrayscaleImage(data=image)
        >>> print(gray.height, gray.width)  # 480, 640
        >>> buffer = gray.to_bytes()
    """

    data: np.ndarray = Field(..., description="Grayscale image as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a grayscale image.

        Args:
            v: Numpy array to validate.

        Returns:
            Validated numpy array.

        Raises:
            ValueError: If array is not a 2D uint8 image.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if v.ndim != 2:
            raise ValueError(f"Expected 2D (grayscale) image, got shape {v.shape}")

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @property
    def shape(self) -> Tuple[int, int]:
        """Get image shape (H, W)."""
        return self.data.shape

    @property
    def height(self) -> int:
        """Get image height in pixels."""
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        """Get image width in pixels."""
        return int(self.data.shape[1])

    def to_bytes(self) -> bytes:
        """
        Get the pixels as a row-major byte string of length width * height.

        Returns:
            Raw grayscale bytes.
        """
        return np.ascontiguousarray(self.data).tobytes()

    def __repr__(self) -> str:
        """String representation of GrayscaleImage."""
        return f"GrayscaleImage(shape={self.shape}, dtype={self.data.dtype})"


class RegionOfInterest(BaseModel):
    """
    Sub-rectangle of the input image that the engine scans.

    All values are percentages of the image size. The model itself accepts
    any float; use ``check_bounds`` for the stricter 0-100 contract.

    Attributes:
        left: Left edge (% of width).
        top: Top edge (% of height).
        width: Width (% of image width).
        height: Height (% of image height).

    Example:
        >>> roi = RegionOfInterest(left=10, top=20, width=80, height=60)
        >>> roi.as_tuple()
        (10.0, 20.0, 80.0, 60.0)
    """

    left: float = 0.0
    top: float = 0.0
    width: float = 100.0
    height: float = 100.0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return (left, top, width, height)."""
        return (self.left, self.top, self.width, self.height)

    @property
    def is_full_image(self) -> bool:
        return self.as_tuple() == (0.0, 0.0, 100.0, 100.0)

    def check_bounds(self) -> None:
        """
        Validate the region lies inside the image.

        Raises:
            ValueError: If a value is outside [0, 100] or the rectangle
                extends past the right or bottom edge.
        """
        for name, value in (
            ("left", self.left),
            ("top", self.top),
            ("width", self.width),
            ("height", self.height),
        ):
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"ROI {name} must be within [0, 100], got {value}")

        if self.left + self.width > 100.0:
            raise ValueError(
                f"ROI left + width must not exceed 100, got {self.left + self.width}"
            )
        if self.top + self.height > 100.0:
            raise ValueError(
                f"ROI top + height must not exceed 100, got {self.top + self.height}"
            )
