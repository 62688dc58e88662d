"""Single decode call against the external engine.

Binds an image buffer and its dimensions to the live registry and runs one
engine call. The call is atomic from the caller's point of view: it returns
the full result sequence or raises, never a partial list.

Example:
    >>> results = decode_image(registry, engine, buffer, 640, 480)
    >>> for result in results:
    ...     print(result.barcode_type_name, result.textual_data)
"""

import logging
import time
from typing import Any, List, Union

import numpy as np

from .engine import BarcodeEngine
from .exceptions import EngineError, ValidationError
from .registry import ConfigRegistry
from .types import BaseResult

logger = logging.getLogger(__name__)

ImageData = Union[bytes, bytearray, memoryview, np.ndarray]


def _validate_dimension(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"Image {name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValidationError(f"Image {name} must be positive, got {value}")
    return int(value)


def prepare_pixels(image: ImageData, width: int, height: int) -> np.ndarray:
    """Validate a grayscale buffer and view it as a (height, width) array.

    Args:
        image: Row-major grayscale bytes, or a uint8 numpy array.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        uint8 array of shape (height, width). Bytes past width * height
        are ignored.

    Raises:
        ValidationError: If dimensions are invalid, the buffer type is not
            supported, or the buffer holds fewer than width * height bytes.
    """
    width = _validate_dimension("width", width)
    height = _validate_dimension("height", height)

    if isinstance(image, np.ndarray):
        if image.dtype != np.uint8:
            raise ValidationError(f"Expected uint8 image array, got {image.dtype}")
        flat = np.ascontiguousarray(image).reshape(-1)
    elif isinstance(image, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(image, dtype=np.uint8)
    else:
        raise ValidationError(
            f"Image buffer must be bytes-like or a numpy array, got {type(image).__name__}"
        )

    required = width * height
    if flat.size < required:
        raise ValidationError("Buffer too small for specified dimensions")

    return flat[:required].reshape(height, width)


def decode_image(
    registry: ConfigRegistry,
    engine: BarcodeEngine,
    image: ImageData,
    width: int,
    height: int,
) -> List[BaseResult]:
    """Decode all enabled symbologies in a grayscale image.

    Args:
        registry: Initialized registry; read live, not copied.
        engine: Engine adapter performing the decode.
        image: Grayscale buffer of at least width * height bytes.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Results in the engine's detection order, at most
        ``registry.maximum_results_count`` of them.

    Raises:
        NotInitializedError: If the registry is not initialized.
        ValidationError: If the buffer or dimensions are malformed.
        EngineError: If the engine fails or returns malformed results.
    """
    registry.require_initialized()
    pixels = prepare_pixels(image, width, height)

    start_time = time.perf_counter()
    raw_results = engine.decode(registry.to_dict(), pixels)

    try:
        results = [BaseResult.from_engine(raw) for raw in raw_results]
    except (TypeError, ValueError) as e:
        raise EngineError(str(e)) from e

    cap = registry.maximum_results_count
    if len(results) > cap:
        logger.debug(f"Engine returned {len(results)} results, keeping first {cap}")
        results = results[:cap]

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(
        f"Decoded {width}x{height} image: {len(results)} result(s) "
        f"in {elapsed_ms:.1f}ms"
    )
    return results
