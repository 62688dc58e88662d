"""String-status caller surface.

Thin layer over BarcodeReader for callers that expect the engine SDK's
original contract: every configuration call returns a status string
prefixed ``SUCCESS:`` or ``ERROR:``, and ``decode_image`` returns the
response document as JSON text. Argument type mistakes raise TypeError;
every other failure collapses to an ``ERROR:`` string.

Example:
    >>> sdk = BarkoderSDK()
    >>> print(sdk.initialize("LICENSE-KEY"))
    SUCCESS: License valid
    >>> sdk.enable_decoders(["QR", "PDF417"])
    'SUCCESS: Enabled 2 decoders'
    >>> print(sdk.decode_image(buffer, 640, 480))
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import yaml
from pydantic import ValidationError as PydanticValidationError

from .config_loader import Config, load_config
from .engine import BarcodeEngine
from .exceptions import BarcodeError
from .reader import BarcodeReader
from .types import DecoderType, DecodingSpeed

logger = logging.getLogger(__name__)

SUCCESS_PREFIX = "SUCCESS: "
ERROR_PREFIX = "ERROR: "


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class BarkoderSDK:
    """Caller-facing facade with string status results.

    Args:
        config: Configuration; bundled defaults if None.
        engine: Engine adapter; built from ``config.engine`` if None.
    """

    def __init__(self, config: Optional[Config] = None, engine: Optional[BarcodeEngine] = None):
        self.reader = BarcodeReader(config=config, engine=engine)

    @property
    def config(self) -> Config:
        return self.reader.config

    def get_version(self) -> str:
        return self.reader.get_version()

    def initialize(self, license_key: str) -> str:
        """Initialize with a license key.

        Raises:
            TypeError: If ``license_key`` is not a string.
        """
        if not isinstance(license_key, str):
            raise TypeError("License key must be a string")

        try:
            response = self.reader.initialize(license_key)
        except BarcodeError as e:
            return ERROR_PREFIX + f"Exception during initialization: {e}"

        if response.is_error():
            return ERROR_PREFIX + response.message
        return SUCCESS_PREFIX + response.message

    def is_initialized(self) -> bool:
        return self.reader.is_initialized

    @staticmethod
    def load_config(config_path: Union[str, Path] = "./config.json") -> Config:
        """Load a configuration file.

        Raises:
            ValueError: If the file is missing or invalid.
        """
        try:
            return load_config(Path(config_path))
        except (FileNotFoundError, yaml.YAMLError, PydanticValidationError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}") from e

    def initialize_from_config(
        self, config_path: Union[str, Path] = "./config.json"
    ) -> Dict[str, Any]:
        """Load a configuration file and initialize with its license key.

        Returns:
            Dict with ``status`` (status string), ``config`` (loaded Config)
            and ``success`` (bool).

        Raises:
            ValueError: If the file cannot be loaded or has no license key.
        """
        config = self.load_config(config_path)
        if not config.license_key:
            raise ValueError("No license_key found in configuration file")

        engine = self.reader.engine
        self.reader.shutdown()
        self.reader = BarcodeReader(config=config, engine=engine)
        status = self.initialize(config.license_key)
        return {
            "status": status,
            "config": config,
            "success": status.startswith(SUCCESS_PREFIX),
        }

    def set_enabled_decoders(self, decoders: Sequence[int]) -> str:
        """Enable exactly the given decoder codes.

        Raises:
            TypeError: If ``decoders`` is not a list or tuple.
        """
        if not isinstance(decoders, (list, tuple)):
            raise TypeError("Decoders must be an array")
        if not self.reader.is_initialized:
            return ERROR_PREFIX + "SDK not initialized"

        try:
            enabled = self.reader.set_enabled_decoders(decoders)
        except BarcodeError as e:
            return ERROR_PREFIX + str(e)
        return SUCCESS_PREFIX + f"Enabled {len(enabled)} decoders"

    def enable_decoders(self, decoder_names: Sequence[str]) -> str:
        """Enable decoders by name, e.g. ``["QR", "PDF417"]``.

        Raises:
            TypeError: If ``decoder_names`` is not a list or tuple.
            ValueError: If a name is unknown.
        """
        if not isinstance(decoder_names, (list, tuple)):
            raise TypeError("Decoder names must be an array")

        codes: List[int] = []
        for name in decoder_names:
            try:
                codes.append(int(DecoderType.from_name(str(name))))
            except KeyError:
                raise ValueError(f"Unknown decoder: {name}") from None
        return self.set_enabled_decoders(codes)

    def set_decoding_speed(self, speed: int) -> str:
        """Set decoding speed (Fast=0, Normal=1, Slow=2, Rigorous=3).

        Raises:
            TypeError: If ``speed`` is not a number.
        """
        if not _is_number(speed):
            raise TypeError("Speed must be a number")
        if not _is_finite(speed):
            return ERROR_PREFIX + f"Invalid decoding speed: {speed}"
        if not self.reader.is_initialized:
            return ERROR_PREFIX + "SDK not initialized"

        try:
            self.reader.set_decoding_speed(int(speed))
        except BarcodeError as e:
            return ERROR_PREFIX + str(e)
        return SUCCESS_PREFIX + f"Decoding speed set to {DecodingSpeed(int(speed)).value}"

    def set_region_of_interest(
        self, left: float, top: float, width: float, height: float
    ) -> str:
        """Set the region of interest in percent (0-100).

        Raises:
            TypeError: If any value is not a number.
        """
        if not all(_is_number(v) for v in (left, top, width, height)):
            raise TypeError("All ROI parameters must be numbers")
        if not _is_finite(left, top, width, height):
            return ERROR_PREFIX + "ROI parameters must be finite numbers"
        if not self.reader.is_initialized:
            return ERROR_PREFIX + "SDK not initialized"

        try:
            self.reader.set_region_of_interest(left, top, width, height)
        except BarcodeError as e:
            return ERROR_PREFIX + str(e)
        return SUCCESS_PREFIX + (
            f"ROI set to ({float(left):f},{float(top):f},"
            f"{float(width):f},{float(height):f})"
        )

    def decode_image(
        self, image_buffer: Union[bytes, bytearray, memoryview, np.ndarray], width: int, height: int
    ) -> str:
        """Decode a grayscale buffer.

        Returns:
            The response document as JSON text, or an ``ERROR:`` string.

        Raises:
            TypeError: If the buffer is not bytes-like or the dimensions are
                not numbers.
        """
        if not isinstance(image_buffer, (bytes, bytearray, memoryview, np.ndarray)):
            raise TypeError("First parameter must be a Buffer")
        if not _is_number(width) or not _is_number(height):
            raise TypeError("Width and height must be numbers")
        if not _is_finite(width, height):
            return ERROR_PREFIX + "Width and height must be finite numbers"
        if not self.reader.is_initialized:
            return ERROR_PREFIX + "SDK not initialized"

        try:
            results = self.reader.decode(image_buffer, int(width), int(height))
        except BarcodeError as e:
            return ERROR_PREFIX + str(e)
        return self.reader.marshaler.to_json(results)
