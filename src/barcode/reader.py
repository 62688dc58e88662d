"""Barcode reader session.

This module ties the configuration file, the engine adapter and the
registry together into one object with an explicit lifecycle:

    1. CONSTRUCT: load configuration, create the engine adapter
    2. INITIALIZE: activate the license, apply global options and the
       configured scan/symbology settings
    3. CONFIGURE / DECODE: any number of calls against the live registry
    4. SHUTDOWN: invalidate the registry

Example:
    >>> with BarcodeReader(Path("config.yaml")) as reader:
    ...     reader.initialize()
    ...     reader.enable_decoders(["QR", "PDF417"])
    ...     document = reader.decode_file(Path("label.bmp"))
    ...     print(document["resultsCount"])
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .config_loader import Config, get_default_config, is_placeholder_license, load_config
from .engine import BarcodeEngine, GlobalOption
from .exceptions import NotInitializedError, ValidationError
from .image_io import load_grayscale
from .invocation import ImageData, decode_image
from .marshaler import ResultMarshaler
from .registry import ConfigRegistry, ConfigResponse
from .symbology import SymbologyConfig
from .types import BaseResult, ConfigResult, DecoderType, DecodingSpeed

logger = logging.getLogger(__name__)


class BarcodeReader:
    """Decode session owning one engine adapter and one registry.

    Args:
        config_path: Optional path to config YAML. If None, uses defaults.
        config: Already-loaded configuration (takes precedence over path).
        engine: Engine adapter; built from ``config.engine`` if None.

    Attributes:
        config: Full configuration object
        engine: Engine adapter
        marshaler: Result document renderer
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config: Optional[Config] = None,
        engine: Optional[BarcodeEngine] = None,
    ):
        if config is not None:
            self.config = config
        elif config_path is None:
            self.config = get_default_config()
        else:
            self.config = load_config(config_path)

        self.engine = engine if engine is not None else BarcodeEngine(self.config.engine)
        self.marshaler = ResultMarshaler()
        self._registry: Optional[ConfigRegistry] = None

    # ═══════════════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════

    def initialize(self, license_key: Optional[str] = None) -> ConfigResponse:
        """Activate the engine and build the registry.

        Args:
            license_key: License key; defaults to ``config.license_key``.

        Returns:
            ConfigResponse from registry initialization. On SUCCESS the
            configured scan and symbology settings have been applied.

        Raises:
            ValidationError: If the configured settings are invalid.
        """
        key = self.config.license_key if license_key is None else license_key
        if is_placeholder_license(key):
            return ConfigResponse(
                ConfigResult.ERROR, "License key is the template placeholder"
            )

        response = ConfigRegistry.initialize_with_license_key(key, self.engine)
        if response.is_error():
            return response

        registry = response.registry
        self._apply_global_options()
        self._apply_scan_settings(registry)
        self._apply_symbology_overrides(registry)

        if self._registry is not None:
            self._registry.shutdown()
        self._registry = registry
        return response

    def shutdown(self) -> None:
        if self._registry is not None:
            self._registry.shutdown()
            self._registry = None

    def __enter__(self) -> "BarcodeReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    @property
    def is_initialized(self) -> bool:
        return self._registry is not None and self._registry.is_initialized

    @property
    def registry(self) -> ConfigRegistry:
        """The live registry.

        Raises:
            NotInitializedError: If ``initialize`` has not succeeded.
        """
        if self._registry is None:
            raise NotInitializedError()
        return self._registry

    def get_version(self) -> str:
        return self.engine.get_version()

    # ═══════════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ═══════════════════════════════════════════════════════════════════════

    def set_enabled_decoders(
        self, decoders: Iterable[Union[DecoderType, int]]
    ) -> List[DecoderType]:
        return self.registry.set_enabled_decoders(decoders)

    def enable_decoders(self, names: Iterable[str]) -> List[DecoderType]:
        """Enable decoders by name (e.g. ``["QR", "PDF417"]``).

        Raises:
            ValidationError: If a name is unknown; nothing changes.
        """
        if isinstance(names, str):
            raise ValidationError("Decoder names must be an array")

        decoders = []
        for name in names:
            try:
                decoders.append(DecoderType.from_name(str(name)))
            except KeyError:
                raise ValidationError(f"Unknown decoder: {name}") from None
        return self.registry.set_enabled_decoders(decoders)

    def set_decoding_speed(self, speed: Union[DecodingSpeed, int]) -> None:
        self.registry.set_decoding_speed(speed)

    def set_region_of_interest(
        self, left: float, top: float, width: float, height: float, strict: bool = False
    ) -> None:
        self.registry.set_region_of_interest(left, top, width, height, strict=strict)

    def set_maximum_results_count(self, count: int) -> None:
        self.registry.set_maximum_results_count(count)

    def configure_symbology(
        self,
        decoder_type: Union[DecoderType, int],
        expected_count: Optional[int] = None,
        minimum_length: Optional[int] = None,
        maximum_length: Optional[int] = None,
        **settings: Any,
    ) -> SymbologyConfig:
        """Update one symbology slot.

        Length bounds not given keep their current value. Keyword settings
        are symbology-specific (``checksum_type``, ``dpm_mode``, ...).
        Everything is validated against a scratch copy first, so a bad value
        leaves the slot untouched.

        Raises:
            ValidationError: If any value is invalid for this symbology.
        """
        config = self.registry.get_config(decoder_type)
        _apply_override(
            _scratch_copy(config), expected_count, minimum_length, maximum_length, settings
        )
        _apply_override(config, expected_count, minimum_length, maximum_length, settings)
        return config

    # ═══════════════════════════════════════════════════════════════════════
    # DECODING
    # ═══════════════════════════════════════════════════════════════════════

    def decode(self, image: ImageData, width: int, height: int) -> List[BaseResult]:
        """Decode a grayscale buffer with the live registry settings."""
        return decode_image(self.registry, self.engine, image, width, height)

    def decode_document(
        self, image: ImageData, width: int, height: int, uniform: bool = False
    ) -> Dict[str, Any]:
        """Decode and render the response document."""
        results = self.decode(image, width, height)
        if uniform:
            return self.marshaler.to_uniform_document(results)
        return self.marshaler.to_document(results)

    def decode_file(self, path: Path, uniform: bool = False) -> Dict[str, Any]:
        """Load an image file as grayscale, decode it and render the document."""
        self.registry.require_initialized()
        image = load_grayscale(path)
        return self.decode_document(image.data, image.width, image.height, uniform)

    # ═══════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════

    def _apply_global_options(self) -> None:
        engine_config = self.config.engine
        wanted = {
            GlobalOption.MAXIMUM_THREADS: engine_config.maximum_threads,
            GlobalOption.USE_GPU: int(engine_config.use_gpu),
        }
        current = self.engine.global_options
        for option, value in wanted.items():
            # Re-initialization after a decode must not touch unchanged options
            if current.get(option) != value:
                self.engine.set_global_option(option, value)

    def _apply_scan_settings(self, registry: ConfigRegistry) -> None:
        scan = self.config.scan
        registry.set_decoding_speed(scan.decoding_speed)
        roi = scan.region_of_interest
        registry.set_region_of_interest(roi.left, roi.top, roi.width, roi.height)
        registry.set_maximum_results_count(scan.maximum_results_count)
        registry.set_enabled_decoders(scan.enabled_decoders)

        logger.info(
            f"Scan settings applied: speed={scan.decoding_speed.name}, "
            f"decoders={[dt.name for dt in scan.enabled_decoders]}, "
            f"max_results={scan.maximum_results_count}"
        )

    def _apply_symbology_overrides(self, registry: ConfigRegistry) -> None:
        for decoder_type, override in self.config.symbologies.items():
            config = registry.get_config(decoder_type)
            _apply_override(
                config,
                override.expected_count,
                override.minimum_length,
                override.maximum_length,
                override.settings,
            )


def _apply_override(
    config: SymbologyConfig,
    expected_count: Optional[int],
    minimum_length: Optional[int],
    maximum_length: Optional[int],
    settings: Dict[str, Any],
) -> None:
    if expected_count is not None:
        config.set_expected_count(expected_count)
    if minimum_length is not None or maximum_length is not None:
        config.set_length_range(
            config.minimum_length if minimum_length is None else minimum_length,
            config.maximum_length if maximum_length is None else maximum_length,
        )
    for name, value in settings.items():
        config.set_setting(name, value)


def _scratch_copy(config: SymbologyConfig) -> SymbologyConfig:
    return copy.deepcopy(config)
