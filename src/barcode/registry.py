"""Registry of per-symbology configuration and scan settings.

A ConfigRegistry holds one SymbologyConfig slot per DecoderType (always
present, disabled by default) plus the scan settings read by every decode
call: decoding speed, region of interest and the result-count cap.

Registries are created through ``ConfigRegistry.initialize_with_license_key``,
which is the only way to obtain a usable one. Any configuration call on a
registry that was never initialized, or was shut down, raises
NotInitializedError.

Example:
    >>> response = ConfigRegistry.initialize_with_license_key(key, engine)
    >>> if response.is_success():
    ...     registry = response.registry
    ...     registry.set_enabled_decoders([DecoderType.QR, DecoderType.Code128])
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional, Union

import numpy as np

from src.common.types import RegionOfInterest

from .exceptions import EngineError, NotInitializedError, ValidationError
from .symbology import SymbologyConfig, create_symbology_config
from .types import ConfigResult, DecoderType, DecodingSpeed

if TYPE_CHECKING:
    from .engine import BarcodeEngine

logger = logging.getLogger(__name__)

DEFAULT_MAXIMUM_RESULTS_COUNT = 1


@dataclass
class ConfigResponse:
    """Outcome of registry initialization.

    Attributes:
        result: SUCCESS or ERROR
        message: Human-readable status or diagnostic
        registry: Usable registry on SUCCESS, None on ERROR
    """

    result: ConfigResult
    message: str
    registry: Optional["ConfigRegistry"] = None

    def is_success(self) -> bool:
        return self.result == ConfigResult.SUCCESS

    def is_error(self) -> bool:
        return self.result == ConfigResult.ERROR


def _coerce_decoder(value: Any) -> DecoderType:
    if isinstance(value, DecoderType):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"Invalid decoder type: {value!r}")
    try:
        return DecoderType(int(value))
    except ValueError as e:
        raise ValidationError(f"Unknown decoder type: {value}") from e


class ConfigRegistry:
    """Mapping DecoderType -> SymbologyConfig plus scan settings.

    Attributes:
        decoding_speed: Current decoding speed
        region_of_interest: Current region of interest
        maximum_results_count: Cap on results returned per decode
        message: Status message from initialization
    """

    def __init__(self) -> None:
        self._configs: Dict[DecoderType, SymbologyConfig] = {
            decoder_type: create_symbology_config(decoder_type)
            for decoder_type in DecoderType
        }
        self.decoding_speed = DecodingSpeed.NORMAL
        self.region_of_interest = RegionOfInterest()
        self.maximum_results_count = DEFAULT_MAXIMUM_RESULTS_COUNT
        self.message = ""
        self._initialized = False

    # ═══════════════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════

    @classmethod
    def initialize_with_license_key(
        cls, license_key: str, engine: "BarcodeEngine"
    ) -> ConfigResponse:
        """Activate the engine and create a usable registry.

        Args:
            license_key: Engine license key.
            engine: Engine adapter used for activation.

        Returns:
            ConfigResponse with a registry on success, or an error message
            and no registry on failure. Never raises for activation failures.
        """
        if not isinstance(license_key, str) or not license_key.strip():
            logger.error("Initialization rejected: empty license key")
            return ConfigResponse(ConfigResult.ERROR, "License key must not be empty")

        try:
            ok, message = engine.activate(license_key)
        except EngineError as e:
            logger.error(f"Engine activation failed: {e}")
            return ConfigResponse(ConfigResult.ERROR, str(e))

        if not ok:
            logger.warning(f"License rejected by engine: {message}")
            return ConfigResponse(ConfigResult.ERROR, message)

        registry = cls()
        registry.message = message
        registry._initialized = True
        logger.info(f"Registry initialized: {message}")
        return ConfigResponse(ConfigResult.SUCCESS, message, registry)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def shutdown(self) -> None:
        """Invalidate the registry; later calls raise NotInitializedError."""
        if self._initialized:
            logger.info("Registry shut down")
        self._initialized = False

    def require_initialized(self) -> None:
        """Raise NotInitializedError unless the registry is usable."""
        if not self._initialized:
            raise NotInitializedError()

    # ═══════════════════════════════════════════════════════════════════════
    # SYMBOLOGY SLOTS
    # ═══════════════════════════════════════════════════════════════════════

    def get_config(self, decoder_type: Union[DecoderType, int]) -> SymbologyConfig:
        """Return the slot owned by ``decoder_type``.

        Raises:
            NotInitializedError: If the registry is not initialized.
            ValidationError: If the decoder type is unknown.
        """
        self.require_initialized()
        return self._configs[_coerce_decoder(decoder_type)]

    def __iter__(self) -> Iterator[SymbologyConfig]:
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)

    @property
    def enabled_decoders(self) -> List[DecoderType]:
        """Enabled decoder types in code order."""
        return [dt for dt, config in self._configs.items() if config.enabled]

    def set_enabled_decoders(
        self, decoders: Iterable[Union[DecoderType, int]]
    ) -> List[DecoderType]:
        """Replace the enabled set.

        Every listed decoder is enabled and every other one disabled. The
        whole list is validated before anything changes.

        Args:
            decoders: Decoder types or their integer codes.

        Returns:
            The enabled decoder types, in code order.

        Raises:
            NotInitializedError: If the registry is not initialized.
            ValidationError: If any element is not a known decoder code.
        """
        self.require_initialized()
        if isinstance(decoders, (str, bytes)) or not isinstance(decoders, Iterable):
            raise ValidationError("Decoders must be a list of decoder types")

        enabled = {_coerce_decoder(value) for value in decoders}

        for decoder_type, config in self._configs.items():
            config.enabled = decoder_type in enabled

        logger.debug(
            f"Enabled decoders: {[dt.name for dt in self.enabled_decoders]}"
        )
        return self.enabled_decoders

    # ═══════════════════════════════════════════════════════════════════════
    # SCAN SETTINGS
    # ═══════════════════════════════════════════════════════════════════════

    def set_decoding_speed(self, speed: Union[DecodingSpeed, int]) -> None:
        """Store the decoding speed.

        Raises:
            NotInitializedError: If the registry is not initialized.
            ValidationError: If ``speed`` is not one of the four speeds.
        """
        self.require_initialized()
        if isinstance(speed, bool) or not isinstance(speed, int):
            raise ValidationError(f"Decoding speed must be an integer, got {speed!r}")
        try:
            self.decoding_speed = DecodingSpeed(speed)
        except ValueError as e:
            raise ValidationError(f"Unknown decoding speed: {speed}") from e
        logger.debug(f"Decoding speed set to {self.decoding_speed.name}")

    def set_region_of_interest(
        self,
        left: float,
        top: float,
        width: float,
        height: float,
        strict: bool = False,
    ) -> RegionOfInterest:
        """Store the region of interest in percent of the image.

        Values are stored as given; pass ``strict=True`` to reject regions
        outside [0, 100] or extending past the image edges.

        Raises:
            NotInitializedError: If the registry is not initialized.
            ValidationError: If a value is not numeric, or strict bounds fail.
        """
        self.require_initialized()
        values = (left, top, width, height)
        if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in values):
            raise ValidationError(f"ROI values must be numbers, got {values!r}")

        roi = RegionOfInterest(
            left=float(left), top=float(top), width=float(width), height=float(height)
        )
        if strict:
            try:
                roi.check_bounds()
            except ValueError as e:
                raise ValidationError(str(e)) from e

        self.region_of_interest = roi
        logger.debug(f"Region of interest set to {roi.as_tuple()}")
        return roi

    def set_maximum_results_count(self, count: int) -> None:
        """Set the cap on results returned per decode.

        Raises:
            NotInitializedError: If the registry is not initialized.
            ValidationError: If ``count`` is not a positive integer.
        """
        self.require_initialized()
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError(
                f"Maximum results count must be a positive integer, got {count!r}"
            )
        self.maximum_results_count = count
        logger.debug(f"Maximum results count set to {count}")

    # ═══════════════════════════════════════════════════════════════════════
    # SERIALIZATION
    # ═══════════════════════════════════════════════════════════════════════

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the live settings, keyed by decoder name.

        This is the settings document handed to the engine on every decode.
        """
        return {
            "decodingSpeed": self.decoding_speed.name,
            "regionOfInterest": self.region_of_interest.model_dump(),
            "maximumResultsCount": self.maximum_results_count,
            "decoders": {
                decoder_type.name: config.to_dict()
                for decoder_type, config in self._configs.items()
            },
        }

    def __repr__(self) -> str:
        return (
            f"ConfigRegistry(initialized={self._initialized}, "
            f"enabled={[dt.name for dt in self.enabled_decoders]}, "
            f"speed={self.decoding_speed.name})"
        )
