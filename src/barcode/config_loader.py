"""Configuration loader with Pydantic validation for the barcode module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values. JSON configuration files
(``{"app_name": ..., "license_key": ...}``) load as well, since YAML is a
superset of JSON.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from src.common.types import RegionOfInterest

from .types import DecoderType, DecodingSpeed

PLACEHOLDER_LICENSE_KEY = "YOUR_LICENSE_KEY_HERE"


def _decoder_from_value(value: Any) -> DecoderType:
    """Accept a DecoderType, its integer code or its member name."""
    if isinstance(value, DecoderType):
        return value
    if isinstance(value, str):
        try:
            return DecoderType.from_name(value)
        except KeyError:
            raise ValueError(f"Unknown decoder: {value}") from None
    if isinstance(value, int) and not isinstance(value, bool):
        return DecoderType(value)
    raise ValueError(f"Invalid decoder: {value!r}")


class EngineConfig(BaseModel):
    """Native engine configuration.

    Attributes:
        module: Import name of the native engine module
        maximum_threads: Thread cap for the engine's internal parallelism
        use_gpu: Enable hardware acceleration if the engine supports it
    """

    module: str = "barkoder"
    maximum_threads: int = Field(default=1, ge=1)
    use_gpu: bool = False


class ScanConfig(BaseModel):
    """Scan settings applied to the registry after initialization.

    Attributes:
        decoding_speed: Speed/thoroughness trade-off (name or 0-3)
        region_of_interest: Scanned sub-rectangle in percent
        maximum_results_count: Cap on results returned per decode
        enabled_decoders: Decoder names enabled after initialization
    """

    decoding_speed: DecodingSpeed = DecodingSpeed.NORMAL
    region_of_interest: RegionOfInterest = Field(default_factory=RegionOfInterest)
    maximum_results_count: int = Field(default=1, ge=1)
    enabled_decoders: List[DecoderType] = Field(default_factory=list)

    @field_validator("decoding_speed", mode="before")
    @classmethod
    def _parse_speed(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return DecodingSpeed[v.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown decoding speed: {v}") from None
        return v

    @field_validator("enabled_decoders", mode="before")
    @classmethod
    def _parse_decoders(cls, v: Any) -> Any:
        if v is None:
            return []
        return [_decoder_from_value(item) for item in v]


class SymbologyOverride(BaseModel):
    """Per-symbology overrides.

    Attributes:
        expected_count: Expected instances per image (0 = unconstrained)
        minimum_length: Minimum decoded length (None keeps the default)
        maximum_length: Maximum decoded length (None keeps the default)
        settings: Symbology-specific settings, e.g. {"checksum_type": "mod10"}
    """

    expected_count: Optional[int] = None
    minimum_length: Optional[int] = None
    maximum_length: Optional[int] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None


class Config(BaseModel):
    """Root configuration container.

    Attributes:
        app_name: Application name reported to the engine
        license_key: Engine license key
        description: Free-form description
        version: Expected engine version
        engine: Native engine configuration
        scan: Scan settings
        symbologies: Per-decoder overrides keyed by decoder
        logging: Logging configuration
    """

    app_name: str = "barcode-engine-bridge"
    license_key: str = ""
    description: Optional[str] = None
    version: Optional[str] = None
    engine: EngineConfig = Field(default_factory=EngineConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    symbologies: Dict[DecoderType, SymbologyOverride] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("symbologies", mode="before")
    @classmethod
    def _parse_symbology_keys(cls, v: Any) -> Any:
        if v is None:
            return {}
        return {_decoder_from_value(key): value for key, value in dict(v).items()}

    @property
    def has_license_key(self) -> bool:
        return bool(self.license_key) and not is_placeholder_license(self.license_key)


def is_placeholder_license(license_key: str) -> bool:
    """Check whether a key is the template placeholder."""
    return license_key.strip() == PLACEHOLDER_LICENSE_KEY


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from YAML (or JSON) file.

    Args:
        config_path: Path to configuration file

    Returns:
        Validated Config object with all settings

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("config.yaml"))
        >>> print(config.scan.decoding_speed)
        DecodingSpeed.NORMAL
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return Config(**config_dict)


def get_default_config() -> Config:
    """Get default configuration from bundled config.yaml file.

    Returns:
        Config object loaded from src/barcode/config.yaml
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return Config()
