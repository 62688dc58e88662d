"""Barcode decoding bridge.

This module configures an external barcode-decoding engine and republishes
its output as structured data. The engine itself is a native collaborator
reached through ``engine.BarcodeEngine``.

Core Components:
    - types: Decoder/result enumerations and the BaseResult record
    - symbology: Per-symbology configuration records
    - registry: ConfigRegistry (symbology slots + scan settings)
    - invocation: Single decode call against the engine
    - marshaler: Cardinality-dependent response documents
    - config_loader: Configuration loading with Pydantic validation
    - reader: BarcodeReader session (config + engine + registry)
    - sdk: String-status caller surface

Example:
    >>> from src.barcode import BarcodeReader
    >>> reader = BarcodeReader()
    >>> reader.initialize("LICENSE-KEY")
    >>> document = reader.decode_document(buffer, 640, 480)
    >>> print(document["resultsCount"])
"""

from .config_loader import (
    Config,
    EngineConfig,
    LoggingConfig,
    ScanConfig,
    SymbologyOverride,
    get_default_config,
    load_config,
)
from .engine import BarcodeEngine, GlobalOption
from .exceptions import BarcodeError, EngineError, NotInitializedError, ValidationError
from .invocation import decode_image
from .marshaler import ResultMarshaler, results_from_document
from .reader import BarcodeReader
from .registry import ConfigRegistry, ConfigResponse
from .sdk import BarkoderSDK
from .symbology import SymbologyConfig, create_symbology_config
from .types import (
    BarcodeType,
    BaseResult,
    ChecksumType,
    Code11ChecksumType,
    Code25ChecksumType,
    Code39ChecksumType,
    ConfigResult,
    DecoderType,
    DecodingSpeed,
    MsiChecksumType,
    SettingType,
)

__all__ = [
    # Types
    "BarcodeType",
    "BaseResult",
    "ChecksumType",
    "Code11ChecksumType",
    "Code25ChecksumType",
    "Code39ChecksumType",
    "ConfigResult",
    "DecoderType",
    "DecodingSpeed",
    "MsiChecksumType",
    "SettingType",
    # Errors
    "BarcodeError",
    "EngineError",
    "NotInitializedError",
    "ValidationError",
    # Configuration
    "Config",
    "EngineConfig",
    "LoggingConfig",
    "ScanConfig",
    "SymbologyOverride",
    "load_config",
    "get_default_config",
    # Core
    "SymbologyConfig",
    "create_symbology_config",
    "ConfigRegistry",
    "ConfigResponse",
    "BarcodeEngine",
    "GlobalOption",
    "decode_image",
    "ResultMarshaler",
    "results_from_document",
    # Session
    "BarcodeReader",
    "BarkoderSDK",
]
