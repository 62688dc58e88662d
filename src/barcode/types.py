"""Type definitions for the barcode module.

This module defines the enumerations shared by the configuration model and
the decode call (decoder types, result labels, speeds, checksum selectors)
and the result record produced for every decoded symbol.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional


class DecoderType(IntEnum):
    """Independently enable/disable-able decode capability.

    Values match the engine's integer codes. They are meaningful only for
    registry lookups and the integer codes accepted by the caller surface.
    """

    Aztec = 0
    AztecCompact = 1
    QR = 2
    QRMicro = 3
    Code128 = 4
    Code93 = 5
    Code39 = 6
    Codabar = 7
    Code11 = 8
    Msi = 9
    UpcA = 10
    UpcE = 11
    UpcE1 = 12
    Ean13 = 13
    Ean8 = 14
    PDF417 = 15
    PDF417Micro = 16
    Datamatrix = 17
    Code25 = 18
    Interleaved25 = 19
    ITF14 = 20
    IATA25 = 21
    Matrix25 = 22
    Datalogic25 = 23
    COOP25 = 24
    Code32 = 25
    Telepen = 26
    Dotcode = 27
    IDDocument = 28
    Databar14 = 29
    DatabarLimited = 30
    DatabarExpanded = 31
    PostalIMB = 32
    Postnet = 33
    Planet = 34
    AustralianPost = 35
    RoyalMail = 36
    KIX = 37
    JapanesePost = 38
    MaxiCode = 39

    @property
    def barcode_type(self) -> "BarcodeType":
        """Result label produced by this decoder."""
        return BarcodeType[self.name]

    @property
    def type_name(self) -> str:
        """Human-readable display name."""
        return self.barcode_type.value

    @classmethod
    def from_name(cls, name: str) -> "DecoderType":
        """Look up a decoder by member name, case-insensitively.

        Raises:
            KeyError: If no decoder has that name.
        """
        for member in cls:
            if member.name.lower() == name.strip().lower():
                return member
        raise KeyError(name)


class BarcodeType(Enum):
    """Label attachable to a decode result.

    A superset of DecoderType: IDMRZ, IDPicture and IDSignature are only
    produced as facets of an ID Document decode and cannot be enabled on
    their own.
    """

    Aztec = "Aztec"
    AztecCompact = "Aztec Compact"
    QR = "QR"
    QRMicro = "QR Micro"
    Code128 = "Code 128"
    Code93 = "Code 93"
    Code39 = "Code 39"
    Codabar = "Codabar"
    Code11 = "Code 11"
    Msi = "MSI"
    UpcA = "Upc-A"
    UpcE = "Upc-E"
    UpcE1 = "Upc-E1"
    Ean13 = "Ean-13"
    Ean8 = "Ean-8"
    PDF417 = "PDF 417"
    PDF417Micro = "PDF 417 Micro"
    Datamatrix = "Data Matrix"
    Code25 = "Code 25"
    Interleaved25 = "Interleaved 2 of 5"
    ITF14 = "ITF 14"
    IATA25 = "IATA 25"
    Matrix25 = "Matrix 25"
    Datalogic25 = "Datalogic 25"
    COOP25 = "COOP 25"
    Code32 = "Code 32"
    Telepen = "Telepen"
    Dotcode = "Dotcode"
    IDDocument = "ID Document"
    IDMRZ = "MRZ"
    IDPicture = "Picture"
    IDSignature = "Signature"
    Databar14 = "Databar 14"
    DatabarLimited = "Databar Limited"
    DatabarExpanded = "Databar Expanded"
    PostalIMB = "Intelligent Mail"
    Postnet = "Postnet"
    Planet = "Planet"
    AustralianPost = "Australian Post"
    RoyalMail = "Royal Mail"
    KIX = "PostNL KIX"
    JapanesePost = "Japanese Post"
    MaxiCode = "MaxiCode"

    @property
    def decoder_type(self) -> Optional[DecoderType]:
        """Decoder that produces this label, None for ID document facets."""
        return DecoderType.__members__.get(self.name)

    @property
    def is_id_document_facet(self) -> bool:
        return self in (BarcodeType.IDMRZ, BarcodeType.IDPicture, BarcodeType.IDSignature)


class DecodingSpeed(IntEnum):
    """Trade-off between scanning speed and thoroughness."""

    FAST = 0
    NORMAL = 1
    SLOW = 2
    RIGOROUS = 3


class Formatting(IntEnum):
    """Engine-side formatting applied to decoded data."""

    DISABLED = 0
    AUTOMATIC = 1
    GS1 = 2
    AAMVA = 3
    SADL = 4


class ChecksumType(IntEnum):
    """Generic two-valued checksum selector (ID Document master checksum)."""

    DISABLED = 0
    ENABLED = 1


class Code11ChecksumType(IntEnum):
    DISABLED = 0
    SINGLE = 1
    DOUBLE = 2


class Code39ChecksumType(IntEnum):
    DISABLED = 0
    ENABLED = 1


class MsiChecksumType(IntEnum):
    """MSI Plessey modulus variants."""

    DISABLED = 0
    MOD10 = 1
    MOD11 = 2
    MOD1010 = 3
    MOD1110 = 4
    MOD11_IBM = 5
    MOD1110_IBM = 6


class Code25ChecksumType(IntEnum):
    """Checksum selector shared by the Code 25 family."""

    DISABLED = 0
    ENABLED = 1


class SettingType(IntEnum):
    """Symbology-specific setting identifiers.

    The first four values match the engine's setting codes.
    """

    CHECKSUM_TYPE = 0
    EXPAND_TO_UPCA = 1
    DPM_MODE = 2
    MULTI_PART_MERGE = 3
    MASTER_CHECKSUM_TYPE = 4

    @property
    def attribute(self) -> str:
        """Attribute name on the extras record."""
        return self.name.lower()


class ConfigResult(Enum):
    """Outcome of registry initialization."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass
class BaseResult:
    """One decoded symbol as reported by the engine.

    Attributes:
        barcode_type_name: Display name of the symbology (e.g. "QR")
        textual_data: Decoded text payload
        extra: Auxiliary key/value fields (GS1 AIs, ID document sub-fields)
    """

    barcode_type_name: str
    textual_data: str
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def barcode_type(self) -> Optional[BarcodeType]:
        """Enum label for the type name, None if the engine used an unknown one."""
        try:
            return BarcodeType(self.barcode_type_name)
        except ValueError:
            return None

    @classmethod
    def from_engine(cls, raw: Any) -> "BaseResult":
        """Build a result from an engine record.

        Engine records may be mappings or objects; both camelCase
        (``barcodeTypeName``) and snake_case attribute names are accepted.
        Extra values are coerced to strings.

        Raises:
            TypeError: If the record has no type name or text.
        """
        def _get(*names: str) -> Any:
            for name in names:
                if isinstance(raw, Mapping):
                    if name in raw:
                        return raw[name]
                elif hasattr(raw, name):
                    return getattr(raw, name)
            return None

        type_name = _get("barcodeTypeName", "barcode_type_name")
        text = _get("textualData", "textual_data")
        if type_name is None or text is None:
            raise TypeError(f"Malformed engine result: {raw!r}")

        extra = _get("extra") or {}
        return cls(
            barcode_type_name=str(type_name),
            textual_data=str(text),
            extra={str(k): str(v) for k, v in dict(extra).items()},
        )
