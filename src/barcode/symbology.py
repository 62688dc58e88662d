"""Per-symbology configuration records.

Every DecoderType owns exactly one SymbologyConfig slot in the registry.
The common fields (enabled flag, expected count, length range) live on
SymbologyConfig itself; fields that only make sense for one symbology
live on a small extras record chosen by decoder type:

    ┌───────────────────────────────────────────┬──────────────────────────────┐
    │ Decoder type(s)                           │ Extras                       │
    ├───────────────────────────────────────────┼──────────────────────────────┤
    │ Code11                                    │ Code11Extras (checksum)      │
    │ Code39                                    │ Code39Extras (checksum)      │
    │ Msi                                       │ MsiExtras (checksum, Mod10)  │
    │ Code25, Interleaved25, IATA25, Matrix25,  │ Code25Extras (checksum)      │
    │ Datalogic25, COOP25                       │                              │
    │ Datamatrix, QRMicro                       │ DpmExtras (dpm_mode)         │
    │ QR                                        │ QRExtras (dpm, merge)        │
    │ UpcE, UpcE1                               │ UpcEExtras (expand_to_upca)  │
    │ IDDocument                                │ IDDocumentExtras (master)    │
    │ everything else                           │ None                         │
    └───────────────────────────────────────────┴──────────────────────────────┘

Consumers branch on ``decoder_type`` (or ``supported_settings``) to know
which extras are valid to read.

Example:
    >>> config = create_symbology_config(DecoderType.Msi)
    >>> config.get_setting(SettingType.CHECKSUM_TYPE)
    <MsiChecksumType.MOD10: 1>
    >>> config.set_length_range(4, 12)
"""

import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Type, Union

from .exceptions import ValidationError
from .types import (
    ChecksumType,
    Code11ChecksumType,
    Code25ChecksumType,
    Code39ChecksumType,
    DecoderType,
    MsiChecksumType,
    SettingType,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# EXTRAS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class Code11Extras:
    checksum_type: Code11ChecksumType = Code11ChecksumType.DISABLED


@dataclass
class Code39Extras:
    checksum_type: Code39ChecksumType = Code39ChecksumType.DISABLED


@dataclass
class MsiExtras:
    checksum_type: MsiChecksumType = MsiChecksumType.MOD10


@dataclass
class Code25Extras:
    """Checksum selector for one member of the Code 25 family."""

    checksum_type: Code25ChecksumType = Code25ChecksumType.DISABLED


@dataclass
class DpmExtras:
    """Direct-part-marking mode for Data Matrix and QR Micro."""

    dpm_mode: int = 0


@dataclass
class QRExtras:
    """QR settings.

    Attributes:
        dpm_mode: Direct-part-marking decoding mode
        multi_part_merge: Merge structured-append QR sequences into one result
    """

    dpm_mode: int = 0
    multi_part_merge: bool = False


@dataclass
class UpcEExtras:
    """Whether UPC-E / UPC-E1 results are expanded to UPC-A text."""

    expand_to_upca: bool = False


@dataclass
class IDDocumentExtras:
    master_checksum_type: ChecksumType = ChecksumType.DISABLED


SymbologyExtras = Union[
    Code11Extras,
    Code39Extras,
    MsiExtras,
    Code25Extras,
    DpmExtras,
    QRExtras,
    UpcEExtras,
    IDDocumentExtras,
]


class SymbologySpec(NamedTuple):
    """Static description of one symbology slot."""

    extras_factory: Optional[Callable[[], SymbologyExtras]] = None
    minimum_length: int = 0
    maximum_length: int = 0


SYMBOLOGY_SPECS: Dict[DecoderType, SymbologySpec] = {
    DecoderType.Code11: SymbologySpec(Code11Extras),
    DecoderType.Code39: SymbologySpec(Code39Extras),
    DecoderType.Msi: SymbologySpec(MsiExtras),
    DecoderType.Codabar: SymbologySpec(minimum_length=4),
    DecoderType.Code25: SymbologySpec(Code25Extras),
    DecoderType.Interleaved25: SymbologySpec(Code25Extras),
    DecoderType.IATA25: SymbologySpec(Code25Extras),
    DecoderType.Matrix25: SymbologySpec(Code25Extras),
    DecoderType.Datalogic25: SymbologySpec(Code25Extras),
    DecoderType.COOP25: SymbologySpec(Code25Extras),
    DecoderType.Datamatrix: SymbologySpec(DpmExtras),
    DecoderType.QRMicro: SymbologySpec(DpmExtras),
    DecoderType.QR: SymbologySpec(QRExtras),
    DecoderType.UpcE: SymbologySpec(UpcEExtras),
    DecoderType.UpcE1: SymbologySpec(UpcEExtras),
    DecoderType.IDDocument: SymbologySpec(IDDocumentExtras),
}

_PLAIN_SPEC = SymbologySpec()


def _validate_length_range(minimum_length: int, maximum_length: int) -> None:
    """Raise ValidationError unless the range is acceptable.

    A zero bound means "unconstrained on that side"; equal positive bounds
    are an exact-length constraint.
    """
    for name, value in (("minimum", minimum_length), ("maximum", maximum_length)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"Length {name} must be an integer, got {type(value).__name__}"
            )

    if minimum_length < 0 or maximum_length < 0:
        raise ValidationError("Length must be positive number")

    if minimum_length > 0 and maximum_length > 0 and maximum_length < minimum_length:
        raise ValidationError("Maximum length can't be smaller than minimum")


def _coerce_setting_value(current: Any, value: Any, setting: SettingType) -> Any:
    """Convert ``value`` to the type of the setting's current value.

    Enum settings accept members, their integer values or their names;
    booleans accept bool or 0/1; integer settings accept non-negative ints.
    """
    if isinstance(current, Enum):
        enum_cls = type(current)
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().replace("_", "").upper()
            for member in enum_cls:
                if member.name.replace("_", "") == normalized:
                    return member
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return enum_cls(value)
            except ValueError:
                pass
        allowed = ", ".join(member.name for member in enum_cls)
        raise ValidationError(
            f"Invalid value {value!r} for {setting.attribute}; expected one of: {allowed}"
        )

    if isinstance(current, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValidationError(f"{setting.attribute} must be a boolean, got {value!r}")

    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(
            f"{setting.attribute} must be a non-negative integer, got {value!r}"
        )
    return value


class SymbologyConfig:
    """Configuration record for one symbology slot.

    Args:
        decoder_type: Capability this record configures.

    Attributes:
        enabled: Whether the symbology participates in the next decode.

    The length bounds, expected count and extras are read-only; change
    them through the validating setters.
    """

    def __init__(self, decoder_type: DecoderType):
        spec = SYMBOLOGY_SPECS.get(decoder_type, _PLAIN_SPEC)

        self._decoder_type = DecoderType(decoder_type)
        self._type_name = self._decoder_type.type_name
        self.enabled = False
        self._expected_count = 0
        self._minimum_length = spec.minimum_length
        self._maximum_length = spec.maximum_length
        self._extras: Optional[SymbologyExtras] = (
            spec.extras_factory() if spec.extras_factory else None
        )

    @property
    def decoder_type(self) -> DecoderType:
        return self._decoder_type

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def expected_count(self) -> int:
        """Expected instances per image (0 = unconstrained)."""
        return self._expected_count

    @property
    def minimum_length(self) -> int:
        """Minimum decoded-text length (0 = unconstrained)."""
        return self._minimum_length

    @property
    def maximum_length(self) -> int:
        """Maximum decoded-text length (0 = unconstrained)."""
        return self._maximum_length

    @property
    def extras(self) -> Optional[SymbologyExtras]:
        """Symbology-specific settings, or None."""
        return self._extras

    @property
    def supported_settings(self) -> List[SettingType]:
        """Settings carried by this symbology's extras, in code order."""
        if self.extras is None:
            return []
        names = {f.name for f in fields(self.extras)}
        return [s for s in SettingType if s.attribute in names]

    def set_length_range(self, minimum_length: int, maximum_length: int) -> None:
        """Set accepted decoded-text length bounds.

        Args:
            minimum_length: Lower bound, 0 for unconstrained.
            maximum_length: Upper bound, 0 for unconstrained.

        Raises:
            ValidationError: If a bound is negative or the non-zero range is
                inverted. The previous bounds are kept.
        """
        _validate_length_range(minimum_length, maximum_length)
        self._minimum_length = minimum_length
        self._maximum_length = maximum_length
        logger.debug(
            f"{self._type_name}: length range set to "
            f"[{minimum_length}, {maximum_length}]"
        )

    def set_expected_count(self, expected_count: int) -> None:
        if (
            isinstance(expected_count, bool)
            or not isinstance(expected_count, int)
            or expected_count < 0
        ):
            raise ValidationError(
                f"Expected count must be a non-negative integer, got {expected_count!r}"
            )
        self._expected_count = expected_count

    def get_setting(self, setting: Union[SettingType, str, int]) -> Any:
        """Read a symbology-specific setting.

        Raises:
            ValidationError: If this symbology does not carry the setting.
        """
        setting = self._resolve_setting(setting)
        return getattr(self.extras, setting.attribute)

    def set_setting(self, setting: Union[SettingType, str, int], value: Any) -> None:
        """Write a symbology-specific setting.

        Args:
            setting: SettingType member, its name or its integer code.
            value: New value; enum settings accept members, names or codes.

        Raises:
            ValidationError: If the setting is not carried by this symbology
                or the value is outside its allowed set.
        """
        setting = self._resolve_setting(setting)
        current = getattr(self.extras, setting.attribute)
        coerced = _coerce_setting_value(current, value, setting)
        setattr(self.extras, setting.attribute, coerced)
        logger.debug(f"{self._type_name}: {setting.attribute} set to {coerced!r}")

    def _resolve_setting(self, setting: Union[SettingType, str, int]) -> SettingType:
        try:
            if isinstance(setting, SettingType):
                resolved = setting
            elif isinstance(setting, str):
                resolved = _setting_from_name(setting)
            else:
                resolved = SettingType(setting)
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Unknown setting: {setting!r}") from e

        if resolved not in self.supported_settings:
            raise ValidationError(
                f"{self._type_name} does not support setting {resolved.attribute}"
            )
        return resolved

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the slot; enum values are written by name."""
        data: Dict[str, Any] = {
            "decoderType": self._decoder_type.name,
            "typeName": self._type_name,
            "enabled": self.enabled,
            "expectedCount": self.expected_count,
            "minimumLength": self.minimum_length,
            "maximumLength": self.maximum_length,
        }
        if self.extras is not None:
            for key, value in asdict(self.extras).items():
                data[key] = value.name if isinstance(value, Enum) else value
        return data

    def __repr__(self) -> str:
        return (
            f"SymbologyConfig({self._decoder_type.name}, enabled={self.enabled}, "
            f"length=[{self.minimum_length}, {self.maximum_length}], "
            f"extras={self.extras!r})"
        )


def _setting_from_name(name: str) -> SettingType:
    """Accept ``CHECKSUM_TYPE``, ``checksum_type`` or ``checksumType``."""
    normalized = name.strip().replace("_", "").lower()
    for member in SettingType:
        if member.name.replace("_", "").lower() == normalized:
            return member
    raise KeyError(name)


def create_symbology_config(decoder_type: DecoderType) -> SymbologyConfig:
    """Construct the default record for a decoder type.

    Raises:
        ValidationError: If ``decoder_type`` is not a known decoder.
    """
    try:
        decoder_type = DecoderType(decoder_type)
    except ValueError as e:
        raise ValidationError(f"Unknown decoder type: {decoder_type!r}") from e
    return SymbologyConfig(decoder_type)


def extras_type_for(decoder_type: DecoderType) -> Optional[Type]:
    """Extras class used by a decoder type, None if it has no extras."""
    spec = SYMBOLOGY_SPECS.get(decoder_type, _PLAIN_SPEC)
    return spec.extras_factory
