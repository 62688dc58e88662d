"""Unit tests for ConfigRegistry."""

import numpy as np
import pytest

from src.barcode.exceptions import EngineError, NotInitializedError, ValidationError
from src.barcode.registry import ConfigRegistry, ConfigResponse
from src.barcode.types import ConfigResult, DecoderType, DecodingSpeed


class TestInitialization:
    """Test license-gated registry creation."""

    def test_success(self, engine, mock_native):
        response = ConfigRegistry.initialize_with_license_key("KEY", engine)

        assert isinstance(response, ConfigResponse)
        assert response.result == ConfigResult.SUCCESS
        assert response.message == "License valid"
        assert response.registry.is_initialized is True
        mock_native.initialize_with_license_key.assert_called_once_with("KEY")

    def test_defaults_after_initialization(self, registry):
        assert registry.decoding_speed == DecodingSpeed.NORMAL
        assert registry.region_of_interest.as_tuple() == (0.0, 0.0, 100.0, 100.0)
        assert registry.maximum_results_count == 1
        assert registry.enabled_decoders == []
        assert len(registry) == len(DecoderType)

    def test_license_rejected(self, engine, mock_native):
        mock_native.initialize_with_license_key.return_value = (False, "License expired")

        response = ConfigRegistry.initialize_with_license_key("KEY", engine)

        assert response.is_error()
        assert response.message == "License expired"
        assert response.registry is None

    def test_engine_failure_becomes_error_response(self, engine, mock_native):
        mock_native.initialize_with_license_key.side_effect = RuntimeError("no device id")

        response = ConfigRegistry.initialize_with_license_key("KEY", engine)

        assert response.is_error()
        assert response.message == "no device id"
        assert response.registry is None

    def test_malformed_activation_reply_is_error(self, engine, mock_native):
        mock_native.initialize_with_license_key.return_value = "OK"

        response = ConfigRegistry.initialize_with_license_key("KEY", engine)

        assert response.is_error()
        assert response.registry is None

    @pytest.mark.parametrize("key", ["", "   "])
    def test_empty_key_does_not_reach_engine(self, engine, mock_native, key):
        response = ConfigRegistry.initialize_with_license_key(key, engine)

        assert response.is_error()
        mock_native.initialize_with_license_key.assert_not_called()


class TestNotInitialized:
    """Test operations on registries without a successful initialization."""

    def test_set_enabled_decoders_requires_initialization(self):
        registry = ConfigRegistry()
        with pytest.raises(NotInitializedError):
            registry.set_enabled_decoders([DecoderType.QR])

    @pytest.mark.parametrize(
        "call",
        [
            lambda r: r.set_decoding_speed(DecodingSpeed.FAST),
            lambda r: r.set_region_of_interest(0, 0, 50, 50),
            lambda r: r.set_maximum_results_count(2),
            lambda r: r.get_config(DecoderType.QR),
        ],
    )
    def test_all_setters_require_initialization(self, call):
        with pytest.raises(NotInitializedError):
            call(ConfigRegistry())

    def test_shutdown_invalidates(self, registry):
        registry.shutdown()

        assert registry.is_initialized is False
        with pytest.raises(NotInitializedError):
            registry.set_decoding_speed(DecodingSpeed.SLOW)


class TestEnabledDecoders:
    """Test replacement semantics of set_enabled_decoders."""

    def test_exactly_listed_decoders_enabled(self, registry):
        registry.set_enabled_decoders([DecoderType.Aztec, DecoderType.Code93])
        registry.set_enabled_decoders([DecoderType.QR, DecoderType.Code128])

        assert registry.enabled_decoders == [DecoderType.QR, DecoderType.Code128]
        for config in registry:
            assert config.enabled is (
                config.decoder_type in (DecoderType.QR, DecoderType.Code128)
            )

    def test_idempotent(self, registry):
        first = registry.set_enabled_decoders([DecoderType.QR, DecoderType.Code128])
        second = registry.set_enabled_decoders([DecoderType.QR, DecoderType.Code128])
        assert first == second

    def test_integer_codes_accepted(self, registry):
        registry.set_enabled_decoders([2, 15])
        assert registry.enabled_decoders == [DecoderType.QR, DecoderType.PDF417]

    def test_empty_list_disables_all(self, registry):
        registry.set_enabled_decoders([DecoderType.QR])
        registry.set_enabled_decoders([])
        assert registry.enabled_decoders == []

    @pytest.mark.parametrize("bad", [40, -1, "QR", True, 2.0])
    def test_invalid_value_rejected_without_partial_apply(self, registry, bad):
        registry.set_enabled_decoders([DecoderType.Ean13])

        with pytest.raises(ValidationError):
            registry.set_enabled_decoders([DecoderType.QR, bad])

        assert registry.enabled_decoders == [DecoderType.Ean13]

    @pytest.mark.parametrize("bad", [None, 2, object()])
    def test_non_iterable_rejected(self, registry, bad):
        with pytest.raises(ValidationError, match="must be a list"):
            registry.set_enabled_decoders(bad)

    def test_numpy_integer_codes_accepted(self, registry):
        registry.set_enabled_decoders(np.array([2, 15], dtype=np.int64))
        assert registry.enabled_decoders == [DecoderType.QR, DecoderType.PDF417]

    def test_string_rejected(self, registry):
        with pytest.raises(ValidationError):
            registry.set_enabled_decoders("QR")


class TestScanSettings:
    def test_decoding_speed(self, registry):
        registry.set_decoding_speed(3)
        assert registry.decoding_speed is DecodingSpeed.RIGOROUS

    @pytest.mark.parametrize("bad", [4, -1, "fast", None])
    def test_decoding_speed_out_of_range(self, registry, bad):
        with pytest.raises(ValidationError):
            registry.set_decoding_speed(bad)
        assert registry.decoding_speed == DecodingSpeed.NORMAL

    def test_region_of_interest_is_permissive(self, registry):
        roi = registry.set_region_of_interest(-10, 50, 150, 80)
        assert roi.as_tuple() == (-10.0, 50.0, 150.0, 80.0)
        assert registry.region_of_interest == roi

    def test_region_of_interest_strict(self, registry):
        registry.set_region_of_interest(10, 10, 80, 80, strict=True)

        with pytest.raises(ValidationError, match="left \\+ width"):
            registry.set_region_of_interest(50, 0, 60, 100, strict=True)

        assert registry.region_of_interest.as_tuple() == (10.0, 10.0, 80.0, 80.0)

    def test_region_of_interest_non_numeric(self, registry):
        with pytest.raises(ValidationError):
            registry.set_region_of_interest("0", 0, 100, 100)

    def test_maximum_results_count(self, registry):
        registry.set_maximum_results_count(5)
        assert registry.maximum_results_count == 5

        with pytest.raises(ValidationError):
            registry.set_maximum_results_count(0)
        assert registry.maximum_results_count == 5


class TestSlotsAndSerialization:
    def test_get_config_returns_owned_slot(self, registry):
        slot = registry.get_config(DecoderType.Msi)
        slot.set_length_range(6, 10)
        assert registry.get_config(9).minimum_length == 6

    def test_get_config_unknown(self, registry):
        with pytest.raises(ValidationError):
            registry.get_config(77)

    def test_to_dict_keyed_by_name(self, registry):
        registry.set_enabled_decoders([DecoderType.QR])
        registry.set_decoding_speed(DecodingSpeed.SLOW)

        data = registry.to_dict()

        assert data["decodingSpeed"] == "SLOW"
        assert data["maximumResultsCount"] == 1
        assert data["regionOfInterest"] == {
            "left": 0.0,
            "top": 0.0,
            "width": 100.0,
            "height": 100.0,
        }
        assert set(data["decoders"]) == {dt.name for dt in DecoderType}
        assert data["decoders"]["QR"]["enabled"] is True
        assert data["decoders"]["Code128"]["enabled"] is False


def test_engine_error_is_not_raised_from_initialization(engine, mock_native):
    mock_native.initialize_with_license_key.side_effect = EngineError("engine crashed")
    response = ConfigRegistry.initialize_with_license_key("KEY", engine)
    assert response.message == "engine crashed"
