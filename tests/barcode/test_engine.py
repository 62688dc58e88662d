"""Unit tests for the native engine adapter."""

import sys
from unittest.mock import Mock, call, patch

import numpy as np
import pytest

from src.barcode.config_loader import EngineConfig
from src.barcode.engine import BarcodeEngine, GlobalOption
from src.barcode.exceptions import EngineError, ValidationError


class TestLazyLoading:
    """Test native module loading."""

    def test_not_loaded_on_construction(self):
        engine = BarcodeEngine(EngineConfig())
        assert engine._native is None

    def test_loads_configured_module(self):
        native = Mock()
        with patch.dict(sys.modules, {"fake_barcode_native": native}):
            engine = BarcodeEngine(EngineConfig(module="fake_barcode_native"))
            assert engine.native is native
            assert engine.is_available() is True

    def test_missing_module(self):
        with patch.dict(sys.modules, {"fake_barcode_native": None}):
            engine = BarcodeEngine(EngineConfig(module="fake_barcode_native"))

            with pytest.raises(EngineError, match="not installed"):
                _ = engine.native
            assert engine.is_available() is False


class TestNativeCalls:
    def test_activate(self, engine, mock_native):
        assert engine.activate("KEY") == (True, "License valid")

    @pytest.mark.parametrize("response", ["OK", (True,), (True, "a", "b"), [True, 7], None])
    def test_activate_malformed_response(self, engine, mock_native, response):
        mock_native.initialize_with_license_key.return_value = response
        with pytest.raises(EngineError, match="Unexpected activation response"):
            engine.activate("KEY")

    def test_get_version(self, engine):
        assert engine.get_version() == "1.6.2"

    def test_native_exception_wrapped(self, engine, mock_native):
        mock_native.get_lib_version.side_effect = OSError("library unloaded")
        with pytest.raises(EngineError, match="library unloaded"):
            engine.get_version()

    def test_missing_native_function(self, engine):
        engine._native = Mock(spec=["initialize_with_license_key"])
        with pytest.raises(EngineError, match="does not provide"):
            engine.get_version()

    def test_decode_passes_dimensions(self, engine, mock_native):
        pixels = np.zeros((30, 40), dtype=np.uint8)
        engine.decode({"decoders": {}}, pixels)

        args = mock_native.decode_image.call_args[0]
        assert args[2:] == (40, 30)

    def test_decode_none_is_empty(self, engine, mock_native):
        mock_native.decode_image.return_value = None
        assert engine.decode({}, np.zeros((2, 2), dtype=np.uint8)) == []

    def test_decode_non_iterable(self, engine, mock_native):
        mock_native.decode_image.return_value = 42
        with pytest.raises(EngineError, match="non-iterable"):
            engine.decode({}, np.zeros((2, 2), dtype=np.uint8))

    def test_decode_failure_while_iterating_results(self, engine, mock_native, raw_qr):
        def lazy_results():
            yield raw_qr
            raise RuntimeError("engine crashed mid-iteration")

        mock_native.decode_image.return_value = lazy_results()

        with pytest.raises(EngineError, match="crashed mid-iteration"):
            engine.decode({}, np.zeros((2, 2), dtype=np.uint8))

    def test_decode_type_error_while_iterating_results(self, engine, mock_native):
        def lazy_results():
            yield from ()
            raise TypeError("bad record layout")

        mock_native.decode_image.return_value = lazy_results()

        with pytest.raises(EngineError, match="bad record layout"):
            engine.decode({}, np.zeros((2, 2), dtype=np.uint8))


class TestGlobalOptions:
    """Test thread/GPU options and their lifecycle."""

    def test_defaults_from_config(self):
        engine = BarcodeEngine(EngineConfig(maximum_threads=4, use_gpu=True))
        assert engine.global_options == {
            GlobalOption.MAXIMUM_THREADS: 4,
            GlobalOption.USE_GPU: 1,
        }

    def test_applied_once_before_first_decode(self, engine, mock_native):
        pixels = np.zeros((2, 2), dtype=np.uint8)

        engine.decode({}, pixels)
        engine.decode({}, pixels)

        assert mock_native.set_global_option.call_args_list == [
            call("maximum_threads", 1),
            call("use_gpu", 0),
        ]

    def test_set_before_decode(self, engine, mock_native):
        engine.set_global_option(GlobalOption.MAXIMUM_THREADS, 8)
        engine.decode({}, np.zeros((2, 2), dtype=np.uint8))

        mock_native.set_global_option.assert_any_call("maximum_threads", 8)

    def test_set_after_decode_rejected(self, engine):
        engine.decode({}, np.zeros((2, 2), dtype=np.uint8))

        with pytest.raises(ValidationError, match="before the first decode"):
            engine.set_global_option(GlobalOption.USE_GPU, True)

    @pytest.mark.parametrize(
        "option,value",
        [
            (GlobalOption.MAXIMUM_THREADS, 0),
            (GlobalOption.USE_GPU, 2),
            (GlobalOption.MAXIMUM_THREADS, "4"),
        ],
    )
    def test_invalid_values(self, engine, option, value):
        with pytest.raises(ValidationError):
            engine.set_global_option(option, value)

    def test_unknown_option(self, engine):
        with pytest.raises(ValidationError, match="Unknown global option"):
            engine.set_global_option("bogus", 1)

    def test_option_by_value(self, engine):
        engine.set_global_option("use_gpu", True)
        assert engine.global_options[GlobalOption.USE_GPU] == 1
