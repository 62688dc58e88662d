"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules. The native decode engine is never loaded: every
engine adapter gets a Mock in place of the native module.
"""

from unittest.mock import Mock

import numpy as np
import pytest

from src.barcode.config_loader import EngineConfig
from src.barcode.engine import BarcodeEngine
from src.barcode.registry import ConfigRegistry


@pytest.fixture
def mock_native():
    """Fixture providing a stand-in for the native engine module."""
    native = Mock()
    native.initialize_with_license_key.return_value = (True, "License valid")
    native.get_lib_version.return_value = "1.6.2"
    native.decode_image.return_value = []
    return native


@pytest.fixture
def engine(mock_native):
    """Fixture providing an engine adapter wired to the mock native module."""
    engine = BarcodeEngine(EngineConfig())
    engine._native = mock_native
    return engine


@pytest.fixture
def registry(engine):
    """Fixture providing an initialized registry."""
    response = ConfigRegistry.initialize_with_license_key("TEST-LICENSE", engine)
    assert response.is_success()
    return response.registry


@pytest.fixture
def gray_image():
    """Fixture providing a 40x30 grayscale image as (buffer, width, height)."""
    width, height = 40, 30
    pixels = np.random.randint(0, 255, (height, width), dtype=np.uint8)
    return pixels.tobytes(), width, height


@pytest.fixture
def raw_qr():
    return {"barcodeTypeName": "QR", "textualData": "ABC", "extra": {"gs1": "01"}}


@pytest.fixture
def raw_code128():
    return {"barcodeTypeName": "Code 128", "textualData": "XYZ", "extra": {}}
