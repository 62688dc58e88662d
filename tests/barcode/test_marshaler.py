"""Unit tests for ResultMarshaler."""

import json
import logging

import pytest

from src.barcode.marshaler import ResultMarshaler, results_from_document
from src.barcode.types import BaseResult


@pytest.fixture
def marshaler():
    return ResultMarshaler()


@pytest.fixture
def qr():
    return BaseResult("QR", "ABC", {"gs1": "01"})


@pytest.fixture
def code128():
    return BaseResult("Code 128", "XYZ")


class TestToDocument:
    """Test the cardinality-dependent document shape."""

    def test_no_results(self, marshaler):
        assert marshaler.to_document([]) == {
            "resultsCount": 0,
            "barcodeTypeName": "",
            "textualData": "",
        }

    def test_single_result_is_flat(self, marshaler, qr):
        assert marshaler.to_document([qr]) == {
            "resultsCount": 1,
            "barcodeTypeName": "QR",
            "textualData": "ABC",
            "gs1": "01",
        }

    def test_multiple_results_use_array(self, marshaler, qr, code128):
        assert marshaler.to_document([qr, code128]) == {
            "resultsCount": 2,
            "results": [
                {"barcodeTypeName": "QR", "textualData": "ABC", "gs1": "01"},
                {"barcodeTypeName": "Code 128", "textualData": "XYZ"},
            ],
        }

    def test_reserved_extra_keys_dropped(self, marshaler, caplog):
        result = BaseResult(
            "QR", "ABC", {"textualData": "spoofed", "resultsCount": "9", "ok": "1"}
        )

        with caplog.at_level(logging.WARNING):
            document = marshaler.to_document([result])

        assert document == {
            "resultsCount": 1,
            "barcodeTypeName": "QR",
            "textualData": "ABC",
            "ok": "1",
        }
        assert "textualData" in caplog.text


class TestUniformAndJson:
    def test_uniform_document_always_has_array(self, marshaler, qr):
        assert marshaler.to_uniform_document([]) == {"resultsCount": 0, "results": []}
        assert marshaler.to_uniform_document([qr])["results"][0]["textualData"] == "ABC"

    def test_to_json_parses_back(self, marshaler, qr):
        text = marshaler.to_json([qr])
        assert json.loads(text) == marshaler.to_document([qr])

    def test_to_json_keeps_unicode(self, marshaler):
        text = marshaler.to_json([BaseResult("QR", "Grüße")])
        assert "Grüße" in text

    def test_to_json_uniform(self, marshaler, qr):
        assert json.loads(marshaler.to_json([qr], uniform=True))["results"][0][
            "barcodeTypeName"
        ] == "QR"


class TestResultsFromDocument:
    def test_all_shapes(self, marshaler, qr, code128):
        for results in ([], [qr], [qr, code128]):
            document = json.loads(marshaler.to_json(results))
            assert results_from_document(document) == results

    def test_uniform_shape(self, marshaler, qr):
        document = marshaler.to_uniform_document([qr])
        assert results_from_document(document) == [qr]

    def test_missing_count(self):
        with pytest.raises(ValueError, match="resultsCount"):
            results_from_document({"textualData": "ABC"})

    def test_count_mismatch(self):
        with pytest.raises(ValueError):
            results_from_document({"resultsCount": 3, "results": [{}]})

    def test_many_without_array(self):
        with pytest.raises(ValueError):
            results_from_document({"resultsCount": 2, "textualData": "ABC"})
