"""Render decode results as a response document.

The document shape depends on how many results were found, so that
single-result consumers never index into an array:

    ┌─────────┬───────────────────────────────────────────────────────────┐
    │ Results │ Document                                                  │
    ├─────────┼───────────────────────────────────────────────────────────┤
    │ 0       │ {resultsCount: 0, barcodeTypeName: "", textualData: ""}   │
    │ 1       │ {resultsCount: 1, barcodeTypeName, textualData, **extra}  │
    │ N > 1   │ {resultsCount: N, results: [{barcodeTypeName,             │
    │         │   textualData, **extra}, ...]}                            │
    └─────────┴───────────────────────────────────────────────────────────┘

``to_uniform_document`` always uses the array form.

Example:
    >>> marshaler = ResultMarshaler()
    >>> marshaler.to_document([BaseResult("QR", "ABC", {"gs1": "01"})])
    {'resultsCount': 1, 'barcodeTypeName': 'QR', 'textualData': 'ABC', 'gs1': '01'}
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Sequence

from .types import BaseResult

logger = logging.getLogger(__name__)

RESULTS_COUNT_KEY = "resultsCount"
TYPE_NAME_KEY = "barcodeTypeName"
TEXTUAL_DATA_KEY = "textualData"
RESULTS_KEY = "results"

RESERVED_KEYS = frozenset(
    {RESULTS_COUNT_KEY, TYPE_NAME_KEY, TEXTUAL_DATA_KEY, RESULTS_KEY}
)


class ResultMarshaler:
    """Converts result sequences to response documents and JSON text.

    Args:
        indent: Indentation used by ``to_json``.
    """

    def __init__(self, indent: int = 4):
        self.indent = indent

    def to_document(self, results: Sequence[BaseResult]) -> Dict[str, Any]:
        """Build the cardinality-dependent response document."""
        count = len(results)

        if count == 0:
            return {RESULTS_COUNT_KEY: 0, TYPE_NAME_KEY: "", TEXTUAL_DATA_KEY: ""}

        if count == 1:
            document: Dict[str, Any] = {RESULTS_COUNT_KEY: 1}
            document.update(self._result_fields(results[0]))
            return document

        return {
            RESULTS_COUNT_KEY: count,
            RESULTS_KEY: [self._result_fields(result) for result in results],
        }

    def to_uniform_document(self, results: Sequence[BaseResult]) -> Dict[str, Any]:
        """Build a document that always carries a ``results`` array."""
        return {
            RESULTS_COUNT_KEY: len(results),
            RESULTS_KEY: [self._result_fields(result) for result in results],
        }

    def to_json(self, results: Sequence[BaseResult], uniform: bool = False) -> str:
        """Serialize the response document as JSON text."""
        document = (
            self.to_uniform_document(results) if uniform else self.to_document(results)
        )
        return json.dumps(document, indent=self.indent, ensure_ascii=False)

    def _result_fields(self, result: BaseResult) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            TYPE_NAME_KEY: result.barcode_type_name,
            TEXTUAL_DATA_KEY: result.textual_data,
        }
        for key, value in result.extra.items():
            if key in RESERVED_KEYS:
                logger.warning(f"Dropping extra field '{key}': collides with reserved key")
                continue
            fields[key] = value
        return fields


def results_from_document(document: Mapping[str, Any]) -> List[BaseResult]:
    """Read results back from any of the three document shapes.

    Args:
        document: Parsed response document.

    Returns:
        Results in document order.

    Raises:
        ValueError: If the document lacks ``resultsCount`` or its shape does
            not match the count.
    """
    if RESULTS_COUNT_KEY not in document:
        raise ValueError(f"Document has no '{RESULTS_COUNT_KEY}' field")

    count = int(document[RESULTS_COUNT_KEY])

    if RESULTS_KEY in document:
        entries = list(document[RESULTS_KEY])
        if len(entries) != count:
            raise ValueError(
                f"Document declares {count} results but holds {len(entries)}"
            )
    elif count == 0:
        return []
    elif count == 1:
        entries = [{k: v for k, v in document.items() if k != RESULTS_COUNT_KEY}]
    else:
        raise ValueError(f"Document declares {count} results but has no results array")

    return [
        BaseResult(
            barcode_type_name=str(entry.get(TYPE_NAME_KEY, "")),
            textual_data=str(entry.get(TEXTUAL_DATA_KEY, "")),
            extra={
                str(k): str(v)
                for k, v in entry.items()
                if k not in (TYPE_NAME_KEY, TEXTUAL_DATA_KEY)
            },
        )
        for entry in entries
    ]
