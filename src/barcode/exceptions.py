"""Exception hierarchy for the barcode decoding bridge.

All errors raised by the configuration model, the decode call and the
result marshaling derive from BarcodeError so callers can catch them in
one place. Only the string-status surface in ``sdk.py`` converts them to
``ERROR:`` messages.
"""


class BarcodeError(Exception):
    """Base class for all barcode bridge errors."""


class ValidationError(BarcodeError, ValueError):
    """Malformed caller input (bad length range, buffer size, decoder code).

    Raised before any state is mutated, so a failed call leaves the
    configuration exactly as it was.
    """


class NotInitializedError(BarcodeError):
    """Operation attempted before a usable registry exists."""

    def __init__(self, message: str = "SDK not initialized"):
        super().__init__(message)


class EngineError(BarcodeError):
    """Opaque failure reported by the external decode engine.

    The engine's own message is passed through verbatim.
    """
