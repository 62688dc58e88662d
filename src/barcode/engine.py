"""Adapter around the external native decode engine.

The engine itself (symbol detection, decoding, licensing) is a compiled
module outside this project. This wrapper:

- Lazy-loads the native module on first use
- Forwards license activation and version queries
- Holds the process-wide global options (thread cap, GPU toggle) and
  applies them before the first decode
- Converts every native failure into EngineError

Native module contract (module name is configurable, default ``barkoder``)::

    initialize_with_license_key(key: str) -> tuple[bool, str]
    decode_image(settings: dict, pixels: np.ndarray, width: int, height: int)
        -> iterable of results (mappings or objects exposing
           barcodeTypeName, textualData and extra)
    get_lib_version() -> str
    set_global_option(name: str, value: int) -> None

Example:
    >>> from src.barcode.config_loader import EngineConfig
    >>> engine = BarcodeEngine(EngineConfig())
    >>> print(engine.get_version())
    '1.6.2'
"""

import importlib
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .config_loader import EngineConfig
from .exceptions import EngineError, ValidationError

logger = logging.getLogger(__name__)


class GlobalOption(Enum):
    """Process-wide engine execution options."""

    MAXIMUM_THREADS = "maximum_threads"
    USE_GPU = "use_gpu"


class BarcodeEngine:
    """Wrapper for the native barcode decode engine.

    Args:
        config: Engine configuration (module name, thread cap, GPU flag).

    Attributes:
        config: Engine configuration instance.
        native: Native module (lazy-loaded).

    Example:
        >>> engine = BarcodeEngine(config)
        >>> ok, message = engine.activate("LICENSE-KEY")
        >>> raw = engine.decode(settings, pixels)
    """

    def __init__(self, config: EngineConfig):
        self.config = config
        self._native: Optional[Any] = None  # Lazy-loaded
        self._global_options: Dict[GlobalOption, int] = {
            GlobalOption.MAXIMUM_THREADS: config.maximum_threads,
            GlobalOption.USE_GPU: int(config.use_gpu),
        }
        self._options_applied = False
        self._decode_started = False

        logger.info(
            f"BarcodeEngine created: module={config.module}, "
            f"maximum_threads={config.maximum_threads}, use_gpu={config.use_gpu}"
        )

    @property
    def native(self) -> Any:
        """Lazy-load the native engine module on first access.

        Returns:
            The imported native module.

        Raises:
            EngineError: If the module cannot be imported.
        """
        if self._native is None:
            try:
                self._native = importlib.import_module(self.config.module)
                logger.info(f"Native engine '{self.config.module}' loaded")
            except ImportError as e:
                logger.error(f"Failed to import native engine '{self.config.module}'")
                raise EngineError(
                    f"Native engine module '{self.config.module}' is not installed"
                ) from e

        return self._native

    @property
    def global_options(self) -> Dict[GlobalOption, int]:
        return dict(self._global_options)

    def set_global_option(self, option: GlobalOption, value: int) -> None:
        """Set a process-wide option.

        Options are applied once, before the first decode; changing them
        afterwards is rejected.

        Raises:
            ValidationError: If decoding has already started or the value is
                invalid for the option.
        """
        if self._decode_started:
            raise ValidationError(
                "Global options must be set before the first decode"
            )

        try:
            option = GlobalOption(option)
        except ValueError as e:
            raise ValidationError(f"Unknown global option: {option!r}") from e
        if isinstance(value, bool):
            value = int(value)
        if not isinstance(value, int):
            raise ValidationError(f"{option.value} must be an integer, got {value!r}")
        if option is GlobalOption.MAXIMUM_THREADS and value < 1:
            raise ValidationError(f"maximum_threads must be at least 1, got {value}")
        if option is GlobalOption.USE_GPU and value not in (0, 1):
            raise ValidationError(f"use_gpu must be 0 or 1, got {value}")

        self._global_options[option] = value
        self._options_applied = False
        logger.debug(f"Global option {option.value} set to {value}")

    def apply_global_options(self) -> None:
        """Push pending global options to the native engine."""
        if self._options_applied:
            return
        for option, value in self._global_options.items():
            self._call("set_global_option", option.value, value)
        self._options_applied = True

    def activate(self, license_key: str) -> Tuple[bool, str]:
        """Activate the engine with a license key.

        Returns:
            Tuple of (success, human-readable message from the engine).

        Raises:
            EngineError: If the engine cannot be loaded or raises.
        """
        response = self._call("initialize_with_license_key", license_key)
        if (
            not isinstance(response, (tuple, list))
            or len(response) != 2
            or not isinstance(response[1], str)
        ):
            raise EngineError(f"Unexpected activation response: {response!r}")
        ok, message = response
        return bool(ok), message

    def get_version(self) -> str:
        """Return the native library version string."""
        return str(self._call("get_lib_version"))

    def decode(self, settings: Dict[str, Any], pixels: np.ndarray) -> List[Any]:
        """Run one decode call.

        Args:
            settings: Registry snapshot (see ConfigRegistry.to_dict).
            pixels: Grayscale image of shape (height, width), dtype uint8.

        Returns:
            Raw engine results in detection order.

        Raises:
            EngineError: If the native call fails.
        """
        self.apply_global_options()
        self._decode_started = True

        height, width = pixels.shape
        raw = self._call("decode_image", settings, pixels, width, height)
        if raw is None:
            return []
        if not isinstance(raw, Iterable):
            raise EngineError(f"Engine returned non-iterable results: {raw!r}")

        # Native results may be produced lazily
        try:
            return list(raw)
        except Exception as e:
            logger.error(f"Native engine failed while producing results: {e}")
            raise EngineError(str(e)) from e

    def _call(self, name: str, *args: Any) -> Any:
        """Call a native function, surfacing every failure as EngineError."""
        native = self.native
        try:
            func = getattr(native, name)
        except AttributeError as e:
            raise EngineError(f"Native engine does not provide '{name}'") from e

        try:
            return func(*args)
        except EngineError:
            raise
        except Exception as e:
            logger.error(f"Native engine call '{name}' failed: {e}")
            raise EngineError(str(e)) from e

    def is_available(self) -> bool:
        """Check if the native engine can be loaded."""
        try:
            _ = self.native  # Trigger lazy loading
            return True
        except EngineError:
            return False
