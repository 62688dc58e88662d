#!/usr/bin/env python3
"""
Decode barcodes in an image file.

Loads the image as grayscale, initializes the engine from a configuration
file, applies any command-line overrides and prints the response document.

Usage:
    # Decode with the bundled configuration
    python scripts/decode_image.py --image label.bmp --license-key KEY

    # Enable specific decoders and allow several results
    python scripts/decode_image.py --image label.bmp --config config.yaml \
        --decoders QR PDF417 Code128 --max-results 5

    # Restrict the scan to the top half, always print a results array
    python scripts/decode_image.py --image label.bmp --roi 0 0 100 50 --uniform
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.barcode import BarcodeError, BarcodeReader, DecodingSpeed  # noqa: E402
from src.utils.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode barcodes in an image file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--image", type=str, required=True, help="Path to image file")
    parser.add_argument(
        "--config", type=str, default=None, help="Path to configuration file"
    )
    parser.add_argument(
        "--license-key", type=str, default=None, help="Override license key"
    )
    parser.add_argument(
        "--decoders", nargs="+", default=None, help="Decoder names to enable"
    )
    parser.add_argument(
        "--speed",
        choices=[s.name.lower() for s in DecodingSpeed],
        default=None,
        help="Decoding speed",
    )
    parser.add_argument(
        "--roi",
        nargs=4,
        type=float,
        metavar=("LEFT", "TOP", "WIDTH", "HEIGHT"),
        default=None,
        help="Region of interest in percent",
    )
    parser.add_argument(
        "--max-results", type=int, default=None, help="Maximum results per image"
    )
    parser.add_argument(
        "--uniform", action="store_true", help="Always print a results array"
    )
    parser.add_argument("--log-level", type=str, default=None, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    reader = BarcodeReader(config_path=Path(args.config) if args.config else None)
    log_config = reader.config.logging
    setup_logging(args.log_level or log_config.level, log_config.file)

    with reader:
        response = reader.initialize(args.license_key)
        if response.is_error():
            logger.error(f"Initialization failed: {response.message}")
            return 1
        logger.info(f"Engine version: {reader.get_version()}")

        try:
            if args.decoders:
                reader.enable_decoders(args.decoders)
            if args.speed:
                reader.set_decoding_speed(DecodingSpeed[args.speed.upper()])
            if args.roi:
                reader.set_region_of_interest(*args.roi, strict=True)
            if args.max_results:
                reader.set_maximum_results_count(args.max_results)

            start_time = time.perf_counter()
            document = reader.decode_file(Path(args.image), uniform=args.uniform)
            logger.info(f"Decode time: {(time.perf_counter() - start_time) * 1000:.1f}ms")
        except BarcodeError as e:
            logger.error(f"Decode failed: {e}")
            return 1

    print(json.dumps(document, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
