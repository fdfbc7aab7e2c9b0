#!/usr/bin/env python
import argparse
import logging
import sys
from typing import Any, List, Optional, Tuple

from utils.logging_config import setup_logging, get_logger
from core.constructor import steering
from core.exceptions import SteeringError
from core.presentation import print_steering
from core.steering import REMOVE
from inout.cas_parser import parse_value
from inout.cas_writer import write_steering_file

logger = get_logger(__name__)

def _parse_assignment(text: str) -> Tuple[str, Any]:
    key, sep, value = text.partition("=")
    if not sep:
        raise SteeringError(f"Expected KEY=VALUE, got '{text}'")
    return key.strip(), parse_value(value.strip())

def main(argv: Optional[List[str]] = None) -> int:
    """
    Create, edit and inspect TELEMAC steering files.

    Command-line arguments:
      --input: Steering file to start from (default: built-in template).
      --output: Path to write the resulting steering file to.
      --set: KEY=VALUE assignment, may be repeated.
      --remove: Parameter to remove, may be repeated.
      --show: Number of parameters to print.
      --verbose: Enable DEBUG logging.
    """
    parser = argparse.ArgumentParser(description="Create, edit and inspect TELEMAC steering files.")
    parser.add_argument("--input", help="Steering file to start from (default: built-in template).", default=None)
    parser.add_argument("--output", help="Path to write the steering file to.", default=None)
    parser.add_argument("--set", action="append", default=[], metavar="KEY=VALUE",
                        help="Set a parameter; the value is typed like in a steering file.")
    parser.add_argument("--remove", action="append", default=[], metavar="KEY", help="Remove a parameter.")
    parser.add_argument("--show", type=int, default=10, help="Number of parameters to print.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(level=logging.DEBUG)
        logger.debug("Verbose logging enabled.")
    else:
        setup_logging(level=logging.INFO)

    try:
        updates = dict(_parse_assignment(item) for item in args.set)
        for key in args.remove:
            updates[key] = REMOVE
        result = steering(args.input, target=args.output)
        if updates:
            result = steering(result, updates=updates)
        if args.output:
            write_steering_file(result)
    except (SteeringError, OSError) as e:
        logger.error("Steering file processing failed: %s", e)
        return 1

    print_steering(result, n=args.show)
    return 0

if __name__ == "__main__":
    sys.exit(main())
