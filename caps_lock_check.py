from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from calibration.errors import MalformedSegmentError
from calibration.logging_utils import get_logger, setup_logging
from calibration.types import CalibrationState
from calibration.workflow import assess_case_conversion

log = get_logger(__name__)


def load_segment(path: str) -> List[str]:
    """Read decoded segment characters from a JSON list or string."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, str):
        return list(data)
    if isinstance(data, list):
        return [str(c) for c in data]
    raise ValueError(f"expected a JSON string or list in {path}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the Caps Lock check."""
    parser = argparse.ArgumentParser(description="Detect keyboard case conversion from a decoded calibration segment")
    parser.add_argument("--segment_json", type=str, required=True,
                        help="JSON file holding the decoded segment as a string or list of characters")
    parser.add_argument("--script", type=str, default="Latin", help="Keyboard script (default: Latin)")
    parser.add_argument("--caps_lock", choices=["on", "off"], default=None,
                        help="Caps Lock state reported by the host, if known")
    parser.add_argument("--log_level", type=str, default=None, help="Log level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Examples:
      python3 caps_lock_check.py --segment_json scans/segment.json
      python3 caps_lock_check.py --segment_json scans/segment.json --script Cyrillic --caps_lock off
    """
    args = parse_args(argv)
    setup_logging(args.log_level)

    caps_lock = None if args.caps_lock is None else args.caps_lock == "on"
    state = CalibrationState(
        segment=tuple(load_segment(args.segment_json)),
        caps_lock_state=caps_lock,
        script=args.script,
    )
    try:
        result = assess_case_conversion(state)
    except MalformedSegmentError as e:
        log.error("malformed segment", extra={"length": e.length, "required": e.required, "error": str(e)})
        return 2

    log.info("case conversion check done", extra={
        "upper_case_conversion": result.upper_case_conversion,
        "lower_case_conversion": result.lower_case_conversion,
        "caps_lock_indicator": result.caps_lock_indicator,
    })
    for item in result.advice:
        log.info("advice: %s", item.condition, extra={
            "advice_type": int(item.advice_type),
            "condition": item.condition,
            "description": item.description,
        })
    return 0


if __name__ == "__main__":
    sys.exit(main())
