"""Barcode scanner calibration core.

Lazy process flows for sequencing calibration decisions, and heuristic
detection of keyboard case conversion (Caps Lock) from decoded calibration
barcode characters.
"""

from calibration.case_conversion import CaseConversionCharacteristics, CaseConversionResult
from calibration.errors import CalibrationError, MalformedSegmentError
from calibration.process_flow import ElseNode, Flow, IfNode, ThenNode, continue_, end, start
from calibration.types import AdviceItem, AdviceType, CalibrationState, Environment, Script
from calibration.unicode_blocks import resolve_script
from calibration.workflow import assess_case_conversion

__all__ = [
    "AdviceItem",
    "AdviceType",
    "CalibrationError",
    "CalibrationState",
    "CaseConversionCharacteristics",
    "CaseConversionResult",
    "ElseNode",
    "Environment",
    "Flow",
    "IfNode",
    "MalformedSegmentError",
    "Script",
    "ThenNode",
    "assess_case_conversion",
    "continue_",
    "end",
    "resolve_script",
    "start",
]
