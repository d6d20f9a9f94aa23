from __future__ import annotations


class CalibrationError(Exception):
    """Base error for the barcode scanner calibration core."""


class MalformedSegmentError(CalibrationError, ValueError):
    """Raised when decoded segment characters do not cover the sampled positions."""

    def __init__(self, message: str, *, length: int, required: int) -> None:
        super().__init__(message)
        self.length = length
        self.required = required
