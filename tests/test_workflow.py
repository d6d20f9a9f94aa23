from __future__ import annotations

import json
import string
import tempfile
import unittest
from pathlib import Path

import caps_lock_check
from calibration.errors import MalformedSegmentError
from calibration.types import AdviceType, CalibrationState
from calibration.workflow import assess_case_conversion

UPPER = string.ascii_uppercase
LOWER = string.ascii_lowercase
CYRILLIC_UPPER = "".join(chr(cp) for cp in range(1040, 1066))
CYRILLIC_LOWER = "".join(chr(cp) for cp in range(1072, 1098))


def make_segment(upper_run: str, lower_run: str, length: int = 82) -> tuple:
    segment = ["#"] * length
    adjustment = 82 - length
    for i, ch in enumerate(upper_run, start=1):
        segment[i + 28 - adjustment] = ch
    for i, ch in enumerate(lower_run, start=1):
        segment[i + 55 - adjustment] = ch
    return tuple(segment)


class TestAssessCaseConversion(unittest.TestCase):
    def test_caps_lock_on(self) -> None:
        state = CalibrationState(segment=make_segment(LOWER, UPPER), script="Latin")
        r = assess_case_conversion(state)
        self.assertTrue(r.case_detection_supported)
        self.assertTrue(r.caps_lock_indicator)
        self.assertEqual(r.advice_types, (AdviceType.CAPS_LOCK_ON,))
        self.assertEqual(int(r.advice[0].advice_type), 325)
        self.assertTrue(r.advice[0].condition)
        self.assertTrue(r.advice[0].description)
        # Input state is untouched.
        self.assertFalse(state.caps_lock_indicator)
        self.assertEqual(state.advice, ())

    def test_no_conversion(self) -> None:
        r = assess_case_conversion(CalibrationState(segment=make_segment(UPPER, LOWER), script="Latin"))
        self.assertFalse(r.upper_case_conversion)
        self.assertFalse(r.lower_case_conversion)
        self.assertEqual(r.advice, ())

    def test_single_direction_advice(self) -> None:
        r = assess_case_conversion(CalibrationState(segment=make_segment(UPPER, UPPER), script="Latin"))
        self.assertEqual(r.advice_types, (AdviceType.CONVERTS_TO_UPPER_CASE,))
        r = assess_case_conversion(CalibrationState(segment=make_segment(LOWER, LOWER), script="Latin"))
        self.assertEqual(r.advice_types, (AdviceType.CONVERTS_TO_LOWER_CASE,))

    def test_reported_caps_lock_off_with_both_directions_converted(self) -> None:
        state = CalibrationState(segment=make_segment(LOWER, UPPER), script="Latin", caps_lock_state=False)
        r = assess_case_conversion(state)
        self.assertTrue(r.upper_case_conversion)
        self.assertTrue(r.lower_case_conversion)
        self.assertFalse(r.caps_lock_indicator)
        self.assertEqual(r.advice_types, (AdviceType.CASE_IS_SWITCHED,))
        self.assertEqual(int(r.advice_types[0]), 330)

    def test_reported_caps_lock_on_with_single_direction(self) -> None:
        r = assess_case_conversion(
            CalibrationState(segment=make_segment(UPPER, UPPER), script="Latin", caps_lock_state=True))
        self.assertTrue(r.caps_lock_indicator)
        self.assertEqual(r.advice_types, (AdviceType.CAPS_LOCK_ON_CONVERTS_TO_UPPER_CASE,))
        r = assess_case_conversion(
            CalibrationState(segment=make_segment(LOWER, LOWER), script="Latin", caps_lock_state=True))
        self.assertEqual(r.advice_types, (AdviceType.CAPS_LOCK_ON_CONVERTS_TO_LOWER_CASE,))
        self.assertEqual(int(r.advice_types[0]), 328)

    def test_reported_caps_lock_on_without_conversion(self) -> None:
        r = assess_case_conversion(
            CalibrationState(segment=make_segment(UPPER, LOWER), script="Latin", caps_lock_state=True))
        self.assertTrue(r.caps_lock_indicator)
        self.assertEqual(r.advice_types, (AdviceType.CAPS_LOCK_ON,))

    def test_script_resolved_from_reported_sequences(self) -> None:
        state = CalibrationState(
            segment=make_segment(CYRILLIC_LOWER, CYRILLIC_UPPER),
            upper_sequences=(CYRILLIC_UPPER,),
            lower_sequences=(CYRILLIC_LOWER,),
        )
        r = assess_case_conversion(state)
        self.assertEqual(r.script, "Cyrillic")
        self.assertTrue(r.caps_lock_indicator)

    def test_unsupported_script(self) -> None:
        r = assess_case_conversion(CalibrationState(script="Arabic"))
        self.assertFalse(r.case_detection_supported)
        self.assertFalse(r.caps_lock_indicator)
        self.assertEqual(r.advice, ())

    def test_unsupported_script_with_caps_lock_reported_on(self) -> None:
        r = assess_case_conversion(CalibrationState(script="Arabic", caps_lock_state=True))
        self.assertFalse(r.case_detection_supported)
        self.assertTrue(r.caps_lock_indicator)
        self.assertEqual(r.advice_types, (AdviceType.CAPS_LOCK_ON_NO_CASE,))
        self.assertEqual(int(r.advice_types[0]), 210)

    def test_unsupported_script_with_caps_lock_reported_off(self) -> None:
        r = assess_case_conversion(CalibrationState(script="Arabic", caps_lock_state=False))
        self.assertFalse(r.caps_lock_indicator)
        self.assertEqual(r.advice, ())

    def test_unresolvable_script(self) -> None:
        r = assess_case_conversion(CalibrationState())
        self.assertEqual(r.script, "<unknown>")
        self.assertFalse(r.case_detection_supported)

    def test_malformed_segment_propagates(self) -> None:
        with self.assertRaises(MalformedSegmentError):
            assess_case_conversion(CalibrationState(segment=("A",) * 10, script="Latin"))


class TestCapsLockCheckCli(unittest.TestCase):
    def test_reports_caps_lock(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "segment.json"
            path.write_text(json.dumps(list(make_segment(LOWER, UPPER))), encoding="utf-8")
            with self.assertLogs("caps_lock_check", level="INFO") as logs:
                self.assertEqual(caps_lock_check.main(["--segment_json", str(path)]), 0)
        advice = [rec for rec in logs.records if rec.getMessage().startswith("advice")]
        self.assertEqual(len(advice), 1)
        self.assertEqual(advice[0].advice_type, 325)
        self.assertEqual(advice[0].condition, "Caps Lock is switched on.")
        self.assertTrue(advice[0].description)

    def test_no_advice_logged_without_conversion(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "segment.json"
            path.write_text(json.dumps(list(make_segment(UPPER, LOWER))), encoding="utf-8")
            with self.assertLogs("caps_lock_check", level="INFO") as logs:
                self.assertEqual(caps_lock_check.main(["--segment_json", str(path)]), 0)
        self.assertFalse(any(hasattr(rec, "advice_type") for rec in logs.records))

    def test_accepts_string_payload(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "segment.json"
            path.write_text(json.dumps("".join(make_segment(UPPER, LOWER))), encoding="utf-8")
            self.assertEqual(caps_lock_check.load_segment(str(path))[29], "A")

    def test_malformed_segment_exit_status(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "segment.json"
            path.write_text(json.dumps("ABC"), encoding="utf-8")
            self.assertEqual(
                caps_lock_check.main(["--segment_json", str(path), "--caps_lock", "off"]),
                2,
            )


if __name__ == "__main__":
    unittest.main()
