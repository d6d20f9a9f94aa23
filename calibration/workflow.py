from __future__ import annotations

from dataclasses import replace

from calibration.case_conversion import CaseConversionCharacteristics
from calibration.logging_utils import get_logger
from calibration.process_flow import Flow, start
from calibration.types import AdviceType, CalibrationState
from calibration.unicode_blocks import resolve_script, to_script

log = get_logger(__name__)


def resolve_keyboard_script(state: CalibrationState) -> Flow[CalibrationState]:
    """Name the keyboard script from the reported upper/lower case runs."""
    script = resolve_script(state.upper_sequences, state.lower_sequences)
    log.info("keyboard script resolved", extra={"script": script})
    return start(replace(state, script=script))


def mark_detection_support(state: CalibrationState) -> Flow[CalibrationState]:
    supported = state.script is not None and to_script(state.script) is not None
    return start(replace(state, case_detection_supported=supported))


def detect_case_conversion(state: CalibrationState) -> Flow[CalibrationState]:
    name = state.script or ""
    characteristics = CaseConversionCharacteristics(state.segment, to_script(name) or name, state.caps_lock_state)
    result = characteristics.analyse()
    log.info("case conversion assessed", extra={
        "script": state.script,
        "upper_case_conversion": result.upper_case_conversion_detected,
        "lower_case_conversion": result.lower_case_conversion_detected,
        "caps_lock_indicator": result.caps_lock_indicator,
    })
    return start(replace(
        state,
        upper_case_conversion=result.upper_case_conversion_detected,
        lower_case_conversion=result.lower_case_conversion_detected,
        caps_lock_indicator=result.caps_lock_indicator,
    ))


def note_unsupported_script(state: CalibrationState) -> Flow[CalibrationState]:
    """Keep the host-reported Caps Lock state when the heuristic cannot run."""
    log.warning("case conversion detection unsupported", extra={
        "script": state.script, "caps_lock_state": state.caps_lock_state,
    })
    return start(replace(state, caps_lock_indicator=bool(state.caps_lock_state)))


def advise_caps_lock_on(state: CalibrationState) -> Flow[CalibrationState]:
    if not state.case_detection_supported:
        advice_type = AdviceType.CAPS_LOCK_ON_NO_CASE
    elif state.upper_case_conversion and not state.lower_case_conversion:
        advice_type = AdviceType.CAPS_LOCK_ON_CONVERTS_TO_UPPER_CASE
    elif state.lower_case_conversion and not state.upper_case_conversion:
        advice_type = AdviceType.CAPS_LOCK_ON_CONVERTS_TO_LOWER_CASE
    else:
        advice_type = AdviceType.CAPS_LOCK_ON
    return start(state.with_advice(advice_type))


def advise_case_conversion(state: CalibrationState) -> Flow[CalibrationState]:
    """Advice when Caps Lock is off but the system still changes case."""
    if state.upper_case_conversion and state.lower_case_conversion:
        return start(state.with_advice(AdviceType.CASE_IS_SWITCHED))
    if state.upper_case_conversion:
        return start(state.with_advice(AdviceType.CONVERTS_TO_UPPER_CASE))
    if state.lower_case_conversion:
        return start(state.with_advice(AdviceType.CONVERTS_TO_LOWER_CASE))
    return start(state)


def assess_case_conversion(state: CalibrationState) -> CalibrationState:
    """Run case-conversion calibration over a decoded segment.

    Resolves the keyboard script when the state does not name one, runs the
    detector for supported scripts and records typed advice for the user.

    Raises:
        MalformedSegmentError: if the segment does not cover the sampled positions.
    """
    return (
        start(state)
        .if_(lambda s: s.script is None)
        .then(resolve_keyboard_script)
        .else_(start)
        .end_if
        .do(mark_detection_support)
        .if_(lambda s: s.case_detection_supported)
        .then(detect_case_conversion)
        .else_(note_unsupported_script)
        .else_if(lambda s: s.caps_lock_indicator)
        .then(advise_caps_lock_on)
        .else_(advise_case_conversion)
        .end()
    )
