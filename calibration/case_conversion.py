"""Heuristic detection of keyboard case conversion during barcode scanning.

The calibration barcode carries, at fixed positions, a run of 26 upper-case
letters followed (after one separator) by a run of 26 lower-case letters. If
the host keyboard is applying Caps Lock, or otherwise converting case, the
decoded characters at those positions fall in the opposite case family for
the keyboard's script. More than 65% of a run in the wrong family counts as
conversion detected for that run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

from calibration.errors import MalformedSegmentError
from calibration.logging_utils import get_logger
from calibration.types import CaseFamily, CodePointRange, Parity, Script

log = get_logger(__name__)

SAMPLE_SIZE = 26
CONVERSION_THRESHOLD = 0.65

# Offsets are relative to a full 82-character segment.
REFERENCE_SEGMENT_LENGTH = 82
UPPER_SAMPLE_OFFSET = 28
LOWER_SAMPLE_OFFSET = 55
MINIMUM_SEGMENT_LENGTH = REFERENCE_SEGMENT_LENGTH - UPPER_SAMPLE_OFFSET - 1


@dataclass(frozen=True)
class ScriptCases:
    upper: CaseFamily
    lower: CaseFamily


def _simple(upper: Tuple[int, int], lower: Tuple[int, int]) -> ScriptCases:
    return ScriptCases(CaseFamily.of(*upper), CaseFamily.of(*lower))


SCRIPT_CASES: Dict[Script, ScriptCases] = {
    Script.LATIN: _simple((65, 90), (97, 122)),
    Script.CYRILLIC: _simple((1040, 1071), (1072, 1103)),
    Script.GREEK: _simple((904, 939), (940, 974)),
    # Caps Lock on Hebrew keyboards switches to Latin capitals.
    Script.HEBREW: _simple((65, 90), (1488, 1514)),
    Script.ARMENIAN: _simple((1329, 1375), (1369, 1418)),
    Script.GEORGIAN_OLD_ALPHABETS: _simple((4256, 4301), (11520, 11567)),
    Script.COPTIC: ScriptCases(
        CaseFamily.of(11392, 11519, Parity.EVEN),
        CaseFamily.of(11392, 11519, Parity.ODD),
    ),
    Script.ADLAM: _simple((125184, 125217), (125218, 125251)),
    Script.WARANG_CITI: _simple((71840, 71871), (71872, 71903)),
    Script.CHEROKEE: ScriptCases(
        CaseFamily.of(5024, 5109),
        CaseFamily((CodePointRange(5112, 5118), CodePointRange(43888, 43967))),
    ),
    Script.OSAGE: _simple((66736, 66771), (66776, 66811)),
    Script.GLAGOLITIC: _simple((11264, 11310), (11312, 11358)),
    Script.DESERET: _simple((66560, 66599), (66600, 66639)),
}


@dataclass(frozen=True)
class CaseConversionResult:
    """Outcome of one analysis pass over a segment."""

    lower_to_upper_count: int
    upper_to_lower_count: int
    upper_case_conversion_detected: bool
    lower_case_conversion_detected: bool
    caps_lock_indicator: bool

    @property
    def lower_to_upper_ratio(self) -> float:
        return self.lower_to_upper_count / SAMPLE_SIZE

    @property
    def upper_to_lower_ratio(self) -> float:
        return self.upper_to_lower_count / SAMPLE_SIZE


def sample_positions(segment_length: int, offset: int) -> range:
    """Indices of the 26 sampled characters for a segment of the given length."""
    adjusted = offset - (REFERENCE_SEGMENT_LENGTH - segment_length)
    return range(1 + adjusted, SAMPLE_SIZE + 1 + adjusted)


def count_in_family(segment: Sequence[str], offset: int, family: CaseFamily) -> int:
    """Count sampled characters whose first code point belongs to ``family``."""
    positions = sample_positions(len(segment), offset)
    if positions.start < 0 or positions.stop > len(segment):
        raise MalformedSegmentError(
            f"segment of length {len(segment)} does not cover sampled positions "
            f"{positions.start}..{positions.stop - 1}",
            length=len(segment),
            required=MINIMUM_SEGMENT_LENGTH,
        )

    count = 0
    for index in positions:
        character = segment[index]
        if not character:
            raise MalformedSegmentError(
                f"empty character at segment position {index}",
                length=len(segment),
                required=MINIMUM_SEGMENT_LENGTH,
            )
        if ord(character[0]) in family:
            count += 1
    return count


class CaseConversionCharacteristics:
    """Case conversion characteristics of a scanner/keyboard combination.

    Args:
        segment: Characters decoded from the calibration barcode segment.
        script: Name of the script of the OS keyboard layout.
        caps_lock_state: Caps Lock state reported by the host, if known.

    Each property re-runs the analysis; inputs are fixed at construction so
    repeated reads agree.
    """

    def __init__(
        self,
        segment: Sequence[str],
        script: Union[Script, str] = Script.LATIN,
        caps_lock_state: Optional[bool] = None,
    ) -> None:
        self._segment: Tuple[str, ...] = tuple(segment)
        self._script = script.value if isinstance(script, Script) else str(script)
        self._caps_lock_state = caps_lock_state

    @property
    def script(self) -> str:
        return self._script

    @property
    def caps_lock_state(self) -> Optional[bool]:
        return self._caps_lock_state

    @property
    def upper_case_conversion_detected(self) -> bool:
        """Lower-case characters were reported as upper case."""
        return self.analyse().upper_case_conversion_detected

    @property
    def lower_case_conversion_detected(self) -> bool:
        """Upper-case characters were reported as lower case."""
        return self.analyse().lower_case_conversion_detected

    @property
    def caps_lock_indicator(self) -> bool:
        """Reported Caps Lock state if known, otherwise the heuristic verdict."""
        return self.analyse().caps_lock_indicator

    def analyse(self) -> CaseConversionResult:
        cases = SCRIPT_CASES.get(Script.lookup(self._script))  # type: ignore[arg-type]
        if cases is None:
            log.debug("case detection unsupported for script", extra={"script": self._script})
            return CaseConversionResult(
                lower_to_upper_count=0,
                upper_to_lower_count=0,
                upper_case_conversion_detected=False,
                lower_case_conversion_detected=False,
                caps_lock_indicator=False,
            )

        lower_to_upper = count_in_family(self._segment, LOWER_SAMPLE_OFFSET, cases.upper)
        upper_to_lower = count_in_family(self._segment, UPPER_SAMPLE_OFFSET, cases.lower)

        upper_detected = lower_to_upper / SAMPLE_SIZE > CONVERSION_THRESHOLD
        lower_detected = upper_to_lower / SAMPLE_SIZE > CONVERSION_THRESHOLD
        if self._caps_lock_state is None:
            indicator = upper_detected and lower_detected
        else:
            indicator = self._caps_lock_state

        log.debug("case conversion analysed", extra={
            "script": self._script,
            "lower_to_upper": lower_to_upper,
            "upper_to_lower": upper_to_lower,
            "caps_lock_state": self._caps_lock_state,
        })
        return CaseConversionResult(
            lower_to_upper_count=lower_to_upper,
            upper_to_lower_count=upper_to_lower,
            upper_case_conversion_detected=upper_detected,
            lower_case_conversion_detected=lower_detected,
            caps_lock_indicator=indicator,
        )

    def __repr__(self) -> str:
        return (f"CaseConversionCharacteristics(script={self._script!r}, "
                f"length={len(self._segment)}, caps_lock_state={self._caps_lock_state!r})")
