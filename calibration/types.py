from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class Environment:
    """Marker base for values that may be threaded through a process flow.

    Carries no behaviour. Subclasses are expected to be immutable; each
    step returns a new value rather than mutating the one it was given.
    """

    __slots__ = ()


class Script(str, Enum):
    """Keyboard scripts supported by case-conversion detection."""

    LATIN = "Latin"
    CYRILLIC = "Cyrillic"
    GREEK = "Greek"
    HEBREW = "Hebrew"
    ARMENIAN = "Armenian"
    GEORGIAN_OLD_ALPHABETS = "GeorgianOldAlphabets"
    COPTIC = "Coptic"
    ADLAM = "Adlam"
    WARANG_CITI = "WarangCiti"
    CHEROKEE = "Cherokee"
    OSAGE = "Osage"
    GLAGOLITIC = "Glagolitic"
    DESERET = "Deseret"

    @classmethod
    def lookup(cls, name: object) -> Optional["Script"]:
        """Return the member for a script name, or None outside the fixed set."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name))
        except ValueError:
            return None


class Parity(str, Enum):
    ANY = "any"
    EVEN = "even"
    ODD = "odd"


@dataclass(frozen=True)
class CodePointRange:
    """Inclusive code point range, optionally restricted to even or odd values."""

    first: int
    last: int
    parity: Parity = Parity.ANY

    def __contains__(self, code_point: object) -> bool:
        if not isinstance(code_point, int):
            return False
        if not (self.first <= code_point <= self.last):
            return False
        if self.parity is Parity.EVEN:
            return code_point % 2 == 0
        if self.parity is Parity.ODD:
            return code_point % 2 == 1
        return True


@dataclass(frozen=True)
class CaseFamily:
    """One or more code point ranges forming the upper or lower case of a script."""

    ranges: Tuple[CodePointRange, ...]

    @classmethod
    def of(cls, first: int, last: int, parity: Parity = Parity.ANY) -> "CaseFamily":
        return cls((CodePointRange(first, last, parity),))

    def __contains__(self, code_point: object) -> bool:
        return any(code_point in r for r in self.ranges)


class AdviceType(int, Enum):
    """Case-related calibration advice. Values are the calibration advice codes."""

    CAPS_LOCK_ON_NO_CASE = 210
    CAPS_LOCK_ON = 325
    CAPS_LOCK_ON_CONVERTS_TO_UPPER_CASE = 327
    CAPS_LOCK_ON_CONVERTS_TO_LOWER_CASE = 328
    CASE_IS_SWITCHED = 330
    CONVERTS_TO_UPPER_CASE = 331
    CONVERTS_TO_LOWER_CASE = 332


ADVICE_TEXT = {
    AdviceType.CAPS_LOCK_ON_NO_CASE: (
        "Caps Lock is switched on.",
        "However, your computer keyboard layout does not support upper and lower-case letters. "
        "You should probably switch Caps Lock off.",
    ),
    AdviceType.CAPS_LOCK_ON: (
        "Caps Lock is switched on.",
        "Switch Caps Lock off and test again. If you must keep Caps Lock switched on while scanning "
        "barcodes, you may be able to configure your barcode scanner to compensate.",
    ),
    AdviceType.CAPS_LOCK_ON_CONVERTS_TO_UPPER_CASE: (
        "Your system converts characters to upper case.",
        "Check your scanner, keyboard and computer configuration and reconfigure them if necessary. "
        "Switch off Caps Lock and test again.",
    ),
    AdviceType.CAPS_LOCK_ON_CONVERTS_TO_LOWER_CASE: (
        "Your system converts characters to lower case.",
        "Check your scanner, keyboard and computer configuration and reconfigure them if necessary. "
        "Switch off Caps Lock and test again.",
    ),
    AdviceType.CASE_IS_SWITCHED: (
        "Your system converts upper and lower case characters.",
        "Your scanner may be configured to emulate Caps Lock. Check your scanner, keyboard and "
        "computer configuration and reconfigure them if necessary.",
    ),
    AdviceType.CONVERTS_TO_UPPER_CASE: (
        "Your system converts characters to upper case.",
        "Check your scanner, keyboard and computer configuration and reconfigure them if necessary.",
    ),
    AdviceType.CONVERTS_TO_LOWER_CASE: (
        "Your system converts characters to lower case.",
        "Check your scanner, keyboard and computer configuration and reconfigure them if necessary.",
    ),
}


@dataclass(frozen=True)
class AdviceItem:
    advice_type: AdviceType
    condition: str
    description: str

    @classmethod
    def of(cls, advice_type: AdviceType) -> "AdviceItem":
        condition, description = ADVICE_TEXT[advice_type]
        return cls(advice_type, condition, description)


@dataclass(frozen=True)
class CalibrationState(Environment):
    """Snapshot of case-conversion calibration state for a single scan."""

    segment: Tuple[str, ...] = ()
    upper_sequences: Optional[Tuple[str, ...]] = None
    lower_sequences: Optional[Tuple[str, ...]] = None
    caps_lock_state: Optional[bool] = None
    script: Optional[str] = None
    case_detection_supported: bool = False
    upper_case_conversion: bool = False
    lower_case_conversion: bool = False
    caps_lock_indicator: bool = False
    advice: Tuple[AdviceItem, ...] = field(default_factory=tuple)

    @property
    def advice_types(self) -> Tuple[AdviceType, ...]:
        return tuple(item.advice_type for item in self.advice)

    def with_advice(self, advice_type: AdviceType) -> "CalibrationState":
        return replace(self, advice=self.advice + (AdviceItem.of(advice_type),))
