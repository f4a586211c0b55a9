"""
Exponent normalizer
===================

Damage magnitudes in the storm table come with a one-character "exponent"
code (PROPDMGEXP / CROPDMGEXP) saying which unit the magnitude is in.
This module turns a code into a numeric multiplier.

The table keeps the legacy semantics of the dataset exactly, oddities
included: digits map to 10, "+" to 1, and blank / "-" / "?" to 0.

Two entry points:
- `lookup_multiplier(code)` is pure: multiplier or None if unmapped.
- `resolve_multiplier(code, anomalies)` never fails: unmapped codes resolve
  to 0 and are counted in the given AnomalyLog.
"""

from __future__ import annotations
import logging
import math
from typing import Dict, Optional

from .anomalies import AnomalyLog, UNCERTAIN_CODE, UNMAPPED_CODE

logger = logging.getLogger(__name__)

BLANK = ""

EXPONENT_MULTIPLIERS: Dict[str, int] = {
    BLANK: 0,
    "-": 0,
    "?": 0,
    "+": 1,
    **{str(d): 10 for d in range(0, 9)},
    "h": 100, "H": 100,
    "k": 1_000, "K": 1_000,
    "m": 1_000_000, "M": 1_000_000,
    "b": 1_000_000_000, "B": 1_000_000_000,
}

def parse_code(raw: object) -> str:
    """Coerce a raw cell into the closed code form (a string, "" for blank).

    None, NaN and whitespace-only text are blank. Integral numbers (pandas
    may read a digit-only column as int/float) become their digit string.
    """
    if raw is None:
        return BLANK
    if isinstance(raw, float):
        if math.isnan(raw):
            return BLANK
        if raw.is_integer():
            return str(int(raw))
    s = str(raw)
    return BLANK if not s.strip() else s

def lookup_multiplier(code: object) -> Optional[int]:
    return EXPONENT_MULTIPLIERS.get(parse_code(code))

def resolve_multiplier(code: object, anomalies: AnomalyLog) -> int:
    c = parse_code(code)
    mult = EXPONENT_MULTIPLIERS.get(c)
    if mult is None:
        if anomalies.record(UNMAPPED_CODE, c):
            logger.warning("Unmapped exponent code %r; using multiplier 0", c)
        return 0
    if c == "?":
        anomalies.record(UNCERTAIN_CODE, c)
    return mult
