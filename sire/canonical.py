"""
Label canonicalization (optional preprocessing)
===============================================

The EVTYPE column is free text: "TSTM WIND", "THUNDERSTORM WINDS" and
"Thunderstorm Wind" all describe the same thing. SIRE does NOT merge them
by default; the aggregator groups exact strings.

When enabled (engine `canonicalize=True`, CLI `--canonicalize`) this stage
rewrites each label before aggregation:
- trim and collapse internal whitespace
- upper-case
- apply the small alias table below (whole-label matches only)
"""

from __future__ import annotations
import re
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional

from .models import StormEvent

_WS = re.compile(r"\s+")

LABEL_ALIASES: Dict[str, str] = {
    "TSTM WIND": "THUNDERSTORM WIND",
    "THUNDERSTORM WINDS": "THUNDERSTORM WIND",
    "TSTM WINDS": "THUNDERSTORM WIND",
    "MARINE TSTM WIND": "MARINE THUNDERSTORM WIND",
    "HURRICANE": "HURRICANE/TYPHOON",
    "TYPHOON": "HURRICANE/TYPHOON",
    "HURRICANE/TYPHOON": "HURRICANE/TYPHOON",
    "FLASH FLOODING": "FLASH FLOOD",
    "FLOODING": "FLOOD",
    "RIP CURRENTS": "RIP CURRENT",
    "EXTREME HEAT": "EXCESSIVE HEAT",
    "HEAT WAVE": "HEAT",
    "WILD/FOREST FIRE": "WILDFIRE",
    "WILD FIRES": "WILDFIRE",
    "STORM SURGE": "STORM SURGE/TIDE",
    "WINTER STORMS": "WINTER STORM",
    "HIGH WINDS": "HIGH WIND",
    "STRONG WINDS": "STRONG WIND",
}

def canonicalize_label(label: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    key = _WS.sub(" ", label.strip()).upper()
    table = LABEL_ALIASES if aliases is None else aliases
    return table.get(key, key)

def canonicalize_events(events: Iterable[StormEvent],
                        aliases: Optional[Mapping[str, str]] = None) -> List[StormEvent]:
    """Return new records with canonical labels (inputs are left untouched)."""
    return [replace(e, event_type=canonicalize_label(e.event_type, aliases)) for e in events]
