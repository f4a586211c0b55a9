"""
Data model (StormEvent and friends)
===================================

Each row of the storm-events table is converted into a `StormEvent` object.
We keep it immutable (`frozen=True`) so that:
- records cannot be accidentally modified after loading, and
- every later stage derives new values instead of editing rows.

Numeric fields are Optional: `None` means the cell was missing or could not
be read as a number. The aggregator counts those as anomalies.
"""

from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class StormEvent:
    """One storm-event record (a curated subset of the source columns)."""
    event_id: int
    event_type: str
    fatalities: Optional[float]
    injuries: Optional[float]
    prop_dmg: Optional[float]
    # "" is a blank code
    prop_dmg_exp: str
    crop_dmg: Optional[float]
    crop_dmg_exp: str
    begin_date: str = ""
    state: str = ""

@dataclass(frozen=True)
class NormalizedEvent:
    """Damage figures of one record after applying the exponent multipliers."""
    event_type: str
    property_damage: float
    crop_damage: float

    @property
    def total_damage(self) -> float:
        return self.property_damage + self.crop_damage

@dataclass(frozen=True)
class ImpactGroup:
    """Finalized per-label totals."""
    label: str
    fatalities: float = 0.0
    injuries: float = 0.0
    property_damage: float = 0.0
    crop_damage: float = 0.0
    events: int = 0

    @property
    def damage(self) -> float:
        return self.property_damage + self.crop_damage

    @property
    def health(self) -> float:
        return self.fatalities + self.injuries

@dataclass(frozen=True)
class RankedEntry:
    label: str
    value: float
