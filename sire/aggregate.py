"""
Impact aggregator
=================

One pass over the records:

1) resolve both exponent codes of a record to multipliers
2) compute normalized property / crop damage
3) add fatalities, injuries and damage into the group for the record's label

Groups are keyed by the exact label string (no case folding, no trimming).
Use `sire.canonical` beforehand if spellings should be merged.

The running sums live in a dict owned by the call; the finished groups are
frozen `ImpactGroup` objects inside the returned `Aggregation`.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .anomalies import AnomalyLog, malformed
from .exponents import resolve_multiplier
from .models import ImpactGroup, NormalizedEvent, StormEvent

logger = logging.getLogger(__name__)

@dataclass
class Aggregation:
    """Result of one aggregation pass."""
    groups: Dict[str, ImpactGroup] = field(default_factory=dict)
    anomalies: AnomalyLog = field(default_factory=AnomalyLog)
    records: int = 0

    def totals(self) -> ImpactGroup:
        """Grand totals across every group (label "ALL")."""
        return _combine("ALL", self.groups.values())

@dataclass
class _Running:
    fatalities: float = 0.0
    injuries: float = 0.0
    property_damage: float = 0.0
    crop_damage: float = 0.0
    events: int = 0

def _amount(value: object, field_name: str, anomalies: AnomalyLog) -> float:
    """Read a non-negative number; anything else counts 0 plus an anomaly."""
    try:
        v = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        anomalies.record(malformed(field_name))
        return 0.0
    if not math.isfinite(v) or v < 0:
        anomalies.record(malformed(field_name))
        return 0.0
    return v

def normalize_event(event: StormEvent, anomalies: AnomalyLog) -> NormalizedEvent:
    prop_mult = resolve_multiplier(event.prop_dmg_exp, anomalies)
    crop_mult = resolve_multiplier(event.crop_dmg_exp, anomalies)
    prop = _amount(event.prop_dmg, "prop_dmg", anomalies) * prop_mult
    crop = _amount(event.crop_dmg, "crop_dmg", anomalies) * crop_mult
    return NormalizedEvent(event_type=event.event_type, property_damage=prop, crop_damage=crop)

def aggregate(events: Iterable[StormEvent]) -> Aggregation:
    """Group records by label and sum their health and economic impact."""
    anomalies = AnomalyLog()
    running: Dict[str, _Running] = {}
    n = 0
    for e in events:
        n += 1
        norm = normalize_event(e, anomalies)
        g = running.get(e.event_type)
        if g is None:
            g = running[e.event_type] = _Running()
        g.fatalities += _amount(e.fatalities, "fatalities", anomalies)
        g.injuries += _amount(e.injuries, "injuries", anomalies)
        g.property_damage += norm.property_damage
        g.crop_damage += norm.crop_damage
        g.events += 1

    groups = {
        label: ImpactGroup(
            label=label,
            fatalities=r.fatalities,
            injuries=r.injuries,
            property_damage=r.property_damage,
            crop_damage=r.crop_damage,
            events=r.events,
        )
        for label, r in running.items()
    }
    logger.info("Aggregated %d records into %d event types (%d anomalies)",
                n, len(groups), anomalies.total)
    return Aggregation(groups=groups, anomalies=anomalies, records=n)

def merge_aggregations(parts: Iterable[Aggregation]) -> Aggregation:
    """Merge partial aggregations (e.g. from partitions of one batch).

    Per-label sums are added, so the merge is associative and commutative.
    Label order follows first appearance across `parts`.
    """
    parts = list(parts)
    by_label: Dict[str, List[ImpactGroup]] = {}
    for p in parts:
        for label, g in p.groups.items():
            by_label.setdefault(label, []).append(g)
    return Aggregation(
        groups={label: _combine(label, gs) for label, gs in by_label.items()},
        anomalies=AnomalyLog.merged(p.anomalies for p in parts),
        records=sum(p.records for p in parts),
    )

def _combine(label: str, groups: Iterable[ImpactGroup]) -> ImpactGroup:
    r = _Running()
    for g in groups:
        r.fatalities += g.fatalities
        r.injuries += g.injuries
        r.property_damage += g.property_damage
        r.crop_damage += g.crop_damage
        r.events += g.events
    return ImpactGroup(label=label, fatalities=r.fatalities, injuries=r.injuries,
                       property_damage=r.property_damage, crop_damage=r.crop_damage,
                       events=r.events)
