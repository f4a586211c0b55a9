"""
Ranker
======

Sort finalized groups by one metric (descending) and keep the first K.

The standard report ranks three metrics independently:
fatalities, injuries and total economic damage.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping

from .aggregate import Aggregation
from .dsa import merge_sort
from .models import ImpactGroup, RankedEntry

DEFAULT_TOP_K = 10

METRICS: Dict[str, Callable[[ImpactGroup], float]] = {
    "fatalities": lambda g: g.fatalities,
    "injuries": lambda g: g.injuries,
    "damage": lambda g: g.damage,
    "property_damage": lambda g: g.property_damage,
    "crop_damage": lambda g: g.crop_damage,
    "health": lambda g: g.health,
    "events": lambda g: float(g.events),
}

@dataclass(frozen=True)
class ImpactRanking:
    """The three standard ranked sequences."""
    fatalities: List[RankedEntry] = field(default_factory=list)
    injuries: List[RankedEntry] = field(default_factory=list)
    damage: List[RankedEntry] = field(default_factory=list)

    def items(self):
        return [("fatalities", self.fatalities), ("injuries", self.injuries), ("damage", self.damage)]

def top_k(values: Mapping[str, float], k: int) -> List[RankedEntry]:
    """Top-k (label, value) pairs, value descending; ties keep mapping order."""
    if k <= 0:
        return []
    entries = [RankedEntry(label=label, value=v) for label, v in values.items()]
    return merge_sort(entries, key=lambda e: e.value, reverse=True)[:k]

def _metric(name: str) -> Callable[[ImpactGroup], float]:
    f = name.lower().strip()
    if f not in METRICS:
        raise ValueError(f"metric must be one of: {', '.join(METRICS)}")
    return METRICS[f]

def rank_groups(groups: Mapping[str, ImpactGroup], metric: str, k: int = DEFAULT_TOP_K) -> List[RankedEntry]:
    get = _metric(metric)
    return top_k({label: get(g) for label, g in groups.items()}, k)

def rank_impacts(aggregation: Aggregation, k: int = DEFAULT_TOP_K) -> ImpactRanking:
    groups = aggregation.groups
    return ImpactRanking(
        fatalities=rank_groups(groups, "fatalities", k),
        injuries=rank_groups(groups, "injuries", k),
        damage=rank_groups(groups, "damage", k),
    )
