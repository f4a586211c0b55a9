"""
Core engine (SIRE)
==================

The pipeline is a straight line over an immutable batch:

1) Load dataset -> list of StormEvent records (see loader.py)
2) Optionally canonicalize labels (see canonical.py)
3) Normalize damage + aggregate per label (see aggregate.py)
4) Rank each metric and keep the top K (see rank.py)
5) Hand the ranked sequences to the sinks (CLI print, charts, DOCX, exports)

Nothing here keeps state between runs: calling `run()` twice on the same
events gives identical results.
"""

from __future__ import annotations
import csv
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .aggregate import Aggregation, aggregate
from .anomalies import AnomalyLog
from .canonical import canonicalize_events
from .models import StormEvent
from .rank import DEFAULT_TOP_K, ImpactRanking, rank_impacts

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ImpactSummary:
    """Everything one run produces."""
    ranking: ImpactRanking
    aggregation: Aggregation
    k: int
    canonicalized: bool = False
    dataset_path: Optional[str] = None

    @property
    def anomalies(self) -> AnomalyLog:
        return self.aggregation.anomalies

    def to_dict(self) -> Dict[str, Any]:
        totals = self.aggregation.totals()
        return {
            "dataset": self.dataset_path,
            "top_k": self.k,
            "canonicalized": self.canonicalized,
            "records": self.aggregation.records,
            "event_types": len(self.aggregation.groups),
            "totals": {
                "fatalities": totals.fatalities,
                "injuries": totals.injuries,
                "damage": totals.damage,
            },
            "rankings": {
                metric: [{"rank": i + 1, "label": e.label, "value": e.value} for i, e in enumerate(entries)]
                for metric, entries in self.ranking.items()
            },
            "anomalies": self.anomalies.summary(),
        }

@dataclass
class SIRE:
    """Storm Impact Ranking Engine.

    Holds the loaded records and the run options. `run()` is pure with
    respect to `events`.
    """
    events: List[StormEvent]
    k: int = DEFAULT_TOP_K
    canonicalize: bool = False
    dataset_path: Optional[str] = None
    _last: Optional[ImpactSummary] = field(default=None, init=False, repr=False)

    def run(self) -> ImpactSummary:
        events = canonicalize_events(self.events) if self.canonicalize else self.events
        agg = aggregate(events)
        summary = ImpactSummary(
            ranking=rank_impacts(agg, self.k),
            aggregation=agg,
            k=self.k,
            canonicalized=self.canonicalize,
            dataset_path=self.dataset_path,
        )
        if agg.anomalies.total:
            logger.warning("Batch finished with anomalies: %s", agg.anomalies.summary())
        self._last = summary
        return summary

    @property
    def summary(self) -> ImpactSummary:
        """Result of the latest run (runs once on first access)."""
        if self._last is None:
            return self.run()
        return self._last

    def export_csv(self, path: str) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["metric", "rank", "label", "value"])
            for metric, entries in self.summary.ranking.items():
                for i, e in enumerate(entries, start=1):
                    w.writerow([metric, i, e.label, e.value])

    def export_json(self, path: str) -> None:
        """Export rankings, totals and the anomaly summary as JSON."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.summary.to_dict(), f, ensure_ascii=False, indent=2)
