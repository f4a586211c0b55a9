"""
Anomaly bookkeeping
===================

Data-quality problems never abort a batch. Each one is counted by kind in an
`AnomalyLog` that travels with the aggregation and is shown to the user at
the end (CLI summary, JSON export, DOCX report).

Kinds used by SIRE:
- unmapped_code            exponent code outside the mapping table
- uncertain_code           the explicit "?" (unknown magnitude) code
- malformed_<field>        missing / non-numeric / negative numeric cell
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Set

UNMAPPED_CODE = "unmapped_code"
UNCERTAIN_CODE = "uncertain_code"

def malformed(field_name: str) -> str:
    return f"malformed_{field_name}"

@dataclass
class AnomalyLog:
    """Counts per anomaly kind, plus the distinct offending values seen."""
    counts: Counter = field(default_factory=Counter)
    details: Dict[str, Set[str]] = field(default_factory=dict)

    def record(self, kind: str, detail: str | None = None) -> bool:
        """Count one anomaly. Returns True if `detail` is new for this kind."""
        self.counts[kind] += 1
        if detail is None:
            return False
        seen = self.details.setdefault(kind, set())
        if detail in seen:
            return False
        seen.add(detail)
        return True

    def count(self, kind: str) -> int:
        return self.counts.get(kind, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> Dict[str, int]:
        """Counts per kind, sorted by kind name (stable for reports/tests)."""
        return {k: self.counts[k] for k in sorted(self.counts) if self.counts[k]}

    def examples(self, kind: str) -> list:
        return sorted(self.details.get(kind, ()))

    @classmethod
    def merged(cls, logs: Iterable["AnomalyLog"]) -> "AnomalyLog":
        out = cls()
        for log in logs:
            out.counts.update(log.counts)
            for kind, vals in log.details.items():
                out.details.setdefault(kind, set()).update(vals)
        return out
