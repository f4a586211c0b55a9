"""
Bar charts for ranked results
-----------------------------
One bar chart per ranked sequence (top fatalities, top injuries, top damage).

matplotlib and numpy are imported lazily so the core pipeline runs without
them; the Agg backend is selected because charts are only written to files.
"""

from __future__ import annotations
import logging
import os
from typing import List, Sequence, Tuple

from .models import RankedEntry

logger = logging.getLogger(__name__)

# metric -> (title, y label, divisor applied to values)
CHART_SPECS = {
    "fatalities": ("Top {k} Event Types by Fatalities", "Fatalities", 1.0),
    "injuries": ("Top {k} Event Types by Injuries", "Injuries", 1.0),
    "damage": ("Top {k} Event Types by Economic Damage", "Property + crop damage (US$ billions)", 1e9),
}

def _pyplot():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e
    return plt, np

def plot_ranking(entries: Sequence[RankedEntry], title: str, ylabel: str, out_path: str,
                 scale: float = 1.0) -> str:
    """Draw a bar chart of (label, value) pairs in ranked order."""
    plt, np = _pyplot()
    labels = [e.label for e in entries]
    values = [e.value / scale for e in entries]
    x = np.arange(len(labels))

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.bar(x, values, edgecolor="black", linewidth=0.8)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_title(title)
    ax.set_xlabel("Event type")
    ax.set_ylabel(ylabel)
    fig.tight_layout()
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path

def plot_summary(summary, out_dir: str) -> List[Tuple[str, str]]:
    """Write the three standard charts into `out_dir`. Returns (title, path) pairs."""
    out: List[Tuple[str, str]] = []
    for metric, entries in summary.ranking.items():
        if not entries:
            logger.info("No %s ranking to plot", metric)
            continue
        title_t, ylabel, scale = CHART_SPECS[metric]
        title = title_t.format(k=len(entries))
        path = plot_ranking(entries, title, ylabel, os.path.join(out_dir, f"top_{metric}.png"), scale=scale)
        out.append((title, path))
    return out
