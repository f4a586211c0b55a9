from __future__ import annotations

"""
SIRE report generator
--------------------
This module writes a DOCX report from an `ImpactSummary`.

Design goals:
- Keep SIRE usable even if report dependencies are missing (lazy imports).
- Show the three rankings both as tables and as bar charts.
- Always show the anomaly summary, so data-quality problems are visible
  next to the numbers they affected.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import os
import tempfile

from .charts import plot_summary
from .exponents import EXPONENT_MULTIPLIERS
from .models import RankedEntry


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "SIRE Impact Report"
    subtitle: str = "Storm Impact Ranking Engine"
    dataset_name: str = "NOAA Storm Events Database"
    include_charts: bool = True


def _fmt(v: float) -> str:
    return f"{v:,.0f}"


def generate_docx_report(
    summary,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX report (tables + charts) for one pipeline run.

    The dataset file is not touched; the report describes the in-memory
    aggregation only.
    """
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    agg = summary.aggregation
    if not agg.records:
        raise ValueError("No records to report on (input batch is empty).")

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    def _ranking_table(heading: str, entries: Sequence[RankedEntry], value_header: str) -> None:
        doc.add_paragraph(heading)
        t = doc.add_table(rows=1, cols=3)
        h = t.rows[0].cells
        h[0].text = "Rank"
        h[1].text = "Event type"
        h[2].text = value_header
        for i, e in enumerate(entries, start=1):
            r = t.add_row().cells
            r[0].text = str(i)
            r[1].text = e.label
            r[2].text = _fmt(e.value)
        doc.add_paragraph("")

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    totals = agg.totals()
    _kv("Dataset", config.dataset_name)
    if summary.dataset_path:
        _kv("Data file", os.path.basename(summary.dataset_path))
    _kv("Records", f"{agg.records:,}")
    _kv("Distinct event types", f"{len(agg.groups):,}")
    _kv("Labels canonicalized", "yes" if summary.canonicalized else "no (exact-string grouping)")
    _kv("Total fatalities", _fmt(totals.fatalities))
    _kv("Total injuries", _fmt(totals.injuries))
    _kv("Total damage (US$)", _fmt(totals.damage))

    doc.add_heading("Public health impact", level=1)
    _ranking_table(f"Top {summary.k} event types by fatalities", summary.ranking.fatalities, "Fatalities")
    _ranking_table(f"Top {summary.k} event types by injuries", summary.ranking.injuries, "Injuries")

    doc.add_heading("Economic impact", level=1)
    _ranking_table(f"Top {summary.k} event types by property + crop damage",
                   summary.ranking.damage, "Damage (US$)")

    if config.include_charts:
        doc.add_heading("Visualizations", level=1)
        # pictures are embedded on add, so the PNGs can go afterwards
        with tempfile.TemporaryDirectory(prefix="sire_report_") as tmpdir:
            for title, path in plot_summary(summary, tmpdir):
                doc.add_paragraph(title)
                doc.add_picture(path, width=Inches(6.5))
                doc.add_paragraph("")

    doc.add_heading("Damage exponent codes", level=1)
    doc.add_paragraph(
        "Damage magnitudes are multiplied by the value of their exponent code. "
        "Codes outside this table count as 0 and are listed under data quality."
    )
    t = doc.add_table(rows=1, cols=2)
    t.rows[0].cells[0].text = "Code"
    t.rows[0].cells[1].text = "Multiplier"
    for code, mult in EXPONENT_MULTIPLIERS.items():
        row = t.add_row().cells
        row[0].text = code if code else "(blank)"
        row[1].text = f"{mult:,}"

    doc.add_heading("Data quality", level=1)
    anomalies = summary.anomalies.summary()
    if not anomalies:
        doc.add_paragraph("No anomalies were recorded.")
    else:
        t2 = doc.add_table(rows=1, cols=3)
        t2.rows[0].cells[0].text = "Anomaly"
        t2.rows[0].cells[1].text = "Count"
        t2.rows[0].cells[2].text = "Values seen"
        for kind, n in anomalies.items():
            row = t2.add_row().cells
            row[0].text = kind
            row[1].text = f"{n:,}"
            examples: List[str] = summary.anomalies.examples(kind)
            row[2].text = ", ".join(repr(x) for x in examples)

    doc.add_heading("Reproducibility footer", level=1)
    from . import __version__ as sire_version
    from datetime import datetime as _dt
    doc.add_paragraph(f"SIRE version: {sire_version}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
