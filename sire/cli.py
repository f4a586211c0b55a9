"""
SIRE Command Line Interface (CLI)
=================================

Runs the whole batch in one go:

    python -m sire.cli --data "repdata_data_StormData.csv.bz2" --top 10

Optional outputs:
    --charts DIR           bar charts (PNG) of the three rankings
    --report OUT.docx      DOCX report (tables, charts, data-quality summary)
    --export-csv OUT.csv   ranked rows (metric, rank, label, value)
    --export-json OUT.json rankings, totals and anomaly counts

The CLI DOES NOT modify the dataset file.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .engine import SIRE, ImpactSummary
from .loader import load_storm_file
from .rank import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

HEADINGS = {
    "fatalities": "Top {k} event types by fatalities",
    "injuries": "Top {k} event types by injuries",
    "damage": "Top {k} event types by economic damage (US$)",
}

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sire", description="Rank storm event types by health and economic impact.")
    ap.add_argument("--data", required=True, help="Path to the storm-events CSV (.csv/.bz2/.gz/.zip) or .xlsx")
    ap.add_argument("--top", type=int, default=DEFAULT_TOP_K, help="How many event types per ranking (default 10)")
    ap.add_argument("--canonicalize", action="store_true", help="Merge label spellings before aggregating")
    ap.add_argument("--charts", metavar="DIR", help="Write bar charts into DIR")
    ap.add_argument("--report", metavar="OUT.docx", help="Write a DOCX report")
    ap.add_argument("--export-csv", metavar="OUT.csv", help="Write rankings as CSV")
    ap.add_argument("--export-json", metavar="OUT.json", help="Write rankings and anomalies as JSON")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the SIRE CLI.

    1) Load dataset
    2) Run the pipeline
    3) Print rankings and write the requested outputs
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except (OSError, KeyError, ValueError, ImportError) as e:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0

def run(args: argparse.Namespace) -> ImpactSummary:
    print("Loading dataset...")
    events = load_storm_file(args.data)
    engine = SIRE(events=events, k=args.top, canonicalize=args.canonicalize, dataset_path=args.data)
    summary = engine.run()
    print(f"Loaded {len(events)} records, {len(summary.aggregation.groups)} event types.")
    _print_summary(summary)

    if args.charts:
        from .charts import plot_summary
        for title, path in plot_summary(summary, args.charts):
            print(f"Chart written: {path} ({title})")
    if args.report:
        from .report import generate_docx_report
        generate_docx_report(summary, args.report)
        print(f"Report written to {args.report}")
    if args.export_csv:
        engine.export_csv(args.export_csv)
        print(f"Exported CSV to {args.export_csv}")
    if args.export_json:
        engine.export_json(args.export_json)
        print(f"Exported JSON to {args.export_json}")
    return summary

def _print_summary(summary: ImpactSummary) -> None:
    for metric, entries in summary.ranking.items():
        print("")
        print(HEADINGS[metric].format(k=summary.k))
        for i, e in enumerate(entries, start=1):
            print(f"{i:>3}. {e.label:<30} {e.value:>20,.0f}")
    anomalies = summary.anomalies.summary()
    print("")
    if not anomalies:
        print("Anomalies: none")
        return
    print("Anomalies:")
    for kind, n in anomalies.items():
        print(f"  {kind}: {n}")

if __name__ == "__main__":
    sys.exit(main())
