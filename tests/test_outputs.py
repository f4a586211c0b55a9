"""Tests for the chart, DOCX report and CLI sinks."""

import json
import os
import tempfile

import pytest
from docx import Document

from sire.charts import plot_ranking, plot_summary
from sire.cli import main
from sire.engine import SIRE
from sire.models import RankedEntry
from sire.report import ReportConfig, generate_docx_report


class TestCharts:
    def test_plot_ranking_writes_png(self, tmp_path):
        out = plot_ranking([RankedEntry("TORNADO", 5), RankedEntry("FLOOD", 1)],
                           "Top 2", "Fatalities", str(tmp_path / "sub" / "chart.png"))
        assert os.path.getsize(out) > 0

    def test_plot_summary_three_charts(self, storm_batch, tmp_path):
        charts = plot_summary(SIRE(events=storm_batch, k=3).run(), str(tmp_path))
        names = sorted(os.path.basename(p) for _, p in charts)
        assert names == ["top_damage.png", "top_fatalities.png", "top_injuries.png"]
        assert charts[0][0] == "Top 3 Event Types by Fatalities"

    def test_empty_rankings_are_skipped(self, tmp_path):
        assert plot_summary(SIRE(events=[]).run(), str(tmp_path)) == []


class TestReport:
    def test_report_contents(self, storm_batch, tmp_path):
        summary = SIRE(events=storm_batch, k=3, dataset_path="/data/StormData.csv.bz2").run()
        out = generate_docx_report(summary, str(tmp_path / "report.docx"),
                                   config=ReportConfig(title="Storm report"))
        doc = Document(out)
        text = "\n".join(p.text for p in doc.paragraphs)
        assert "Storm report" in text
        assert "StormData.csv.bz2" in text
        assert "Public health impact" in text
        assert "Top 3 event types by fatalities" in text
        cells = [c.text for t in doc.tables for row in t.rows for c in row.cells]
        assert "EXCESSIVE HEAT" in cells
        assert "uncertain_code" in cells
        assert "(blank)" in cells

    def test_report_without_charts(self, tornado_flood, tmp_path):
        summary = SIRE(events=tornado_flood, k=1).run()
        out = generate_docx_report(summary, str(tmp_path / "r.docx"),
                                   config=ReportConfig(include_charts=False))
        doc = Document(out)
        assert not doc.inline_shapes
        assert any("No anomalies were recorded." == p.text for p in doc.paragraphs)

    def test_chart_files_are_cleaned_up(self, storm_batch, tmp_path, monkeypatch):
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(scratch))
        summary = SIRE(events=storm_batch, k=3).run()
        out = generate_docx_report(summary, str(tmp_path / "r.docx"))
        assert len(Document(out).inline_shapes) == 3
        assert list(scratch.iterdir()) == []

    def test_empty_summary_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            generate_docx_report(SIRE(events=[]).run(), str(tmp_path / "r.docx"))


class TestCLI:
    def test_prints_rankings_and_exports(self, storm_csv, tmp_path, capsys):
        out_json = tmp_path / "out.json"
        out_csv = tmp_path / "out.csv"
        code = main(["--data", storm_csv, "--top", "2",
                     "--export-json", str(out_json), "--export-csv", str(out_csv),
                     "--charts", str(tmp_path / "charts")])
        assert code == 0
        printed = capsys.readouterr().out
        assert "Top 2 event types by fatalities" in printed
        assert "unmapped_code: 1" in printed
        payload = json.loads(out_json.read_text(encoding="utf-8"))
        assert payload["rankings"]["damage"][0]["label"] == "FLOOD"
        assert out_csv.exists()
        assert os.path.exists(tmp_path / "charts" / "top_damage.png")

    def test_canonicalize_option(self, storm_csv, tmp_path):
        out_json = tmp_path / "out.json"
        assert main(["--data", storm_csv, "--canonicalize", "--export-json", str(out_json)]) == 0
        labels = [e["label"] for e in json.loads(out_json.read_text(encoding="utf-8"))["rankings"]["damage"]]
        assert "THUNDERSTORM WIND" in labels

    def test_report_option(self, storm_csv, tmp_path):
        out = tmp_path / "report.docx"
        assert main(["--data", storm_csv, "--report", str(out)]) == 0
        assert out.exists()

    def test_missing_file_is_an_error(self, tmp_path, capsys):
        assert main(["--data", str(tmp_path / "nope.csv")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_column_is_an_error(self, tmp_path, capsys):
        p = tmp_path / "bad.csv"
        p.write_text("EVTYPE\nTORNADO\n", encoding="utf-8")
        assert main(["--data", str(p)]) == 1
        assert "Missing required column" in capsys.readouterr().err
