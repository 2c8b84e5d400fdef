"""Tests for the layout report and JSON exporter."""

from __future__ import annotations

import json

from panelcut.domain.exceptions import PartTooLargeError
from panelcut.domain.value_objects import Part, SplitAxis, StockSheet
from panelcut.infrastructure.bin_packing import (
    GuillotineBinPacker,
    PackingConfig,
    PackingResult,
)
from panelcut.infrastructure.formatters import JsonResultExporter, LayoutReportFormatter


def _six_panel_result(six_panels: list[Part], stock: StockSheet) -> PackingResult:
    return GuillotineBinPacker(PackingConfig(split_axis=SplitAxis.LONGER)).pack(six_panels, stock)


class TestLayoutReportFormatter:
    """Tests for LayoutReportFormatter."""

    def test_summary_lines(self, six_panels: list[Part], standard_stock: StockSheet) -> None:
        report = LayoutReportFormatter().format(_six_panel_result(six_panels, standard_stock))

        assert report.startswith("CUTTING LAYOUT")
        assert "Stock sheet: 2700 x 1800 mm" in report
        assert "Sheets used: 1" in report
        assert "Pieces placed: 6" in report
        assert "Utilization: 66.7%" in report
        result = _six_panel_result(six_panels, standard_stock)
        assert f"Saw cuts: {result.cut_count}, total length" in report
        assert f"Saw cuts: {result.sheets[0].cut_count} (" in report
        assert "SHEET 1" in report
        assert "892 x 600 at (1808, 0)" in report

    def test_cut_listing_is_optional(
        self, six_panels: list[Part], standard_stock: StockSheet
    ) -> None:
        result = _six_panel_result(six_panels, standard_stock)

        assert "Cuts:" not in LayoutReportFormatter().format(result)
        report = LayoutReportFormatter(show_cuts=True).format(result)
        assert "Cuts:" in report
        assert "horizontal" in report

    def test_failure_report(self) -> None:
        parts = [Part(id="big", width=3000, height=100)]
        result = PackingResult.failed(PartTooLargeError(["big"]), parts)

        report = LayoutReportFormatter().format(result)

        assert report.startswith("PACKING FAILED")
        assert "part_too_large" in report
        assert "big x1" in report


class TestJsonResultExporter:
    def test_round_trips_through_json(
        self, six_panels: list[Part], standard_stock: StockSheet
    ) -> None:
        result = _six_panel_result(six_panels, standard_stock)
        data = json.loads(JsonResultExporter().export(result))

        assert len(data["sheets"]) == 1
        assert len(data["sheets"][0]["placements"]) == 6
        assert data["unplaced"] == []
