"""Output formatters for packing results."""

from __future__ import annotations

import json

from panelcut.infrastructure.bin_packing import PackingResult, SheetLayout


def _mm(value: float) -> str:
    """Render a dimension without a trailing .0 for whole millimetres."""
    return f"{value:g}"


class LayoutReportFormatter:
    """Formats a packing result as a sheet-by-sheet text report.

    Example:
        ```python
        result = BinPackingService().optimize(parts, stock)
        print(LayoutReportFormatter().format(result))
        ```
    """

    def __init__(self, show_cuts: bool = False) -> None:
        """Initialize formatter.

        Args:
            show_cuts: Whether to list the guillotine cut sequence per sheet.
        """
        self._show_cuts = show_cuts

    def format(self, result: PackingResult) -> str:
        """Format the full report."""
        if not result.success:
            return self._format_failure(result)

        lines = [
            "CUTTING LAYOUT",
            "=" * 70,
        ]
        if result.stock is not None:
            lines.append(f"Stock sheet: {_mm(result.stock.width)} x {_mm(result.stock.height)} mm")
        lines.append(f"Sheets used: {result.total_sheets}")
        lines.append(f"Pieces placed: {result.total_pieces_placed}")
        lines.append(f"Utilization: {result.utilization:.1%}")
        lines.append(f"Saw cuts: {result.cut_count}, total length {_mm(result.cut_length)} mm")

        for sheet in result.sheets:
            lines.append("")
            lines.extend(self._format_sheet(sheet))

        return "\n".join(lines)

    def _format_sheet(self, sheet: SheetLayout) -> list[str]:
        lines = [
            f"SHEET {sheet.index + 1}  ({sheet.utilization:.1%} used)",
            "-" * 70,
            f"{'Part':<20} {'#':<4} {'X':<8} {'Y':<8} {'Width':<8} {'Height':<8} {'Rot'}",
        ]
        for p in sheet.placements:
            lines.append(
                f"{p.part_id:<20} {p.instance:<4} {_mm(p.x):<8} {_mm(p.y):<8} "
                f"{_mm(p.width):<8} {_mm(p.height):<8} {'yes' if p.rotated else ''}"
            )

        if sheet.usable_offcuts:
            lines.append("Usable offcuts:")
            for o in sheet.usable_offcuts:
                lines.append(
                    f"  {_mm(o.width)} x {_mm(o.height)} at ({_mm(o.x)}, {_mm(o.y)})"
                )
        else:
            lines.append("Usable offcuts: none")
        lines.append(f"Scrap area: {sheet.scrap_area / 1_000_000:.3f} m²")
        lines.append(f"Saw cuts: {sheet.cut_count} ({_mm(sheet.cut_length)} mm)")

        if self._show_cuts:
            lines.append("Cuts:")
            for n, cut in enumerate(sheet.cuts, start=1):
                lines.append(
                    f"  {n:>3}. {cut.axis.value:<10} at {_mm(cut.position)} "
                    f"(length {_mm(cut.length)})"
                )
        return lines

    def _format_failure(self, result: PackingResult) -> str:
        error = result.error
        lines = [
            "PACKING FAILED",
            "=" * 70,
            f"{error.error_type}: {error.message}" if error is not None else "unknown error",
        ]
        if result.unplaced:
            lines.append("")
            lines.append("Unplaced parts:")
            for u in result.unplaced:
                lines.append(f"  {u.part_id} x{u.count} ({u.reason})")
        return "\n".join(lines)


class JsonResultExporter:
    """Exports a packing result as JSON."""

    def export(self, result: PackingResult) -> str:
        return json.dumps(result.to_dict(), indent=2)
