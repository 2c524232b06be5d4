"""Excel export of a validation result (openpyxl)."""

from pathlib import Path
from typing import Optional, Sequence

from models.issue import ValidationResult
from validation.context import CheckDefinition
from validation.registry import CHECK_REGISTRY

from export.helpers import COLORS, affected_entities, severity_color, today_str, type_label


class IssueExcelExporter:
    """Writes a ValidationResult to a workbook with an Issues and a Checks sheet."""

    ROW_HEADER_H = 22

    def __init__(self, result: ValidationResult,
                 checks: Optional[Sequence[CheckDefinition]] = None,
                 title: str = "Feasibility Check"):
        self.result = result
        self.checks = list(checks) if checks is not None else list(CHECK_REGISTRY)
        self.title = title

    # ─── Public API ───────────────────────────────────────────────────────────

    def export(self, output_path: Path) -> Path:
        """Creates the Excel file and returns its path."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # drop the empty default sheet

        self._sheet_issues(wb)
        self._sheet_checks(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return output_path

    # ─── Style helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _wrap_align(self):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=True, vertical="top")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

    # ─── Sheet: Issues ────────────────────────────────────────────────────────

    def _sheet_issues(self, wb) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Issues", index=0)

        row = 1
        ws.cell(row=row, column=1, value=self.title).font = Font(bold=True, size=14)
        row += 1
        ws.cell(row=row, column=1, value=f"Created: {today_str()}")
        ws.cell(row=row, column=3,
                value=f"Errors: {self.result.error_count} | "
                      f"Warnings: {self.result.warning_count} | "
                      f"Info: {self.result.info_count}")
        row += 2

        headers = ["Type", "Severity", "Check", "Title", "Description",
                   "Details", "Recommendation", "Affected"]
        self._write_header(ws, row, headers)
        ws.freeze_panes = ws.cell(row=row + 1, column=1)
        row += 1

        border = self._thin_border()
        align = self._wrap_align()
        for issue in self.result.sorted_issues():
            fill = self._fill(severity_color(issue.severity))
            values = [
                type_label(issue.type),
                issue.severity.value,
                issue.check_id,
                issue.title,
                issue.description,
                issue.details,
                issue.recommendation,
                affected_entities(issue),
            ]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
                cell.alignment = align
                if col <= 2:
                    cell.fill = fill
            row += 1

        self._set_widths(ws, [10, 10, 32, 32, 40, 70, 50, 30])

    # ─── Sheet: Checks ────────────────────────────────────────────────────────

    def _sheet_checks(self, wb) -> None:
        ws = wb.create_sheet(title="Checks")
        self._write_header(ws, 1, ["Check", "Name", "Category", "Status", "Issues"])

        run = set(self.result.checks_run)
        skipped = set(self.result.checks_skipped)
        border = self._thin_border()
        row = 2
        for check in self.checks:
            if check.id in run:
                count = len(self.result.issues_for_check(check.id))
                status = "ran"
                fill = self._fill(COLORS["ok"] if count == 0 else COLORS["medium"])
            elif check.id in skipped:
                count = None
                status = "skipped (missing data)"
                fill = self._fill(COLORS["skipped"])
            else:
                count = None
                status = "disabled"
                fill = self._fill(COLORS["skipped"])

            values = [check.id, check.name, check.category, status, count]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
            ws.cell(row=row, column=4).fill = fill
            row += 1

        self._set_widths(ws, [34, 36, 10, 24, 8])
