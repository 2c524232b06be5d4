"""Export module: Excel (openpyxl) report of validation results."""

from export.excel_export import IssueExcelExporter

__all__ = ["IssueExcelExporter"]
