"""Tabular export of the job store.

Public API:
    - ReportBuilder: Writes the Summary / All Jobs / per-company workbook
    - ExportResult: Structured outcome of a build
    - sheet_name_for: Company name to worksheet name
"""

from careerwatch.report.builder import ExportResult, ReportBuilder, sheet_name_for

__all__ = [
    "ReportBuilder",
    "ExportResult",
    "sheet_name_for",
]
