"""Excel report builder for extracted jobs.

Writes a workbook with a Summary sheet, an All Jobs sheet and one sheet per
company, using pandas with the openpyxl engine.

Cell text comes straight from scraped pages, so it is cleaned of control
characters openpyxl refuses and always stored as a literal string, never as
a formula.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.workbook.workbook import Workbook

from careerwatch.store.models import JobListing, utc_now

logger = logging.getLogger(__name__)

SUMMARY_SHEET = "Summary"
ALL_JOBS_SHEET = "All Jobs"

# Excel limits sheet names to 31 characters and forbids a few symbols.
SHEET_NAME_MAX_LENGTH = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")

# Company sheets may not take the name of a fixed sheet.
_RESERVED_SHEET_NAMES = frozenset(
    name.lower() for name in (SUMMARY_SHEET, ALL_JOBS_SHEET)
)
RESERVED_NAME_SUFFIX = " (company)"

SUMMARY_COLUMNS = ["Company", "Total Jobs", "Last Updated"]
ALL_JOBS_COLUMNS = ["Company", "Title", "Location", "Summary", "URL", "Fetched At"]
COMPANY_COLUMNS = ["Title", "Location", "Summary", "URL", "Fetched At"]

MISSING = "N/A"
UNKNOWN_COMPANY = "Unknown"


@dataclass
class ExportResult:
    """Result of a report build."""

    success: bool
    message: str
    file_path: Path | None = None
    job_count: int = 0
    built_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "file_path": str(self.file_path) if self.file_path else None,
            "job_count": self.job_count,
            "built_at": self.built_at.isoformat(),
        }


def clean_cell_text(value: str | None) -> str:
    """Drop control characters that cannot be stored in a worksheet cell."""
    return ILLEGAL_CHARACTERS_RE.sub("", value or "")


def sheet_name_for(company: str) -> str:
    """Derive a worksheet name from a company name.

    ``Summary`` and ``All Jobs`` get a suffix so they never replace the
    fixed sheets.
    """
    name = _INVALID_SHEET_CHARS.sub("_", clean_cell_text(company)).strip("'")
    name = name[:SHEET_NAME_MAX_LENGTH].rstrip("'")
    if not name:
        return UNKNOWN_COMPANY
    if name.lower() in _RESERVED_SHEET_NAMES:
        return f"{name}{RESERVED_NAME_SUFFIX}"
    return name


def group_by_company(jobs: list[JobListing]) -> dict[str, list[JobListing]]:
    """Group jobs by their denormalized company name, keeping first-seen order."""
    groups: dict[str, list[JobListing]] = {}
    for job in jobs:
        groups.setdefault(job.company_name or UNKNOWN_COMPANY, []).append(job)
    return groups


def assign_sheets(
    groups: dict[str, list[JobListing]],
) -> dict[str, tuple[str, list[JobListing]]]:
    """Map each worksheet name to the company whose rows it holds.

    Companies whose names reduce to the same sheet name (compared without
    case, as Excel does) share one slot; the later company takes it and the
    earlier one only appears in the Summary and All Jobs sheets.
    """
    sheets: dict[str, tuple[str, str, list[JobListing]]] = {}
    for company, company_jobs in groups.items():
        name = sheet_name_for(company)
        key = name.lower()
        if key in sheets:
            logger.warning(
                f"Companies {sheets[key][1]!r} and {company!r} share sheet "
                f"{name!r}; keeping {company!r}"
            )
        sheets[key] = (name, company, company_jobs)
    return {name: (company, jobs) for name, company, jobs in sheets.values()}


def _text(value: str | None) -> str:
    return clean_cell_text(value) or MISSING


def _timestamp(value: datetime | None) -> str:
    return value.isoformat() if value else MISSING


def _job_row(job: JobListing) -> list[str]:
    return [
        _text(job.title),
        _text(job.location),
        _text(job.summary),
        _text(job.url),
        _timestamp(job.fetched_at),
    ]


def _store_as_literals(book: Workbook) -> None:
    """Keep text that starts with ``=`` from being written as a formula."""
    for worksheet in book.worksheets:
        for row in worksheet.iter_rows():
            for cell in row:
                if cell.data_type == "f":
                    cell.data_type = "s"


class ReportBuilder:
    """Builds the multi-sheet job report.

    Attributes:
        output_path: Workbook location; overwritten on every successful build.
    """

    def __init__(self, output_path: Path | str):
        self.output_path = Path(output_path)

    def build(self, jobs: list[JobListing]) -> ExportResult:
        """Write the workbook for the given jobs.

        An empty job list leaves any existing workbook untouched. Failures
        while writing are reported in the result, never raised.

        Args:
            jobs: Every job in the store.

        Returns:
            ExportResult describing the outcome.
        """
        if not jobs:
            logger.info("No jobs to export; report left unchanged")
            return ExportResult(success=False, message="No jobs to export")

        groups = group_by_company(jobs)

        summary = pd.DataFrame(
            [
                [
                    _text(company),
                    len(company_jobs),
                    _timestamp(max(job.fetched_at for job in company_jobs)),
                ]
                for company, company_jobs in groups.items()
            ],
            columns=SUMMARY_COLUMNS,
        )
        all_jobs = pd.DataFrame(
            [[_text(job.company_name or UNKNOWN_COMPANY), *_job_row(job)] for job in jobs],
            columns=ALL_JOBS_COLUMNS,
        )

        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with pd.ExcelWriter(self.output_path, engine="openpyxl") as writer:
                summary.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
                all_jobs.to_excel(writer, sheet_name=ALL_JOBS_SHEET, index=False)
                for sheet_name, (_, company_jobs) in assign_sheets(groups).items():
                    frame = pd.DataFrame(
                        [_job_row(job) for job in company_jobs],
                        columns=COMPANY_COLUMNS,
                    )
                    frame.to_excel(writer, sheet_name=sheet_name, index=False)
                _store_as_literals(writer.book)
        except Exception as e:
            logger.error(f"Failed to write report {self.output_path}: {e}")
            return ExportResult(
                success=False,
                message=f"Failed to write report: {e}",
                job_count=len(jobs),
            )

        logger.info(f"Exported {len(jobs)} jobs to {self.output_path}")
        return ExportResult(
            success=True,
            message=f"Exported {len(jobs)} jobs to Excel",
            file_path=self.output_path,
            job_count=len(jobs),
        )
