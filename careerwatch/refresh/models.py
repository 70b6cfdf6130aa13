"""Refresh result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from careerwatch.report.builder import ExportResult
from careerwatch.store.models import JobListing


@dataclass
class SiteRefreshResult:
    """Outcome of refreshing one site.

    A failed refresh carries ``error`` and no jobs. A refresh whose
    extraction hit trouble still succeeds; its jobs are placeholders.
    """

    site_id: str
    site: str
    job_count: int = 0
    jobs: list[JobListing] = field(default_factory=list)
    error: str | None = None
    export: ExportResult | None = None

    def __post_init__(self) -> None:
        if self.job_count < 0:
            raise ValueError("job_count must be >= 0")

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"site_id": self.site_id, "site": self.site}
        if self.error is not None:
            payload["error"] = self.error
            return payload
        payload["job_count"] = self.job_count
        payload["jobs"] = [job.to_dict() for job in self.jobs]
        if self.export is not None:
            payload["export"] = self.export.to_dict()
        return payload


@dataclass
class BulkRefreshResult:
    """Summary of refreshing every tracked site."""

    results: list[SiteRefreshResult]
    export: ExportResult | None = None
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be >= 0")

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.success)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "export": self.export.to_dict() if self.export else None,
            "duration_seconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class RefreshProgressEvent:
    index: int
    total: int
    site: str
    job_count: int
    error: str | None
