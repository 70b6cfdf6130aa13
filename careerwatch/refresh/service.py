"""Refresh orchestration for tracked sites.

This module provides the RefreshService class which handles:
- Re-extracting one site and replacing its jobs
- Refreshing every site in turn, isolating per-site failures
- Rebuilding the report after each refresh run
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime

from careerwatch.extractor.service import JobExtractor
from careerwatch.refresh.models import (
    BulkRefreshResult,
    RefreshProgressEvent,
    SiteRefreshResult,
)
from careerwatch.report.builder import ExportResult, ReportBuilder
from careerwatch.store.models import JobListing, TrackedSite, utc_now
from careerwatch.store.repository import WatchRepository

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a site id does not match any tracked site."""

    def __init__(self, site_id: str):
        super().__init__(f"Site not found: {site_id}")
        self.site_id = site_id


class RefreshService:
    """Coordinates extraction, the job store and the report for refreshes.

    Sites are refreshed one at a time, so at most one browser is alive
    at once.
    """

    def __init__(
        self,
        repository: WatchRepository,
        report_builder: ReportBuilder,
        extractor: JobExtractor | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the service.

        Args:
            repository: Store for sites and jobs.
            report_builder: Builder run after every refresh.
            extractor: Job extractor. A default one is created if omitted.
            clock: Source of refresh timestamps.
        """
        self.repository = repository
        self.report_builder = report_builder
        self.extractor = extractor or JobExtractor()
        self.clock = clock

    async def refresh_site(self, site_id: str) -> SiteRefreshResult:
        """Re-extract one site, replace its jobs and rebuild the report.

        Args:
            site_id: The site to refresh.

        Returns:
            The new jobs and the report outcome.

        Raises:
            NotFoundError: If no site has that id.
            PersistenceError: If the store cannot be read or written.
        """
        site = await self.repository.get_site(site_id)
        if site is None:
            raise NotFoundError(site_id)

        jobs = await self._refresh(site)
        export = await self.export()

        return SiteRefreshResult(
            site_id=site.id,
            site=site.company_name,
            job_count=len(jobs),
            jobs=jobs,
            export=export,
        )

    async def refresh_all(
        self,
        progress_callback: Callable[[RefreshProgressEvent], None] | None = None,
    ) -> BulkRefreshResult:
        """Refresh every tracked site sequentially.

        A failure on one site is recorded in its result and the run moves
        on to the next site. The report is rebuilt once at the end.

        Args:
            progress_callback: Called after each site finishes.

        Returns:
            Per-site results in site order plus the report outcome.
        """
        start_time = time.monotonic()
        sites = await self.repository.list_sites()
        logger.info(f"Refreshing {len(sites)} sites")

        results: list[SiteRefreshResult] = []
        for index, site in enumerate(sites, start=1):
            try:
                jobs = await self._refresh(site)
                result = SiteRefreshResult(
                    site_id=site.id,
                    site=site.company_name,
                    job_count=len(jobs),
                    jobs=jobs,
                )
            except Exception as e:
                logger.error(f"Refresh failed for {site.company_name}: {e}")
                result = SiteRefreshResult(
                    site_id=site.id, site=site.company_name, error=str(e)
                )
            results.append(result)

            if progress_callback is not None:
                progress_callback(
                    RefreshProgressEvent(
                        index=index,
                        total=len(sites),
                        site=site.company_name,
                        job_count=result.job_count,
                        error=result.error,
                    )
                )

        export = await self.export()
        return BulkRefreshResult(
            results=results,
            export=export,
            duration_seconds=time.monotonic() - start_time,
        )

    async def export(self) -> ExportResult:
        """Rebuild the report from every job in the store."""
        jobs = await self.repository.list_jobs()
        return self.report_builder.build(jobs)

    async def _refresh(self, site: TrackedSite) -> list[JobListing]:
        candidates = await self.extractor.extract(site.url)

        fetched_at = self.clock()
        jobs = [
            JobListing.from_candidate(candidate, site, fetched_at)
            for candidate in candidates
        ]
        await self.repository.replace_jobs_for_site(site.id, jobs)

        site.last_refreshed = fetched_at
        site.job_count = len(jobs)
        await self.repository.update_site(site)

        logger.info(f"Refreshed {site.company_name}: {len(jobs)} jobs")
        return jobs
