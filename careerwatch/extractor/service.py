"""Job extraction service: render a career page and mine it for postings."""

from __future__ import annotations

import logging

from careerwatch.extractor.heuristics import extract_candidates
from careerwatch.extractor.models import JobCandidate
from careerwatch.renderer.service import PageRenderer

logger = logging.getLogger(__name__)


class JobExtractor:
    """Service for extracting job postings from career page URLs.

    ``extract`` never raises. A page that cannot be rendered or mined gives a
    single ``scraping_error`` placeholder, and a page where no strategy finds
    anything gives a single ``no_jobs_found`` placeholder, so callers always
    get at least one record back.

    Attributes:
        renderer: The page renderer used to load each URL.
    """

    def __init__(self, renderer: PageRenderer | None = None) -> None:
        """Initialize the JobExtractor.

        Args:
            renderer: Page renderer. If not provided, a default one is created.
        """
        self.renderer = renderer or PageRenderer()

    async def extract(self, url: str) -> list[JobCandidate]:
        """Extract job candidates from a career page.

        Args:
            url: The career page URL.

        Returns:
            Between 1 and 20 candidates; placeholders on failure.
        """
        try:
            logger.info(f"Extracting jobs from: {url}")
            page = await self.renderer.render(url)
            outcome = extract_candidates(page.html, source_url=url, base_url=page.final_url)
        except Exception as e:
            logger.error(f"Error scraping {url}: {e}")
            return [JobCandidate.scraping_error(url, str(e))]

        if outcome.exhausted:
            logger.warning(f"No jobs found on {url}; manual review needed")
            return [JobCandidate.no_jobs_found(url)]

        return outcome.candidates
