"""Site registry: add, list and remove tracked career pages."""

import logging

from careerwatch.store.models import JobListing, TrackedSite
from careerwatch.store.repository import WatchRepository

logger = logging.getLogger(__name__)


class SiteRegistry:
    """Business logic for managing tracked sites.

    Removing a site also removes every job it owns.
    """

    def __init__(self, repository: WatchRepository):
        """Initialize the registry.

        Args:
            repository: The WatchRepository instance for database access.
        """
        self.repository = repository

    async def add_site(self, url: str, company_name: str | None = None) -> TrackedSite:
        """Start tracking a career page.

        Args:
            url: The career page URL.
            company_name: Display name; the URL is used when omitted.

        Returns:
            The newly created site.

        Raises:
            ValueError: If the URL is empty.
        """
        site = TrackedSite.create(url, company_name)
        await self.repository.add_site(site)
        logger.info(f"Tracking {site.company_name} ({site.url}) as {site.id}")
        return site

    async def list_sites(self) -> list[TrackedSite]:
        return await self.repository.list_sites()

    async def remove_site(self, site_id: str) -> bool:
        """Stop tracking a site and purge its jobs.

        Returns:
            True if the site existed.
        """
        removed = await self.repository.delete_site(site_id)
        if removed:
            logger.info(f"Removed site {site_id}")
        return removed

    async def list_jobs(self, site_id: str | None = None) -> list[JobListing]:
        """List jobs for one site, or for all sites when no id is given."""
        if site_id is None:
            return await self.repository.list_jobs()
        return await self.repository.list_jobs_for_site(site_id)
