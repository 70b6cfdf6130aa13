"""Persistence for tracked sites and their job listings.

Public API:
- WatchRepository: aiosqlite repository for sites and jobs
- TrackedSite: A watched career page
- JobListing: A job record owned by a site
- PersistenceError: Raised on database failures
"""

from careerwatch.store.models import JobListing, TrackedSite
from careerwatch.store.repository import PersistenceError, WatchRepository

__all__ = [
    "WatchRepository",
    "TrackedSite",
    "JobListing",
    "PersistenceError",
]
