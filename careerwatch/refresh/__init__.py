"""Refresh orchestration.

Public API:
- RefreshService: Refreshes one site or all sites and rebuilds the report
- SiteRefreshResult: Outcome for a single site
- BulkRefreshResult: Outcome for a refresh of every site
- NotFoundError: Raised for unknown site ids
"""

from careerwatch.refresh.models import (
    BulkRefreshResult,
    RefreshProgressEvent,
    SiteRefreshResult,
)
from careerwatch.refresh.service import NotFoundError, RefreshService

__all__ = [
    "RefreshService",
    "SiteRefreshResult",
    "BulkRefreshResult",
    "RefreshProgressEvent",
    "NotFoundError",
]
