"""Tracked site registry.

Public API:
- SiteRegistry: Add, list and remove tracked sites
"""

from careerwatch.registry.service import SiteRegistry

__all__ = ["SiteRegistry"]
