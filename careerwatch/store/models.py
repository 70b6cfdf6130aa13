"""Data models for tracked sites and their job listings."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from careerwatch.extractor.models import CandidateKind, JobCandidate


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class TrackedSite:
    """A career page being watched.

    Attributes:
        id: Opaque, immutable identifier.
        url: The career page URL.
        company_name: Display label; defaults to the URL.
        created_at: When the site was added.
        last_refreshed: When the last refresh completed, if ever.
        job_count: Number of records produced by the last refresh.
    """

    id: str
    url: str
    company_name: str = ""
    created_at: datetime = field(default_factory=utc_now)
    last_refreshed: datetime | None = None
    job_count: int = 0

    def __post_init__(self) -> None:
        self.url = (self.url or "").strip()
        if not self.url:
            raise ValueError("url is required")
        if not self.company_name or not self.company_name.strip():
            self.company_name = self.url
        if self.job_count < 0:
            raise ValueError("job_count must be >= 0")

    @classmethod
    def create(cls, url: str, company_name: str | None = None) -> TrackedSite:
        """Create a new site with a fresh identifier."""
        return cls(id=uuid.uuid4().hex, url=url, company_name=company_name or "")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "company_name": self.company_name,
            "created_at": _isoformat(self.created_at),
            "last_refreshed": _isoformat(self.last_refreshed),
            "job_count": self.job_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TrackedSite:
        return cls(
            id=data["id"],
            url=data["url"],
            company_name=data.get("company_name") or "",
            created_at=parse_datetime(data.get("created_at")) or utc_now(),
            last_refreshed=parse_datetime(data.get("last_refreshed")),
            job_count=int(data.get("job_count") or 0),
        )


@dataclass
class JobListing:
    """A job record owned by a tracked site.

    ``company_name`` is copied from the site when the record is extracted
    and is not updated if the site is later renamed.

    Attributes:
        title: Posting title.
        location: Posting location.
        summary: Short description.
        url: Link to the posting (the career page if none was found).
        site_id: Owning site.
        company_name: Site name at extraction time.
        fetched_at: Timestamp of the refresh that produced the record.
        kind: Real listing or placeholder.
    """

    title: str
    location: str
    summary: str
    url: str
    site_id: str
    company_name: str
    fetched_at: datetime
    kind: CandidateKind = CandidateKind.LISTING

    @property
    def is_placeholder(self) -> bool:
        return self.kind is not CandidateKind.LISTING

    @classmethod
    def from_candidate(
        cls, candidate: JobCandidate, site: TrackedSite, fetched_at: datetime
    ) -> JobListing:
        """Stamp an extracted candidate with its owning site."""
        return cls(
            title=candidate.title,
            location=candidate.location,
            summary=candidate.summary,
            url=candidate.url,
            site_id=site.id,
            company_name=site.company_name,
            fetched_at=fetched_at,
            kind=candidate.kind,
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "location": self.location,
            "summary": self.summary,
            "url": self.url,
            "site_id": self.site_id,
            "company_name": self.company_name,
            "fetched_at": _isoformat(self.fetched_at),
            "kind": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> JobListing:
        return cls(
            title=data["title"],
            location=data["location"],
            summary=data["summary"],
            url=data["url"],
            site_id=data["site_id"],
            company_name=data["company_name"],
            fetched_at=parse_datetime(data["fetched_at"]) or utc_now(),
            kind=CandidateKind(data.get("kind", CandidateKind.LISTING.value)),
        )
