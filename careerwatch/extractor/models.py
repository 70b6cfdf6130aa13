"""Data models for the Extraction Engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

TITLE_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 100
SUMMARY_MAX_LENGTH = 300

NOT_SPECIFIED = "Not specified"
NOT_AVAILABLE = "N/A"


class CandidateKind(str, Enum):
    """Whether a record is a real posting or a synthetic placeholder."""

    LISTING = "listing"
    NO_JOBS_FOUND = "no_jobs_found"
    SCRAPING_ERROR = "scraping_error"


class JobCandidate(BaseModel):
    """A job record mined from a career page.

    Text fields are truncated to their maximum length on construction, so
    every instance is within bounds regardless of what the page contained.

    Attributes:
        title: Posting title (at most 100 characters).
        location: Posting location (at most 100 characters).
        summary: Short description (at most 300 characters).
        url: Link to the posting, or the career page itself.
        kind: Real listing or placeholder.
    """

    title: str = Field(..., description="Job title")
    location: str = Field(default=NOT_SPECIFIED, description="Job location")
    summary: str = Field(default="", description="Short job summary")
    url: str = Field(..., description="Link to the posting")
    kind: CandidateKind = Field(
        default=CandidateKind.LISTING,
        description="Listing, or a placeholder signalling extraction trouble",
    )

    @field_validator("title", mode="before")
    @classmethod
    def truncate_title(cls, v: str) -> str:
        return str(v)[:TITLE_MAX_LENGTH]

    @field_validator("location", mode="before")
    @classmethod
    def truncate_location(cls, v: str) -> str:
        return str(v)[:LOCATION_MAX_LENGTH]

    @field_validator("summary", mode="before")
    @classmethod
    def truncate_summary(cls, v: str) -> str:
        return str(v)[:SUMMARY_MAX_LENGTH]

    @property
    def is_placeholder(self) -> bool:
        return self.kind is not CandidateKind.LISTING

    @classmethod
    def no_jobs_found(cls, source_url: str) -> JobCandidate:
        """Placeholder for a page where no strategy found any posting."""
        return cls(
            title="No jobs found - Manual review needed",
            location=NOT_AVAILABLE,
            summary=(
                f"Could not automatically extract jobs from {source_url}. "
                "Please review the page manually."
            ),
            url=source_url,
            kind=CandidateKind.NO_JOBS_FOUND,
        )

    @classmethod
    def scraping_error(cls, source_url: str, message: str) -> JobCandidate:
        """Placeholder for a page that could not be rendered or mined."""
        return cls(
            title="Scraping Error",
            location=NOT_AVAILABLE,
            summary=f"Error: {message}",
            url=source_url,
            kind=CandidateKind.SCRAPING_ERROR,
        )

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
