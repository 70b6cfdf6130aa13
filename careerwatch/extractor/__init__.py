"""Job posting extraction from arbitrary career pages.

Public API:
    - JobExtractor: Renders a page and returns candidate job records
    - JobCandidate: Pydantic model for an extracted (or placeholder) record
    - CandidateKind: Listing vs. placeholder marker
    - extract_candidates: The browser-independent heuristic cascade
"""

from careerwatch.extractor.heuristics import ExtractionOutcome, extract_candidates
from careerwatch.extractor.models import CandidateKind, JobCandidate
from careerwatch.extractor.service import JobExtractor

__all__ = [
    "JobExtractor",
    "JobCandidate",
    "CandidateKind",
    "ExtractionOutcome",
    "extract_candidates",
]
