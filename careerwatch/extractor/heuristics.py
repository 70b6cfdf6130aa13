"""Heuristic job mining over a rendered career page.

Career pages follow no common markup, so extraction is an ordered list of
strategies over the parsed DOM. The first strategy that yields at least one
candidate wins; when none does, the outcome is marked exhausted and the
caller decides how to report it.

1. selector cascade: the first selector in JOB_CONTAINER_SELECTORS with any
   match supplies up to 20 elements, each mined for title, location, summary
   and link.
2. anchor scan: the first 15 links on the page, kept when their text looks
   like a posting title and their target looks like a job path.

Everything here works on BeautifulSoup trees and has no browser dependency.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from careerwatch.extractor.models import NOT_SPECIFIED, JobCandidate

logger = logging.getLogger(__name__)

# Tried in order; only the first selector with a match is used.
JOB_CONTAINER_SELECTORS: tuple[str, ...] = (
    'a[href*="job"]',
    'a[href*="career"]',
    'a[href*="position"]',
    '[class*="job"]',
    '[class*="position"]',
    '[class*="opening"]',
    '[id*="job"]',
    "[data-job-id]",
    "article",
    ".job-listing",
    ".job-item",
    ".position",
    ".opening",
)

TITLE_SELECTOR = 'h1, h2, h3, h4, .title, [class*="title"]'
LOCATION_SELECTOR = (
    '[class*="location"], [id*="location"], [class*="city"], [id*="city"]'
)
SUMMARY_SELECTOR = '[class*="description"], [class*="summary"], p'

JOB_PATH_TOKENS: tuple[str, ...] = ("job", "career", "position")

MAX_CANDIDATES = 20
MAX_SCANNED_ANCHORS = 15

# Raw element text must fall in [min, max) to count as a single listing.
ELEMENT_TEXT_MIN = 10
ELEMENT_TEXT_MAX = 200
ANCHOR_TEXT_MIN = 10
ANCHOR_TEXT_MAX = 100
TITLE_MIN_EXCLUSIVE = 3

EMPTY_TITLE_PREFIX = 50
SUMMARY_FALLBACK_PREFIX = 150


@dataclass(frozen=True)
class ExtractionStrategy:
    """A named way of turning a parsed page into candidates.

    ``run`` receives the soup, the URL relative links resolve against, and
    the source URL used when a candidate has no link of its own.
    """

    name: str
    run: Callable[[BeautifulSoup, str, str], list[JobCandidate]]


@dataclass
class ExtractionOutcome:
    """Result of running the strategy list over one page."""

    candidates: list[JobCandidate] = field(default_factory=list)
    strategy: str | None = None

    @property
    def exhausted(self) -> bool:
        """True when every strategy came back empty."""
        return self.strategy is None


def _text(element: Tag) -> str:
    return element.get_text().strip()


def _resolve(base_url: str, href: str | None) -> str | None:
    if not href or not href.strip():
        return None
    return urljoin(base_url, href.strip())


def find_job_elements(soup: BeautifulSoup) -> tuple[str | None, list[Tag]]:
    """Return the first container selector with matches and its elements."""
    for selector in JOB_CONTAINER_SELECTORS:
        elements = soup.select(selector)
        if elements:
            logger.debug(f"Selector {selector!r} matched {len(elements)} elements")
            return selector, elements
    return None, []


def candidate_from_element(
    element: Tag, base_url: str, fallback_url: str
) -> JobCandidate | None:
    """Mine one container element, or return None if it is not a posting."""
    text = _text(element)
    if not (ELEMENT_TEXT_MIN <= len(text) < ELEMENT_TEXT_MAX):
        return None

    title_element = element.select_one(TITLE_SELECTOR)
    if title_element is None:
        title = text
    else:
        title = _text(title_element) or text[:EMPTY_TITLE_PREFIX]
    if len(title) <= TITLE_MIN_EXCLUSIVE:
        return None

    location_element = element.select_one(LOCATION_SELECTOR)
    location = (_text(location_element) if location_element else "") or NOT_SPECIFIED

    summary_element = element.select_one(SUMMARY_SELECTOR)
    summary = (_text(summary_element) if summary_element else "") or text[
        :SUMMARY_FALLBACK_PREFIX
    ]

    href = element.get("href") if element.name == "a" else None
    if not href:
        link = element.select_one("a[href]")
        href = link.get("href") if link is not None else None
    url = _resolve(base_url, href) or fallback_url

    return JobCandidate(title=title, location=location, summary=summary, url=url)


def scan_selector_matches(
    soup: BeautifulSoup, base_url: str, fallback_url: str
) -> list[JobCandidate]:
    """Selector cascade strategy."""
    _, elements = find_job_elements(soup)

    candidates: list[JobCandidate] = []
    for element in elements[:MAX_CANDIDATES]:
        try:
            candidate = candidate_from_element(element, base_url, fallback_url)
        except Exception as e:
            logger.debug(f"Skipping unreadable element <{element.name}>: {e}")
            continue
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def scan_job_anchors(
    soup: BeautifulSoup, base_url: str, fallback_url: str
) -> list[JobCandidate]:
    """Anchor scan strategy."""
    candidates: list[JobCandidate] = []
    for link in soup.select("a[href]")[:MAX_SCANNED_ANCHORS]:
        link_text = _text(link)
        if not (ANCHOR_TEXT_MIN <= len(link_text) < ANCHOR_TEXT_MAX):
            continue
        href = _resolve(base_url, link.get("href"))
        if not href or not any(token in href for token in JOB_PATH_TOKENS):
            continue
        candidates.append(
            JobCandidate(
                title=link_text,
                location=NOT_SPECIFIED,
                summary=link_text,
                url=href,
            )
        )
    return candidates


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy("selector_cascade", scan_selector_matches),
    ExtractionStrategy("anchor_scan", scan_job_anchors),
)


def extract_candidates(
    html: str | BeautifulSoup,
    source_url: str,
    base_url: str | None = None,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> ExtractionOutcome:
    """Run the strategies in order and return the first non-empty result.

    Args:
        html: Rendered page markup, or an already parsed soup.
        source_url: The tracked page URL; used for candidates without a link.
        base_url: URL relative links resolve against. Defaults to source_url;
            pass the post-redirect URL when it differs.
        strategies: Strategies to try, in priority order.

    Returns:
        The winning strategy's candidates (at most 20), or an exhausted
        outcome when no strategy produced anything.
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    base_url = base_url or source_url

    for strategy in strategies:
        candidates = strategy.run(soup, base_url, source_url)[:MAX_CANDIDATES]
        if candidates:
            logger.info(
                f"{strategy.name} found {len(candidates)} candidates on {source_url}"
            )
            return ExtractionOutcome(candidates=candidates, strategy=strategy.name)
        logger.debug(f"{strategy.name} found nothing on {source_url}")

    return ExtractionOutcome()
