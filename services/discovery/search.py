"""Web search scraping for venue discovery.

Turns "<category> in <city>" searches into DiscoveredVenue candidates:
reads the top result elements, drops ticketing/social/encyclopedia hits,
guesses a venue type from the text, and pulls a street address if the
snippet has one.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Protocol, runtime_checkable
from urllib.parse import quote_plus

from loguru import logger
from playwright.async_api import Error as PlaywrightError

from db.models.discovered_venue import DiscoveredVenue, DiscoveryStatus
from lib.browser import BrowserEngine


SEARCH_URL = "https://www.google.com/search?q="
RESULT_SELECTOR = '.g, [data-content-feature="1"]'

MAX_NAME_LENGTH = 100
MAX_ADDRESS_LENGTH = 200
MIN_NAME_LENGTH = 3

ADDRESS_PATTERN = re.compile(
    r"\d+[^,]*(?:street|st|avenue|ave|road|rd|drive|dr|blvd|boulevard)[^,]*",
    re.IGNORECASE,
)

EXCLUDED_SITES = ["wikipedia", "ticketmaster", "eventbrite", "facebook.com", "instagram.com"]
EXCLUDED_NAME_WORDS = ["event", "ticket"]

# JS: name/link/snippet for each result element
_RESULTS_JS = """
([selector, max]) => Array.from(document.querySelectorAll(selector)).slice(0, max).map(el => {
    const title = el.querySelector('h3');
    const anchor = el.querySelector('a');
    return {
        name: ((title && title.textContent) || (anchor && anchor.textContent) || '').trim(),
        link: anchor ? anchor.href : '',
        snippet: (el.textContent || '').trim()
    };
})
"""


@dataclass
class SearchHit:
    """One raw search result."""
    name: str
    link: str
    snippet: str = ""


def build_query(term: str, city: str) -> str:
    return f"{term} in {city}"


def build_search_url(query: str) -> str:
    return SEARCH_URL + quote_plus(query)


def classify_venue_type(text: str) -> str:
    """Guess a venue type from result text. First matching rule wins."""
    content = (text or "").lower()

    if "theater" in content or "theatre" in content:
        return "Theater"
    if "club" in content and "jazz" in content:
        return "Jazz Club"
    if "club" in content and "blues" in content:
        return "Blues Club"
    if "bar" in content or "pub" in content:
        return "Bar/Restaurant"
    if "coffee" in content or "cafe" in content:
        return "Coffee Shop"
    if "brewery" in content:
        return "Brewery"
    if "outdoor" in content or "amphitheater" in content:
        return "Outdoor Venue"
    if "hall" in content or "center" in content:
        return "Concert Hall"
    return "Music Venue"


def extract_address(snippet: str) -> str:
    match = ADDRESS_PATTERN.search(snippet or "")
    if not match:
        return ""
    return match.group(0).strip()[:MAX_ADDRESS_LENGTH]


def is_excluded(hit: SearchHit) -> bool:
    """True for results that are not venue pages (ticketing, social, wikis, junk names)."""
    name = (hit.name or "").strip()
    if not name or not hit.link or len(name) < MIN_NAME_LENGTH:
        return True

    content = f"{name} {hit.snippet}".lower()
    if any(site in content for site in EXCLUDED_SITES):
        return True
    if any(word in name.lower() for word in EXCLUDED_NAME_WORDS):
        return True
    return False


def hit_to_candidate(hit: SearchHit, term: str, city: str, today: Optional[date] = None) -> Optional[DiscoveredVenue]:
    """Convert a search hit into a pending candidate, or None if it is filtered out."""
    if is_excluded(hit):
        return None

    name = hit.name.strip()
    return DiscoveredVenue(
        name=name[:MAX_NAME_LENGTH],
        location=city,
        address=extract_address(hit.snippet),
        venue_type=classify_venue_type(f"{name} {hit.snippet}"),
        website=hit.link,
        discovered_from=term,
        discovery_date=(today or date.today()).isoformat(),
        status=DiscoveryStatus.PENDING,
    )


@runtime_checkable
class ISearchScraper(Protocol):
    """Protocol for search result scraping."""

    async def search(self, query: str, max_results: int = 10) -> List[SearchHit]:
        """Return up to max_results raw hits for a query."""
        ...


class SearchScraper(ISearchScraper):
    """Reads search result pages through a running BrowserEngine."""

    def __init__(self, engine: BrowserEngine, timeout_ms: int = 15000, wait_ms: int = 5000):
        self._engine = engine
        self.timeout_ms = timeout_ms
        self.wait_ms = wait_ms

    async def search(self, query: str, max_results: int = 10) -> List[SearchHit]:
        ctx = await self._engine.new_context()
        try:
            page = await ctx.new_page()
            await page.goto(build_search_url(query), timeout=self.timeout_ms, wait_until="domcontentloaded")
            try:
                await page.wait_for_selector(RESULT_SELECTOR, timeout=self.wait_ms)
            except PlaywrightError:
                logger.debug(f"No result elements for '{query}'")
                return []
            rows = await page.evaluate(_RESULTS_JS, [RESULT_SELECTOR, max_results])
        finally:
            await ctx.close()

        return [
            SearchHit(name=row.get("name", ""), link=row.get("link", ""), snippet=row.get("snippet", ""))
            for row in rows or []
        ]


class MockSearchScraper(ISearchScraper):
    """Mock scraper for unit testing."""

    def __init__(self, results: Optional[Dict[str, List[SearchHit]]] = None, failing: Optional[set] = None):
        """Initialize with query -> hits, and queries that should raise."""
        self._results = results or {}
        self._failing = failing or set()
        self.queries: List[str] = []

    async def search(self, query: str, max_results: int = 10) -> List[SearchHit]:
        self.queries.append(query)
        if query in self._failing:
            raise PlaywrightError(f"Timeout {query}")
        return list(self._results.get(query, []))[:max_results]
