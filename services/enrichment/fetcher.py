"""Page fetching for venue crawls.

The enricher only talks to two small capabilities: a fetch client that
opens page sessions, and a page session that navigates and lists links.
PlaywrightFetchClient is the real thing; MockFetchClient serves canned pages
for tests.
"""

import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, List, Optional, Pattern, Protocol, runtime_checkable
from urllib.parse import urljoin, urlparse

from loguru import logger
from playwright.async_api import BrowserContext, Error as PlaywrightError, Page, Route

from lib.browser import BrowserEngine


PRIMARY_TIMEOUT_MS = 10000
SECONDARY_TIMEOUT_MS = 8000

# Resource types not needed to read text off a page
BLOCKED_RESOURCE_TYPES = {"image", "stylesheet"}

CONTACT_LINK_PATTERN = re.compile(r"contact|booking|about|info", re.IGNORECASE)

# JS: every anchor's resolved href and visible text
_ANCHORS_JS = """
() => Array.from(document.querySelectorAll('a[href]')).map(a => ({
    href: a.href,
    text: (a.textContent || '').trim()
}))
"""


class FetchError(Exception):
    """Raised when a page cannot be navigated to or read."""


@runtime_checkable
class IPageSession(Protocol):
    """Protocol for one open page."""

    async def navigate(self, url: str, timeout_ms: int = PRIMARY_TIMEOUT_MS) -> str:
        """Load url and return its raw HTML plus visible text."""
        ...

    async def find_links(self, pattern: Pattern = CONTACT_LINK_PATTERN) -> List[str]:
        """Absolute URLs of anchors whose text or href matches pattern."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class IFetchClient(Protocol):
    """Protocol for opening page sessions."""

    async def open_page(self) -> IPageSession:
        ...


@asynccontextmanager
async def open_session(client: IFetchClient) -> AsyncIterator[IPageSession]:
    """Open a page session and always close it, whatever happens inside."""
    session = await client.open_page()
    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            logger.debug(f"Page close failed: {e}")


def filter_links(
    anchors: Iterable[dict],
    pattern: Pattern = CONTACT_LINK_PATTERN,
    base_url: str = "",
) -> List[str]:
    """Pick http(s) links whose text or href matches pattern, deduped, in page order."""
    links = []
    for anchor in anchors:
        href = (anchor.get("href") or "").strip()
        text = anchor.get("text") or ""
        if not href:
            continue
        url = urljoin(base_url, href) if base_url else href
        if urlparse(url).scheme not in ("http", "https"):
            continue
        if url.split("#")[0] == base_url.split("#")[0]:
            continue
        if (pattern.search(text) or pattern.search(href)) and url not in links:
            links.append(url)
    return links


async def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class PlaywrightPageSession(IPageSession):
    """A page in its own browser context. Closing the session closes both."""

    def __init__(self, context: BrowserContext, page: Page):
        self._context = context
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    async def navigate(self, url: str, timeout_ms: int = PRIMARY_TIMEOUT_MS) -> str:
        try:
            await self._page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
            html = await self._page.content()
            text = await self._page.evaluate("document.body ? document.body.innerText : ''")
        except PlaywrightError as e:
            raise FetchError(f"{url}: {e}") from e
        return f"{html} {text or ''}"

    async def find_links(self, pattern: Pattern = CONTACT_LINK_PATTERN) -> List[str]:
        try:
            anchors = await self._page.evaluate(_ANCHORS_JS)
        except PlaywrightError as e:
            logger.debug(f"Link lookup failed on {self._page.url}: {e}")
            return []
        return filter_links(anchors or [], pattern, base_url=self._page.url)

    async def close(self) -> None:
        try:
            await self._page.close()
        finally:
            await self._context.close()


class PlaywrightFetchClient(IFetchClient):
    """Opens one isolated context per fetch on a running BrowserEngine."""

    def __init__(self, engine: BrowserEngine):
        self._engine = engine

    async def open_page(self) -> PlaywrightPageSession:
        ctx = await self._engine.new_context()
        try:
            page = await ctx.new_page()
            await page.route("**/*", _block_heavy_resources)
        except Exception:
            await ctx.close()
            raise
        return PlaywrightPageSession(ctx, page)


class MockPageSession(IPageSession):
    """Page session over canned content."""

    def __init__(self, client: "MockFetchClient"):
        self._client = client
        self.url = ""
        self.closed = False

    async def navigate(self, url: str, timeout_ms: int = PRIMARY_TIMEOUT_MS) -> str:
        self._client.navigations.append(url)
        failures = self._client.failures.get(url, 0)
        if failures:
            self._client.failures[url] = failures - 1
            raise FetchError(f"{url}: simulated failure")
        if url not in self._client.pages:
            raise FetchError(f"{url}: net::ERR_NAME_NOT_RESOLVED")
        self.url = url
        return self._client.pages[url]

    async def find_links(self, pattern: Pattern = CONTACT_LINK_PATTERN) -> List[str]:
        anchors = self._client.links.get(self.url, [])
        return filter_links(anchors, pattern, base_url=self.url)

    async def close(self) -> None:
        self.closed = True
        self._client.closed_pages += 1


class MockFetchClient(IFetchClient):
    """Mock fetch client for unit testing.

    Args:
        pages: url -> page content
        links: url -> anchors on that page ({"href": ..., "text": ...})
        failures: url -> number of times navigation should fail before succeeding
    """

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        links: Optional[Dict[str, List[dict]]] = None,
        failures: Optional[Dict[str, int]] = None,
    ):
        self.pages = pages or {}
        self.links = links or {}
        self.failures = dict(failures or {})
        self.navigations: List[str] = []
        self.opened_pages = 0
        self.closed_pages = 0

    async def open_page(self) -> MockPageSession:
        self.opened_pages += 1
        return MockPageSession(self)
