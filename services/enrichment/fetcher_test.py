"""Tests for fetch clients and link filtering."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import Error as PlaywrightError

from services.enrichment.fetcher import (
    CONTACT_LINK_PATTERN,
    FetchError,
    IFetchClient,
    IPageSession,
    MockFetchClient,
    PlaywrightFetchClient,
    PlaywrightPageSession,
    filter_links,
    open_session,
    _block_heavy_resources,
)


class TestFilterLinks:
    """Tests for filter_links()."""

    def test_matches_text_or_href(self):
        anchors = [
            {"href": "https://v.test/menu", "text": "Menu"},
            {"href": "https://v.test/page-2", "text": "Contact Us"},
            {"href": "https://v.test/booking", "text": "Shows"},
        ]
        links = filter_links(anchors, base_url="https://v.test/")
        assert links == ["https://v.test/page-2", "https://v.test/booking"]

    def test_skips_non_http_and_duplicates(self):
        anchors = [
            {"href": "mailto:info@v.test", "text": "Email info"},
            {"href": "/contact", "text": "Contact"},
            {"href": "https://v.test/contact", "text": "contact"},
        ]
        assert filter_links(anchors, base_url="https://v.test/") == ["https://v.test/contact"]

    def test_skips_current_page(self):
        anchors = [{"href": "https://v.test/about#team", "text": "About"}]
        assert filter_links(anchors, base_url="https://v.test/about") == []


class TestMockFetchClient:
    """Tests for MockFetchClient."""

    def test_satisfies_protocols(self):
        client = MockFetchClient()
        assert isinstance(client, IFetchClient)

    @pytest.mark.asyncio
    async def test_session_closed_on_error(self):
        """open_session closes the page even when navigation fails."""
        client = MockFetchClient()

        with pytest.raises(FetchError):
            async with open_session(client) as page:
                assert isinstance(page, IPageSession)
                await page.navigate("https://missing.test")

        assert client.opened_pages == 1
        assert client.closed_pages == 1

    @pytest.mark.asyncio
    async def test_scripted_failures(self):
        client = MockFetchClient(pages={"https://v.test": "ok"}, failures={"https://v.test": 1})

        async with open_session(client) as page:
            with pytest.raises(FetchError):
                await page.navigate("https://v.test")
            assert await page.navigate("https://v.test") == "ok"


class TestPlaywrightFetchClient:
    """Tests for the Playwright-backed client with mocked pages."""

    @pytest.fixture
    def mock_page(self):
        page = MagicMock()
        page.goto = AsyncMock()
        page.content = AsyncMock(return_value="<html><body>Hi</body></html>")
        page.evaluate = AsyncMock(return_value="Hi")
        page.route = AsyncMock()
        page.close = AsyncMock()
        page.url = "https://v.test/"
        return page

    @pytest.fixture
    def mock_engine(self, mock_page):
        ctx = MagicMock()
        ctx.new_page = AsyncMock(return_value=mock_page)
        ctx.close = AsyncMock()
        engine = MagicMock()
        engine.new_context = AsyncMock(return_value=ctx)
        return engine, ctx

    @pytest.mark.asyncio
    async def test_open_page_blocks_heavy_resources(self, mock_engine, mock_page):
        engine, _ = mock_engine
        client = PlaywrightFetchClient(engine)

        await client.open_page()

        mock_page.route.assert_awaited_once_with("**/*", _block_heavy_resources)

    @pytest.mark.asyncio
    async def test_navigate_returns_html_and_text(self, mock_engine, mock_page):
        engine, _ = mock_engine
        session = await PlaywrightFetchClient(engine).open_page()

        content = await session.navigate("https://v.test/", timeout_ms=5000)

        assert content == "<html><body>Hi</body></html> Hi"
        mock_page.goto.assert_awaited_once_with(
            "https://v.test/", timeout=5000, wait_until="domcontentloaded"
        )

    @pytest.mark.asyncio
    async def test_navigate_wraps_playwright_errors(self, mock_engine, mock_page):
        engine, _ = mock_engine
        mock_page.goto = AsyncMock(side_effect=PlaywrightError("Timeout 10000ms exceeded"))
        session = await PlaywrightFetchClient(engine).open_page()

        with pytest.raises(FetchError, match="Timeout"):
            await session.navigate("https://v.test/")

    @pytest.mark.asyncio
    async def test_close_closes_page_and_context(self, mock_engine, mock_page):
        engine, ctx = mock_engine
        session = await PlaywrightFetchClient(engine).open_page()

        await session.close()

        mock_page.close.assert_awaited_once()
        ctx.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_find_links(self, mock_page):
        mock_page.evaluate = AsyncMock(return_value=[
            {"href": "https://v.test/contact", "text": "Contact"},
            {"href": "https://v.test/shop", "text": "Shop"},
        ])
        session = PlaywrightPageSession(MagicMock(), mock_page)

        assert await session.find_links(CONTACT_LINK_PATTERN) == ["https://v.test/contact"]


class TestBlockHeavyResources:
    """Tests for the request router."""

    @pytest.mark.asyncio
    async def test_aborts_images_and_styles(self):
        for resource_type, aborted in [("image", True), ("stylesheet", True), ("document", False), ("script", False)]:
            route = MagicMock()
            route.request.resource_type = resource_type
            route.abort = AsyncMock()
            route.continue_ = AsyncMock()

            await _block_heavy_resources(route)

            assert route.abort.await_count == (1 if aborted else 0)
            assert route.continue_.await_count == (0 if aborted else 1)
