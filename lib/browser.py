"""Browser engine for Playwright crawling.

Owns one Playwright driver and one headless Chromium instance per run.
Callers open an isolated context per fetch and must close it themselves.
"""

from typing import Optional

from loguru import logger
from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright
from playwright_stealth import Stealth


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_VIEWPORT = {"width": 1280, "height": 720}

LAUNCH_ARGS = [
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-extensions",
    "--disable-sync",
    "--disable-translate",
    "--ignore-certificate-errors",
    "--mute-audio",
    "--no-first-run",
]


class BrowserLaunchError(Exception):
    """Raised when the browser engine cannot be started."""


class BrowserEngine:
    """Headless Chromium shared by every fetch in a run.

    Usage:
        async with BrowserEngine() as engine:
            ctx = await engine.new_context()
            ...
    """

    def __init__(
        self,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        viewport: Optional[dict] = None,
        stealth: bool = True,
    ):
        self.headless = headless
        self.user_agent = user_agent
        self.viewport = viewport or DEFAULT_VIEWPORT
        self._stealth = Stealth() if stealth else None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def start(self) -> "BrowserEngine":
        """Launch Playwright and Chromium. Raises BrowserLaunchError on failure."""
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=LAUNCH_ARGS,
            )
        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        logger.info(f"Browser engine started (headless={self.headless})")
        return self

    async def new_context(self) -> BrowserContext:
        """Open a fresh isolated context with the crawl user agent and viewport."""
        if self._browser is None:
            raise BrowserLaunchError("Browser engine is not running")

        ctx = await self._browser.new_context(
            user_agent=self.user_agent,
            viewport=self.viewport,
            ignore_https_errors=True,
            locale="en-US",
        )
        if self._stealth is not None:
            await self._stealth.apply_stealth_async(ctx)
        return ctx

    async def close(self) -> None:
        """Shutdown browser and Playwright. Safe to call more than once."""
        try:
            if self._browser:
                await self._browser.close()
        except Exception as e:
            logger.debug(f"Browser close failed: {e}")
        try:
            if self._playwright:
                await self._playwright.stop()
        except Exception as e:
            logger.debug(f"Playwright stop failed: {e}")

        if self._browser is not None:
            logger.info("Browser engine closed")
        self._browser = None
        self._playwright = None

    async def __aenter__(self) -> "BrowserEngine":
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
