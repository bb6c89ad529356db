import logging
from typing import Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import BrowserConfig
from .errors import RenderFailure

logger = logging.getLogger(__name__)

LAUNCH_URL = "about:blank"


class PageRenderer:
    """
    One headless Chromium session, scoped to an ``async with`` block.

    The browser is launched on enter and closed on every exit path, so each
    pipeline run or chat request owns exactly one session.
    """

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self.config      = config or BrowserConfig()
        self._playwright = None
        self._browser    = None
        self._page       = None

    async def open(self) -> None:
        """
        Launch Chromium and open a page.

        Raises:
            RenderFailure: If Playwright or the browser fails to start
        """
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.launch_args),
            )
            context    = await self._browser.new_context(user_agent=self.config.user_agent)
            self._page = await context.new_page()
        except PlaywrightError as exc:
            await self.close()
            raise RenderFailure(LAUNCH_URL, f"browser launch failed: {exc.message}") from exc
        except BaseException:
            await self.close()
            raise
        logger.debug("[BROWSER]: Opened.")

    async def render(self, url: str) -> str:
        """
        Load a URL and return the rendered HTML.

        Raises:
            RenderFailure: On navigation timeout or network failure
        """
        if self._page is None:
            raise RuntimeError("PageRenderer used outside of 'async with'")

        logger.info("[BROWSER]: navigating to %s", url)
        try:
            await self._page.goto(
                url,
                wait_until="networkidle",
                timeout=self.config.navigation_timeout_ms,
            )
            return await self._page.content()
        except PlaywrightTimeoutError as exc:
            raise RenderFailure(url, "navigation timed out") from exc
        except PlaywrightError as exc:
            raise RenderFailure(url, exc.message) from exc

    async def close(self) -> None:
        """Close the browser and stop Playwright if they are running."""
        self._page = None
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
            logger.debug("[BROWSER]: Closed.")

    async def __aenter__(self) -> "PageRenderer":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


RendererFactory = Callable[[], PageRenderer]


def renderer_factory(config: BrowserConfig) -> RendererFactory:
    """Return a callable producing fresh, unopened renderers."""
    return lambda: PageRenderer(config)
