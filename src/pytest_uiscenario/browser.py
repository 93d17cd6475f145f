"""Browser session management.

The engine drives pages it is handed and never creates them. This
module is the page provider used by the pytest plugin and the CLI: it
starts Playwright, launches the configured browser, and hands out pages
living in isolated browser contexts.
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from playwright.async_api import async_playwright

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from playwright.async_api import Browser, BrowserContext, Page

    from pytest_uiscenario.settings import EngineSettings


class BrowserSession:
    """Launched browser handing out isolated pages.

    Every page gets its own browser context, so cookies and storage never
    leak between test cases. Contexts are closed with the session.

    Attributes:
        browser: Launched Playwright browser.
        settings: Settings providing the base URL and the default timeout.
    """

    def __init__(self, browser: 'Browser', settings: 'EngineSettings') -> None:
        self.browser = browser
        self.settings = settings
        self.contexts: list[BrowserContext] = []

    async def new_page(self) -> 'Page':
        """Create a page in a fresh browser context.

        Returns:
            The new page with the base URL and default timeout applied.
        """
        context = await self.browser.new_context(base_url=self.settings.base_url)
        if self.settings.timeout is not None:
            context.set_default_timeout(self.settings.timeout)

        self.contexts.append(context)

        return await context.new_page()

    async def close(self) -> None:
        """Close every context opened by the session."""
        while self.contexts:
            await self.contexts.pop().close()


@asynccontextmanager
async def open_session(settings: 'EngineSettings') -> 'AsyncIterator[BrowserSession]':
    """Start Playwright and launch the configured browser.

    Args:
        settings: Settings selecting the browser and the headless mode.

    Yields:
        Browser session; the browser is closed on exit.
    """
    async with async_playwright() as playwright:
        launcher = getattr(playwright, settings.browser)
        browser = await launcher.launch(headless=settings.headless)
        session = BrowserSession(browser, settings)
        try:
            yield session
        finally:
            await session.close()
            await browser.close()
