"""
Playwright-backed browser session.

PlaywrightSession adapts a Playwright page to the BrowserSession protocol the
engine consumes. BrowserManager owns the browser for the server's lifetime
and hands out the single active tab.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from .config import BROWSER_TYPE, HEADLESS, NAVIGATION_WAIT_UNTIL, SUPPORTED_BROWSERS
from .exceptions import SessionUnavailableError
from .typing_utils import CookieDict, StorageItem, ensure_string

logger = logging.getLogger("mcp_storage_state.session")


class PlaywrightSession:
    """BrowserSession implementation over a Playwright async page."""

    def __init__(self, page: Page) -> None:
        self.page = page
        # Local storage by origin from the last storage_state() dump. Filled by
        # storage_origins() and dropped by any call that can change the page.
        self._origin_storage: dict[str, list[StorageItem]] | None = None

    @property
    def context(self) -> BrowserContext:
        return self.page.context

    async def get_cookies(self) -> list[CookieDict]:
        return [dict(cookie) for cookie in await self.context.cookies()]

    async def add_cookies(self, cookies: list[CookieDict]) -> None:
        self._origin_storage = None
        await self.context.add_cookies(cookies)  # type: ignore[arg-type]

    def current_url(self) -> str:
        return ensure_string(self.page.url)

    async def navigate(self, url: str) -> None:
        self._origin_storage = None
        await self.page.goto(url, wait_until=NAVIGATION_WAIT_UNTIL)

    async def evaluate_in_page(self, script: str, arg: Any = None) -> Any:
        self._origin_storage = None
        return await self.page.evaluate(script, arg)

    async def _dump_origin_storage(self) -> dict[str, list[StorageItem]]:
        state = await self.context.storage_state()
        self._origin_storage = {
            entry["origin"]: [dict(item) for item in entry.get("localStorage", [])]
            for entry in state.get("origins", [])
        }
        return self._origin_storage

    async def storage_origins(self) -> list[str]:
        return list(await self._dump_origin_storage())

    async def get_local_storage(self, origin: str) -> list[StorageItem]:
        origin_storage = self._origin_storage
        if origin_storage is None or origin not in origin_storage:
            origin_storage = await self._dump_origin_storage()
        return list(origin_storage.get(origin, []))


class BrowserManager:
    """Owns the Playwright browser and the single tab every tool operates on."""

    def __init__(self, browser_type: str = BROWSER_TYPE, headless: bool = HEADLESS) -> None:
        if browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{browser_type}', expected one of {SUPPORTED_BROWSERS}"
            )
        self.browser_type = browser_type
        self.headless = headless
        # Serializes tool calls against the shared tab
        self.lock = asyncio.Lock()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._session: PlaywrightSession | None = None

    @property
    def is_running(self) -> bool:
        return self._session is not None and not self._session.page.is_closed()

    async def start(self) -> PlaywrightSession:
        """Launch the browser and open the tab."""
        if self._session is not None:
            return self._session

        logger.info(f"Launching {self.browser_type} (headless={self.headless})")
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        self._browser = await launcher.launch(headless=self.headless)
        context = await self._browser.new_context()
        page = await context.new_page()
        self._session = PlaywrightSession(page)
        return self._session

    def current_session_or_die(self) -> PlaywrightSession:
        """Return the active tab's session."""
        if not self.is_running:
            raise SessionUnavailableError("No open browser tab")
        assert self._session is not None
        return self._session

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        self._session = None
        if self._browser is not None:
            logger.info("Closing browser")
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
