"""OS window resizing through the browser-level Browser.* protocol domain."""

import logging
from typing import Any

from playwright.async_api import Browser, CDPSession, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .base import DevToolsEndpoint, DevToolsError, WindowManager

logger = logging.getLogger(__name__)


class BrowserWindowManager(WindowManager):
    """Resizes the window hosting a target so its viewport changes by the requested delta.

    The window's outer bounds include browser chrome, so the new outer size is
    the current outer size shifted by (to - from) on each axis.
    """

    __slots__ = ("_browser", "_endpoint", "_playwright", "_session")

    def __init__(self, endpoint: DevToolsEndpoint) -> None:
        self._endpoint = endpoint
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._session: CDPSession | None = None

    async def _browser_session(self) -> CDPSession:
        if self._session is None:
            pw = await async_playwright().start()
            try:
                browser = await pw.chromium.connect_over_cdp(self._endpoint.http_url)
                self._session = await browser.new_browser_cdp_session()
            except BaseException:
                await pw.stop()
                raise
            self._playwright = pw
            self._browser = browser
        return self._session

    async def _send(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        session = await self._browser_session()
        try:
            return await session.send(method, params)
        except PlaywrightError as e:
            raise DevToolsError(f"{method} failed: {e.message}") from e

    async def resize_window(
        self,
        page_id: str,
        from_width: int,
        from_height: int,
        to_width: int,
        to_height: int,
    ) -> None:
        window = await self._send("Browser.getWindowForTarget", {"targetId": page_id})
        window_id = window["windowId"]
        bounds = window["bounds"]

        if bounds.get("windowState", "normal") != "normal":
            # Maximized/fullscreen windows ignore explicit sizes
            await self._send("Browser.setWindowBounds", {"windowId": window_id, "bounds": {"windowState": "normal"}})
            bounds = (await self._send("Browser.getWindowBounds", {"windowId": window_id}))["bounds"]

        width = bounds["width"] + to_width - from_width
        height = bounds["height"] + to_height - from_height
        logger.debug(
            "Window %s: outer %dx%d -> %dx%d (viewport %dx%d -> %dx%d)",
            window_id, bounds["width"], bounds["height"], width, height,
            from_width, from_height, to_width, to_height,
        )
        await self._send(
            "Browser.setWindowBounds",
            {"windowId": window_id, "bounds": {"width": width, "height": height, "windowState": "normal"}},
        )

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._session = None
        self._browser = None
        self._playwright = None
