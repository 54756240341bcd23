"""DevTools client backed by httpx (target HTTP API) and Playwright (CDP sessions)."""

import logging
from typing import Any

import httpx
from playwright.async_api import Browser, CDPSession, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .base import DevToolsClient, DevToolsEndpoint, DevToolsError, PageTarget, ProtocolChannel

logger = logging.getLogger(__name__)


class PlaywrightChannel(ProtocolChannel):
    """CDP session attached to one page through a Playwright browser connection."""

    __slots__ = ("_browser", "_closed", "_playwright", "_session")

    def __init__(self, playwright: Playwright, browser: Browser, session: CDPSession) -> None:
        self._playwright = playwright
        self._browser = browser
        self._session = session
        self._closed = False

    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        logger.debug("-> %s %s", method, params or {})
        try:
            result = await self._session.send(method, params)
        except PlaywrightError as e:
            raise DevToolsError(f"{method} failed: {e.message}") from e
        return result or {}

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._session.detach()
        except PlaywrightError as e:
            # Detach fails once the page is gone; the connection still has to be released
            logger.debug("CDP session detach failed: %s", e.message)
        finally:
            await self._browser.close()
            await self._playwright.stop()


async def _detach_quietly(session: CDPSession) -> None:
    try:
        await session.detach()
    except PlaywrightError as e:
        logger.debug("Detaching unmatched CDP session failed: %s", e.message)


async def _attach_to_target(browser: Browser, target_id: str) -> CDPSession:
    """Open a CDP session on the Playwright page backing the given target id."""
    for context in browser.contexts:
        for candidate in context.pages:
            session = await context.new_cdp_session(candidate)
            matched = False
            try:
                info = await session.send("Target.getTargetInfo")
                matched = info["targetInfo"]["targetId"] == target_id
            finally:
                if not matched:
                    await _detach_quietly(session)
            if matched:
                return session
    raise DevToolsError(f"Target {target_id} is not visible through the CDP connection")


class PlaywrightDevToolsClient(DevToolsClient):
    """Default DevTools client.

    Target listing and closing go through the endpoint's HTTP API; page
    channels are Playwright CDP sessions obtained with ``connect_over_cdp``.
    """

    __slots__ = ("_timeout", "_transport")

    HTTP_TIMEOUT = 10.0

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._timeout = timeout or self.HTTP_TIMEOUT
        self._transport = transport

    async def _get(self, endpoint: DevToolsEndpoint, path: str) -> httpx.Response:
        url = f"{endpoint.http_url}{path}"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                raise DevToolsError(f"GET {url} failed: {e}") from e
        if response.is_error:
            raise DevToolsError(f"GET {url} returned {response.status_code}: {response.text.strip()}")
        return response

    async def list_pages(self, endpoint: DevToolsEndpoint) -> list[PageTarget]:
        response = await self._get(endpoint, "/json/list")
        targets = [PageTarget.model_validate(item) for item in response.json()]
        logger.debug("Endpoint %s lists %d targets", endpoint.http_url, len(targets))
        return targets

    async def open_channel(self, endpoint: DevToolsEndpoint, page: PageTarget) -> ProtocolChannel:
        pw = await async_playwright().start()
        try:
            browser = await pw.chromium.connect_over_cdp(endpoint.http_url)
            try:
                session = await _attach_to_target(browser, page.id)
            except BaseException:
                await browser.close()
                raise
        except BaseException:
            await pw.stop()
            raise
        logger.info("CDP session attached to %s (%s)", page.id, page.url)
        return PlaywrightChannel(pw, browser, session)

    async def close_page(self, endpoint: DevToolsEndpoint, page: PageTarget) -> None:
        await self._get(endpoint, f"/json/close/{page.id}")
        logger.info("Closed target %s", page.id)
