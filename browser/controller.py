"""Session controller: the operations test orchestration calls into."""

import logging
from pathlib import Path

from devtools import (
    BrowserWindowManager,
    DevToolsClient,
    DevToolsEndpoint,
    FileWriter,
    LocalFileWriter,
    PlaywrightDevToolsClient,
    WindowManager,
)

from . import capture, viewport
from .channel import Channel, open_channel
from .emulation import apply_emulation
from .errors import ConnectionFailed, TabNotFound
from .geometry import Dimensions, ViewportSize
from .state import SessionRuntimeState
from .tabs import resolve_page

logger = logging.getLogger(__name__)


class BrowserController:
    """Drives one browser session at a time through its remote-debugging endpoint.

    The controller holds only the collaborators; all session data lives in the
    SessionRuntimeState passed to each call. Callers must not issue overlapping
    operations against the same state, except resize, which is serialized.
    """

    __slots__ = ("_client", "_file_writer", "_window_manager")

    def __init__(
        self,
        client: DevToolsClient,
        window_manager: WindowManager,
        file_writer: FileWriter | None = None,
    ) -> None:
        self._client = client
        self._window_manager = window_manager
        self._file_writer = file_writer or LocalFileWriter()

    @classmethod
    def create(cls, endpoint: DevToolsEndpoint) -> "BrowserController":
        """Build a controller with the default Playwright/httpx adapters."""
        return cls(PlaywrightDevToolsClient(), BrowserWindowManager(endpoint), LocalFileWriter())

    async def connect(self, state: SessionRuntimeState) -> Channel | TabNotFound | ConnectionFailed:
        """Resolve the session's page, open a channel, measure it and apply emulation.

        Returns the ready channel, or TabNotFound / ConnectionFailed when the
        browser is not there yet; both are worth retrying.

        Raises:
            EmulationError: If the channel is up but emulation did not fully apply
        """
        if state.channel is not None and state.channel.is_ready:
            return state.channel

        page = state.page
        if page is None:
            resolved = await resolve_page(self._client, state.endpoint, state.session_marker)
            if isinstance(resolved, TabNotFound):
                return resolved
            page = resolved

        result = await open_channel(self._client, state.endpoint, page, timeout=state.config.negotiation_timeout)
        if isinstance(result, ConnectionFailed):
            return result

        state.page = page
        state.channel = result
        logger.info("Session %r connected to %s", state.session_marker, page.id)
        await viewport.measure_viewport(state)

        if state.config.emulation:
            await apply_emulation(state, self._window_manager)
        return result

    async def resize(self, dimensions: Dimensions, state: SessionRuntimeState) -> ViewportSize:
        """Resize the viewport; see browser.viewport.resize."""
        return await viewport.resize(state, dimensions, self._window_manager)

    async def screenshot(self, path: Path, state: SessionRuntimeState) -> Path:
        """Capture the page into a PNG file at path."""
        return await capture.take_screenshot(state, path, self._file_writer)

    async def close_tab(self, state: SessionRuntimeState) -> None:
        """Close the session's page."""
        await capture.close_tab(state, self._client)
        logger.info("Session %r tab closed", state.session_marker)

    def is_headless(self, state: SessionRuntimeState) -> bool:
        return capture.is_headless(state)

    async def disconnect(self, state: SessionRuntimeState) -> None:
        """Close the channel and release window-manager resources."""
        if state.channel is not None:
            await state.channel.close()
        await self._window_manager.close()
        logger.info("Session %r disconnected", state.session_marker)
