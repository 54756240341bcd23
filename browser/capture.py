"""Screenshot capture, tab closure and the headless predicate."""

import base64
import binascii
import logging
from pathlib import Path

from devtools import DevToolsClient, DevToolsError, FileWriter

from .errors import CaptureError, ChannelUnavailableError, TeardownError
from .state import SessionRuntimeState

logger = logging.getLogger(__name__)


def is_headless(state: SessionRuntimeState) -> bool:
    return state.page is not None and state.config.headless


async def take_screenshot(state: SessionRuntimeState, path: Path, file_writer: FileWriter) -> Path:
    """Capture the page and write the decoded PNG to path.

    Headless pages are captured from the compositor surface, headed ones
    from the window.
    """
    if not state.connected:
        raise ChannelUnavailableError(f"Cannot take screenshot for {state.session_marker!r}: not connected")

    try:
        result = await state.channel.send("Page.captureScreenshot", {"fromSurface": state.config.headless})
        data = base64.b64decode(result["data"], validate=True)
    except (DevToolsError, KeyError, binascii.Error) as e:
        raise CaptureError(f"Screenshot capture failed: {e}") from e

    try:
        await file_writer.write(path, data)
    except OSError as e:
        raise CaptureError(f"Could not write screenshot to {path}: {e}") from e

    logger.info("Screenshot saved to %s (%d bytes)", path, len(data))
    return path


async def close_tab(state: SessionRuntimeState, client: DevToolsClient) -> None:
    """Close the session's page and release its channel."""
    if state.page is None:
        raise ChannelUnavailableError(f"Cannot close tab for {state.session_marker!r}: no page resolved")

    try:
        await client.close_page(state.endpoint, state.page)
    except DevToolsError as e:
        raise TeardownError(f"Closing page {state.page.id} failed: {e}") from e

    if state.channel is not None:
        try:
            await state.channel.close()
        except DevToolsError as e:
            raise TeardownError(f"Page {state.page.id} closed but its channel did not: {e}") from e
