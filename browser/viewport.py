"""Keep the logical viewport, the OS window and the emulation override in step."""

import logging

from devtools import DevToolsError, WindowManager

from .channel import Channel
from .config import BrowserConfig
from .errors import ChannelUnavailableError, ResizeError
from .geometry import Dimensions, ViewportSize
from .state import SessionRuntimeState

logger = logging.getLogger(__name__)


async def set_emulation_bounds(channel: Channel, config: BrowserConfig, viewport_size: ViewportSize) -> None:
    """Push the device-metrics and visible-size overrides for viewport_size."""
    await channel.send(
        "Emulation.setDeviceMetricsOverride",
        {
            "width": viewport_size.width,
            "height": viewport_size.height,
            "deviceScaleFactor": config.scale_factor,
            "mobile": config.mobile,
            # The override must never resize the window itself
            "fitWindow": False,
        },
    )
    await channel.send("Emulation.setVisibleSize", {"width": viewport_size.width, "height": viewport_size.height})


async def measure_viewport(state: SessionRuntimeState) -> ViewportSize:
    """Read the page's current inner size into state.viewport_size.

    If the page cannot report it, the size from the run config is kept.
    """
    if not state.connected:
        raise ChannelUnavailableError(f"Cannot measure viewport for {state.session_marker!r}: not connected")

    async with state.resize_lock:
        try:
            result = await state.channel.send(
                "Runtime.evaluate",
                {"expression": "[window.innerWidth, window.innerHeight]", "returnByValue": True},
            )
            width, height = result["result"]["value"]
            measured = ViewportSize(width=int(width), height=int(height))
        except (DevToolsError, KeyError, TypeError, ValueError) as e:
            logger.warning("Could not measure viewport, keeping %s: %s", state.viewport_size, e)
            return state.viewport_size

        state.viewport_size = measured
        logger.debug("Measured viewport %dx%d", measured.width, measured.height)
        return measured


async def resize(state: SessionRuntimeState, dimensions: Dimensions, window_manager: WindowManager) -> ViewportSize:
    """Resize the session viewport.

    Order matters: the OS window is resized first while ``state.viewport_size``
    still holds the old size, then the logical size is updated, then the
    emulation override is pushed. A failing window resize does not stop the
    later steps, and nothing already applied is rolled back.

    Args:
        state: Connected session state
        dimensions: Requested size; omitted values keep the current size
        window_manager: Used to resize the real window of headed sessions

    Returns:
        The new viewport size

    Raises:
        ChannelUnavailableError: If the session is not connected
        ResizeError: If the window resize or the emulation push failed
    """
    if state.page is None or not state.connected:
        raise ChannelUnavailableError(f"Cannot resize session {state.session_marker!r}: not connected")

    async with state.resize_lock:
        previous = state.viewport_size
        target = dimensions.apply_to(previous)
        window_error: Exception | None = None
        emulation_error: Exception | None = None

        if not state.config.headless:
            try:
                await window_manager.resize_window(
                    state.page.id, previous.width, previous.height, target.width, target.height
                )
            except Exception as e:
                logger.warning(
                    "Window resize %dx%d -> %dx%d failed: %s",
                    previous.width, previous.height, target.width, target.height, e,
                )
                window_error = e

        state.viewport_size = target

        if state.config.emulation:
            try:
                await set_emulation_bounds(state.channel, state.config, target)
            except Exception as e:
                logger.warning("Emulation override to %dx%d failed: %s", target.width, target.height, e)
                emulation_error = e

        if window_error is not None or emulation_error is not None:
            raise ResizeError(previous, target, window_error, emulation_error) from (window_error or emulation_error)

        logger.info("Viewport %dx%d -> %dx%d", previous.width, previous.height, target.width, target.height)
        return target
