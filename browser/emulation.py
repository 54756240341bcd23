"""Session-start device emulation."""

import logging

from devtools import WindowManager

from .errors import ChannelUnavailableError, EmulationError
from .geometry import Dimensions
from .state import SessionRuntimeState
from .viewport import resize

logger = logging.getLogger(__name__)


async def apply_emulation(state: SessionRuntimeState, window_manager: WindowManager) -> None:
    """Apply user agent, touch and initial device metrics from the run config.

    Every step is attempted even if an earlier one failed; overrides that
    succeeded stay in effect.

    Raises:
        ChannelUnavailableError: If the session is not connected
        EmulationError: If any override failed
    """
    channel = state.channel
    if channel is None or not channel.is_ready:
        raise ChannelUnavailableError(f"Cannot configure emulation for {state.session_marker!r}: not connected")

    config = state.config
    failures: dict[str, Exception] = {}

    if config.user_agent is not None:
        try:
            await channel.send("Network.setUserAgentOverride", {"userAgent": config.user_agent})
        except Exception as e:
            failures["user_agent"] = e

    if config.touch is not None:
        try:
            await channel.send(
                "Emulation.setTouchEmulationEnabled",
                {"enabled": config.touch, "configuration": "mobile" if config.mobile else "desktop"},
            )
        except Exception as e:
            failures["touch"] = e

    try:
        await resize(state, Dimensions(width=config.width, height=config.height), window_manager)
    except Exception as e:
        failures["viewport"] = e

    if failures:
        logger.warning("Emulation for %r partially applied; failed: %s", state.session_marker, ", ".join(failures))
        raise EmulationError(failures)

    logger.info(
        "Emulation applied (scale=%s, mobile=%s, touch=%s, user_agent=%s)",
        config.scale_factor, config.mobile, config.touch, config.user_agent is not None,
    )
