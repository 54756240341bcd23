"""Browser session controller package."""

from .channel import Channel, ChannelState, open_channel
from .config import BrowserConfig, parse_config
from .controller import BrowserController
from .errors import (
    BrowserSessionError,
    CaptureError,
    ChannelUnavailableError,
    ConnectionFailed,
    EmulationError,
    ResizeError,
    TabNotFound,
    TeardownError,
)
from .geometry import Dimensions, ViewportSize
from .state import SessionRuntimeState

__all__ = [
    "BrowserConfig",
    "BrowserController",
    "BrowserSessionError",
    "CaptureError",
    "Channel",
    "ChannelState",
    "ChannelUnavailableError",
    "ConnectionFailed",
    "Dimensions",
    "EmulationError",
    "ResizeError",
    "SessionRuntimeState",
    "TabNotFound",
    "TeardownError",
    "ViewportSize",
    "open_channel",
    "parse_config",
]
