"""Remote-debugging collaborators: target discovery, page channels, window and file access."""

from .base import (
    DevToolsClient,
    DevToolsEndpoint,
    DevToolsError,
    FileWriter,
    PageTarget,
    ProtocolChannel,
    WindowManager,
)
from .files import LocalFileWriter
from .playwright_client import PlaywrightChannel, PlaywrightDevToolsClient
from .window import BrowserWindowManager

__all__ = [
    "BrowserWindowManager",
    "DevToolsClient",
    "DevToolsEndpoint",
    "DevToolsError",
    "FileWriter",
    "LocalFileWriter",
    "PageTarget",
    "PlaywrightChannel",
    "PlaywrightDevToolsClient",
    "ProtocolChannel",
    "WindowManager",
]
