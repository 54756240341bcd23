"""Per-session mutable runtime state."""

import asyncio
from dataclasses import dataclass, field

from devtools import DevToolsEndpoint, PageTarget

from .channel import Channel
from .config import BrowserConfig
from .geometry import Dimensions, ViewportSize


@dataclass(slots=True)
class SessionRuntimeState:
    """Everything the controller knows about one browser session.

    ``page`` and ``channel`` are filled in together by a successful connect.
    ``viewport_size`` starts at the configured size, is measured from the page
    on connect and is otherwise only replaced by the resize routine.
    """

    session_marker: str
    endpoint: DevToolsEndpoint
    config: BrowserConfig
    page: PageTarget | None = None
    channel: Channel | None = None
    viewport_size: ViewportSize | None = None
    resize_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        if self.viewport_size is None:
            initial = Dimensions(width=self.config.width, height=self.config.height)
            self.viewport_size = initial.apply_to(ViewportSize())

    @property
    def connected(self) -> bool:
        return self.channel is not None and self.channel.is_ready
