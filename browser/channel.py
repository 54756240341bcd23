"""Control channel lifecycle: negotiate, enable domains, serve RPCs, close."""

import asyncio
import logging
from enum import Enum
from typing import Any

from devtools import DevToolsClient, DevToolsEndpoint, PageTarget, ProtocolChannel

from .errors import ChannelUnavailableError, ConnectionFailed

logger = logging.getLogger(__name__)

# Domains whose events downstream operations rely on, enabled in this order
REQUIRED_DOMAINS = ("Page", "Network")


class ChannelState(str, Enum):
    """Lifecycle state of a control channel."""

    DISCONNECTED = "disconnected"
    NEGOTIATING = "negotiating"
    ENABLING_DOMAINS = "enabling_domains"
    READY = "ready"
    CLOSED = "closed"


class Channel:
    """Control channel to one page. RPCs are only accepted in the READY state."""

    __slots__ = ("_raw", "_state", "page")

    def __init__(self, page: PageTarget) -> None:
        self.page = page
        self._raw: ProtocolChannel | None = None
        self._state = ChannelState.DISCONNECTED

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ChannelState.READY

    async def _negotiate(self, client: DevToolsClient, endpoint: DevToolsEndpoint, timeout: float | None) -> None:
        self._state = ChannelState.NEGOTIATING
        self._raw = await asyncio.wait_for(client.open_channel(endpoint, self.page), timeout)

    async def _enable_domains(self) -> None:
        if self._raw is None:
            raise ChannelUnavailableError(f"Channel to {self.page.id} has no transport to enable domains on")
        self._state = ChannelState.ENABLING_DOMAINS
        for domain in REQUIRED_DOMAINS:
            await self._raw.send(f"{domain}.enable")
        self._state = ChannelState.READY

    async def _discard(self) -> None:
        """Drop a channel that never became ready."""
        raw, self._raw = self._raw, None
        self._state = ChannelState.DISCONNECTED
        if raw is None:
            return
        try:
            await raw.close()
        except Exception as e:
            logger.debug("Closing half-open channel to %s failed: %s", self.page.id, e)

    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Issue a protocol command on a ready channel."""
        if not self.is_ready or self._raw is None:
            raise ChannelUnavailableError(f"Channel to {self.page.id} is {self._state.value}, cannot send {method}")
        logger.debug("%s %s", method, params or {})
        return await self._raw.send(method, params)

    async def close(self) -> None:
        """Detach from the page. Safe to call more than once."""
        raw, self._raw = self._raw, None
        self._state = ChannelState.CLOSED
        if raw is not None:
            await raw.close()
            logger.info("Channel to %s closed", self.page.id)


async def open_channel(
    client: DevToolsClient,
    endpoint: DevToolsEndpoint,
    page: PageTarget,
    timeout: float | None = None,
) -> Channel | ConnectionFailed:
    """Open a control channel to page and enable the required domains.

    A browser that is still starting up is an expected state, so every
    negotiation failure is reported as a ConnectionFailed result instead of
    an exception.
    """
    channel = Channel(page)
    try:
        await channel._negotiate(client, endpoint, timeout)
        await channel._enable_domains()
    except Exception as e:
        reason = str(e) or type(e).__name__
        logger.warning("Could not connect to %s (%s): %s", page.id, page.url, reason)
        await channel._discard()
        return ConnectionFailed(page=page, reason=reason)

    logger.info("Channel to %s ready", page.id)
    return channel
