"""Base abstractions for the remote-debugging collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DevToolsError(Exception):
    """Transport or protocol failure reported by a DevTools adapter."""


@dataclass(frozen=True, slots=True)
class DevToolsEndpoint:
    """Address of a browser's remote-debugging endpoint."""

    host: str = "localhost"
    port: int = 9222

    @property
    def http_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class PageTarget(BaseModel):
    """One entry of the endpoint's /json/list target listing."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    type: str
    url: str = ""
    title: str = ""
    ws_url: str | None = Field(default=None, alias="webSocketDebuggerUrl")


class ProtocolChannel(ABC):
    """Raw command channel scoped to a single page."""

    __slots__ = ()

    @abstractmethod
    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a protocol command and return its result payload.

        Args:
            method: Fully-qualified method name, e.g. "Page.enable"
            params: Optional command parameters

        Returns:
            The command's result dict (empty for commands without a result)
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the channel and any transport it owns."""
        ...


class DevToolsClient(ABC):
    """Target discovery and channel factory for a remote-debugging endpoint."""

    __slots__ = ()

    @abstractmethod
    async def list_pages(self, endpoint: DevToolsEndpoint) -> list[PageTarget]:
        """List every target open at the endpoint, in the endpoint's order."""
        ...

    @abstractmethod
    async def open_channel(self, endpoint: DevToolsEndpoint, page: PageTarget) -> ProtocolChannel:
        """Open a control channel to the given page target.

        Raises:
            Any exception describing why negotiation failed
        """
        ...

    @abstractmethod
    async def close_page(self, endpoint: DevToolsEndpoint, page: PageTarget) -> None:
        """Ask the endpoint to close the given page target.

        Raises:
            DevToolsError: If the endpoint refuses or does not know the target
        """
        ...


class WindowManager(ABC):
    """Resizes the OS-level window hosting a page."""

    __slots__ = ()

    @abstractmethod
    async def resize_window(
        self,
        page_id: str,
        from_width: int,
        from_height: int,
        to_width: int,
        to_height: int,
    ) -> None:
        """Resize the window so its viewport goes from (from_*) to (to_*)."""
        ...

    async def close(self) -> None:
        """Release resources held by the window manager."""
        return None


class FileWriter(ABC):
    """Persists captured data to the filesystem."""

    __slots__ = ()

    @abstractmethod
    async def write(self, path: Path, data: bytes) -> None:
        """Write raw bytes to path."""
        ...
