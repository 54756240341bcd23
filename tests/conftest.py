"""Pytest fixtures and in-memory collaborators."""

import asyncio
import os
from pathlib import Path
from typing import Any

import pytest

from browser import BrowserConfig, BrowserController, SessionRuntimeState, open_channel
from devtools import (
    DevToolsClient,
    DevToolsEndpoint,
    DevToolsError,
    FileWriter,
    PageTarget,
    ProtocolChannel,
    WindowManager,
)

SESSION_MARKER = "a1b2c3"


class FakeProtocolChannel(ProtocolChannel):
    """Records every command; fails the methods listed in ``failures``."""

    def __init__(self, failures: dict[str, Exception] | None = None, responses: dict[str, dict] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.failures = failures or {}
        self.responses = responses or {}
        self.closed = False

    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        self.calls.append((method, params))
        if method in self.failures:
            raise self.failures[method]
        return self.responses.get(method, {})

    async def close(self) -> None:
        self.closed = True

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_of(self, method: str) -> list[dict[str, Any] | None]:
        return [params for name, params in self.calls if name == method]


class FakeDevToolsClient(DevToolsClient):
    def __init__(
        self,
        pages: list[PageTarget] | None = None,
        channel: FakeProtocolChannel | None = None,
        open_error: Exception | None = None,
        open_delay: float = 0.0,
        close_error: Exception | None = None,
    ) -> None:
        self.pages = pages or []
        self.channel = channel or FakeProtocolChannel()
        self.open_error = open_error
        self.open_delay = open_delay
        self.close_error = close_error
        self.opened: list[PageTarget] = []
        self.closed_pages: list[PageTarget] = []

    async def list_pages(self, endpoint: DevToolsEndpoint) -> list[PageTarget]:
        return list(self.pages)

    async def open_channel(self, endpoint: DevToolsEndpoint, page: PageTarget) -> ProtocolChannel:
        self.opened.append(page)
        if self.open_delay:
            await asyncio.sleep(self.open_delay)
        if self.open_error is not None:
            raise self.open_error
        return self.channel

    async def close_page(self, endpoint: DevToolsEndpoint, page: PageTarget) -> None:
        if self.close_error is not None:
            raise self.close_error
        if page in self.closed_pages:
            raise DevToolsError(f"No such target id: {page.id}")
        self.closed_pages.append(page)


class FakeWindowManager(WindowManager):
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, int, int, int, int]] = []
        self.error = error
        self.closed = False

    async def resize_window(self, page_id: str, from_width: int, from_height: int, to_width: int, to_height: int) -> None:
        self.calls.append((page_id, from_width, from_height, to_width, to_height))
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


class FakeFileWriter(FileWriter):
    def __init__(self, error: Exception | None = None) -> None:
        self.files: dict[Path, bytes] = {}
        self.error = error

    async def write(self, path: Path, data: bytes) -> None:
        if self.error is not None:
            raise self.error
        self.files[path] = data


def _make_page(page_id: str = "page-1", url: str = f"http://localhost:1337/browser/idle/{SESSION_MARKER}", type: str = "page") -> PageTarget:
    return PageTarget(id=page_id, type=type, url=url, title="TestCafe")


@pytest.fixture
def endpoint():
    return DevToolsEndpoint(host="localhost", port=9222)


@pytest.fixture
def session_page():
    return _make_page()


@pytest.fixture
def page_factory():
    return _make_page


@pytest.fixture
def raw_channel():
    return FakeProtocolChannel()


@pytest.fixture
def client(session_page, raw_channel):
    return FakeDevToolsClient(pages=[session_page], channel=raw_channel)


@pytest.fixture
def window_manager():
    return FakeWindowManager()


@pytest.fixture
def file_writer():
    return FakeFileWriter()


@pytest.fixture
def controller(client, window_manager, file_writer):
    return BrowserController(client, window_manager, file_writer)


@pytest.fixture
def make_state(endpoint):
    """Build a fresh runtime state from config keyword arguments."""
    def factory(**config: Any) -> SessionRuntimeState:
        return SessionRuntimeState(session_marker=SESSION_MARKER, endpoint=endpoint, config=BrowserConfig(**config))
    return factory


@pytest.fixture
def connected_state(controller, make_state):
    """Provide a state factory that also connects the session."""
    async def factory(**config: Any) -> SessionRuntimeState:
        state = make_state(**config)
        await controller.connect(state)
        return state
    return factory


@pytest.fixture
def attached_state(client, session_page, make_state):
    """Provide a state factory with a ready channel but no emulation applied yet."""
    async def factory(**config: Any) -> SessionRuntimeState:
        state = make_state(**config)
        state.page = session_page
        state.channel = await open_channel(client, state.endpoint, session_page)
        client.channel.calls.clear()
        return state
    return factory


@pytest.fixture
def live_endpoint():
    """Endpoint of a real browser for integration tests."""
    port = os.environ.get("CDP_PORT")
    if not port:
        pytest.skip("CDP_PORT is not set; no live browser available")
    return DevToolsEndpoint(host=os.environ.get("CDP_HOST", "localhost"), port=int(port))
