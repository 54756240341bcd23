"""Unit tests for the DevTools adapters."""

from typing import Any

import httpx
import pytest
from playwright.async_api import Error as PlaywrightError

from devtools import BrowserWindowManager, DevToolsEndpoint, DevToolsError, LocalFileWriter, PageTarget, PlaywrightDevToolsClient
from devtools.playwright_client import _attach_to_target

TARGETS = [
    {
        "description": "",
        "devtoolsFrontendUrl": "/devtools/inspector.html?ws=localhost:9222/devtools/page/AB12",
        "id": "AB12",
        "title": "TestCafe",
        "type": "page",
        "url": "http://localhost:1337/browser/idle/a1b2c3",
        "webSocketDebuggerUrl": "ws://localhost:9222/devtools/page/AB12",
    },
    {
        "id": "SW01",
        "title": "Service Worker",
        "type": "service_worker",
        "url": "http://localhost:1337/sw.js",
    },
]


def _client(handler) -> PlaywrightDevToolsClient:
    return PlaywrightDevToolsClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_endpoint_http_url():
    """Test the derived HTTP base URL."""
    assert DevToolsEndpoint("127.0.0.1", 9333).http_url == "http://127.0.0.1:9333"


@pytest.mark.unit
async def test_list_pages_parses_targets():
    """Test that /json/list entries become PageTargets in listing order."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=TARGETS)

    pages = await _client(handler).list_pages(DevToolsEndpoint())

    assert seen == ["http://localhost:9222/json/list"]
    assert [page.id for page in pages] == ["AB12", "SW01"]
    assert pages[0].ws_url == "ws://localhost:9222/devtools/page/AB12"
    assert pages[1].type == "service_worker"
    assert pages[1].ws_url is None


@pytest.mark.unit
async def test_list_pages_unreachable_endpoint():
    """Test that transport errors surface as DevToolsError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DevToolsError, match="connection refused"):
        await _client(handler).list_pages(DevToolsEndpoint())


@pytest.mark.unit
async def test_close_page_hits_close_endpoint():
    """Test that closing a page calls /json/close/<id>."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, text="Target is closing")

    await _client(handler).close_page(DevToolsEndpoint(), PageTarget.model_validate(TARGETS[0]))

    assert seen == ["/json/close/AB12"]


@pytest.mark.unit
async def test_close_unknown_page_is_an_error():
    """Test that the endpoint's 404 for a gone target is reported."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="No such target id: AB12")

    with pytest.raises(DevToolsError, match="No such target id"):
        await _client(handler).close_page(DevToolsEndpoint(), PageTarget.model_validate(TARGETS[0]))


@pytest.mark.unit
async def test_local_file_writer_creates_parents(tmp_path):
    """Test that screenshots land in not-yet-existing directories."""
    path = tmp_path / "screenshots" / "run-1" / "page.png"

    await LocalFileWriter().write(path, b"png-bytes")

    assert path.read_bytes() == b"png-bytes"


class _FakeBrowserSession:
    """Stands in for a browser-level Playwright CDPSession."""

    def __init__(self, bounds: dict[str, Any]) -> None:
        self.bounds = bounds
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def send(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((method, params))
        if method == "Browser.getWindowForTarget":
            return {"windowId": 7, "bounds": dict(self.bounds)}
        if method == "Browser.getWindowBounds":
            return {"bounds": {**self.bounds, "windowState": "normal"}}
        return {}


@pytest.mark.unit
async def test_window_manager_applies_viewport_delta():
    """Test that the outer window grows by the same delta as the viewport."""
    session = _FakeBrowserSession({"left": 0, "top": 0, "width": 1040, "height": 855, "windowState": "normal"})
    manager = BrowserWindowManager(DevToolsEndpoint())
    manager._session = session

    await manager.resize_window("AB12", 1024, 768, 800, 600)

    assert session.calls == [
        ("Browser.getWindowForTarget", {"targetId": "AB12"}),
        ("Browser.setWindowBounds", {"windowId": 7, "bounds": {"width": 816, "height": 687, "windowState": "normal"}}),
    ]


@pytest.mark.unit
async def test_window_manager_restores_maximized_window_first():
    """Test that a maximized window is switched to normal before sizing."""
    session = _FakeBrowserSession({"left": 0, "top": 0, "width": 1920, "height": 1080, "windowState": "maximized"})
    manager = BrowserWindowManager(DevToolsEndpoint())
    manager._session = session

    await manager.resize_window("AB12", 1904, 993, 1024, 768)

    assert [method for method, _ in session.calls] == [
        "Browser.getWindowForTarget",
        "Browser.setWindowBounds",
        "Browser.getWindowBounds",
        "Browser.setWindowBounds",
    ]
    assert session.calls[1][1] == {"windowId": 7, "bounds": {"windowState": "normal"}}
    assert session.calls[-1][1]["bounds"] == {"width": 1040, "height": 855, "windowState": "normal"}


class _FakePageSession:
    """Stands in for a page-level Playwright CDPSession."""

    def __init__(self, target_id: str, error: Exception | None = None) -> None:
        self.target_id = target_id
        self.error = error
        self.detached = False

    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        return {"targetInfo": {"targetId": self.target_id, "type": "page"}}

    async def detach(self) -> None:
        self.detached = True


class _FakeContext:
    def __init__(self, sessions: list[_FakePageSession]) -> None:
        self.pages = [object() for _ in sessions]
        self._sessions = dict(zip(map(id, self.pages), sessions))

    async def new_cdp_session(self, page: object) -> _FakePageSession:
        return self._sessions[id(page)]


class _FakeBrowser:
    def __init__(self, *contexts: _FakeContext) -> None:
        self.contexts = list(contexts)


@pytest.mark.unit
async def test_attach_detaches_sessions_of_other_targets():
    """Test that only the session of the requested target stays attached."""
    other, wanted = _FakePageSession("OTHER"), _FakePageSession("AB12")

    session = await _attach_to_target(_FakeBrowser(_FakeContext([other, wanted])), "AB12")

    assert session is wanted
    assert other.detached
    assert not wanted.detached


@pytest.mark.unit
async def test_attach_detaches_session_when_target_info_fails():
    """Test that a session whose target lookup fails is detached before the error propagates."""
    broken = _FakePageSession("AB12", error=PlaywrightError("Target closed"))

    with pytest.raises(PlaywrightError, match="Target closed"):
        await _attach_to_target(_FakeBrowser(_FakeContext([broken])), "AB12")

    assert broken.detached


@pytest.mark.unit
async def test_attach_unknown_target_detaches_everything():
    """Test that every session is released when no page matches."""
    sessions = [_FakePageSession("ONE"), _FakePageSession("TWO")]

    with pytest.raises(DevToolsError, match="AB12"):
        await _attach_to_target(_FakeBrowser(_FakeContext(sessions[:1]), _FakeContext(sessions[1:])), "AB12")

    assert all(session.detached for session in sessions)
