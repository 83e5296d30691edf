"""
Shared test fixtures and configurations for the storage state plugin tests.
"""

import asyncio
from typing import Any
from unittest.mock import MagicMock
from urllib.parse import urlparse

import pytest

from mcp_storage_state.config import SET_LOCAL_STORAGE_SCRIPT
from mcp_storage_state.monitoring import performance_monitor
from mcp_storage_state.security import security_manager
from mcp_storage_state.server import server_metrics

# The example snapshot used throughout the tests
EXAMPLE_STATE = {
    "cookies": [
        {"name": "session", "value": "abc", "domain": "example.com", "path": "/"}
    ],
    "origins": [
        {
            "origin": "https://example.com",
            "localStorage": [{"name": "theme", "value": "dark"}],
        }
    ],
}


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class FakeBrowserSession:
    """In-memory browser tab with a cookie jar and per-origin local storage.

    Every collaborator call is appended to ``calls`` so tests can assert
    ordering and that read-only operations made no mutating calls.
    """

    MUTATING_CALLS = {"add_cookies", "navigate", "evaluate_in_page"}

    def __init__(self, url: str = "about:blank") -> None:
        self.url = url
        self.cookie_jar: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.storage: dict[str, dict[str, str]] = {}
        self.calls: list[tuple[str, Any]] = []
        self.injection_urls: list[str] = []
        self.fail_navigation_to: set[str] = set()
        self.redirects: dict[str, str] = {}
        self.fail_script = False

    async def get_cookies(self) -> list[dict[str, Any]]:
        self.calls.append(("get_cookies", None))
        return [dict(cookie) for cookie in self.cookie_jar.values()]

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.calls.append(("add_cookies", cookies))
        for cookie in cookies:
            self.cookie_jar[(cookie["name"], cookie["domain"], cookie["path"])] = dict(cookie)

    def current_url(self) -> str:
        self.calls.append(("current_url", self.url))
        return self.url

    async def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))
        await asyncio.sleep(0)
        if url in self.fail_navigation_to:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if url in self.redirects:
            self.url = self.redirects[url]
            return
        parsed = urlparse(url)
        self.url = url if parsed.path else f"{url}/"

    async def evaluate_in_page(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate_in_page", arg))
        if self.fail_script:
            raise RuntimeError("SecurityError: Access is denied for this document")
        assert script == SET_LOCAL_STORAGE_SCRIPT
        self.injection_urls.append(self.url)
        items = self.storage.setdefault(origin_of(self.url), {})
        for item in arg:
            items[item["name"]] = item["value"]
        return None

    async def storage_origins(self) -> list[str]:
        self.calls.append(("storage_origins", None))
        return [origin for origin, items in self.storage.items() if items]

    async def get_local_storage(self, origin: str) -> list[dict[str, str]]:
        self.calls.append(("get_local_storage", origin))
        return [
            {"name": name, "value": value}
            for name, value in self.storage.get(origin, {}).items()
        ]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def mutating_calls(self) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] in self.MUTATING_CALLS]

    def state(self) -> tuple[Any, ...]:
        return (
            dict(self.cookie_jar),
            {origin: dict(items) for origin, items in self.storage.items()},
            self.url,
        )


class FakeBrowserManager:
    """Stand-in for BrowserManager handing out one fake tab."""

    def __init__(self, session: FakeBrowserSession | None) -> None:
        self.session = session
        self.lock = asyncio.Lock()
        self.browser_type = "chromium"
        self.headless = True

    @property
    def is_running(self) -> bool:
        return self.session is not None

    def current_session_or_die(self) -> FakeBrowserSession:
        from mcp_storage_state.exceptions import SessionUnavailableError

        if self.session is None:
            raise SessionUnavailableError("No open browser tab")
        return self.session


class MockContext(MagicMock):
    """Mock for MCP Context"""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.lifespan_context = {}
        self.errors: list[str] = []

    async def error(self, message: str) -> None:
        """Mock for error method"""
        self.errors.append(message)

    async def info(self, message: str) -> None:
        """Mock for info method"""
        pass


@pytest.fixture
def fake_session() -> FakeBrowserSession:
    """Return an empty fake browser tab."""
    return FakeBrowserSession()


@pytest.fixture
def mock_context(fake_session: FakeBrowserSession) -> MockContext:
    """Return a mock Context whose lifespan holds a fake browser manager."""
    context = MockContext()
    context.lifespan_context = {"browser_manager": FakeBrowserManager(fake_session)}
    return context


@pytest.fixture(autouse=True)
def reset_server_state() -> None:
    """Ensure metrics and the audit log do not leak between tests."""

    security_manager.clear()
    performance_monitor.reset()
    saved = dict(server_metrics)
    yield
    security_manager.clear()
    server_metrics.update(saved)
