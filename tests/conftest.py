"""
Pytest Configuration and Shared Fixtures

Fake Playwright objects and scripted prompters shared by the unit tests.
No real browser is ever launched.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagerunner.browser.handle import AutomationHandle
from pagerunner.core.config import Config, ENV_PREFIX


# ============================================================================
# Fake Playwright
# ============================================================================

class FakeResponse:
    def __init__(self, status: int):
        self.status = status


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def is_visible(self) -> bool:
        return self._selector in self._page.visible


class FakePage:
    """
    Minimal stand-in for playwright.async_api.Page.

    statuses maps URL -> HTTP status (None: no response); anchors are the raw
    href values of the document; texts maps selector -> list of element texts,
    page_texts overrides it per URL; next_pages maps URL -> href of its
    rel="next" link; on_click maps selector -> URL the click navigates to.
    """

    def __init__(self):
        self.url = "about:blank"
        self.page_title = "Example Domain"
        self.statuses: Dict[str, Optional[int]] = {}
        self.anchors: List[str] = []
        self.texts: Dict[str, List[str]] = {}
        self.page_texts: Dict[str, Dict[str, List[str]]] = {}
        self.next_pages: Dict[str, str] = {}
        self.visible: set = set()
        self.on_click: Dict[str, str] = {}
        self.signed_in_user = ""
        self.helpers_installed = False
        self.fail_on: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self.filled: Dict[str, str] = {}

    def _maybe_fail(self, op: str):
        if op in self.fail_on:
            raise self.fail_on[op]

    async def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", url))
        self._maybe_fail("goto")
        self.url = url
        status = self.statuses.get(url, 200)
        return FakeResponse(status) if status is not None else None

    @asynccontextmanager
    async def expect_navigation(self, wait_until=None, timeout=None):
        self.calls.append(("expect_navigation",))
        yield

    async def click(self, selector, timeout=None):
        self.calls.append(("click", selector))
        self._maybe_fail("click")
        if selector in self.on_click:
            self.url = self.on_click[selector]

    async def fill(self, selector, text, timeout=None):
        self.calls.append(("fill", selector))
        self._maybe_fail("fill")
        self.filled[selector] = text

    async def wait_for_selector(self, selector, state=None, timeout=None):
        self.calls.append(("wait_for_selector", selector))
        self._maybe_fail("wait_for_selector")

    async def wait_for_load_state(self, state=None, timeout=None):
        self.calls.append(("wait_for_load_state", state))
        self._maybe_fail("wait_for_load_state")

    async def evaluate(self, script, arg=None):
        self.calls.append(("evaluate",))
        self._maybe_fail("evaluate")
        if ".hrefs()" in script:
            return list(self.anchors) if self.helpers_installed else None
        if "user-login" in script:
            return self.signed_in_user
        if 'rel="next"' in script:
            return self.next_pages.get(self.url, "")
        return arg

    async def eval_on_selector_all(self, selector, expression):
        self.calls.append(("eval_on_selector_all", selector))
        self._maybe_fail("eval_on_selector_all")
        if selector == "a[href]":
            return list(self.anchors)
        texts = self.page_texts.get(self.url, self.texts)
        return list(texts.get(selector, []))

    async def text_content(self, selector, timeout=None):
        values = self.texts.get(selector) or [""]
        return values[0]

    def locator(self, selector):
        return FakeLocator(self, selector)

    async def title(self):
        return self.page_title


class FakeContext:
    def __init__(self, page: FakePage):
        self.page = page
        self.close_count = 0
        self.routes: List[tuple] = []
        self.init_scripts: List[str] = []
        self.default_timeout: Optional[int] = None
        self.default_navigation_timeout: Optional[int] = None
        self.fail_new_page: Optional[Exception] = None

    async def new_page(self):
        if self.fail_new_page:
            raise self.fail_new_page
        return self.page

    async def route(self, pattern, handler):
        self.routes.append((pattern, handler))

    async def add_init_script(self, script):
        self.init_scripts.append(script)
        self.page.helpers_installed = True

    def set_default_timeout(self, ms):
        self.default_timeout = ms

    def set_default_navigation_timeout(self, ms):
        self.default_navigation_timeout = ms

    async def close(self):
        self.close_count += 1


class FakeBrowser:
    def __init__(self, context: FakeContext):
        self.context = context
        self.context_kwargs: Dict[str, Any] = {}
        self.close_count = 0

    async def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return self.context

    async def close(self):
        self.close_count += 1


class FakeChromium:
    def __init__(self, browser: FakeBrowser):
        self.browser = browser
        self.launch_kwargs: Dict[str, Any] = {}
        self.launch_error: Optional[Exception] = None

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        if self.launch_error:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium: FakeChromium):
        self.chromium = chromium
        self.stop_count = 0

    async def stop(self):
        self.stop_count += 1


class FakeDriver:
    """Bundle of fakes plus a factory usable as playwright_factory."""

    def __init__(self):
        self.page = FakePage()
        self.context = FakeContext(self.page)
        self.browser = FakeBrowser(self.context)
        self.chromium = FakeChromium(self.browser)
        self.playwright = FakePlaywright(self.chromium)
        self.start_error: Optional[Exception] = None
        self.factory_calls = 0

    def factory(self):
        self.factory_calls += 1
        driver = self

        class _Manager:
            async def start(self_inner):
                if driver.start_error:
                    raise driver.start_error
                return driver.playwright

        return _Manager()

    def handle(self, helpers_injected: bool = False) -> AutomationHandle:
        self.page.helpers_installed = helpers_injected
        return AutomationHandle(
            self.playwright, self.browser, self.context, self.page,
            nav_timeout_ms=1000, action_timeout_ms=500,
            helpers_injected=helpers_injected,
        )

    @property
    def released(self) -> bool:
        return (self.context.close_count, self.browser.close_count, self.playwright.stop_count) == (1, 1, 1)


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def playwright_timeout() -> Callable[[str], Exception]:
    return lambda message: PlaywrightTimeoutError(message)


# ============================================================================
# Prompting
# ============================================================================

class ScriptedPrompter:
    """Answers prompts from a fixed list and records what was asked."""

    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.asked: List[tuple] = []
        self.warnings: List[str] = []

    def ask(self, prompt: str, hidden: bool = False) -> str:
        self.asked.append((prompt, hidden))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt}")
        return self.answers.pop(0)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture
def prompter_factory() -> Callable[[List[str]], ScriptedPrompter]:
    return ScriptedPrompter


# ============================================================================
# Configuration
# ============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove every PAGERUNNER_ variable from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def app_config(clean_env, tmp_path: Path) -> Config:
    """Defaults only; the .env path does not exist."""
    return Config(env_path=tmp_path / "missing.env")


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (launches a real browser)"
    )
