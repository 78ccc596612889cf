"""
Automation handle: one live headless-browser session.

Wraps the Playwright driver, browser, context and page behind typed
operations. Every operation converts driver errors into
BrowserOperationError, and close() releases the session exactly once.
"""

from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
)

from pagerunner.core.errors import BrowserOperationError
from pagerunner.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Set by the init script when script injection is enabled
HELPER_NAMESPACE = "__pagerunner"

HREFS_VIA_HELPER_JS = (
    f"() => window.{HELPER_NAMESPACE} ? window.{HELPER_NAMESPACE}.hrefs() : null"
)
HREFS_JS = "els => els.map(a => a.getAttribute('href') || '')"
TEXTS_JS = "els => els.map(e => (e.innerText || e.textContent || '').trim())"


def first_line(exc: BaseException) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


class AutomationHandle:
    """
    A single browser session owned by one action.

    Usage:
        >>> async with await create_handle(config) as handle:
        ...     status = await handle.open("https://example.com")
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        nav_timeout_ms: int = 30_000,
        action_timeout_ms: int = 15_000,
        helpers_injected: bool = False,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self.nav_timeout_ms = nav_timeout_ms
        self.action_timeout_ms = action_timeout_ms
        self.helpers_injected = helpers_injected
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def url(self) -> str:
        return self._page.url

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        if self._closed:
            raise BrowserOperationError(operation, "automation handle is closed")
        logger.debug(f"[op] {operation}")
        try:
            return await call()
        except PlaywrightTimeoutError as e:
            raise BrowserOperationError(operation, f"timed out ({first_line(e)})") from e
        except PlaywrightError as e:
            raise BrowserOperationError(operation, first_line(e)) from e

    async def open(self, url: str) -> int:
        """
        Navigate to url and return the HTTP status of the main document.

        Returns 0 when the navigation produced no response (e.g. about:blank
        or a same-document fragment change).
        """
        async def _goto():
            response = await self._page.goto(url, wait_until="domcontentloaded",
                                             timeout=self.nav_timeout_ms)
            return response.status if response is not None else 0

        return await self._run(f"open {url}", _goto)

    async def click(self, selector: str, expect_navigation: bool = False) -> None:
        """Click selector; optionally wait for the navigation the click triggers."""
        async def _click():
            if expect_navigation:
                async with self._page.expect_navigation(wait_until="domcontentloaded",
                                                        timeout=self.nav_timeout_ms):
                    await self._page.click(selector, timeout=self.action_timeout_ms)
            else:
                await self._page.click(selector, timeout=self.action_timeout_ms)

        await self._run(f"click {selector}", _click)

    async def type(self, selector: str, text: str) -> None:
        await self._run(
            f"type into {selector}",
            lambda: self._page.fill(selector, text, timeout=self.action_timeout_ms),
        )

    async def wait_for_selector(self, selector: str, state: str = "visible") -> None:
        await self._run(
            f"wait for {selector}",
            lambda: self._page.wait_for_selector(selector, state=state,
                                                 timeout=self.action_timeout_ms),
        )

    async def wait_for_navigation(self, state: str = "load") -> None:
        await self._run(
            "wait for navigation",
            lambda: self._page.wait_for_load_state(state, timeout=self.nav_timeout_ms),
        )

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self._run("evaluate script", lambda: self._page.evaluate(script, arg))

    async def is_visible(self, selector: str) -> bool:
        return await self._run(
            f"check {selector}",
            lambda: self._page.locator(selector).first.is_visible(),
        )

    async def text_of(self, selector: str) -> str:
        text = await self._run(
            f"read {selector}",
            lambda: self._page.text_content(selector, timeout=self.action_timeout_ms),
        )
        return (text or "").strip()

    async def texts_of(self, selector: str) -> List[str]:
        """Trimmed inner text of every element matching selector, in document order."""
        return await self._run(
            f"read all {selector}",
            lambda: self._page.eval_on_selector_all(selector, TEXTS_JS),
        )

    async def hrefs(self) -> List[str]:
        """Raw href attribute values of every anchor, in document order."""
        if self.helpers_injected:
            found = await self.evaluate(HREFS_VIA_HELPER_JS)
            if found is not None:
                return list(found)
            logger.debug("Injected helpers missing on this document, reading anchors directly")
        return await self._run(
            "extract links",
            lambda: self._page.eval_on_selector_all("a[href]", HREFS_JS),
        )

    async def title(self) -> str:
        return await self._run("read title", self._page.title)

    async def close(self) -> None:
        """Release page, context, browser and driver. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True

        closers = (
            ("context", self._context.close),
            ("browser", self._browser.close),
            ("driver", self._playwright.stop),
        )
        for name, closer in closers:
            try:
                await closer()
            except Exception as e:
                logger.warning(f"Failed to close {name}: {first_line(e)}")
        logger.debug("Automation handle closed")

    async def __aenter__(self) -> "AutomationHandle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
