"""
Automation handle factory.

Builds exactly one AutomationHandle per invocation from a fixed BrowserConfig.
"""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional, AsyncIterator

from playwright.async_api import async_playwright
from pydantic import BaseModel, Field, ConfigDict

from pagerunner.browser.handle import AutomationHandle, HELPER_NAMESPACE, first_line
from pagerunner.core.errors import DriverUnavailable
from pagerunner.core.logging import get_logger

logger = get_logger(__name__)

BLOCK_RESOURCE_TYPES = {"media", "font", "image"}  # keep CSS/JS/XHR

HELPERS_JS = f"""
(() => {{
  if (window.{HELPER_NAMESPACE}) return;
  window.{HELPER_NAMESPACE} = {{
    hrefs: () => Array.from(document.querySelectorAll('a[href]'))
                      .map(a => a.getAttribute('href') || ''),
  }};
}})();
"""


class BrowserConfig(BaseModel):
    """Recognized options for the automation handle."""
    resource_loading_enabled: bool = Field(default=True, description="Load images, media and fonts")
    script_injection_enabled: bool = Field(default=True, description="Install helper script on every document")
    strict_transport_security: bool = Field(default=True, description="Keep browser web security on")
    ignore_certificate_errors: bool = Field(default=True, description="Accept invalid TLS certificates")
    driver_path: str = Field(default="", description="Browser executable, empty for Playwright's bundled one")
    headless: bool = Field(default=True)
    nav_timeout_ms: int = Field(default=30_000, gt=0)
    action_timeout_ms: int = Field(default=15_000, gt=0)
    user_agent: Optional[str] = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def launch_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headless": self.headless, "args": []}
        if self.driver_path:
            kwargs["executable_path"] = self.driver_path
        if not self.strict_transport_security:
            kwargs["args"].append("--disable-web-security")
        return kwargs

    def context_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"ignore_https_errors": self.ignore_certificate_errors}
        if self.user_agent:
            kwargs["user_agent"] = self.user_agent
        return kwargs


async def _block_heavy_resources(route):
    if route.request.resource_type in BLOCK_RESOURCE_TYPES:
        return await route.abort()
    return await route.continue_()


async def create_handle(
    config: BrowserConfig,
    playwright_factory: Callable[[], Any] = async_playwright,
) -> AutomationHandle:
    """
    Start the driver and open one page configured from config.

    Args:
        config: Browser options
        playwright_factory: Returns an object with an async start() (tests inject fakes)

    Returns:
        Ready AutomationHandle

    Raises:
        DriverUnavailable: If the driver cannot be started or the browser cannot launch
    """
    try:
        pw = await playwright_factory().start()
    except Exception as e:
        raise DriverUnavailable(config.driver_path, first_line(e)) from e

    browser = None
    try:
        browser = await pw.chromium.launch(**config.launch_kwargs())
        context = await browser.new_context(**config.context_kwargs())
        context.set_default_timeout(config.action_timeout_ms)
        context.set_default_navigation_timeout(config.nav_timeout_ms)
        if not config.resource_loading_enabled:
            await context.route("**/*", _block_heavy_resources)
        if config.script_injection_enabled:
            await context.add_init_script(HELPERS_JS)
        page = await context.new_page()
    except Exception as e:
        logger.debug(f"Browser start-up failed, stopping driver: {first_line(e)}")
        if browser is not None:
            try:
                await browser.close()
            except Exception as close_err:
                logger.warning(f"Failed to close browser: {first_line(close_err)}")
        try:
            await pw.stop()
        except Exception as stop_err:
            logger.warning(f"Failed to stop driver: {first_line(stop_err)}")
        raise DriverUnavailable(config.driver_path, first_line(e)) from e

    logger.info(
        f"Browser ready (headless={config.headless}, "
        f"resources={'on' if config.resource_loading_enabled else 'off'}, "
        f"helpers={'on' if config.script_injection_enabled else 'off'})"
    )
    return AutomationHandle(
        pw, browser, context, page,
        nav_timeout_ms=config.nav_timeout_ms,
        action_timeout_ms=config.action_timeout_ms,
        helpers_injected=config.script_injection_enabled,
    )


@asynccontextmanager
async def open_handle(
    config: BrowserConfig,
    playwright_factory: Callable[[], Any] = async_playwright,
) -> AsyncIterator[AutomationHandle]:
    """Create a handle and make sure it is released when the block exits."""
    handle = await create_handle(config, playwright_factory=playwright_factory)
    try:
        yield handle
    finally:
        await handle.close()
