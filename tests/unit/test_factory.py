"""
Unit tests for the automation handle factory.
"""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from pydantic import ValidationError

from pagerunner.browser.factory import (
    BLOCK_RESOURCE_TYPES,
    BrowserConfig,
    create_handle,
    open_handle,
)
from pagerunner.core.errors import DriverUnavailable


class TestBrowserConfig:
    """Tests for BrowserConfig option mapping."""

    def test_defaults(self):
        config = BrowserConfig()
        assert config.launch_kwargs() == {"headless": True, "args": []}
        assert config.context_kwargs() == {"ignore_https_errors": True}

    def test_driver_path_and_web_security(self):
        config = BrowserConfig(driver_path="/opt/chrome", strict_transport_security=False)
        kwargs = config.launch_kwargs()
        assert kwargs["executable_path"] == "/opt/chrome"
        assert "--disable-web-security" in kwargs["args"]

    def test_certificates_and_user_agent(self):
        config = BrowserConfig(ignore_certificate_errors=False, user_agent="pagerunner/1")
        assert config.context_kwargs() == {"ignore_https_errors": False, "user_agent": "pagerunner/1"}

    def test_rejects_non_positive_timeouts(self):
        with pytest.raises(ValidationError):
            BrowserConfig(nav_timeout_ms=0)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            BrowserConfig().headless = False


class TestCreateHandle:
    """Tests for create_handle function."""

    def test_creates_configured_handle(self, fake_driver):
        config = BrowserConfig(nav_timeout_ms=2000, action_timeout_ms=700)
        handle = asyncio.run(create_handle(config, playwright_factory=fake_driver.factory))
        assert not handle.closed
        assert handle.helpers_injected is True
        assert fake_driver.context.default_timeout == 700
        assert fake_driver.context.default_navigation_timeout == 2000
        assert len(fake_driver.context.init_scripts) == 1
        assert fake_driver.context.routes == []

    def test_resource_blocking(self, fake_driver):
        config = BrowserConfig(resource_loading_enabled=False, script_injection_enabled=False)
        handle = asyncio.run(create_handle(config, playwright_factory=fake_driver.factory))
        assert handle.helpers_injected is False
        assert fake_driver.context.init_scripts == []
        assert [pattern for pattern, _ in fake_driver.context.routes] == ["**/*"]

    def test_route_handler_aborts_heavy_resources(self, fake_driver):
        config = BrowserConfig(resource_loading_enabled=False)
        asyncio.run(create_handle(config, playwright_factory=fake_driver.factory))
        _, handler = fake_driver.context.routes[0]

        class FakeRoute:
            def __init__(self, resource_type):
                self.request = type("Req", (), {"resource_type": resource_type})()
                self.outcome = None

            async def abort(self):
                self.outcome = "abort"

            async def continue_(self):
                self.outcome = "continue"

        for resource_type in sorted(BLOCK_RESOURCE_TYPES):
            route = FakeRoute(resource_type)
            asyncio.run(handler(route))
            assert route.outcome == "abort"

        route = FakeRoute("document")
        asyncio.run(handler(route))
        assert route.outcome == "continue"

    def test_driver_start_failure(self, fake_driver):
        fake_driver.start_error = FileNotFoundError("playwright driver not found")
        with pytest.raises(DriverUnavailable, match="driver not found"):
            asyncio.run(create_handle(BrowserConfig(), playwright_factory=fake_driver.factory))

    def test_launch_failure_stops_driver(self, fake_driver):
        fake_driver.chromium.launch_error = PlaywrightError("Executable doesn't exist at /opt/chrome")
        with pytest.raises(DriverUnavailable) as exc_info:
            asyncio.run(create_handle(BrowserConfig(driver_path="/opt/chrome"),
                                      playwright_factory=fake_driver.factory))
        assert exc_info.value.driver_path == "/opt/chrome"
        assert fake_driver.playwright.stop_count == 1
        assert fake_driver.browser.close_count == 0

    def test_page_failure_closes_browser(self, fake_driver):
        fake_driver.context.fail_new_page = PlaywrightError("Target closed")
        with pytest.raises(DriverUnavailable):
            asyncio.run(create_handle(BrowserConfig(), playwright_factory=fake_driver.factory))
        assert fake_driver.browser.close_count == 1
        assert fake_driver.playwright.stop_count == 1


class TestOpenHandle:
    """Tests for the open_handle context manager."""

    def test_releases_on_error(self, fake_driver):
        async def _use():
            async with open_handle(BrowserConfig(), playwright_factory=fake_driver.factory):
                raise RuntimeError("inside block")

        with pytest.raises(RuntimeError):
            asyncio.run(_use())
        assert fake_driver.released
