"""
Unit tests for the sequential script runner.
"""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from pagerunner.browser.script import (
    Click,
    Evaluate,
    ExtractLinks,
    Navigate,
    ReadText,
    ScriptResult,
    TypeText,
    WaitForNavigation,
    WaitForSelector,
    run_script,
)
from pagerunner.core.errors import BrowserOperationError


class TestRunScript:
    """Tests for run_script function."""

    def test_runs_steps_in_order(self, fake_driver):
        handle = fake_driver.handle()
        steps = [
            Navigate("https://example.com/login"),
            WaitForSelector("#user"),
            TypeText("#user", "octocat"),
            Click("#submit"),
            WaitForNavigation(),
        ]
        asyncio.run(run_script(handle, steps))
        assert fake_driver.page.calls == [
            ("goto", "https://example.com/login"),
            ("wait_for_selector", "#user"),
            ("fill", "#user"),
            ("click", "#submit"),
            ("wait_for_load_state", "load"),
        ]

    def test_records_results(self, fake_driver):
        fake_driver.page.anchors = ["/a", "/b"]
        fake_driver.page.texts["h1"] = ["Title"]
        handle = fake_driver.handle()
        result = asyncio.run(run_script(handle, [
            Navigate("https://example.com"),
            ExtractLinks(),
            ReadText("h1"),
            Evaluate("(x) => x", 42),
        ]))
        assert result.value_of(Navigate) == 200
        assert result.value_of(ExtractLinks) == ["/a", "/b"]
        assert result.value_of(ReadText) == "Title"
        assert result.last == 42
        assert len(result.results) == 4

    def test_read_all_matches(self, fake_driver):
        fake_driver.page.texts["li"] = ["a", "b"]
        result = asyncio.run(run_script(fake_driver.handle(), [ReadText("li", all_matches=True)]))
        assert result.last == ["a", "b"]

    def test_stops_at_first_failure(self, fake_driver):
        fake_driver.page.fail_on["click"] = PlaywrightError("not clickable")
        handle = fake_driver.handle()
        with pytest.raises(BrowserOperationError):
            asyncio.run(run_script(handle, [
                Navigate("https://example.com"),
                Click("#broken"),
                TypeText("#after", "never"),
            ]))
        assert ("fill", "#after") not in fake_driver.page.calls

    def test_empty_script(self, fake_driver):
        result = asyncio.run(run_script(fake_driver.handle(), []))
        assert result.results == []
        assert result.last is None


class TestScriptResult:
    """Tests for ScriptResult lookups."""

    def test_value_of_missing_step(self):
        assert ScriptResult().value_of(Navigate) is None

    def test_type_text_hides_secret_in_repr(self):
        assert "hunter2" not in repr(TypeText("#password", "hunter2"))
