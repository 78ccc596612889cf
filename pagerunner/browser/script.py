"""
Sequential browser scripts.

An action describes its browser work as an ordered list of typed steps.
run_script() executes them one at a time, each awaited before the next
starts, and records every step's result so the action can consume it.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Type

from pagerunner.browser.handle import AutomationHandle
from pagerunner.core.logging import get_logger

logger = get_logger(__name__)


class Step:
    """Base class for script steps."""

    async def run(self, handle: AutomationHandle) -> Any:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Navigate(Step):
    """Open url. Result: HTTP status code (0 if no response)."""
    url: str

    async def run(self, handle: AutomationHandle) -> int:
        return await handle.open(self.url)

    def describe(self) -> str:
        return f"navigate {self.url}"


@dataclass(frozen=True)
class Click(Step):
    selector: str
    expect_navigation: bool = False

    async def run(self, handle: AutomationHandle) -> None:
        await handle.click(self.selector, expect_navigation=self.expect_navigation)

    def describe(self) -> str:
        return f"click {self.selector}"


@dataclass(frozen=True)
class TypeText(Step):
    selector: str
    text: str = field(repr=False)  # may hold a password

    async def run(self, handle: AutomationHandle) -> None:
        await handle.type(self.selector, self.text)

    def describe(self) -> str:
        return f"type into {self.selector}"


@dataclass(frozen=True)
class WaitForSelector(Step):
    selector: str
    state: str = "visible"

    async def run(self, handle: AutomationHandle) -> None:
        await handle.wait_for_selector(self.selector, state=self.state)

    def describe(self) -> str:
        return f"wait for {self.selector}"


@dataclass(frozen=True)
class WaitForNavigation(Step):
    state: str = "load"

    async def run(self, handle: AutomationHandle) -> None:
        await handle.wait_for_navigation(self.state)


@dataclass(frozen=True)
class Evaluate(Step):
    """Evaluate a JS function in the page. Result: its JSON-serializable return value."""
    script: str
    arg: Any = None

    async def run(self, handle: AutomationHandle) -> Any:
        return await handle.evaluate(self.script, self.arg)


@dataclass(frozen=True)
class ExtractLinks(Step):
    """Result: raw href values in document order."""

    async def run(self, handle: AutomationHandle) -> List[str]:
        return await handle.hrefs()


@dataclass(frozen=True)
class ReadText(Step):
    """Result: trimmed texts of all matches (all_matches=True) or of the first match."""
    selector: str
    all_matches: bool = False

    async def run(self, handle: AutomationHandle) -> Any:
        if self.all_matches:
            return await handle.texts_of(self.selector)
        return await handle.text_of(self.selector)

    def describe(self) -> str:
        return f"read {self.selector}"


@dataclass(frozen=True)
class StepResult:
    step: Step
    value: Any = None


@dataclass
class ScriptResult:
    results: List[StepResult] = field(default_factory=list)

    @property
    def last(self) -> Any:
        return self.results[-1].value if self.results else None

    def value_of(self, step_type: Type[Step]) -> Optional[Any]:
        """Value of the most recent step of step_type, or None if none ran."""
        for result in reversed(self.results):
            if isinstance(result.step, step_type):
                return result.value
        return None


async def run_script(handle: AutomationHandle, steps: Sequence[Step]) -> ScriptResult:
    """
    Run steps in order against handle.

    The first failing step stops the script; its exception propagates to
    the caller and later steps never run.

    Example:
        >>> result = await run_script(handle, [Navigate("https://example.com"), ExtractLinks()])
        >>> result.value_of(Navigate)
        200
    """
    outcome = ScriptResult()
    for index, step in enumerate(steps, start=1):
        logger.debug(f"[step {index}/{len(steps)}] {step.describe()}")
        value = await step.run(handle)
        outcome.results.append(StepResult(step=step, value=value))
    return outcome
