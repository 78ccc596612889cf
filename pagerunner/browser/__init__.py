"""
Browser automation layer (requires playwright).

Module Structure:
- handle: AutomationHandle, one live browser session with typed operations
- factory: BrowserConfig and create_handle/open_handle
- script: typed steps and the sequential script runner
"""

from pagerunner.browser.handle import AutomationHandle
from pagerunner.browser.factory import BrowserConfig, create_handle, open_handle
from pagerunner.browser.script import (
    Step,
    Navigate,
    Click,
    TypeText,
    WaitForSelector,
    WaitForNavigation,
    Evaluate,
    ExtractLinks,
    ReadText,
    StepResult,
    ScriptResult,
    run_script,
)

__all__ = [
    "AutomationHandle",
    "BrowserConfig",
    "create_handle",
    "open_handle",
    "Step",
    "Navigate",
    "Click",
    "TypeText",
    "WaitForSelector",
    "WaitForNavigation",
    "Evaluate",
    "ExtractLinks",
    "ReadText",
    "StepResult",
    "ScriptResult",
    "run_script",
]
