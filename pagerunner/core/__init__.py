"""
Core utilities for pagerunner.

This module contains shared utilities used across all components:
- Configuration management
- Logging
- Error taxonomy
- Action result models and exit codes
"""

from pagerunner.core.logging import get_logger, setup_logging
from pagerunner.core.config import get_config, Config
from pagerunner.core.errors import (
    PagerunnerError,
    UnknownAction,
    ValidationFailure,
    MissingParameter,
    DriverUnavailable,
    ActionFailure,
    HttpStatusError,
    LoginRejected,
    ResourceConflict,
    BrowserOperationError,
)
from pagerunner.core.results import ActionResult, FailureKind, exit_code_for

__all__ = [
    "get_logger",
    "setup_logging",
    "get_config",
    "Config",
    "PagerunnerError",
    "UnknownAction",
    "ValidationFailure",
    "MissingParameter",
    "DriverUnavailable",
    "ActionFailure",
    "HttpStatusError",
    "LoginRejected",
    "ResourceConflict",
    "BrowserOperationError",
    "ActionResult",
    "FailureKind",
    "exit_code_for",
]
