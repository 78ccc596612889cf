"""
Pydantic models for action outcomes.

Every action unit returns an ActionResult instead of letting exceptions
escape; the dispatcher maps the result onto a process exit status.
"""

import json
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict

from pagerunner.core.errors import (
    ActionFailure,
    BrowserOperationError,
    DriverUnavailable,
    HttpStatusError,
    LoginRejected,
    MissingParameter,
    ResourceConflict,
    UnknownAction,
    ValidationFailure,
)


class FailureKind(str, Enum):
    """Categorized failure types."""
    UNKNOWN_ACTION = "unknown_action"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    DRIVER_UNAVAILABLE = "driver_unavailable"
    ACTION_FAILURE = "action_failure"
    HTTP_ERROR = "http_error"
    LOGIN_REJECTED = "login_rejected"
    CONFLICT = "conflict"
    BROWSER_ERROR = "browser_error"
    INTERRUPTED = "interrupted"


EXIT_OK = 0
EXIT_ACTION_FAILED = 1
EXIT_USAGE = 2
EXIT_DRIVER_UNAVAILABLE = 3
EXIT_INTERRUPTED = 130

_EXIT_CODES = {
    FailureKind.UNKNOWN_ACTION: EXIT_USAGE,
    FailureKind.MISSING_PARAMETER: EXIT_USAGE,
    FailureKind.INVALID_PARAMETER: EXIT_USAGE,
    FailureKind.DRIVER_UNAVAILABLE: EXIT_DRIVER_UNAVAILABLE,
    FailureKind.INTERRUPTED: EXIT_INTERRUPTED,
}

# Most specific classes first
_CLASSIFICATION = (
    (HttpStatusError, FailureKind.HTTP_ERROR),
    (LoginRejected, FailureKind.LOGIN_REJECTED),
    (ResourceConflict, FailureKind.CONFLICT),
    (BrowserOperationError, FailureKind.BROWSER_ERROR),
    (ActionFailure, FailureKind.ACTION_FAILURE),
    (UnknownAction, FailureKind.UNKNOWN_ACTION),
    (MissingParameter, FailureKind.MISSING_PARAMETER),
    (ValidationFailure, FailureKind.INVALID_PARAMETER),
    (DriverUnavailable, FailureKind.DRIVER_UNAVAILABLE),
)


class ActionResult(BaseModel):
    """
    Outcome of one dispatched action.

    A success carries kind=None; a failure always carries a FailureKind.
    """
    action: str = Field(..., min_length=1, description="Action identifier")
    ok: bool = Field(..., description="Whether the action completed successfully")
    message: str = Field(default="", description="Human-readable summary")
    kind: Optional[FailureKind] = Field(None, description="Failure category, None on success")
    data: Dict[str, Any] = Field(default_factory=dict, description="Action-specific output")
    duration_ms: int = Field(default=0, ge=0, description="Wall time spent in the action")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    @field_validator("data")
    @classmethod
    def sanitize_data(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Convert values that are not JSON-serializable to strings."""
        sanitized = {}
        for key, value in v.items():
            try:
                json.dumps(value)
                sanitized[key] = value
            except (TypeError, ValueError):
                sanitized[key] = str(value)
        return sanitized

    @classmethod
    def success(cls, action: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> "ActionResult":
        return cls(action=action, ok=True, message=message, data=data or {})

    @classmethod
    def failure(
        cls,
        action: str,
        message: str,
        kind: FailureKind = FailureKind.ACTION_FAILURE,
        data: Optional[Dict[str, Any]] = None,
    ) -> "ActionResult":
        return cls(action=action, ok=False, message=message, kind=kind, data=data or {})

    @classmethod
    def from_exception(cls, action: str, exc: BaseException,
                       data: Optional[Dict[str, Any]] = None) -> "ActionResult":
        """
        Build a failure result from an exception with automatic classification.

        Example:
            >>> result = ActionResult.from_exception("ping", HttpStatusError("https://x.test", 404))
            >>> result.kind
            <FailureKind.HTTP_ERROR: 'http_error'>
        """
        message = str(exc) or f"{type(exc).__name__} occurred"
        return cls.failure(action, message, kind=classify_exception(exc), data=data)

    @property
    def exit_code(self) -> int:
        return exit_code_for(self)


def classify_exception(exc: BaseException) -> FailureKind:
    """Map an exception onto a FailureKind. Unrecognized errors are action failures."""
    if isinstance(exc, KeyboardInterrupt):
        return FailureKind.INTERRUPTED
    for exc_type, kind in _CLASSIFICATION:
        if isinstance(exc, exc_type):
            return kind
    return FailureKind.ACTION_FAILURE


def exit_code_for(result: ActionResult) -> int:
    """
    Process exit status for a result.

    0 on success, 2 for usage errors, 3 when the driver is unavailable,
    130 when interrupted and 1 for every failure reported by an action.
    """
    if result.ok:
        return EXIT_OK
    return _EXIT_CODES.get(result.kind, EXIT_ACTION_FAILED)
