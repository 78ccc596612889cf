"""
Exception taxonomy for pagerunner.

Framework errors (UnknownAction, MissingParameter, DriverUnavailable) are
handled by the dispatcher. ActionFailure and its subclasses are raised inside
action units and converted into failure results there.
"""

from typing import Iterable, Optional


class PagerunnerError(Exception):
    """Base class for all pagerunner errors."""


class UnknownAction(PagerunnerError):
    """The requested action identifier has no registered unit."""

    def __init__(self, identifier: str, known: Iterable[str] = ()):
        self.identifier = identifier
        self.known = list(known)
        msg = f"Unknown action: {identifier!r}"
        if self.known:
            msg += f" (available: {', '.join(self.known)})"
        super().__init__(msg)


class ValidationFailure(PagerunnerError):
    """Operator input rejected by a parameter validator. Recovered by re-prompting."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid value for {name}: {reason}")


class MissingParameter(PagerunnerError):
    """A required parameter has no value and prompting is disabled."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required parameter: {name}")


class DriverUnavailable(PagerunnerError):
    """The browser-automation driver could not be located or started."""

    def __init__(self, driver_path: Optional[str], reason: str):
        self.driver_path = driver_path
        self.reason = reason
        where = driver_path or "bundled chromium"
        super().__init__(f"Browser driver unavailable ({where}): {reason}")


class ActionFailure(PagerunnerError):
    """Any failure reported by an action unit."""


class HttpStatusError(ActionFailure):
    def __init__(self, url: str, status: int):
        self.url = url
        self.status = status
        super().__init__(f"{url} responded with HTTP {status}")


class LoginRejected(ActionFailure):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Login rejected: {reason}")


class ResourceConflict(ActionFailure):
    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} already exists")


class BrowserOperationError(ActionFailure):
    """A browser operation timed out or the driver reported an error."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")
