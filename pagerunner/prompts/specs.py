"""
Parameter specifications and reusable validators.

A ParameterSpec declares one input an action needs. Validators take the raw
string and return an error message, or None when the value is acceptable.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from pagerunner.utils.url_utils import validate_url


Validator = Callable[[str], Optional[str]]

REPO_NAME_RE = re.compile(r"^[A-Za-z0-9._-]{1,100}$")


@dataclass(frozen=True)
class ParameterSpec:
    """Declared shape of one action input."""

    name: str
    prompt: str
    required: bool = True
    hidden: bool = False
    validator: Optional[Validator] = None
    default: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("name must be non-empty")
        if not self.prompt:
            raise ValueError("prompt must be non-empty")

    def check(self, value: str) -> Optional[str]:
        """
        Return the reason value is rejected, or None if it is accepted.

        Empty values are rejected for required specs before the validator
        runs; optional specs accept them without consulting the validator.
        """
        if value == "":
            return "a value is required" if self.required else None
        if self.validator is not None:
            return self.validator(value)
        return None


def url_validator(value: str) -> Optional[str]:
    if validate_url(value):
        return None
    return "expected an absolute http(s) URL, e.g. https://example.com"


def non_empty(value: str) -> Optional[str]:
    return None if value.strip() else "a value is required"


def repository_name_validator(value: str) -> Optional[str]:
    """GitHub repository naming rules."""
    if value in (".", ".."):
        return "'.' and '..' are reserved names"
    if not REPO_NAME_RE.match(value):
        return "use up to 100 letters, digits, '.', '-' or '_'"
    return None
