"""
Parameter specs and interactive collection.
"""

from pagerunner.prompts.specs import (
    ParameterSpec,
    url_validator,
    non_empty,
    repository_name_validator,
)
from pagerunner.prompts.collector import (
    CollectedParameters,
    Prompter,
    RichPrompter,
    collect,
    collect_one,
)

__all__ = [
    "ParameterSpec",
    "url_validator",
    "non_empty",
    "repository_name_validator",
    "CollectedParameters",
    "Prompter",
    "RichPrompter",
    "collect",
    "collect_one",
]
