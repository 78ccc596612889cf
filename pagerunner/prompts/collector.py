"""
Parameter collection.

Values come from pre-supplied flags first, then from the operator. Invalid
input never advances: the same parameter is asked again until it validates.
"""

from typing import Dict, Iterable, Mapping, Optional, Protocol

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from pagerunner.core.errors import MissingParameter, ValidationFailure
from pagerunner.core.logging import get_logger
from pagerunner.prompts.specs import ParameterSpec

logger = get_logger(__name__)

CollectedParameters = Dict[str, str]


class Prompter(Protocol):
    """Interactive input facility used by collect()."""

    def ask(self, prompt: str, hidden: bool = False) -> str:
        ...

    def warn(self, message: str) -> None:
        ...


class RichPrompter:
    """Prompts on the terminal with rich. Hidden specs are not echoed."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def ask(self, prompt: str, hidden: bool = False) -> str:
        # Text, not markup: labels and defaults may contain brackets
        return Prompt.ask(Text(prompt), password=hidden, console=self.console)

    def warn(self, message: str) -> None:
        # Messages echo operator input; never interpret them as markup
        self.console.print(message, style="yellow", markup=False)


def _label(spec: ParameterSpec) -> str:
    if spec.default:
        return f"{spec.prompt} [{spec.default}]"
    if not spec.required:
        return f"{spec.prompt} (optional)"
    return spec.prompt


def _normalize(spec: ParameterSpec, raw: Optional[str]) -> str:
    value = raw if raw is not None else ""
    # Secrets are taken verbatim
    return value if spec.hidden else value.strip()


def _finalize(spec: ParameterSpec, value: str) -> str:
    if value == "" and spec.default is not None:
        return spec.default
    return value


def collect_one(
    spec: ParameterSpec,
    supplied: Optional[str] = None,
    prompter: Optional[Prompter] = None,
    interactive: bool = True,
) -> str:
    """
    Collect a single value for spec.

    Raises:
        MissingParameter: required value absent and interactive is False
        ValidationFailure: supplied value rejected and interactive is False
    """
    if supplied is not None:
        value = _finalize(spec, _normalize(spec, supplied))
        reason = spec.check(value)
        if reason is None:
            logger.debug(f"Using supplied value for {spec.name}")
            return value
        failure = ValidationFailure(spec.name, reason)
        logger.warning(str(failure))
        if not interactive:
            raise failure
        if prompter is None:
            prompter = RichPrompter()
        prompter.warn(str(failure))

    if not interactive:
        value = _finalize(spec, "")
        if spec.check(value) is not None:
            raise MissingParameter(spec.name)
        return value

    if prompter is None:
        prompter = RichPrompter()

    while True:
        value = _finalize(spec, _normalize(spec, prompter.ask(_label(spec), spec.hidden)))
        reason = spec.check(value)
        if reason is None:
            return value
        failure = ValidationFailure(spec.name, reason)
        logger.debug(str(failure))
        prompter.warn(str(failure))


def collect(
    specs: Iterable[ParameterSpec],
    supplied: Optional[Mapping[str, Optional[str]]] = None,
    prompter: Optional[Prompter] = None,
    interactive: bool = True,
) -> CollectedParameters:
    """
    Collect values for specs, in declaration order.

    Args:
        specs: Parameter specs of the selected action
        supplied: Values given out-of-band (e.g. flags); None entries are ignored
        prompter: Input facility (default: RichPrompter on stderr)
        interactive: When False, never prompt

    Returns:
        Mapping of parameter name to validated value, in declaration order

    Example:
        >>> collect([ParameterSpec("url", "URL")], supplied={"url": "https://example.com"})
        {'url': 'https://example.com'}
    """
    supplied = {k: v for k, v in (supplied or {}).items() if v is not None}
    if prompter is None and interactive:
        prompter = RichPrompter()

    collected: CollectedParameters = {}
    for spec in specs:
        collected[spec.name] = collect_one(
            spec,
            supplied=supplied.get(spec.name),
            prompter=prompter,
            interactive=interactive,
        )
    return collected
