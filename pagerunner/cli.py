"""
Command-line dispatcher.

Pipeline, strictly in order: parse flags -> resolve action -> collect
parameters -> create automation handle -> execute action -> exit status.
No handle is created unless an action was resolved and its parameters
collected.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from playwright.async_api import async_playwright

from pagerunner import __version__
from pagerunner.actions.base import Action
from pagerunner.actions.registry import REGISTRY, available_actions, parse_action_id, resolve
from pagerunner.browser.factory import BrowserConfig, create_handle
from pagerunner.core.config import Config, get_config
from pagerunner.core.errors import (
    DriverUnavailable,
    MissingParameter,
    UnknownAction,
    ValidationFailure,
)
from pagerunner.core.logging import get_logger, init_cli_logging
from pagerunner.core.results import (
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
    ActionResult,
    FailureKind,
)
from pagerunner.prompts.collector import CollectedParameters, Prompter, collect, collect_one
from pagerunner.prompts.specs import ParameterSpec

logger = get_logger(__name__)


def _known_action(value: str) -> Optional[str]:
    try:
        parse_action_id(value)
    except UnknownAction as e:
        return str(e)
    return None


ACTION_SPEC = ParameterSpec(
    "action",
    f"Action to perform ({', '.join(available_actions())})",
    validator=_known_action,
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pagerunner",
        description="Run a scripted headless-browser action.",
    )
    ap.add_argument("-x", "--action-to-perform", dest="action", metavar="ACTION",
                    help=f"Action to run: {', '.join(available_actions())}")
    ap.add_argument("-u", "--url", help="URL for actions that need one")
    ap.add_argument("-l", "--list-actions", action="store_true", help="List actions and exit")
    ap.add_argument("--headed", action="store_true", help="Show the browser window")
    ap.add_argument("--absolute", action="store_true",
                    help="gather_links: resolve links against the page URL")
    ap.add_argument("--json", action="store_true", help="Print the result as JSON")
    ap.add_argument("--no-input", action="store_true",
                    help="Never prompt; fail if a required value is missing")
    ap.add_argument("--env-file", type=Path, help="Read settings from this .env file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


async def dispatch(
    action: Action,
    params: CollectedParameters,
    browser_config: BrowserConfig,
    playwright_factory: Callable[[], Any] = async_playwright,
) -> ActionResult:
    """
    Create the automation handle and hand it to action.

    Returns a failure result instead of raising when the driver is unavailable.
    """
    try:
        handle = await create_handle(browser_config, playwright_factory=playwright_factory)
    except DriverUnavailable as e:
        logger.error(str(e))
        return ActionResult.from_exception(action.name, e)

    try:
        return await action.execute(handle, params)
    finally:
        # No-op when the action already released it
        await handle.close()


def print_actions() -> None:
    for action_id, action_cls in REGISTRY.items():
        descriptor = action_cls.descriptor
        names = ", ".join(descriptor.param_names()) or "-"
        print(f"{action_id.value:<20} {descriptor.summary}  [params: {names}]")


def report(result: ActionResult, as_json: bool = False) -> None:
    """Print result: details to stdout on success, the message to stderr on failure."""
    if as_json:
        print(result.model_dump_json(indent=2))
        return

    if not result.ok:
        kind = result.kind.value if result.kind else "error"
        print(f"[{kind}] {result.message}", file=sys.stderr)
        return

    print(f"[ok] {result.message}")
    links = result.data.get("links")
    if links is not None:
        for link in links:
            print(link)
        return
    for key, value in result.data.items():
        print(f"  {key}: {value}")


def _fail(message: str, code: int, parser: Optional[argparse.ArgumentParser] = None) -> int:
    if parser is not None:
        parser.print_usage(sys.stderr)
    print(f"[error] {message}", file=sys.stderr)
    return code


def run(
    argv: Optional[List[str]] = None,
    prompter: Optional[Prompter] = None,
    playwright_factory: Callable[[], Any] = async_playwright,
    config: Optional[Config] = None,
) -> int:
    """
    Run one invocation and return its exit status.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
        prompter: Input facility (default: terminal prompts)
        playwright_factory: Driver factory (tests inject fakes)
        config: Settings (default: loaded from --env-file or configs/.env)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if config is None:
        config = Config(env_path=args.env_file) if args.env_file else get_config()
    init_cli_logging(verbose=args.verbose, log_file=config.log_file, level=config.log_level)

    try:
        config.validate()
    except ValueError as e:
        return _fail(str(e), EXIT_USAGE)

    if args.list_actions:
        print_actions()
        return EXIT_OK

    interactive = not args.no_input
    try:
        identifier = args.action
        if identifier is None:
            if not interactive:
                return _fail("-x/--action-to-perform is required with --no-input", EXIT_USAGE, parser)
            identifier = collect_one(ACTION_SPEC, prompter=prompter)

        try:
            action = resolve(identifier, options={
                "absolute": args.absolute,
                "github_url": config.github_url,
            })
        except UnknownAction as e:
            logger.debug(f"Rejected action {identifier!r}")
            return _fail(str(e), EXIT_USAGE, parser)

        if args.url is not None and "url" not in action.descriptor.param_names():
            logger.warning(f"--url is not used by {action.name}, ignoring it")

        try:
            params = collect(
                action.descriptor.params,
                supplied={"url": args.url},
                prompter=prompter,
                interactive=interactive,
            )
        except (MissingParameter, ValidationFailure) as e:
            return _fail(str(e), EXIT_USAGE)

        logger.info(f"Dispatching {action.name}")
        result = asyncio.run(dispatch(
            action,
            params,
            config.browser_config(headless=False if args.headed else None),
            playwright_factory=playwright_factory,
        ))
    except (KeyboardInterrupt, EOFError):
        print("\n[abort] interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED

    report(result, as_json=args.json)
    if result.kind == FailureKind.DRIVER_UNAVAILABLE:
        print("[hint] install a browser with `playwright install chromium` "
              "or set PAGERUNNER_DRIVER_PATH", file=sys.stderr)
    return result.exit_code


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
