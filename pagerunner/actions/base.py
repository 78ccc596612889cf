"""
Action contract.

An action declares its parameters through an ActionDescriptor and implements
perform(). execute() is the only entry point used by the dispatcher: it never
raises, and it always releases the automation handle.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pagerunner.browser.handle import AutomationHandle
from pagerunner.core.logging import get_logger
from pagerunner.core.results import ActionResult
from pagerunner.prompts.specs import ParameterSpec

logger = get_logger(__name__)


class ActionId(str, Enum):
    """Closed set of actions selectable with -x/--action-to-perform."""
    PING = "ping"
    LOGIN = "login"
    CREATE_REPOSITORY = "create_repository"
    GATHER_LINKS = "gather_links"


@dataclass(frozen=True)
class ActionDescriptor:
    identifier: ActionId
    summary: str
    params: Tuple[ParameterSpec, ...] = ()

    def param_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.params)


class Action:
    """Base class for action units."""

    descriptor: ActionDescriptor

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self.options = dict(options or {})

    @property
    def name(self) -> str:
        return self.descriptor.identifier.value

    async def perform(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        raise NotImplementedError

    async def execute(self, handle: AutomationHandle, params: Mapping[str, str]) -> ActionResult:
        """
        Run perform() with catch-log-release discipline.

        Any exception raised by perform() becomes a failure result. The handle
        is closed before returning on every path.
        """
        start = time.monotonic()
        try:
            result = await self.perform(handle, params)
        except Exception as e:
            logger.error(f"[{self.name}] {type(e).__name__}: {e}")
            logger.debug(f"[{self.name}] failure details", exc_info=True)
            result = ActionResult.from_exception(self.name, e)
        finally:
            await handle.close()

        result.duration_ms = int((time.monotonic() - start) * 1000)
        if result.ok:
            logger.info(f"[{self.name}] completed in {result.duration_ms} ms")
        return result
